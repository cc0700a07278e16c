"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (users, books, borrows) exposes a router
defined in ``api/v1/endpoints`` backed by a service in ``services``.
"""

from .main import app, create_app  # noqa: F401
