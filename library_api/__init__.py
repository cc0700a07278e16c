"""
Top‑level package for the Library API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
