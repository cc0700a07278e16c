"""
Pydantic schema definitions for API payloads.

Each domain (users, books, borrows) defines its own Pydantic models
for request and response bodies.  The repository returns the ``*Read``
models directly so services and handlers share one representation.
"""
