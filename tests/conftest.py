"""Test configuration and fixtures for the Library API.

Every test gets its own SQLite file under ``tmp_path`` so tests never
share state.  The engine is built with a fixed clock so timestamps are
predictable.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from library_api.app.core.config import Settings
from library_api.app.core.repository import LibraryRepository
from library_api.app.main import create_app
from library_api.app.services import BookService, BorrowService, UserService

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "library.db")


@pytest.fixture
def repository(db_path):
    repo = LibraryRepository(db_path)
    repo.init_schema()
    return repo


@pytest.fixture
def borrow_service(repository):
    return BorrowService(repository, clock=lambda: FIXED_NOW)


@pytest.fixture
def user_service(repository, borrow_service):
    return UserService(repository, borrow_service)


@pytest.fixture
def book_service(repository, borrow_service):
    return BookService(repository, borrow_service)


@pytest.fixture
def alice(repository):
    return repository.create_user("Alice")


@pytest.fixture
def bob(repository):
    return repository.create_user("Bob")


@pytest.fixture
def book(repository):
    return repository.create_book("I, Robot")


@pytest.fixture
def other_book(repository):
    return repository.create_book("Brave New World")


@pytest.fixture
def test_settings(db_path):
    return Settings(database_url=db_path, log_level="WARNING")


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which applies migrations.
    with TestClient(app) as test_client:
        yield test_client
