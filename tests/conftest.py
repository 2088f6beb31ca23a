"""
pytest Fixtures for Bookstore Tests

Shared fixtures used across all test files.

For database tests, each test gets a brand-new SQLite in-memory database:
the services commit and roll back their own transactions, so isolation
comes from a fresh engine rather than an outer rolled-back transaction.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_CATEGORIES_ON_STARTUP"] = "false"

import threading
from collections.abc import Callable, Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.database import Base, get_db
from bookstore.main import app
from bookstore.models import Book, Category, Review, User, UserRole
from bookstore.services.security import issue_token

# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    """
    Create a SQLite in-memory database engine for one test.

    StaticPool keeps the single connection alive for the whole test;
    without it the in-memory database would vanish between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session for each test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def file_sessions(tmp_path) -> Generator[sessionmaker, None, None]:
    """
    Session factory over a file-backed SQLite database.

    For tests that run real threads: each session gets its own
    connection, and writers queue on the database lock (busy timeout).
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookstore.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)

    yield sessionmaker(bind=engine, autoflush=False)

    engine.dispose()


@pytest.fixture
def run_in_threads() -> Callable[[list[Callable[[], object]]], list[object]]:
    """
    Start every callable in its own thread at the same moment.

    Returns each call's result, or the exception it raised, in input order.
    """

    def _run(calls: list[Callable[[], object]]) -> list[object]:
        barrier = threading.Barrier(len(calls))
        outcomes: list[object] = [None] * len(calls)

        def worker(index: int, call: Callable[[], object]) -> None:
            barrier.wait()
            try:
                outcomes[index] = call()
            except Exception as exc:
                outcomes[index] = exc

        threads = [
            threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    return _run


@pytest.fixture
def file_catalog(file_sessions) -> dict:
    """Users u0..u3, one book and one review by u0 in the file-backed database."""
    with file_sessions() as db:
        for i in range(4):
            _add_user(db, f"u{i}")
        db.add(Category(name="Fantasy"))
        book = Book(name="Contested", price=Decimal("7.00"), category_name="Fantasy", stock=5)
        db.add(book)
        db.commit()
        review = Review(book_id=book.id, user_login="u0", text="First!")
        db.add(review)
        db.commit()
        return {"book_id": book.id, "review_id": review.id}


# =============================================================================
# AUTH HELPERS
# =============================================================================


@pytest.fixture
def auth_header() -> Callable[[User], dict]:
    """Build an Authorization header for a user, as the identity provider would."""

    def _auth_header(user: User) -> dict:
        token = issue_token(user.login)
        return {"Authorization": f"Bearer {token}"}

    return _auth_header


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


def _add_user(db: Session, login: str, role: UserRole = UserRole.CLIENT) -> User:
    user = User(
        login=login,
        first_name=login.capitalize(),
        last_name="Tester",
        email=f"{login}@example.com",
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample client user for testing."""
    return _add_user(db_session, "reader")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second client for ownership and race scenarios."""
    return _add_user(db_session, "critic")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    """Create an admin for catalog management tests."""
    return _add_user(db_session, "admin", UserRole.ADMIN)


@pytest.fixture
def make_users(db_session: Session) -> Callable[[int], list[User]]:
    """Factory creating n extra client users named user0..user{n-1}."""

    def _make_users(count: int) -> list[User]:
        return [_add_user(db_session, f"user{i}") for i in range(count)]

    return _make_users


@pytest.fixture
def sample_category(db_session: Session) -> Category:
    category = Category(name="Fantasy")
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_book(db_session: Session, sample_category: Category) -> Callable[..., Book]:
    """Factory creating books in the sample category."""

    def _make_book(
        name: str = "The Hobbit",
        price: str = "11.00",
        stock: int = 5,
        category_name: str | None = None,
    ) -> Book:
        book = Book(
            name=name,
            price=Decimal(price),
            description=f"About {name}",
            category_name=category_name or sample_category.name,
            stock=stock,
        )
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make_book


@pytest.fixture
def sample_book(make_book: Callable[..., Book]) -> Book:
    """Create a sample book with five units in stock."""
    return make_book()
