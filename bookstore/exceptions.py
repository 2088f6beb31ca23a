"""
Core Exceptions

Every core operation either succeeds or raises one of the typed errors
below. The HTTP layer maps them to status codes in bookstore.main; other
callers (scripts, a CLI) can catch them directly.

Error kinds:
- NotFoundError: referenced book/review/user/category is absent
- InvalidParentError: bad or cyclic reply target
- InvalidRatingError: rating outside 1-5
- InsufficientStockError: purchase attempted at stock 0
- ConflictError: a write lost a race or hit a uniqueness rule; retryable
- StorageError: any other storage-layer failure; retryable
"""


class BookstoreError(Exception):
    """Base class for all errors raised by the bookstore core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BookstoreError):
    """A referenced record does not exist."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} {key!r} not found")
        self.entity = entity
        self.key = key


class InvalidParentError(BookstoreError):
    """The requested reply target cannot be the parent of a new review."""


class InvalidRatingError(BookstoreError):
    """A rating value outside the 1-5 range."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Rating must be between 1 and 5, got {value}")
        self.value = value


class InsufficientStockError(BookstoreError):
    """The book has no stock left to sell."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} is out of stock")
        self.book_id = book_id


class ConflictError(BookstoreError):
    """A concurrent or duplicate write could not be applied."""


class StorageError(BookstoreError):
    """The underlying database failed; the caller may retry."""
