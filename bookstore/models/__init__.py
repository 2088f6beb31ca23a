"""
SQLAlchemy Models Package

Model Relationships:
- Category -> Book: One-to-Many (by category name)
- Book -> Review: One-to-Many; Review -> Review: optional parent (replies)
- Review -> Reaction: One-to-Many, at most one per user
- Book -> BookRating: One-to-Many, at most one per user
- Book -> Purchase: One-to-Many, append-only

Import all models here so they are available as
`from bookstore.models import Book` and registered for Alembic.
"""

from bookstore.models.category import Category
from bookstore.models.user import User, UserRole
from bookstore.models.book import Book
from bookstore.models.review import Review
from bookstore.models.reaction import Reaction, ReactionKind
from bookstore.models.rating import BookRating
from bookstore.models.purchase import Purchase
from bookstore.models.message import Message

__all__ = [
    "Category",
    "User",
    "UserRole",
    "Book",
    "Review",
    "Reaction",
    "ReactionKind",
    "BookRating",
    "Purchase",
    "Message",
]
