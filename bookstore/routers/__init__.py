"""
API Routers Package

Router Structure:
- categories.py: /api/v1/categories/* (listing and category stats)
- books.py: /api/v1/books/* (catalog administration, book detail)
- reviews.py: review threads and reactions
- ratings.py: /api/v1/books/{id}/rating
- purchases.py: purchasing and purchase history
- users.py: /api/v1/users/*
- messages.py: /api/v1/messages/*

Each router is imported and registered in main.py.
"""

from bookstore.routers.books import router as books_router
from bookstore.routers.categories import router as categories_router
from bookstore.routers.messages import router as messages_router
from bookstore.routers.purchases import router as purchases_router
from bookstore.routers.ratings import router as ratings_router
from bookstore.routers.reviews import router as reviews_router
from bookstore.routers.users import router as users_router

__all__ = [
    "books_router",
    "categories_router",
    "messages_router",
    "purchases_router",
    "ratings_router",
    "reviews_router",
    "users_router",
]
