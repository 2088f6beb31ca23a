"""
Bookstore Core Package

Catalog, discussion threads, reactions, ratings and the purchase ledger
for a small bookstore, exposed through a FastAPI application.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Typed errors raised by the services
- main.py: FastAPI application factory and exception handlers
- dependencies.py: Dependency injection functions (session, current user)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- services/: Core operations (catalog, reviews, reactions, ratings, purchases)
- routers/: API route handlers
"""

__version__ = "0.1.0"
