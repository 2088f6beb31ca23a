#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with the default categories, an admin account and
a few sample books for development.

USAGE:
    # From the project root with the virtualenv active
    python scripts/seed_data.py

    # Start from an empty database
    python scripts/seed_data.py --reset

This script:
1. Connects to the database using app settings
2. Optionally drops and recreates all tables
3. Creates the default categories (idempotent)
4. Ensures the admin account exists
5. Adds sample books to empty categories
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session

from bookstore.config import get_settings
from bookstore.database import SessionLocal, create_tables, drop_tables
from bookstore.services import catalog, users

logger = logging.getLogger("seed_data")

SAMPLE_BOOKS = [
    {"name": "Dune", "price": Decimal("9.99"), "category_name": "Science", "stock": 5,
     "description": "Politics and ecology on a desert planet."},
    {"name": "Foundation", "price": Decimal("8.49"), "category_name": "Science", "stock": 3,
     "description": "A mathematician forecasts the fall of an empire."},
    {"name": "The Hobbit", "price": Decimal("11.00"), "category_name": "Fantasy", "stock": 4,
     "description": "A reluctant burglar joins a company of dwarves."},
    {"name": "The Name of the Wind", "price": Decimal("12.50"), "category_name": "Fantasy",
     "stock": 2, "description": "A legend tells his own story."},
    {"name": "Murder on the Orient Express", "price": Decimal("7.99"),
     "category_name": "Mystery", "stock": 6,
     "description": "Twelve suspects and a snowbound train."},
    {"name": "SPQR", "price": Decimal("15.00"), "category_name": "History", "stock": 1,
     "description": "A history of ancient Rome."},
]


def seed_books(db: Session) -> int:
    """Add sample books to categories that have none. Returns books added."""
    stocked = {
        name
        for name in {data["category_name"] for data in SAMPLE_BOOKS}
        if catalog.list_books(db, name)
    }
    added = 0
    for data in SAMPLE_BOOKS:
        if data["category_name"] in stocked:
            continue
        catalog.create_book(db, **data)
        added += 1
    return added


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the bookstore database")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    parser.add_argument("--admin-login", default="admin", help="Login of the admin account")
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.reset:
        logger.warning("Dropping all tables...")
        drop_tables()
    create_tables()

    db = SessionLocal()
    try:
        categories = catalog.ensure_default_categories(db, settings.default_categories_list)
        logger.info(f"Categories ready: {len(categories)}")

        admin = users.ensure_admin(db, args.admin_login)
        logger.info(f"Admin ready: {admin.login} ({admin.role.value})")

        logger.info(f"Sample books added: {seed_books(db)}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
