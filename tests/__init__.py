"""
Test Suite for the Bookstore API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_catalog.py: Categories, books and the ordered listing
- test_reviews.py: Posting reviews and rebuilding threads
- test_reactions.py: Like/Dislike upserts and review counters
- test_ratings.py: Star ratings and averages
- test_purchases.py: Purchase ledger, stock and the purchase race
- test_users.py: User records, roles and the identity boundary
- test_messages.py: Direct messages

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=bookstore --cov-report=html

    # Run specific file
    pytest tests/test_purchases.py
"""
