"""
Services Package

Core operations, separate from HTTP handling. Every function takes the
SQLAlchemy Session to work in as its first argument.

Current services:
- catalog.py: Categories, books and the per-category listing
- reviews.py: Posting reviews/replies and rebuilding discussion threads
- reactions.py: Like/Dislike per user and review, with cached counters
- ratings.py: 1-5 star ratings per user and book, live averages
- purchases.py: Purchase ledger and the only stock mutations
- users.py: User records supplied by the identity provider
- messages.py: Direct messages between users
- security.py: JWT verification for the identity boundary
- rate_limiter.py: Rate limiting with slowapi
- common.py: Transaction and lookup helpers
"""
