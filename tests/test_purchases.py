"""
Tests for the purchase ledger and stock handling.

The race test runs real threads against a file-backed SQLite database,
each with its own connection, so the conditional stock decrement is
exercised the way concurrent requests would exercise it.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from bookstore.exceptions import InsufficientStockError, NotFoundError
from bookstore.models import Book, Category, Purchase, User
from bookstore.services import catalog, purchases


def ledger_size(db_session, book_id: int) -> int:
    stmt = select(func.count(Purchase.id)).where(Purchase.book_id == book_id)
    return db_session.execute(stmt).scalar()


class TestPurchase:
    """Tests for purchase()."""

    def test_purchase_decrements_stock(self, db_session, sample_book, sample_user):
        record = purchases.purchase(db_session, sample_user.login, sample_book.id)

        assert record.id is not None
        assert record.user_login == sample_user.login
        assert record.timestamp is not None
        assert catalog.get_book(db_session, sample_book.id).stock == 4
        assert ledger_size(db_session, sample_book.id) == 1

    def test_last_unit(self, db_session, make_book, sample_user):
        book = make_book("Rare", stock=1)

        purchases.purchase(db_session, sample_user.login, book.id)
        assert catalog.get_book(db_session, book.id).stock == 0

        with pytest.raises(InsufficientStockError):
            purchases.purchase(db_session, sample_user.login, book.id)
        assert ledger_size(db_session, book.id) == 1

    def test_out_of_stock_writes_nothing(self, db_session, make_book, sample_user):
        book = make_book("Sold out", stock=0)

        with pytest.raises(InsufficientStockError):
            purchases.purchase(db_session, sample_user.login, book.id)

        assert catalog.get_book(db_session, book.id).stock == 0
        assert ledger_size(db_session, book.id) == 0

    def test_unknown_book(self, db_session, sample_user):
        with pytest.raises(NotFoundError):
            purchases.purchase(db_session, sample_user.login, 999)

    def test_unknown_user(self, db_session, sample_book):
        with pytest.raises(NotFoundError):
            purchases.purchase(db_session, "ghost", sample_book.id)
        assert catalog.get_book(db_session, sample_book.id).stock == 5

    def test_same_user_can_buy_twice(self, db_session, sample_book, sample_user):
        purchases.purchase(db_session, sample_user.login, sample_book.id)
        purchases.purchase(db_session, sample_user.login, sample_book.id)

        assert purchases.get_purchase_count(db_session, sample_book.id) == 2
        assert len(purchases.list_purchases(db_session, sample_user.login)) == 2


class TestRestock:
    """Tests for restock()."""

    def test_restock(self, db_session, sample_book):
        book = purchases.restock(db_session, sample_book.id, 10)
        assert book.stock == 15

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_restock_requires_positive_quantity(self, db_session, sample_book, quantity):
        with pytest.raises(ValueError):
            purchases.restock(db_session, sample_book.id, quantity)

    def test_restock_unknown_book(self, db_session):
        with pytest.raises(NotFoundError):
            purchases.restock(db_session, 999, 1)


class TestPurchaseRace:
    """Concurrent buyers competing for a limited stock."""

    STOCK = 3
    BUYERS = 8

    def test_never_oversells(self, file_sessions, run_in_threads):
        with file_sessions() as setup:
            setup.add(Category(name="Fantasy"))
            setup.add_all(
                User(login=f"buyer{i}", first_name="B", last_name="B", email=f"b{i}@example.com")
                for i in range(self.BUYERS)
            )
            book = Book(name="Hot item", price=Decimal("5.00"), category_name="Fantasy", stock=self.STOCK)
            setup.add(book)
            setup.commit()
            book_id = book.id

        def buy(login: str):
            with file_sessions() as db:
                return purchases.purchase(db, login, book_id).id

        outcomes = run_in_threads(
            [lambda login=f"buyer{i}": buy(login) for i in range(self.BUYERS)]
        )

        with file_sessions() as check:
            stock = check.get(Book, book_id).stock
            sold = ledger_size(check, book_id)

        sold_out = [o for o in outcomes if isinstance(o, InsufficientStockError)]
        assert len([o for o in outcomes if isinstance(o, int)]) == self.STOCK
        assert len(sold_out) == self.BUYERS - self.STOCK
        assert stock == 0
        assert sold == self.STOCK


class TestPurchasesAPI:
    """Tests for the purchase endpoints."""

    def test_purchase(self, client, sample_book, sample_user, auth_header):
        response = client.post(
            f"/api/v1/books/{sample_book.id}/purchase",
            headers=auth_header(sample_user),
        )
        assert response.status_code == 201
        assert response.json()["book_id"] == sample_book.id

        book = client.get(f"/api/v1/books/{sample_book.id}").json()
        assert book["stock"] == 4
        assert book["purchase_count"] == 1

    def test_purchase_out_of_stock(self, client, make_book, sample_user, auth_header):
        book = make_book("Sold out", stock=0)

        response = client.post(f"/api/v1/books/{book.id}/purchase", headers=auth_header(sample_user))
        assert response.status_code == 409
        assert response.json()["error"] == "insufficient_stock"

    def test_purchase_unknown_book(self, client, sample_user, auth_header):
        response = client.post("/api/v1/books/999/purchase", headers=auth_header(sample_user))
        assert response.status_code == 404

    def test_purchase_requires_auth(self, client, sample_book):
        response = client.post(f"/api/v1/books/{sample_book.id}/purchase")
        assert response.status_code == 401

    def test_list_my_purchases(self, client, db_session, sample_book, sample_user, second_user, auth_header):
        purchases.purchase(db_session, sample_user.login, sample_book.id)
        purchases.purchase(db_session, second_user.login, sample_book.id)

        response = client.get("/api/v1/users/me/purchases", headers=auth_header(sample_user))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["user_login"] == sample_user.login
