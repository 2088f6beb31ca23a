"""initial_bookstore_schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('name', sa.String(length=100), nullable=False,
                  comment="Category name (e.g., 'Fiction', 'History')"),
        sa.PrimaryKeyConstraint('name'),
    )

    op.create_table(
        'users',
        sa.Column('login', sa.String(length=100), nullable=False,
                  comment='Unique login supplied by the identity provider'),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('avatar_path', sa.String(length=1000), nullable=True,
                  comment='Opaque avatar reference'),
        sa.Column('role', sa.Enum('Client', 'Admin', name='user_role'), nullable=False),
        sa.PrimaryKeyConstraint('login'),
    )

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=500), nullable=False, comment='Book title'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False, comment='Book price'),
        sa.Column('description', sa.Text(), nullable=True, comment='Book description or summary'),
        sa.Column('category_name', sa.String(length=100), nullable=False),
        sa.Column('cover_path', sa.String(length=1000), nullable=True,
                  comment='Opaque cover image reference'),
        sa.Column('stock', sa.Integer(), nullable=False, comment='Units available for purchase'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('stock >= 0', name='ck_book_stock_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_book_price_non_negative'),
        sa.ForeignKeyConstraint(['category_name'], ['categories.name']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_books_name'), 'books', ['name'], unique=False)
    op.create_index(op.f('ix_books_category_name'), 'books', ['category_name'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('user_login', sa.String(length=100), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('likes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('dislikes', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('likes >= 0', name='ck_review_likes_non_negative'),
        sa.CheckConstraint('dislikes >= 0', name='ck_review_dislikes_non_negative'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.ForeignKeyConstraint(['user_login'], ['users.login']),
        sa.ForeignKeyConstraint(['parent_id'], ['reviews.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reviews_book_id'), 'reviews', ['book_id'], unique=False)
    op.create_index(op.f('ix_reviews_user_login'), 'reviews', ['user_login'], unique=False)
    op.create_index(op.f('ix_reviews_parent_id'), 'reviews', ['parent_id'], unique=False)

    op.create_table(
        'reactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_login', sa.String(length=100), nullable=False),
        sa.Column('review_id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.Enum('Like', 'Dislike', name='reaction_kind'), nullable=False),
        sa.ForeignKeyConstraint(['user_login'], ['users.login']),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_login', 'review_id', name='uq_reaction_user_review'),
    )
    op.create_index(op.f('ix_reactions_review_id'), 'reactions', ['review_id'], unique=False)

    op.create_table(
        'book_reactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_login', sa.String(length=100), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating from 1-5 stars'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_rating_range'),
        sa.ForeignKeyConstraint(['user_login'], ['users.login']),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_login', 'book_id', name='uq_rating_user_book'),
    )
    op.create_index(op.f('ix_book_reactions_book_id'), 'book_reactions', ['book_id'], unique=False)

    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_login', sa.String(length=100), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_login'], ['users.login']),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_purchases_user_login'), 'purchases', ['user_login'], unique=False)
    op.create_index(op.f('ix_purchases_book_id'), 'purchases', ['book_id'], unique=False)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('sender_login', sa.String(length=100), nullable=False),
        sa.Column('receiver_login', sa.String(length=100), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['sender_login'], ['users.login']),
        sa.ForeignKeyConstraint(['receiver_login'], ['users.login']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_messages_sender_login'), 'messages', ['sender_login'], unique=False)
    op.create_index(op.f('ix_messages_receiver_login'), 'messages', ['receiver_login'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_messages_receiver_login'), table_name='messages')
    op.drop_index(op.f('ix_messages_sender_login'), table_name='messages')
    op.drop_table('messages')
    op.drop_index(op.f('ix_purchases_book_id'), table_name='purchases')
    op.drop_index(op.f('ix_purchases_user_login'), table_name='purchases')
    op.drop_table('purchases')
    op.drop_index(op.f('ix_book_reactions_book_id'), table_name='book_reactions')
    op.drop_table('book_reactions')
    op.drop_index(op.f('ix_reactions_review_id'), table_name='reactions')
    op.drop_table('reactions')
    op.drop_index(op.f('ix_reviews_parent_id'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_user_login'), table_name='reviews')
    op.drop_index(op.f('ix_reviews_book_id'), table_name='reviews')
    op.drop_table('reviews')
    op.drop_index(op.f('ix_books_category_name'), table_name='books')
    op.drop_index(op.f('ix_books_name'), table_name='books')
    op.drop_table('books')
    op.drop_table('users')
    op.drop_table('categories')
    sa.Enum(name='reaction_kind').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
