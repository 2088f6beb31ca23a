"""
Direct messages between users.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from bookstore.models import Message
from bookstore.services.common import atomic
from bookstore.services.users import get_user

logger = logging.getLogger(__name__)


def send_message(db: Session, sender_login: str, receiver_login: str, text: str) -> Message:
    """
    Raises:
        NotFoundError: sender or receiver does not exist
    """
    get_user(db, sender_login)
    get_user(db, receiver_login)

    message = Message(
        sender_login=sender_login,
        receiver_login=receiver_login,
        text=text,
    )
    with atomic(db, "send_message"):
        db.add(message)

    db.refresh(message)
    logger.debug(f"Message {message.id} sent from {sender_login} to {receiver_login}")
    return message


def list_messages(db: Session, login: str) -> list[Message]:
    """Messages sent or received by a user, oldest first."""
    get_user(db, login)
    stmt = (
        select(Message)
        .where(or_(Message.sender_login == login, Message.receiver_login == login))
        .order_by(Message.timestamp, Message.id)
    )
    return list(db.execute(stmt).scalars().all())
