"""
Message Model

Direct messages between two users.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sender_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
        index=True,
    )
    receiver_login: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("users.login"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, {self.sender_login!r} -> {self.receiver_login!r})>"
