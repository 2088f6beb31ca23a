"""
Messages Router

Endpoints:
- GET /messages - Messages sent or received by the caller
- POST /messages - Send a message to another user
"""

from typing import List

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentUser, DbSession
from bookstore.schemas import MessageCreate, MessageResponse
from bookstore.services import messages
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/", response_model=List[MessageResponse], summary="List your messages")
@limiter.limit(settings.rate_limit_default)
def list_messages(
    request: Request,
    db: DbSession,
    current_user: CurrentUser,
) -> List[MessageResponse]:
    return [
        MessageResponse.model_validate(m)
        for m in messages.list_messages(db, current_user.login)
    ]


@router.post(
    "/",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
@limiter.limit(settings.rate_limit_write)
def send_message(
    request: Request,
    message_data: MessageCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> MessageResponse:
    message = messages.send_message(
        db,
        sender_login=current_user.login,
        receiver_login=message_data.receiver_login,
        text=message_data.text,
    )
    return MessageResponse.model_validate(message)
