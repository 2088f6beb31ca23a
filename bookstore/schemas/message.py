"""
Message Pydantic Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageCreate(BaseModel):
    receiver_login: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=5000)

    @field_validator("text")
    @classmethod
    def text_must_not_be_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message text cannot be empty or whitespace")
        return v


class MessageResponse(BaseModel):
    id: int
    sender_login: str
    receiver_login: str
    text: str
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
