"""
User Pydantic Schemas
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bookstore.models.user import UserRole


class UserResponse(BaseModel):
    login: str = Field(..., description="Unique login")
    first_name: str
    last_name: str
    email: str
    avatar_path: Optional[str] = Field(default=None, description="Opaque avatar reference")
    role: UserRole = Field(..., description="Client or Admin")

    model_config = ConfigDict(from_attributes=True)


class RoleUpdate(BaseModel):
    role: UserRole = Field(..., description="New role", examples=["Admin"])
