"""
Purchase Pydantic Schemas
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PurchaseResponse(BaseModel):
    id: int = Field(..., description="Ledger entry ID")
    user_login: str = Field(..., description="Buyer")
    book_id: int = Field(..., description="Book bought")
    timestamp: datetime = Field(..., description="When the purchase was recorded")

    model_config = ConfigDict(from_attributes=True)


class PurchaseListResponse(BaseModel):
    items: list[PurchaseResponse] = Field(..., description="Purchases, oldest first")
    total: int = Field(..., ge=0)
