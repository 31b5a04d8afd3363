# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class CartItemIn(BaseModel):
    """Schema dla dodawania utworu do koszyka."""

    track_id: int = Field(..., gt=0, description="ID utworu (musi być > 0)")


class CartItemOut(BaseModel):
    track_id: int
    price: Decimal
    added_at: datetime


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    user_id: int
    items: List[CartItemOut]
    total: Decimal
    item_count: int
    unavailable_track_ids: List[int] = []


class IntentOut(BaseModel):
    client_secret: str
    provider_id: str
    amount: Decimal
    currency: str
    track_ids: List[int]


class FinalizeIn(BaseModel):
    """Schema dla potwierdzenia platnosci."""

    provider_id: str = Field(..., min_length=1, max_length=255, description="ID payment intentu")


class FinalizeOut(BaseModel):
    purchase_id: int
    tracks_entitled: int
    total_amount: Decimal
    already_finalized: bool


class PurchaseLineOut(BaseModel):
    track_id: int
    price_at_purchase: Decimal

    model_config = ConfigDict(from_attributes=True)


class PurchaseOut(BaseModel):
    """Schema dla zakupu (response)."""

    id: int
    user_id: int
    lines: List[PurchaseLineOut]
    total_amount: Decimal
    currency: str
    payment_provider_id: str
    status: str
    transaction_ref: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LibraryEntryOut(BaseModel):
    track_id: int
    purchase_id: int
    purchase_date: datetime
    payment_provider_id: str

    model_config = ConfigDict(from_attributes=True)


class OwnershipOut(BaseModel):
    track_id: int
    owned: bool


class StreamTargetOut(BaseModel):
    track_id: int
    kind: str
