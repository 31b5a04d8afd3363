# app/domain/types.py
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from enum import Enum
from typing import List


class IntentState(str, Enum):
    SUCCEEDED = "succeeded"
    PENDING = "pending"
    FAILED = "failed"


class PurchaseStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class StreamKind(str, Enum):
    PREVIEW = "preview"
    FULL = "full"


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TrackInfo:
    id: int
    price: Decimal
    active: bool


@dataclass(frozen=True)
class CartLine:
    track_id: int
    price: Decimal
    added_at: datetime


@dataclass(frozen=True)
class CartSnapshot:
    user_id: int
    version: int
    items: List[CartLine] = field(default_factory=list)
    unavailable_track_ids: List[int] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((i.price for i in self.items), Decimal("0.00"))

    @property
    def track_ids(self) -> List[int]:
        return [i.track_id for i in self.items]

    @property
    def is_empty(self) -> bool:
        return not self.items


@dataclass(frozen=True)
class IntentRef:
    provider_id: str
    client_secret: str


@dataclass(frozen=True)
class IntentStatus:
    provider_id: str
    status: IntentState
    charged_amount_minor_units: int
    transaction_ref: str | None = None


@dataclass(frozen=True)
class FinalizeResult:
    purchase_id: int
    tracks_entitled: int
    total_amount: Decimal
    already_finalized: bool = False


@dataclass(frozen=True)
class StreamTarget:
    track_id: int
    kind: StreamKind
