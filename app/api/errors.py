# app/api/errors.py
from fastapi import HTTPException

from app.domain.errors import (
    StoreError,
    ValidationError,
    TrackNotFound,
    PurchaseNotFound,
    ConflictError,
    PreconditionError,
    PaymentNotCompleted,
    OwnershipRequired,
    UpstreamUnavailable,
    StorageError,
    ConcurrentModification,
)

#kolejnosc ma znaczenie - najpierw podklasy
_STATUS = [
    (TrackNotFound, 404),
    (PurchaseNotFound, 404),
    (ValidationError, 400),
    (ConflictError, 409),
    (PaymentNotCompleted, 402),
    (PreconditionError, 400),
    (OwnershipRequired, 403),
    (UpstreamUnavailable, 503),
    (ConcurrentModification, 409),
    (StorageError, 503),
]


def to_http(e: StoreError) -> HTTPException:
    for error_type, status_code in _STATUS:
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
