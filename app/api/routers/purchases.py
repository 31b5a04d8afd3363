# app/api/routers/purchases.py
from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_purchase_service
from app.api.errors import to_http
from app.domain.errors import StoreError
from app.domain.schemas import (
    FinalizeIn,
    FinalizeOut,
    IntentOut,
    LibraryEntryOut,
    PurchaseOut,
)
from app.services.purchase_service import PurchaseService
from app.utils.retry import storage_retry

router = APIRouter(tags=["purchases"])


@router.post("/purchases/intent", response_model=IntentOut, status_code=201)
def create_intent(
    user_id: int = Query(..., gt=0),
    svc: PurchaseService = Depends(get_purchase_service),
):
    """
    Tworzy payment intent z aktualnego koszyka.
    """
    try:
        return svc.create_intent(user_id)
    except StoreError as e:
        raise to_http(e)


@router.post("/purchases/finalize", response_model=FinalizeOut)
def finalize(
    payload: FinalizeIn,
    user_id: int = Query(..., gt=0),
    svc: PurchaseService = Depends(get_purchase_service),
):
    """
    Potwierdza platnosc i zapisuje zakup.
    Bledy przejsciowe bazy ponawiane z tym samym provider_id - guard idempotencji
    gwarantuje jeden zakup.
    """
    try:
        result = storage_retry()(svc.finalize)(user_id, payload.provider_id)
    except StoreError as e:
        raise to_http(e)

    return {
        "purchase_id": result.purchase_id,
        "tracks_entitled": result.tracks_entitled,
        "total_amount": result.total_amount,
        "already_finalized": result.already_finalized,
    }


@router.get("/purchases", response_model=List[PurchaseOut])
def list_purchases(
    user_id: int = Query(..., gt=0),
    svc: PurchaseService = Depends(get_purchase_service),
):
    return svc.list_purchases(user_id)


@router.get("/purchases/{purchase_id}", response_model=PurchaseOut)
def get_purchase(
    purchase_id: int,
    user_id: int = Query(..., gt=0),
    svc: PurchaseService = Depends(get_purchase_service),
):
    try:
        return svc.get_purchase(purchase_id, user_id)
    except StoreError as e:
        raise to_http(e)


@router.get("/library", response_model=List[LibraryEntryOut])
def library(
    user_id: int = Query(..., gt=0),
    svc: PurchaseService = Depends(get_purchase_service),
):
    return svc.library(user_id)
