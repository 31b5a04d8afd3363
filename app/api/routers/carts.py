#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_cart_service
from app.api.errors import to_http
from app.domain.errors import StoreError
from app.domain.schemas import CartItemIn, CartOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.get_cart(user_id)
    except StoreError as e:
        raise to_http(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_track(user_id=user_id, track_id=payload.track_id)
    except StoreError as e:
        raise to_http(e)


@router.delete("/items/{track_id}", response_model=CartOut)
def remove_item(
    track_id: int,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_track(user_id, track_id)
    except StoreError as e:
        raise to_http(e)


@router.delete("/", response_model=CartOut)
def clear_cart(
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.clear(user_id)
    except StoreError as e:
        raise to_http(e)
