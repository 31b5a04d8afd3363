# app/api/deps.py
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.data.database import get_db, get_read_db
from app.services.access_service import AccessService
from app.services.cart_service import CartService
from app.services.catalog_client import CatalogClient
from app.services.lock_service import LockService
from app.services.payment_gateway import StripeGateway
from app.services.purchase_service import PurchaseService
from app.services.stats_service import PlayCounter


#klienci zewnetrzni jako singletony (pule polaczen)
@lru_cache
def get_catalog() -> CatalogClient:
    return CatalogClient()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_gateway() -> StripeGateway:
    return StripeGateway()


def get_play_counter() -> PlayCounter:
    return PlayCounter()


def get_cart_service(
    db: Session = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, catalog=catalog, lock_service=lock_service)


def get_purchase_service(
    db: Session = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog),
    lock_service: LockService = Depends(get_lock_service),
    gateway: StripeGateway = Depends(get_gateway),
) -> PurchaseService:
    cart_service = CartService(db=db, catalog=catalog, lock_service=lock_service)
    return PurchaseService(db=db, cart_service=cart_service, gateway=gateway)


def get_access_service(
    read_db: Session = Depends(get_read_db),
    catalog: CatalogClient = Depends(get_catalog),
    play_counter: PlayCounter = Depends(get_play_counter),
) -> AccessService:
    return AccessService(read_db=read_db, catalog=catalog, play_counter=play_counter)
