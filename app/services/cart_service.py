from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    AlreadyInCart,
    AlreadyOwned,
    ConcurrentModification,
    TrackUnavailable,
    TrackNotFound,
)
from app.domain.types import CartLine, CartSnapshot
from app.repos.cart_repo import CartRepo
from app.repos.entitlement_repo import EntitlementRepo
from app.services.catalog_client import CatalogClient
from app.services.lock_service import LockService
from app.utils.logging import get_logger

logger = get_logger(__name__)


def snapshot_to_dict(snapshot: CartSnapshot) -> Dict[str, Any]:
    return {
        "user_id": snapshot.user_id,
        "items": [
            {
                "track_id": line.track_id,
                "price": line.price,
                "added_at": line.added_at,
            }
            for line in snapshot.items
        ],
        "total": snapshot.total,
        "item_count": len(snapshot.items),
        "unavailable_track_ids": snapshot.unavailable_track_ids,
    }


class CartService:
    """
    Prosta implementacja cqrs dla koszyka
    commands (add, remove, clear) modyfikuja stan pod per-user lockiem + version
    query (snapshot) tylko odczyt
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogClient,
        lock_service: LockService,
    ):
        self.repo = CartRepo(db)
        self.entitlements = EntitlementRepo(db)
        self.catalog = catalog
        self.lock_service = lock_service

    #query - odczyt
    def snapshot(self, user_id: int) -> CartSnapshot:
        cart = self.repo.get_cart(user_id)
        #jedno zapytanie = spojny widok pozycji
        items = self.repo.get_cart_items(user_id)

        lines = []
        unavailable = []
        for item in items:
            try:
                track = self.catalog.lookup(item.track_id)
            except TrackNotFound:
                unavailable.append(item.track_id)
                continue

            if not track.active:
                unavailable.append(item.track_id)
                continue

            lines.append(CartLine(track_id=item.track_id, price=track.price, added_at=item.added_at))

        return CartSnapshot(
            user_id=user_id,
            version=cart.version if cart else 0,
            items=lines,
            unavailable_track_ids=unavailable,
        )

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        return snapshot_to_dict(self.snapshot(user_id))

    #commands
    def add_track(self, user_id: int, track_id: int) -> Dict[str, Any]:
        # Walidacja w katalogu zanim cokolwiek zmienimy
        track = self.catalog.lookup(track_id)
        if not track.active:
            raise TrackUnavailable(track_id)

        with self.lock_service.user_lock(user_id):
            if self.entitlements.owns(user_id, track_id):
                raise AlreadyOwned(track_id)

            if self.repo.get_cart_item(user_id, track_id):
                raise AlreadyInCart(track_id)

            cart = self.repo.get_or_create_cart(user_id)
            logger.info(f"Adding track {track_id} to cart of user {user_id}")

            try:
                self.repo.add_cart_item(CartItemModel(user_id=user_id, track_id=track_id))
            except IntegrityError:
                #unique (user_id, track_id) zlapal wyscig
                self.repo.rollback()
                raise AlreadyInCart(track_id)

            new_version = cart.version + 1
            self.bump_version(user_id, cart.version)
            self.repo.commit()

        logger.info(f"Track {track_id} added to cart of user {user_id}, version {new_version}")
        return self.get_cart(user_id)

    def remove_track(self, user_id: int, track_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            cart = self.repo.get_cart(user_id)
            if not cart:
                return self.get_cart(user_id)

            removed = self.repo.delete_cart_item(user_id, track_id)
            if not removed:
                #idempotentne, brak pozycji to nie blad
                self.repo.rollback()
                return self.get_cart(user_id)

            self.bump_version(user_id, cart.version)
            self.repo.commit()

        logger.info(f"Track {track_id} removed from cart of user {user_id}")
        return self.get_cart(user_id)

    def clear(self, user_id: int) -> Dict[str, Any]:
        with self.lock_service.user_lock(user_id):
            cart = self.repo.get_cart(user_id)
            if cart:
                removed = self.repo.delete_cart_items(user_id)
                self.bump_version(user_id, cart.version)
                self.repo.commit()
                logger.info(f"Cart of user {user_id} cleared ({removed} items)")

        return self.get_cart(user_id)

    def bump_version(self, user_id: int, version: int):
        # Optimistic locking warunek na wersje
        rowcount = self.repo.update_cart_version(user_id, version)
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrentModification()
