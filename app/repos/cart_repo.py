# app/repos/cart_repo.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import StorageError


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, user_id: int) -> CartModel | None:
        return self.db.get(CartModel, user_id, populate_existing=True)

    def get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.get_cart(user_id)
        if cart:
            return cart
        cart = CartModel(user_id=user_id, version=1)
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_items(self, user_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.added_at, CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, user_id: int, track_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.track_id == track_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, user_id: int, track_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.track_id == track_id,
            )
        )
        return result.rowcount

    def delete_cart_items(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def update_cart_version(self, user_id: int, old_version: int) -> int:
        #UPDATE carts SET version = 2 WHERE user_id = 1 AND version = 1
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.user_id == user_id, CartModel.version == old_version)
            .values(version=old_version + 1, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        try:
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            raise StorageError(f"Commit failed: {e.orig}") from e

    def rollback(self):
        self.db.rollback()
