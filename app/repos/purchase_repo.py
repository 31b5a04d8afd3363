# app/repos/purchase_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.data.models.purchase import PurchaseModel


class PurchaseRepo:
    """Append-only: zakupy sa tylko dodawane, nigdy aktualizowane."""

    def __init__(self, db: Session):
        self.db = db

    def add_purchase(self, purchase: PurchaseModel) -> PurchaseModel:
        self.db.add(purchase)
        self.db.flush()
        return purchase

    def get_purchase(self, purchase_id: int) -> PurchaseModel | None:
        return self.db.get(PurchaseModel, purchase_id)

    def get_by_provider_id(self, provider_id: str) -> PurchaseModel | None:
        return self.db.execute(
            select(PurchaseModel)
            .options(selectinload(PurchaseModel.lines))
            .where(PurchaseModel.payment_provider_id == provider_id)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: int) -> List[PurchaseModel]:
        return list(
            self.db.execute(
                select(PurchaseModel)
                .options(selectinload(PurchaseModel.lines))
                .where(PurchaseModel.user_id == user_id)
                .order_by(PurchaseModel.created_at.desc(), PurchaseModel.id.desc())
            ).scalars()
        )
