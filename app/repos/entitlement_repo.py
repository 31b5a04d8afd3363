# app/repos/entitlement_repo.py
from typing import Iterable, List, Set

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.entitlement import EntitlementModel


class EntitlementRepo:
    def __init__(self, db: Session):
        self.db = db

    def owns(self, user_id: int, track_id: int) -> bool:
        found = self.db.execute(
            select(EntitlementModel.id).where(
                EntitlementModel.user_id == user_id,
                EntitlementModel.track_id == track_id,
            )
        ).first()
        return found is not None

    def owned_among(self, user_id: int, track_ids: Iterable[int]) -> Set[int]:
        track_ids = list(track_ids)
        if not track_ids:
            return set()
        rows = self.db.execute(
            select(EntitlementModel.track_id).where(
                EntitlementModel.user_id == user_id,
                EntitlementModel.track_id.in_(track_ids),
            )
        ).scalars()
        return set(rows)

    def add_entitlements(self, entitlements: List[EntitlementModel]) -> None:
        self.db.add_all(entitlements)
        self.db.flush()

    def list_for_user(self, user_id: int) -> List[EntitlementModel]:
        return list(
            self.db.execute(
                select(EntitlementModel)
                .where(EntitlementModel.user_id == user_id)
                .order_by(EntitlementModel.purchase_date.desc(), EntitlementModel.id.desc())
            ).scalars()
        )
