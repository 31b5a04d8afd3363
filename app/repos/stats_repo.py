# app/repos/stats_repo.py
from typing import Iterable

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.data.models.track_stats import TrackStatsModel


class StatsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, track_id: int) -> TrackStatsModel | None:
        return self.db.get(TrackStatsModel, track_id)

    def _increment(self, track_id: int, column: str) -> None:
        #inkrementacja w SQL, bez read-modify-write
        rowcount = self.db.execute(
            update(TrackStatsModel)
            .where(TrackStatsModel.track_id == track_id)
            .values({column: getattr(TrackStatsModel, column) + 1})
            .execution_options(synchronize_session=False)
        ).rowcount

        if rowcount == 0:
            stats = TrackStatsModel(track_id=track_id, purchase_count=0, play_count=0)
            setattr(stats, column, 1)
            self.db.add(stats)
            self.db.flush()

    def increment_purchase_counts(self, track_ids: Iterable[int]) -> None:
        for track_id in track_ids:
            self._increment(track_id, "purchase_count")

    def increment_play_count(self, track_id: int) -> None:
        self._increment(track_id, "play_count")
