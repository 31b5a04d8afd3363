from sqlalchemy import Column, Integer

from app.data.database import Base


class TrackStatsModel(Base):
    __tablename__ = "track_stats"

    track_id = Column(Integer, primary_key=True, autoincrement=False)
    purchase_count = Column(Integer, nullable=False, default=0)
    play_count = Column(Integer, nullable=False, default=0)
