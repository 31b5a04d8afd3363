from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint
from datetime import datetime, timezone

from app.data.database import Base


class EntitlementModel(Base):
    __tablename__ = "entitlements"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    track_id = Column(Integer, nullable=False)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False)
    payment_provider_id = Column(String(255), nullable=False)
    purchase_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("user_id", "track_id", name="u_user_track"),)
