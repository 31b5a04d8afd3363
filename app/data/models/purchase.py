from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.data.database import Base


class PurchaseModel(Base):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    #klucz idempotencji finalize, unique = serializacja rownoleglych potwierdzen
    payment_provider_id = Column(String(255), nullable=False, unique=True)
    status = Column(String, nullable=False, default="pending")  # pending, completed, failed
    transaction_ref = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    lines = relationship(
        "PurchaseLineModel",
        cascade="all, delete-orphan",
        order_by="PurchaseLineModel.id",
    )


class PurchaseLineModel(Base):
    __tablename__ = "purchase_lines"

    id = Column(Integer, primary_key=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    track_id = Column(Integer, nullable=False)
    price_at_purchase = Column(Numeric(10, 2), nullable=False)
