#app/data/models/cart.py
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime

from app.data.database import Base


class CartModel(Base):
    __tablename__ = "carts"

    #jeden koszyk na usera, version pod optimistic locking
    user_id = Column(Integer, primary_key=True, autoincrement=False)
    version = Column(Integer, nullable=False, default=1)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
