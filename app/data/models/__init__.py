#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.purchase import PurchaseModel, PurchaseLineModel
from app.data.models.entitlement import EntitlementModel
from app.data.models.track_stats import TrackStatsModel

__all__ = [
    "CartModel",
    "CartItemModel",
    "PurchaseModel",
    "PurchaseLineModel",
    "EntitlementModel",
    "TrackStatsModel",
]
