"""Store feature - the relational dataset the reports run against"""

from .models import Restaurant, Customer, Rider, Order, Delivery, OrderStatus, DeliveryStatus
from .service import StoreService
from .loader import DatasetLoader

__all__ = [
    # Models
    "Restaurant",
    "Customer",
    "Rider",
    "Order",
    "Delivery",
    "OrderStatus",
    "DeliveryStatus",

    # Services
    "StoreService",
    "DatasetLoader",
]
