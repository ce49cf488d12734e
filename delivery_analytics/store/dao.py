"""Data Access Objects for the store module."""

from typing import Dict
from sqlalchemy.orm import Session
from sqlalchemy import select, func

from delivery_analytics.core.base_dao import BaseDAO
from delivery_analytics.store.models import Restaurant, Customer, Rider, Order, Delivery


class RestaurantDAO(BaseDAO[Restaurant]):
    def __init__(self, db_session: Session):
        super().__init__(Restaurant, db_session)


class CustomerDAO(BaseDAO[Customer]):
    def __init__(self, db_session: Session):
        super().__init__(Customer, db_session)


class RiderDAO(BaseDAO[Rider]):
    def __init__(self, db_session: Session):
        super().__init__(Rider, db_session)


class OrderDAO(BaseDAO[Order]):
    def __init__(self, db_session: Session):
        super().__init__(Order, db_session)


class DeliveryDAO(BaseDAO[Delivery]):
    def __init__(self, db_session: Session):
        super().__init__(Delivery, db_session)

    def get_by_order_id(self, order_id: int):
        """Get the delivery recorded for an order, if any."""
        return self.get_by_field("order_id", order_id)


class StoreDAO:
    """Cross-table reads over the whole store."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def get_row_counts(self) -> Dict[str, int]:
        """Row count per table."""
        counts = {}
        for name, model, pk in (
            ("restaurants", Restaurant, Restaurant.restaurant_id),
            ("customers", Customer, Customer.customer_id),
            ("riders", Rider, Rider.rider_id),
            ("orders", Order, Order.order_id),
            ("deliveries", Delivery, Delivery.delivery_id),
        ):
            counts[name] = self.db.execute(select(func.count(pk))).scalar()
        return counts
