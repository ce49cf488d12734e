"""Service layer for the store module using BaseService."""

from delivery_analytics.core.base_service import BaseService, ModelType, CreateSchemaType, ResponseSchemaType
from delivery_analytics.core.exceptions import DuplicateRecordError, ReferentialIntegrityError
from delivery_analytics.store.dao import RestaurantDAO, CustomerDAO, RiderDAO, OrderDAO, DeliveryDAO, StoreDAO
from delivery_analytics.store.models import Restaurant, Customer, Rider, Order, Delivery
from delivery_analytics.store.schemas import (
    RestaurantCreate, RestaurantRead,
    CustomerCreate, CustomerRead,
    RiderCreate, RiderRead,
    OrderCreate, OrderRead,
    DeliveryCreate, DeliveryRead,
    StoreSummary,
)


class UniqueIdService(BaseService[ModelType, CreateSchemaType, ResponseSchemaType]):
    """Rejects a create whose primary key is already taken."""

    entity_name = "Record"
    id_field = "id"

    def _validate_create(self, create_data) -> None:
        record_id = getattr(create_data, self.id_field)
        if self.dao.get_by_id(record_id) is not None:
            raise DuplicateRecordError(f"{self.entity_name} with {self.id_field} {record_id} already exists")


class RestaurantService(UniqueIdService[Restaurant, RestaurantCreate, RestaurantRead]):
    """Service for Restaurant operations."""

    response_model = RestaurantRead
    entity_name = "Restaurant"
    id_field = "restaurant_id"

    def __init__(self, restaurant_dao: RestaurantDAO):
        super().__init__(restaurant_dao)


class CustomerService(UniqueIdService[Customer, CustomerCreate, CustomerRead]):
    """Service for Customer operations."""

    response_model = CustomerRead
    entity_name = "Customer"
    id_field = "customer_id"

    def __init__(self, customer_dao: CustomerDAO):
        super().__init__(customer_dao)


class RiderService(UniqueIdService[Rider, RiderCreate, RiderRead]):
    """Service for Rider operations."""

    response_model = RiderRead
    entity_name = "Rider"
    id_field = "rider_id"

    def __init__(self, rider_dao: RiderDAO):
        super().__init__(rider_dao)


class OrderService(UniqueIdService[Order, OrderCreate, OrderRead]):
    """Service for Order operations; both parents must already exist."""

    response_model = OrderRead
    entity_name = "Order"
    id_field = "order_id"

    def __init__(self, order_dao: OrderDAO, customer_dao: CustomerDAO, restaurant_dao: RestaurantDAO):
        super().__init__(order_dao)
        self.customer_dao = customer_dao
        self.restaurant_dao = restaurant_dao

    def _validate_create(self, create_data: OrderCreate) -> None:
        super()._validate_create(create_data)
        if self.customer_dao.get_by_id(create_data.customer_id) is None:
            raise ReferentialIntegrityError("Order", "customer_id", create_data.customer_id)
        if self.restaurant_dao.get_by_id(create_data.restaurant_id) is None:
            raise ReferentialIntegrityError("Order", "restaurant_id", create_data.restaurant_id)


class DeliveryService(UniqueIdService[Delivery, DeliveryCreate, DeliveryRead]):
    """Service for Delivery operations."""

    response_model = DeliveryRead
    entity_name = "Delivery"
    id_field = "delivery_id"

    def __init__(self, delivery_dao: DeliveryDAO, order_dao: OrderDAO, rider_dao: RiderDAO):
        super().__init__(delivery_dao)
        self.delivery_dao = delivery_dao
        self.order_dao = order_dao
        self.rider_dao = rider_dao

    def _validate_create(self, create_data: DeliveryCreate) -> None:
        super()._validate_create(create_data)
        if self.order_dao.get_by_id(create_data.order_id) is None:
            raise ReferentialIntegrityError("Delivery", "order_id", create_data.order_id)
        if self.rider_dao.get_by_id(create_data.rider_id) is None:
            raise ReferentialIntegrityError("Delivery", "rider_id", create_data.rider_id)
        if self.delivery_dao.get_by_order_id(create_data.order_id) is not None:
            raise DuplicateRecordError(f"Order {create_data.order_id} already has a delivery")


class StoreService:
    """Wires the per-entity services to one session."""

    def __init__(self, db_session):
        self.db = db_session
        restaurant_dao = RestaurantDAO(db_session)
        customer_dao = CustomerDAO(db_session)
        rider_dao = RiderDAO(db_session)
        order_dao = OrderDAO(db_session)
        delivery_dao = DeliveryDAO(db_session)

        self.restaurants = RestaurantService(restaurant_dao)
        self.customers = CustomerService(customer_dao)
        self.riders = RiderService(rider_dao)
        self.orders = OrderService(order_dao, customer_dao, restaurant_dao)
        self.deliveries = DeliveryService(delivery_dao, order_dao, rider_dao)
        self.store_dao = StoreDAO(db_session)

    def entity_service(self, entity: str) -> BaseService:
        """Look up the service for a table name such as 'orders'."""
        services = {
            "restaurants": self.restaurants,
            "customers": self.customers,
            "riders": self.riders,
            "orders": self.orders,
            "deliveries": self.deliveries,
        }
        return services[entity]

    def get_summary(self) -> StoreSummary:
        return StoreSummary(**self.store_dao.get_row_counts())
