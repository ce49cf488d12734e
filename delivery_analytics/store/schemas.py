"""Pydantic schemas for the store module."""

from datetime import date, time
from typing import Optional, List, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from delivery_analytics.store.models import OrderStatus, DeliveryStatus


# Restaurant Schemas
class RestaurantBase(BaseModel):
    restaurant_id: int
    restaurant_name: str
    city: str
    opening_hours: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class RestaurantCreate(RestaurantBase):
    pass


class RestaurantRead(RestaurantBase):
    pass


# Customer Schemas
class CustomerBase(BaseModel):
    customer_id: int
    customer_name: str
    reg_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class CustomerCreate(CustomerBase):
    pass


class CustomerRead(CustomerBase):
    pass


# Rider Schemas
class RiderBase(BaseModel):
    rider_id: int
    rider_name: str
    sign_up: Optional[date] = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class RiderCreate(RiderBase):
    pass


class RiderRead(RiderBase):
    pass


# Order Schemas
class OrderBase(BaseModel):
    order_id: int
    customer_id: int
    restaurant_id: int
    order_item: Optional[str] = None
    order_date: date
    order_time: time
    order_status: OrderStatus = OrderStatus.PENDING
    total_amount: float = Field(default=0, ge=0)

    model_config = ConfigDict(from_attributes=True, extra="forbid", use_enum_values=True)


class OrderCreate(OrderBase):

    @field_validator("total_amount", mode="before")
    @classmethod
    def default_missing_amount(cls, value: Any) -> Any:
        """A missing amount is recorded as zero."""
        if value is None or value == "":
            return 0
        return value


class OrderRead(OrderBase):
    pass


# Delivery Schemas
class DeliveryBase(BaseModel):
    delivery_id: int
    order_id: int
    delivery_status: DeliveryStatus
    delivery_time: Optional[time] = None
    rider_id: int

    model_config = ConfigDict(from_attributes=True, extra="forbid", use_enum_values=True)


class DeliveryCreate(DeliveryBase):
    pass


class DeliveryRead(DeliveryBase):
    pass


# Bulk load
class DatasetLoad(BaseModel):
    """Full dataset posted in one request; loaded atomically."""

    restaurants: List[RestaurantCreate] = []
    customers: List[CustomerCreate] = []
    riders: List[RiderCreate] = []
    orders: List[OrderCreate] = []
    deliveries: List[DeliveryCreate] = []

    model_config = ConfigDict(extra="forbid")


class StoreSummary(BaseModel):
    restaurants: int
    customers: int
    riders: int
    orders: int
    deliveries: int
