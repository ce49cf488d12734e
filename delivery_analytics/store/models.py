"""Database models for the store module: restaurants, customers, riders, orders, deliveries."""

import enum

from sqlalchemy import Column, Integer, String, Date, Time, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from delivery_analytics.core.database import Base


class OrderStatus(str, enum.Enum):
    """Lifecycle states an order can be recorded in."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    NOT_FULFILLED = "Not Fulfilled"


class DeliveryStatus(str, enum.Enum):
    """States of the delivery leg of an order."""

    PENDING = "Pending"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    NOT_DELIVERED = "Not Delivered"
    CANCELLED = "Cancelled"


class Restaurant(Base):
    """Restaurant taking orders in a city."""

    __tablename__ = "restaurants"

    restaurant_id = Column(Integer, primary_key=True)
    restaurant_name = Column(String(55), nullable=False)
    city = Column(String(25), nullable=False, index=True)
    opening_hours = Column(String(55), nullable=True)

    orders = relationship("Order", back_populates="restaurant")

    def __repr__(self):
        return f"<Restaurant(id={self.restaurant_id}, name='{self.restaurant_name}', city='{self.city}')>"


class Customer(Base):
    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True)
    customer_name = Column(String(25), nullable=False, index=True)
    reg_date = Column(Date, nullable=True)

    orders = relationship("Order", back_populates="customer")


class Rider(Base):
    __tablename__ = "riders"

    rider_id = Column(Integer, primary_key=True)
    rider_name = Column(String(35), nullable=False)
    sign_up = Column(Date, nullable=True)

    deliveries = relationship("Delivery", back_populates="rider")


class Order(Base):
    """A purchase placed by a customer at a restaurant."""

    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.restaurant_id"), nullable=False)
    order_item = Column(String(55), nullable=True)
    order_date = Column(Date, nullable=False)
    order_time = Column(Time, nullable=False)
    order_status = Column(String(55), nullable=False, default=OrderStatus.PENDING.value)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)

    customer = relationship("Customer", back_populates="orders")
    restaurant = relationship("Restaurant", back_populates="orders")
    delivery = relationship("Delivery", back_populates="order", uselist=False)

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_amount_non_negative"),
        Index("IX_orders_customer_date", "customer_id", "order_date"),
        Index("IX_orders_restaurant_date", "restaurant_id", "order_date"),
    )

    def __repr__(self):
        return (f"<Order(id={self.order_id}, customer={self.customer_id}, "
                f"restaurant={self.restaurant_id}, amount={self.total_amount})>")


class Delivery(Base):
    """Delivery leg of an order. At most one per order."""

    __tablename__ = "deliveries"

    delivery_id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, unique=True)
    delivery_status = Column(String(35), nullable=False)
    delivery_time = Column(Time, nullable=True)
    rider_id = Column(Integer, ForeignKey("riders.rider_id"), nullable=False, index=True)

    order = relationship("Order", back_populates="delivery")
    rider = relationship("Rider", back_populates="deliveries")
