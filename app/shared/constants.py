# app/shared/constants.py
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    DELIVERY_PARTNER = "delivery_partner"


class OrderStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"


class AvailabilityStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


# Orders a partner is still working on
ACTIVE_ORDER_STATUSES = (OrderStatus.ASSIGNED.value, OrderStatus.PICKED_UP.value)
