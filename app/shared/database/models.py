# app/shared/database/models.py
import uuid

from sqlalchemy import (
    Column, String, DateTime, Float, ForeignKey, CheckConstraint, func
)
from sqlalchemy.orm import relationship

from app.config.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


# =====================================================
# TIMESTAMP MIXIN
# =====================================================
class TimestampMixin:
    """Mixin that adds created_at and updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


# =====================================================
# USERS
# =====================================================

class User(Base, TimestampMixin):
    """Authenticated principal"""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'delivery_partner')", name="ck_users_role"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False)

    # Relationships
    partner = relationship("DeliveryPartner", back_populates="user", uselist=False)


# =====================================================
# DELIVERY PARTNERS
# =====================================================

class DeliveryPartner(Base, TimestampMixin):
    """Delivery partner profile, one per delivery_partner user"""
    __tablename__ = "delivery_partners"
    __table_args__ = (
        CheckConstraint(
            "availability_status IN ('available', 'unavailable')",
            name="ck_delivery_partners_availability"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    contact_number = Column(String(50), nullable=False)

    # Last reported position
    current_latitude = Column(Float, nullable=False)
    current_longitude = Column(Float, nullable=False)
    current_address = Column(String(500))

    availability_status = Column(String(20), nullable=False, default='available')

    # Relationships
    user = relationship("User", back_populates="partner")
    orders = relationship("Order", back_populates="assigned_partner")

    @property
    def email(self):
        return self.user.email if self.user else None

    @property
    def current_location(self):
        return {
            "latitude": self.current_latitude,
            "longitude": self.current_longitude,
            "address": self.current_address
        }


# =====================================================
# ORDERS
# =====================================================

class Order(Base, TimestampMixin):
    """Delivery order"""
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'assigned', 'picked_up', 'delivered')",
            name="ck_orders_status"
        ),
        # assigned_to is set exactly when the order has left 'pending'
        CheckConstraint(
            "(status = 'pending' AND assigned_to IS NULL) OR "
            "(status <> 'pending' AND assigned_to IS NOT NULL)",
            name="ck_orders_assignment"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    order_id = Column(String(100), nullable=False, unique=True, index=True)
    item_name = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)

    delivery_latitude = Column(Float, nullable=False)
    delivery_longitude = Column(Float, nullable=False)
    delivery_address = Column(String(500))

    status = Column(String(20), nullable=False, default='pending', index=True)
    assigned_to = Column(String(36), ForeignKey("delivery_partners.id"), index=True)

    # Relationships
    assigned_partner = relationship("DeliveryPartner", back_populates="orders")

    @property
    def delivery_location(self):
        return {
            "latitude": self.delivery_latitude,
            "longitude": self.delivery_longitude,
            "address": self.delivery_address
        }
