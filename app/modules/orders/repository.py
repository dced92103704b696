# app/modules/orders/repository.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, update, desc
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from app.core.exceptions import AlreadyExists
from app.shared.constants import AvailabilityStatus, OrderStatus
from app.shared.database.models import DeliveryPartner, Order
import logging

logger = logging.getLogger(__name__)

class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, order_pk: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.assigned_partner))
            .filter(Order.id == order_pk)
            .first()
        )

    def get_by_reference(self, order_id: str) -> Optional[Order]:
        return self.db.query(Order).filter(Order.order_id == order_id).first()

    def list_all(self) -> List[Order]:
        return (
            self.db.query(Order)
            .options(joinedload(Order.assigned_partner))
            .order_by(desc(Order.created_at))
            .all()
        )

    def list_for_partner(self, partner_id: str, statuses: Optional[List[str]] = None, limit: Optional[int] = None) -> List[Order]:
        query = self.db.query(Order).filter(Order.assigned_to == partner_id)
        if statuses:
            query = query.filter(Order.status.in_(statuses))
        query = query.order_by(desc(Order.created_at))
        if limit:
            query = query.limit(limit)
        return query.all()

    def create(self, order_id: str, item_name: str, customer_name: str,
               latitude: float, longitude: float, address: Optional[str]) -> Order:
        """Insert a pending, unassigned order"""
        if self.get_by_reference(order_id):
            raise AlreadyExists("Order with this ID already exists")

        order = Order(
            order_id=order_id,
            item_name=item_name,
            customer_name=customer_name,
            delivery_latitude=latitude,
            delivery_longitude=longitude,
            delivery_address=address,
            status=OrderStatus.PENDING.value,
            assigned_to=None
        )
        self.db.add(order)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Duplicate order reference on insert: {order_id}")
            raise AlreadyExists("Order with this ID already exists")

        self.db.refresh(order)
        return order

    def assign_if_pending(self, order_pk: str, partner_id: str) -> bool:
        """
        Set status=assigned and assigned_to in one statement.

        The row only changes if the order is still pending and the partner is
        still available at write time, so two concurrent assignments of the
        same order cannot both succeed. The partner row is share-locked first
        so a concurrent switch to unavailable waits for this commit.
        """
        self.db.query(DeliveryPartner.id).filter(
            DeliveryPartner.id == partner_id
        ).with_for_update(read=True).first()

        partner_available = (
            select(DeliveryPartner.id)
            .where(
                DeliveryPartner.id == partner_id,
                DeliveryPartner.availability_status == AvailabilityStatus.AVAILABLE.value
            )
            .exists()
        )
        stmt = (
            update(Order)
            .where(
                Order.id == order_pk,
                Order.status == OrderStatus.PENDING.value,
                partner_available
            )
            .values(status=OrderStatus.ASSIGNED.value, assigned_to=partner_id)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def update_status_if(self, order_pk: str, partner_id: str, current_status: str, new_status: str) -> bool:
        """Compare-and-set on (id, assigned_to, status)"""
        stmt = (
            update(Order)
            .where(
                Order.id == order_pk,
                Order.assigned_to == partner_id,
                Order.status == current_status
            )
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1
