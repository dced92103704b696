# app/modules/partners/repository.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import case, desc, func, select, update
from typing import Dict, List, Optional

from app.core.exceptions import NotFound
from app.shared.constants import ACTIVE_ORDER_STATUSES, AvailabilityStatus, OrderStatus
from app.shared.database.models import DeliveryPartner, Order, User

class PartnerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, partner_id: str) -> Optional[DeliveryPartner]:
        return (
            self.db.query(DeliveryPartner)
            .options(joinedload(DeliveryPartner.user))
            .filter(DeliveryPartner.id == partner_id)
            .first()
        )

    def get_by_principal(self, user_id: str) -> Optional[DeliveryPartner]:
        return (
            self.db.query(DeliveryPartner)
            .options(joinedload(DeliveryPartner.user))
            .filter(DeliveryPartner.user_id == user_id)
            .first()
        )

    def find_by_principal(self, user_id: str) -> DeliveryPartner:
        """Partner profile owned by a user, re-read on every call"""
        partner = self.get_by_principal(user_id)
        if partner is None:
            raise NotFound("Partner profile not found")
        return partner

    def list_all(self) -> List[DeliveryPartner]:
        return (
            self.db.query(DeliveryPartner)
            .options(joinedload(DeliveryPartner.user))
            .order_by(desc(DeliveryPartner.created_at))
            .all()
        )

    def add(self, user: User, name: str, contact_number: str,
            latitude: float, longitude: float, address: Optional[str]) -> DeliveryPartner:
        """Stage a profile for a freshly created user, caller commits"""
        partner = DeliveryPartner(
            user=user,
            name=name,
            contact_number=contact_number,
            current_latitude=latitude,
            current_longitude=longitude,
            current_address=address,
            availability_status=AvailabilityStatus.AVAILABLE.value
        )
        self.db.add(partner)
        self.db.flush()
        return partner

    def is_assignable(self, partner_id: str) -> bool:
        """True if the partner exists and is available. Does not reserve it."""
        availability = (
            self.db.query(DeliveryPartner.availability_status)
            .filter(DeliveryPartner.id == partner_id)
            .scalar()
        )
        return availability == AvailabilityStatus.AVAILABLE.value

    def count_orders(self, partner_id: str, statuses: Optional[List[str]] = None) -> int:
        query = self.db.query(func.count(Order.id)).filter(Order.assigned_to == partner_id)
        if statuses:
            query = query.filter(Order.status.in_(statuses))
        return query.scalar() or 0

    def count_active_orders(self, partner_id: str) -> int:
        return self.count_orders(partner_id, list(ACTIVE_ORDER_STATUSES))

    def order_stats(self, partner_id: str) -> Dict[str, int]:
        """Total / completed / active / picked up counts in one query"""
        row = self.db.query(
            func.count(Order.id).label('total'),
            func.coalesce(func.sum(case((Order.status == OrderStatus.DELIVERED.value, 1), else_=0)), 0).label('completed'),
            func.coalesce(func.sum(case((Order.status.in_(ACTIVE_ORDER_STATUSES), 1), else_=0)), 0).label('active'),
            func.coalesce(func.sum(case((Order.status == OrderStatus.PICKED_UP.value, 1), else_=0)), 0).label('picked_up')
        ).filter(Order.assigned_to == partner_id).one()

        return {
            "total_orders": int(row.total or 0),
            "completed_orders": int(row.completed or 0),
            "active_orders": int(row.active or 0),
            "picked_up_orders": int(row.picked_up or 0)
        }

    def order_counts_by_partner(self) -> Dict[str, Dict[str, int]]:
        """partner_id -> {total_orders, active_orders} for every partner with orders"""
        rows = self.db.query(
            Order.assigned_to,
            func.count(Order.id).label('total'),
            func.coalesce(func.sum(case((Order.status.in_(ACTIVE_ORDER_STATUSES), 1), else_=0)), 0).label('active')
        ).filter(
            Order.assigned_to.isnot(None)
        ).group_by(Order.assigned_to).all()

        return {
            row.assigned_to: {"total_orders": int(row.total), "active_orders": int(row.active)}
            for row in rows
        }

    def set_availability(self, partner_id: str, availability_status: str) -> bool:
        """
        Write the new availability.

        Going unavailable is a single UPDATE guarded by NOT EXISTS on the
        partner's active orders; False means the guard rejected the write.
        The partner row is locked first, so an assignment in flight either
        commits before the check or sees the partner as unavailable.
        """
        stmt = update(DeliveryPartner).where(DeliveryPartner.id == partner_id)

        if availability_status == AvailabilityStatus.UNAVAILABLE.value:
            self.db.query(DeliveryPartner.id).filter(
                DeliveryPartner.id == partner_id
            ).with_for_update().first()

            has_active_orders = (
                select(Order.id)
                .where(
                    Order.assigned_to == partner_id,
                    Order.status.in_(ACTIVE_ORDER_STATUSES)
                )
                .exists()
            )
            stmt = stmt.where(~has_active_orders)

        result = self.db.execute(
            stmt.values(availability_status=availability_status)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def set_location(self, partner_id: str, latitude: float, longitude: float, address: Optional[str] = None) -> None:
        self.db.execute(
            update(DeliveryPartner)
            .where(DeliveryPartner.id == partner_id)
            .values(
                current_latitude=latitude,
                current_longitude=longitude,
                current_address=address
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
