# app/modules/orders/service.py
from typing import Optional
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound, Unassignable, InvalidTransition
from app.modules.partners.repository import PartnerRepository
from app.shared.constants import ACTIVE_ORDER_STATUSES, OrderStatus
from app.shared.database.models import DeliveryPartner, Order
from .repository import OrderRepository
from .schemas import (
    OrderCreateRequest, OrderDetail, OrderInfo, OrderListResponse,
    OrderResponse, PartnerOrdersResponse
)
from .state_machine import can_transition, ensure_partner_transition

logger = logging.getLogger(__name__)

class OrderService:
    """Order lifecycle: creation, assignment and status changes"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = OrderRepository(db)
        self.partners = PartnerRepository(db)

    def _get_order(self, order_pk: str) -> Order:
        order = self.repository.get_by_id(order_pk)
        if order is None:
            raise NotFound("Order not found")
        return order

    def create_order(self, order_data: OrderCreateRequest) -> OrderResponse:
        location = order_data.delivery_location
        order = self.repository.create(
            order_id=order_data.order_id,
            item_name=order_data.item_name,
            customer_name=order_data.customer_name,
            latitude=location.latitude,
            longitude=location.longitude,
            address=location.address
        )
        logger.info(f"📦 Order {order.order_id} created ({order.id})")

        return OrderResponse(
            success=True,
            message="Order created successfully",
            order=OrderDetail.model_validate(order)
        )

    def list_orders(self) -> OrderListResponse:
        orders = self.repository.list_all()
        return OrderListResponse(
            success=True,
            message="Orders retrieved",
            orders=[OrderDetail.model_validate(order) for order in orders],
            count=len(orders)
        )

    def get_order(self, order_pk: str) -> OrderResponse:
        order = self._get_order(order_pk)
        return OrderResponse(
            success=True,
            message="Order retrieved",
            order=OrderDetail.model_validate(order)
        )

    def assign_order(self, order_pk: str, partner_id: str) -> OrderResponse:
        """
        Assign a pending order to an available partner.

        The checks below produce specific errors; the write itself re-checks
        both conditions so a concurrent assignment or availability change
        between the checks and the write is still rejected.
        """
        order = self._get_order(order_pk)

        partner = self.partners.get_by_id(partner_id)
        if partner is None:
            raise NotFound("Delivery partner not found")

        if not can_transition(order.status, OrderStatus.ASSIGNED):
            raise Unassignable(f"Order is already {order.status} and cannot be assigned")

        if not self.partners.is_assignable(partner_id):
            raise Unassignable("Partner is not available for assignment")

        if not self.repository.assign_if_pending(order_pk, partner_id):
            self.db.expire_all()
            current = self._get_order(order_pk)
            if current.status != OrderStatus.PENDING.value:
                raise Unassignable(f"Order is already {current.status} and cannot be assigned")
            raise Unassignable("Partner is not available for assignment")

        order = self._get_order(order_pk)
        logger.info(f"🚚 Order {order.order_id} assigned to partner {partner_id}")

        return OrderResponse(
            success=True,
            message="Order assigned successfully",
            order=OrderDetail.model_validate(order)
        )

    def advance_status(self, order_pk: str, partner: DeliveryPartner, new_status: OrderStatus) -> OrderResponse:
        """Move an order one step forward on behalf of its assigned partner"""
        order = self._get_order(order_pk)

        if order.assigned_to != partner.id:
            raise Forbidden("This order is not assigned to you")

        current_status = order.status
        target = ensure_partner_transition(current_status, new_status)

        if not self.repository.update_status_if(order_pk, partner.id, current_status, target.value):
            # Someone else moved the order between the read and the write
            self.db.expire_all()
            current = self._get_order(order_pk)
            if current.assigned_to != partner.id:
                raise Forbidden("This order is not assigned to you")
            raise InvalidTransition(current.status, target.value)

        order = self._get_order(order_pk)
        logger.info(f"✅ Order {order.order_id}: {current_status} -> {target.value} by partner {partner.id}")

        return OrderResponse(
            success=True,
            message=f"Order status updated to {target.value}",
            order=OrderDetail.model_validate(order)
        )

    def list_partner_orders(self, partner: DeliveryPartner, status: Optional[OrderStatus] = None) -> PartnerOrdersResponse:
        statuses = [status.value] if status else None
        orders = self.repository.list_for_partner(partner.id, statuses)
        return PartnerOrdersResponse(
            success=True,
            message="Orders retrieved",
            orders=[OrderInfo.model_validate(order) for order in orders],
            count=len(orders),
            partner_id=partner.id
        )

    def list_active_orders(self, partner: DeliveryPartner) -> PartnerOrdersResponse:
        orders = self.repository.list_for_partner(partner.id, list(ACTIVE_ORDER_STATUSES))
        return PartnerOrdersResponse(
            success=True,
            message="Active orders retrieved",
            orders=[OrderInfo.model_validate(order) for order in orders],
            count=len(orders),
            partner_id=partner.id
        )
