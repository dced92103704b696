# app/modules/courier/router.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.core.auth.dependencies import get_current_partner, get_partner_user
from app.modules.orders.service import OrderService
from app.modules.orders.schemas import OrderStatusUpdateRequest, OrderResponse, PartnerOrdersResponse
from app.modules.partners.service import PartnerService
from app.modules.partners.schemas import (
    AvailabilityUpdateRequest, LocationUpdateRequest,
    AvailabilityResponse, LocationResponse, PartnerProfileResponse
)
from app.shared.constants import OrderStatus
from app.shared.database.models import DeliveryPartner

# Every route below requires the delivery_partner role
router = APIRouter(dependencies=[Depends(get_partner_user)])

# ==================== MY ORDERS ====================

@router.get("/orders", response_model=PartnerOrdersResponse)
def get_my_orders(
    status: Optional[OrderStatus] = Query(None, description="Only orders in this status"),
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """Orders assigned to the logged-in partner, newest first"""
    return OrderService(db).list_partner_orders(partner, status)

@router.get("/orders/active", response_model=PartnerOrdersResponse)
def get_my_active_orders(
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """Orders still in progress (assigned or picked_up)"""
    return OrderService(db).list_active_orders(partner)

@router.put("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    status_update: OrderStatusUpdateRequest,
    order_id: str = Path(..., description="Order id"),
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """
    Advance an order assigned to me

    **Allowed steps:**
    - assigned -> picked_up
    - picked_up -> delivered

    Any other change is rejected with 400; orders assigned to someone
    else are rejected with 403.
    """
    return OrderService(db).advance_status(order_id, partner, status_update.status)

# ==================== MY PROFILE ====================

@router.put("/status", response_model=AvailabilityResponse)
def update_availability(
    availability: AvailabilityUpdateRequest,
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """
    Change availability

    Going unavailable is refused (409) while any order is assigned or picked up.
    """
    return PartnerService(db).update_availability(partner, availability.availability_status)

@router.put("/location", response_model=LocationResponse)
def update_location(
    location: LocationUpdateRequest,
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """Store the latest reported position"""
    return PartnerService(db).update_location(
        partner, location.latitude, location.longitude, location.address
    )

@router.get("/profile", response_model=PartnerProfileResponse)
def get_profile(
    partner: DeliveryPartner = Depends(get_current_partner),
    db: Session = Depends(get_db)
):
    """Profile with total, completed, active and picked up order counts"""
    return PartnerService(db).get_profile(partner)
