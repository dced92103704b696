# app/modules/admin/router.py
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_admin_user
from app.modules.orders.service import OrderService
from app.modules.orders.schemas import (
    OrderCreateRequest, OrderAssignRequest, OrderResponse, OrderListResponse
)
from app.modules.partners.service import PartnerService
from app.modules.partners.schemas import (
    PartnerCreateRequest, PartnerResponse, PartnerListResponse, PartnerDetailResponse
)

# Every route below requires the admin role
router = APIRouter(dependencies=[Depends(get_admin_user)])

# ==================== ORDER MANAGEMENT ====================

@router.get("/orders", response_model=OrderListResponse)
def get_orders(db: Session = Depends(get_db)):
    """
    List every order, newest first

    **Includes:**
    - Assigned partner name, contact and availability when assigned
    """
    return OrderService(db).list_orders()

@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a pending, unassigned order

    **Validations:**
    - `order_id` must be unique
    - Delivery latitude in [-90, 90], longitude in [-180, 180]
    """
    return OrderService(db).create_order(order_data)

@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str = Path(..., description="Order id"),
    db: Session = Depends(get_db)
):
    """Single order with its assigned partner's current location"""
    return OrderService(db).get_order(order_id)

@router.put("/orders/{order_id}/assign", response_model=OrderResponse)
def assign_order(
    assignment: OrderAssignRequest,
    order_id: str = Path(..., description="Order id"),
    db: Session = Depends(get_db)
):
    """
    Assign a pending order to a delivery partner

    **Rules:**
    - Only pending orders can be assigned
    - The partner must be available
    - Two admins racing on the same order: exactly one wins, the other gets 409
    """
    return OrderService(db).assign_order(order_id, assignment.partner_id)

# ==================== PARTNER MANAGEMENT ====================

@router.get("/partners", response_model=PartnerListResponse)
def get_partners(db: Session = Depends(get_db)):
    """Every delivery partner with total and active order counts"""
    return PartnerService(db).list_partners()

@router.post("/partners", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
def create_partner(
    partner_data: PartnerCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Provision a delivery partner

    Creates the login account (role `delivery_partner`) and the partner
    profile together; neither exists if either step fails.
    """
    return PartnerService(db).provision_partner(partner_data)

@router.get("/partners/{partner_id}", response_model=PartnerDetailResponse)
def get_partner(
    partner_id: str = Path(..., description="Partner id"),
    db: Session = Depends(get_db)
):
    """Partner profile, most recent orders and total/completed/active counts"""
    return PartnerService(db).get_partner_detail(partner_id)
