# app/modules/orders/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.shared.constants import OrderStatus
from app.shared.schemas.common import BaseResponse, LocationInfo

class OrderCreateRequest(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=100, description="External order reference")
    item_name: str = Field(..., min_length=1, description="Item to deliver")
    customer_name: str = Field(..., min_length=1, description="Customer receiving the item")
    delivery_location: LocationInfo

    class Config:
        str_strip_whitespace = True
        json_schema_extra = {
            "example": {
                "order_id": "O1",
                "item_name": "Book",
                "customer_name": "Alice",
                "delivery_location": {"latitude": 10, "longitude": 20, "address": "Calle 5 #12"}
            }
        }

class OrderAssignRequest(BaseModel):
    partner_id: str = Field(..., min_length=1, description="Delivery partner id")

class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus = Field(..., description="Next status of the order")

class AssignedPartnerInfo(BaseModel):
    id: str
    name: str
    contact_number: str
    availability_status: str
    current_location: Optional[LocationInfo] = None

    class Config:
        from_attributes = True

class OrderInfo(BaseModel):
    id: str
    order_id: str
    item_name: str
    customer_name: str
    delivery_location: LocationInfo
    status: str
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderDetail(OrderInfo):
    assigned_partner: Optional[AssignedPartnerInfo] = None

class OrderResponse(BaseResponse):
    order: OrderDetail

class OrderListResponse(BaseResponse):
    orders: List[OrderDetail]
    count: int

class PartnerOrdersResponse(BaseResponse):
    orders: List[OrderInfo]
    count: int
    partner_id: Optional[str] = None
