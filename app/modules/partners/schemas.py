# app/modules/partners/schemas.py
from pydantic import BaseModel, EmailStr, Field, StrictFloat, StrictInt, field_validator
from typing import List, Optional, Union
from datetime import datetime

from app.shared.constants import AvailabilityStatus
from app.modules.orders.schemas import OrderInfo
from app.shared.schemas.common import BaseResponse, LocationInfo

class PartnerCreateRequest(BaseModel):
    """Provision a delivery partner account and profile (admin only)"""
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6)
    contact_number: str = Field(..., min_length=1, description="Phone number")
    current_location: LocationInfo

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    class Config:
        str_strip_whitespace = True
        json_schema_extra = {
            "example": {
                "name": "Luis Ramírez",
                "email": "luis@example.com",
                "password": "partner123",
                "contact_number": "+52 55 1234 5678",
                "current_location": {"latitude": 19.4326, "longitude": -99.1332}
            }
        }

class AvailabilityUpdateRequest(BaseModel):
    availability_status: AvailabilityStatus = Field(..., description="available or unavailable")

class LocationUpdateRequest(BaseModel):
    # Only JSON numbers, "12.5" and true are rejected
    latitude: Union[StrictFloat, StrictInt] = Field(..., description="Latitude in degrees")
    longitude: Union[StrictFloat, StrictInt] = Field(..., description="Longitude in degrees")
    address: Optional[str] = Field(None, description="Street address")

    class Config:
        json_schema_extra = {
            "example": {"latitude": 19.4326, "longitude": -99.1332}
        }

class PartnerInfo(BaseModel):
    id: str
    user_id: str
    email: Optional[str] = None
    name: str
    contact_number: str
    current_location: LocationInfo
    availability_status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PartnerStats(BaseModel):
    total_orders: int = 0
    active_orders: int = 0
    completed_orders: Optional[int] = None
    picked_up_orders: Optional[int] = None

class PartnerWithStats(PartnerInfo):
    stats: PartnerStats

class PartnerResponse(BaseResponse):
    partner: PartnerInfo

class PartnerListResponse(BaseResponse):
    partners: List[PartnerWithStats]
    count: int

class PartnerAvailabilityInfo(BaseModel):
    id: str
    name: str
    availability_status: str

    class Config:
        from_attributes = True

class AvailabilityResponse(BaseResponse):
    partner: PartnerAvailabilityInfo

class LocationResponse(BaseResponse):
    current_location: LocationInfo

class PartnerProfileResponse(BaseResponse):
    partner: PartnerInfo
    stats: PartnerStats

class PartnerDetailResponse(BaseResponse):
    partner: PartnerInfo
    recent_orders: List[OrderInfo]
    stats: PartnerStats
