from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from app.shared.constants import UserRole
from app.shared.schemas.common import BaseResponse, LocationInfo

class UserLogin(BaseModel):
    """Login credentials"""
    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=6, description="User password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    class Config:
        json_schema_extra = {
            "example": {
                "email": "partner@example.com",
                "password": "partner123"
            }
        }

class UserRegister(UserLogin):
    """Account creation payload"""
    role: UserRole = Field(..., description="admin or delivery_partner")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@example.com",
                "password": "admin123",
                "role": "admin"
            }
        }

class UserResponse(BaseModel):
    """Public user fields"""
    id: str
    email: str
    role: str

    class Config:
        from_attributes = True

class PartnerSummary(BaseModel):
    """Partner fields returned alongside the user"""
    id: str
    name: str
    contact_number: str
    availability_status: str
    current_location: Optional[LocationInfo] = None

    class Config:
        from_attributes = True

class TokenResponse(BaseResponse):
    """Login result with the bearer token"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    partner_info: Optional[PartnerSummary] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Login successful",
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "user": {
                    "id": "5b0f6f0e-8d55-4f57-9a4e-3f1f0c7f2d11",
                    "email": "partner@example.com",
                    "role": "delivery_partner"
                },
                "partner_info": {
                    "id": "0b6f4a8e-2b9c-4c4e-a0a4-7a9d8f1e2c33",
                    "name": "Luis",
                    "contact_number": "+52 55 1234 5678",
                    "availability_status": "available"
                }
            }
        }

class RegisterResponse(BaseResponse):
    user: UserResponse

class CurrentUserResponse(BaseResponse):
    user: UserResponse
    partner_info: Optional[PartnerSummary] = None
