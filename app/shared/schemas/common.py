# app/shared/schemas/common.py
from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional
from datetime import datetime

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Any] = None

class LocationInfo(BaseModel):
    """Coordinate pair with optional street address"""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    address: Optional[str] = Field(None, description="Street address")

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        # bool is an int subclass but never a coordinate
        if isinstance(value, bool):
            raise ValueError("Coordinates must be numbers")
        return value

    class Config:
        from_attributes = True
        str_strip_whitespace = True
        json_schema_extra = {
            "example": {
                "latitude": 19.4326,
                "longitude": -99.1332,
                "address": "Av. Reforma 222"
            }
        }
