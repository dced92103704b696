# app/modules/partners/service.py
from typing import Optional
import logging
import math

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.auth.repository import UserRepository
from app.core.auth.service import AuthService
from app.core.exceptions import AlreadyExists, Conflict, InvalidArgument, NotFound
from app.modules.orders.repository import OrderRepository
from app.modules.orders.schemas import OrderInfo
from app.shared.constants import AvailabilityStatus, UserRole
from app.shared.database.models import DeliveryPartner
from .repository import PartnerRepository
from .schemas import (
    AvailabilityResponse, LocationResponse, PartnerCreateRequest, PartnerDetailResponse,
    PartnerInfo, PartnerListResponse, PartnerProfileResponse, PartnerResponse,
    PartnerStats, PartnerWithStats, PartnerAvailabilityInfo
)

logger = logging.getLogger(__name__)


def _is_real_number(value) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_coordinates(latitude, longitude) -> None:
    """Raise InvalidArgument unless both values are in-range numbers"""
    if not _is_real_number(latitude) or not _is_real_number(longitude):
        raise InvalidArgument("Valid latitude and longitude are required")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise InvalidArgument("Invalid coordinates")


class PartnerService:
    """Delivery partner registry: provisioning, availability, location, stats"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = PartnerRepository(db)
        self.users = UserRepository(db)

    def provision_partner(self, partner_data: PartnerCreateRequest) -> PartnerResponse:
        """Create the user account and its partner profile in one transaction"""
        location = partner_data.current_location
        try:
            user = self.users.add(
                email=partner_data.email,
                password_hash=AuthService.get_password_hash(partner_data.password),
                role=UserRole.DELIVERY_PARTNER.value
            )
            partner = self.repository.add(
                user=user,
                name=partner_data.name,
                contact_number=partner_data.contact_number,
                latitude=location.latitude,
                longitude=location.longitude,
                address=location.address
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise AlreadyExists("User with this email already exists")
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(partner)
        logger.info(f"👤 Partner {partner.id} provisioned for {partner_data.email}")

        return PartnerResponse(
            success=True,
            message="Delivery partner created successfully",
            partner=PartnerInfo.model_validate(partner)
        )

    def list_partners(self) -> PartnerListResponse:
        partners = self.repository.list_all()
        counts = self.repository.order_counts_by_partner()

        items = []
        for partner in partners:
            partner_counts = counts.get(partner.id, {"total_orders": 0, "active_orders": 0})
            items.append(PartnerWithStats(
                **PartnerInfo.model_validate(partner).model_dump(),
                stats=PartnerStats(**partner_counts)
            ))

        return PartnerListResponse(
            success=True,
            message="Partners retrieved",
            partners=items,
            count=len(items)
        )

    def get_partner_detail(self, partner_id: str) -> PartnerDetailResponse:
        partner = self.repository.get_by_id(partner_id)
        if partner is None:
            raise NotFound("Partner not found")

        recent_orders = OrderRepository(self.db).list_for_partner(
            partner.id, limit=settings.recent_orders_limit
        )
        stats = self.repository.order_stats(partner.id)

        return PartnerDetailResponse(
            success=True,
            message="Partner retrieved",
            partner=PartnerInfo.model_validate(partner),
            recent_orders=[OrderInfo.model_validate(order) for order in recent_orders],
            stats=PartnerStats(
                total_orders=stats["total_orders"],
                completed_orders=stats["completed_orders"],
                active_orders=stats["active_orders"]
            )
        )

    def get_profile(self, partner: DeliveryPartner) -> PartnerProfileResponse:
        return PartnerProfileResponse(
            success=True,
            message="Profile retrieved",
            partner=PartnerInfo.model_validate(partner),
            stats=PartnerStats(**self.repository.order_stats(partner.id))
        )

    def update_availability(self, partner: DeliveryPartner, availability_status: AvailabilityStatus) -> AvailabilityResponse:
        """Change availability; going unavailable requires zero active orders"""
        if not self.repository.set_availability(partner.id, availability_status.value):
            if availability_status == AvailabilityStatus.UNAVAILABLE:
                logger.info(f"Partner {partner.id} refused unavailable with active orders")
                raise Conflict("Cannot set status to unavailable while you have active orders")
            raise NotFound("Partner profile not found")

        self.db.refresh(partner)
        logger.info(f"Partner {partner.id} is now {partner.availability_status}")

        return AvailabilityResponse(
            success=True,
            message=f"Status updated to {partner.availability_status}",
            partner=PartnerAvailabilityInfo.model_validate(partner)
        )

    def update_location(self, partner: DeliveryPartner, latitude, longitude, address: Optional[str] = None) -> LocationResponse:
        validate_coordinates(latitude, longitude)

        self.repository.set_location(partner.id, float(latitude), float(longitude), address)
        self.db.refresh(partner)
        logger.debug(f"Partner {partner.id} location updated")

        return LocationResponse(
            success=True,
            message="Location updated successfully",
            current_location=partner.current_location
        )
