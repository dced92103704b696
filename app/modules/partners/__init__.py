# app/modules/partners/__init__.py
"""
Partners module - delivery partner registry

- Provision partner accounts and profiles
- Availability, refused while the partner holds active orders
- Latest reported location
- Order statistics per partner
"""

from .repository import PartnerRepository
from .service import PartnerService

__all__ = [
    "PartnerRepository",
    "PartnerService"
]
