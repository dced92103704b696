# app/modules/orders/__init__.py
"""
Orders module - order lifecycle

- Create orders (pending, unassigned)
- Assign a pending order to an available partner
- Partner-driven status changes: assigned -> picked_up -> delivered

Architecture:
- state_machine.py: transition table
- service.py: business rules
- repository.py: data access, conditional updates
- schemas.py: request/response models
"""

from .repository import OrderRepository
from .service import OrderService

__all__ = [
    "OrderRepository",
    "OrderService"
]
