# app/modules/courier/__init__.py
"""
Courier module - endpoints for the delivery_partner role

- My orders, optionally filtered by status
- My active orders
- Advance an assigned order: picked_up, delivered
- Availability and location updates
- Profile with order statistics
"""

from .router import router

__all__ = [
    "router"
]
