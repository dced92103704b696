# app/modules/admin/__init__.py

"""
Admin module - endpoints for the admin role

- Create, list and inspect orders
- Assign pending orders to available partners
- Provision, list and inspect delivery partners

Architecture:
- router.py: FastAPI endpoints; logic lives in the orders and partners modules
"""

from .router import router as admin_router

__all__ = [
    "admin_router"
]
