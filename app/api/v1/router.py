# app/api/v1/router.py
from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.config.settings import settings
from app.modules.admin import admin_router
from app.modules.courier.router import router as courier_router

# Main v1 API router
api_router = APIRouter()

api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Authentication"]
)

api_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin"]
)

api_router.include_router(
    courier_router,
    prefix="/partner",
    tags=["Delivery Partner"]
)

@api_router.get("/")
async def api_root():
    """API root"""
    return {
        "success": True,
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "admin": "/api/v1/admin",
            "partner": "/api/v1/partner"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "success": True,
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "modules": ["auth", "admin", "partner"]
    }
