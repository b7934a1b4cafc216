"""
FastAPI Routers Package

All routers are mounted under /api by api/index.py.
"""

from fastapi import APIRouter

from .account import router as account_router
from .auth import router as auth_router
from .cart import router as cart_router
from .functions import router as functions_router
from .vehicle import router as vehicle_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(cart_router)
router.include_router(vehicle_router)
router.include_router(account_router)
router.include_router(functions_router)

__all__ = [
    "router",
    "account_router",
    "auth_router",
    "cart_router",
    "functions_router",
    "vehicle_router",
]
