"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import bookings, calendar, menus, quotations

api_router = APIRouter(prefix="/api")
api_router.include_router(bookings.router)
api_router.include_router(calendar.router)
api_router.include_router(menus.router)
api_router.include_router(quotations.router)
