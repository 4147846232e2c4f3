"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import analytics, auth, bookings, cars, contact, interactions, showrooms, staff, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(cars.router)
api_router.include_router(bookings.router)
api_router.include_router(interactions.router)
api_router.include_router(analytics.router)
api_router.include_router(staff.router)
api_router.include_router(showrooms.router)
api_router.include_router(contact.router)
