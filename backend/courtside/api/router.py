"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from courtside.api.routes import auth, catalog, availability, selection, quotes, bookings

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(catalog.router)
api_router.include_router(availability.router)
api_router.include_router(selection.router)
api_router.include_router(quotes.router)
api_router.include_router(bookings.router)
