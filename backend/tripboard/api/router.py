"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from tripboard.api.routes import trips, itinerary, expenses, packing, export

api_router = APIRouter()

# Include all route modules
api_router.include_router(trips.router)
api_router.include_router(itinerary.router)
api_router.include_router(expenses.router)
api_router.include_router(packing.router)
api_router.include_router(export.router)
