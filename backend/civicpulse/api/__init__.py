"""API router aggregator."""
from fastapi import APIRouter

from civicpulse.api.routes import categories, complaints, users

api_router = APIRouter(prefix="/api")
api_router.include_router(users.router)
api_router.include_router(complaints.router)
api_router.include_router(categories.router)

__all__ = ["api_router"]
