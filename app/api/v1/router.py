"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import alternatives, usage

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    alternatives.router, prefix="/ai", tags=["AI alternatives"]
)
api_router.include_router(
    usage.router, prefix="/ai", tags=["AI usage"]
)
