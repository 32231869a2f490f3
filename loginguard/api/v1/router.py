"""
API v1 router configuration.
"""
from fastapi import APIRouter

from loginguard.api.v1.endpoints import auth, health

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
