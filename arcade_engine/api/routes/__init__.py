"""Versioned API route modules."""

from fastapi import APIRouter

from arcade_engine.api.routes.control import router as control_router
from arcade_engine.api.routes.sessions import router as sessions_router
from arcade_engine.api.routes.variants import router as variants_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(variants_router, tags=["Variants"])
api_router.include_router(sessions_router, tags=["Sessions"])
api_router.include_router(control_router, tags=["Control"])

__all__ = ["api_router"]
