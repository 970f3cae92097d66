"""API version 1 routes."""

from fastapi import APIRouter

from acutrace.api.v1 import analytics

router = APIRouter(prefix="/api/v1")

router.include_router(analytics.router)
