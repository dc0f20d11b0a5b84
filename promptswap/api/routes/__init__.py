"""
API router initialization and setup.
"""
from fastapi import APIRouter
from . import swaps

api_router = APIRouter()

api_router.include_router(
    swaps.router,
    prefix="/swaps",
    tags=["swaps"]
)
