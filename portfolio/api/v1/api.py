"""
API v1 router.
"""
from fastapi import APIRouter

from portfolio.api.v1.endpoints import images, models

api_router = APIRouter()

api_router.include_router(models.router)
api_router.include_router(images.router)
