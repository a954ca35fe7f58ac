"""
Main API router for v1.
"""

from fastapi import APIRouter
from sokohub_feed.api import feeds

router = APIRouter()

router.include_router(feeds.router)
