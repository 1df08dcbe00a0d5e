"""
Main API router
"""

from fastapi import APIRouter

from signal_gateway.api import analysis

# Create main API router
api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(analysis.router)

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "POST /api/analyze-symbol",
]
