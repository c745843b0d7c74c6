"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from career_assistant.api.routes.document_routes import router as document_router
from career_assistant.api.routes.profile_routes import router as profile_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(document_router)
api_router.include_router(profile_router)
