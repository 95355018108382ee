from fastapi import APIRouter

from app.domains.telehealth.api import router as telehealth_router

api_router = APIRouter()

# API routes (all have /api/v1 prefix from the app factory)
api_router.include_router(telehealth_router)
