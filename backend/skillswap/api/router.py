"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from skillswap.api.routes import auth, users, skills, swaps, admin

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(skills.router)
api_router.include_router(swaps.router)
api_router.include_router(admin.router)
