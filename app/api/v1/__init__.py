"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import admin, auth, games, students, teachers

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])
api_router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])
api_router.include_router(games.router, prefix="/games", tags=["Games"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
