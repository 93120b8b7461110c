from fastapi import APIRouter
from . import cycles, objectives, key_results, initiatives, progress, health

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(cycles.router, prefix="/cycles", tags=["cycles"])
api_router.include_router(objectives.router, prefix="/objectives", tags=["objectives"])
api_router.include_router(key_results.router, prefix="/key-results", tags=["key-results"])
api_router.include_router(initiatives.router, prefix="/initiatives", tags=["initiatives"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
