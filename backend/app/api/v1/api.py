from fastapi import APIRouter

from app.api.v1.endpoints import downloads, health, image_to_3d, tryon

api_router = APIRouter()

api_router.include_router(image_to_3d.router, tags=["image_to_3d"])
api_router.include_router(tryon.router, prefix="/fashn", tags=["tryon"])
api_router.include_router(downloads.router, tags=["downloads"])
api_router.include_router(health.router, tags=["health"])
