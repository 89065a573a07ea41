from fastapi import APIRouter

from tales.api.v1.endpoints import sessions, system

api_router = APIRouter()
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
