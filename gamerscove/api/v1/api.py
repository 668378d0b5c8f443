from fastapi import APIRouter

from gamerscove.api.v1.endpoints import friendships


api_router = APIRouter()
api_router.include_router(friendships.router, tags=["friendships"])
