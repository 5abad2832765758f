from fastapi import APIRouter

from game_relay.api.routes import ws

api_router = APIRouter()
api_router.include_router(ws.router, tags=["ws"])
