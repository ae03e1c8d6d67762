"""FastAPI main application for the Letter Lover game backend"""

import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .serialization import serialize_catalog, serialize_room_info, serialize_state
from .ws import engine, manager, router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _parse_origins(raw: str) -> list:
    return [x.strip() for x in raw.split(",") if x.strip()]


ALLOWED_ORIGINS = _parse_origins(os.getenv("CORS_ORIGINS", "*"))

app = FastAPI(title="Letter Lover Game API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {"message": "Letter Lover Game API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "rooms": len(engine.list_rooms()),
        "connections": manager.connection_count(),
    }


@app.get("/cards")
async def cards():
    return serialize_catalog()


@app.get("/rooms")
async def list_rooms():
    return [serialize_room_info(room) for room in engine.list_rooms()]


@app.get("/rooms/{room_code}")
async def get_room(room_code: str):
    room = engine.get_room(room_code)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return serialize_room_info(room)


@app.get("/rooms/{room_code}/state")
async def get_game(room_code: str):
    state = engine.get_game(room_code)
    if state is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return serialize_state(state)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
