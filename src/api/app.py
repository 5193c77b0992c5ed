"""
Blokus backend - FastAPI Application
Create games, read their state, place pieces and skip turns.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional
from uuid import UUID

from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    PiecesResponse,
    PlacePieceRequest,
    SkipTurnRequest,
)
from src.core.config import get_settings
from src.core.exceptions import (
    FaultError,
    GameNotFoundError,
    RejectionError,
)
from src.db.database import get_db, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.blokus_service import BlokusService

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("Blokus backend ready")
    yield


app = FastAPI(
    title="Blokus backend",
    description="Rule engine and game state for four-player Blokus",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(db: Session = Depends(get_db)) -> BlokusService:
    return BlokusService(SQLGameRepository(db))


# --- ERROR MAPPING ---
@app.exception_handler(GameNotFoundError)
async def not_found_handler(_request: Request, exc: GameNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": exc.code})


@app.exception_handler(RejectionError)
async def rejection_handler(_request: Request, exc: RejectionError) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"error": exc.code, "detail": exc.message}
    )


@app.exception_handler(ValidationError)
async def validation_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"error": "invalid_request", "detail": str(exc)}
    )


@app.exception_handler(FaultError)
async def fault_handler(_request: Request, exc: FaultError) -> JSONResponse:
    logger.error("Fault while handling request: %s", exc.message, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": exc.code})


# --- ROUTES ---
# Bodies are taken as plain JSON and turned into request models here,
# so malformed fields end up in the handlers above instead of FastAPI's 422.
@app.get("/api/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.get("/api/pieces", response_model=PiecesResponse)
def list_pieces(service: BlokusService = Depends(get_service)) -> PiecesResponse:
    return service.list_pieces()


@app.post("/api/games", response_model=GameResponse)
def create_game(
    payload: Optional[dict[str, Any]] = Body(default=None),
    service: BlokusService = Depends(get_service),
) -> GameResponse:
    return service.create_new_game(CreateGameRequest(**(payload or {})))


@app.get("/api/games/{game_id}", response_model=GameResponse)
def get_game(
    game_id: UUID, service: BlokusService = Depends(get_service)
) -> GameResponse:
    return service.get_game_state(GetGameRequest(game_id=game_id))


@app.post("/api/games/{game_id}/place", response_model=GameResponse)
def place_piece(
    game_id: UUID,
    payload: dict[str, Any] = Body(...),
    service: BlokusService = Depends(get_service),
) -> GameResponse:
    return service.place_piece(PlacePieceRequest(**{**payload, "game_id": game_id}))


@app.post("/api/games/{game_id}/skip", response_model=GameResponse)
def skip_turn(
    game_id: UUID,
    payload: dict[str, Any] = Body(...),
    service: BlokusService = Depends(get_service),
) -> GameResponse:
    return service.skip_turn(SkipTurnRequest(**{**payload, "game_id": game_id}))


@app.delete("/api/games/{game_id}", status_code=204)
def delete_game(
    game_id: UUID, service: BlokusService = Depends(get_service)
) -> Response:
    service.delete_game(DeleteGameRequest(game_id=game_id))
    return Response(status_code=204)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
