import logging
from contextlib import asynccontextmanager
from functools import partial

import anyio
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .core import compare
from .core.chesscom import ChessComClient
from .core.errors import ChessDuelError
from .core.settings import cors_origins, log_level

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield


app = FastAPI(title="ChessDuel", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_client() -> ChessComClient:
    return ChessComClient()


async def _run(fn, *args, **kwargs):
    # Gateway calls block on requests; keep them off the event loop.
    return await anyio.to_thread.run_sync(partial(fn, *args, **kwargs))


def _error(message: str, exc: Exception) -> JSONResponse:
    logger.error("%s: %s", message, exc)
    return JSONResponse(status_code=500, content={"status": "error", "message": message})


@app.get("/healthz")
def healthz():
    return {"status": "ok", "version": __version__}


@app.get("/api/chess/player/{username}")
async def player(username: str, client: ChessComClient = Depends(get_client)):
    try:
        profile = await _run(compare.get_player, username, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch player information", e)
    return {"status": "success", "player": profile.model_dump()}


@app.get("/api/chess/players/{username1}/{username2}")
async def players(username1: str, username2: str, client: ChessComClient = Depends(get_client)):
    try:
        pair = await _run(compare.get_players, username1, username2, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch players information", e)
    return {"status": "success", "players": pair.model_dump()}


@app.get("/api/chess/player/{username}/games/archives")
async def archives(username: str, client: ChessComClient = Depends(get_client)):
    try:
        urls = await _run(compare.get_archives, username, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch game archives", e)
    return {"status": "success", "archives": urls}


@app.get("/api/chess/players/{username1}/{username2}/games/archives")
async def common_archives(
    username1: str, username2: str, client: ChessComClient = Depends(get_client)
):
    try:
        urls = await _run(compare.get_archive_intersection, username1, username2, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch common game archives", e)
    return {"status": "success", "commonArchives": urls}


@app.get("/api/chess/players/{username1}/{username2}/games/matches")
async def matches(username1: str, username2: str, client: ChessComClient = Depends(get_client)):
    try:
        games = await _run(compare.get_matches, username1, username2, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch matches", e)
    return {"status": "success", "matches": games}


@app.get("/api/chess/players/{username1}/{username2}/games/results")
async def results(username1: str, username2: str, client: ChessComClient = Depends(get_client)):
    try:
        tally = await _run(compare.get_head_to_head, username1, username2, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch head-to-head results", e)
    return {"status": "success", "results": tally.as_results()}


@app.get("/api/chess/players/{username1}/{username2}/comparison")
@app.get("/api/chess/players/{username1}/{username2}/comparation", include_in_schema=False)
async def comparison(username1: str, username2: str, client: ChessComClient = Depends(get_client)):
    try:
        cmp = await _run(compare.get_comparison, username1, username2, client=client)
    except ChessDuelError as e:
        return _error("Unable to fetch players information and results", e)
    return {
        "status": "success",
        "players": cmp.players.model_dump(),
        "results": cmp.results.as_results(),
    }
