from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from keychase.api.models import ClientMessage, GameStateResponse, KeyRequest
from keychase.common.config import settings
from keychase.engine.engine import GameEngine
from keychase.engine.scheduler import AsyncioScheduler

app = FastAPI(title="keychase")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger(__name__)

WEB_DIR = Path(__file__).resolve().parents[1] / "web"
CLIENT_SEND_TIMEOUT = 1.0

engine: GameEngine | None = None

# View subscribers
game_clients: Set[WebSocket] = set()
game_clients_lock = asyncio.Lock()


@dataclass
class ViewBroadcaster:
    queue: asyncio.Queue[Dict[str, object]]
    task: asyncio.Task


broadcaster: ViewBroadcaster | None = None


def _get_engine() -> GameEngine:
    assert engine is not None
    return engine


@app.on_event("startup")
async def _startup() -> None:
    global engine, broadcaster
    engine = GameEngine(
        AsyncioScheduler(asyncio.get_running_loop()),
        width=settings.grid_width,
        language=settings.language,
        seed=settings.random_seed,
        chaser_interval_ms=settings.chaser_interval_ms,
        nommer_interval_ms=settings.nommer_interval_ms,
        runner_interval_ms=settings.runner_interval_ms,
        unpause_delay_ms=settings.unpause_delay_ms,
    )
    engine.add_listener(_publish)
    queue: asyncio.Queue[Dict[str, object]] = asyncio.Queue(maxsize=1)
    broadcaster = ViewBroadcaster(queue=queue, task=asyncio.create_task(_broadcast_views(queue)))
    if settings.autostart:
        engine.restart()
    else:
        logger.warning("Autostart disabled via KEYCHASE_AUTOSTART; waiting for /game/restart")


@app.on_event("shutdown")
async def _shutdown() -> None:
    if engine is not None:
        engine.pause()
    if broadcaster is not None:
        broadcaster.task.cancel()


def _publish(game_engine: GameEngine) -> None:
    """Engine listener: hand the latest view to the broadcaster."""
    if broadcaster is None or not game_clients:
        game_engine.drain_effects()
        return
    _queue_latest(broadcaster.queue, game_engine.render_view())


def _queue_latest(queue: asyncio.Queue[Dict[str, object]], state: Dict[str, object]) -> None:
    try:
        queue.put_nowait(state)
    except asyncio.QueueFull:
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            pass
        try:
            queue.put_nowait(state)
        except asyncio.QueueFull:
            pass


async def _send_view(ws: WebSocket, state: Dict[str, object]) -> bool:
    try:
        await asyncio.wait_for(ws.send_json(state), timeout=CLIENT_SEND_TIMEOUT)
        return True
    except Exception:
        logger.exception("Failed to send game view")
        return False


async def _broadcast_views(queue: asyncio.Queue[Dict[str, object]]) -> None:
    while True:
        try:
            state = await queue.get()
        except asyncio.CancelledError:
            break
        async with game_clients_lock:
            clients = list(game_clients)
        if not clients:
            continue
        results = await asyncio.gather(
            *(_send_view(ws, state) for ws in clients),
            return_exceptions=True,
        )
        stale = [ws for ws, ok in zip(clients, results) if ok is not True]
        if stale:
            async with game_clients_lock:
                for ws in stale:
                    game_clients.discard(ws)


def _apply_message(game_engine: GameEngine, msg: ClientMessage) -> None:
    if msg.type == "key" and msg.key is not None:
        game_engine.handle_key(msg.key)
    elif msg.type == "pause":
        game_engine.toggle_pause()
        _publish(game_engine)
    elif msg.type == "restart":
        game_engine.restart()
        _publish(game_engine)


@app.get("/game/state", response_model=GameStateResponse)
async def game_state() -> GameStateResponse:
    return GameStateResponse(**_get_engine().render_view())


@app.post("/game/key", response_model=GameStateResponse)
async def game_key(req: KeyRequest) -> GameStateResponse:
    game_engine = _get_engine()
    game_engine.handle_key(req.key)
    return GameStateResponse(**game_engine.render_view())


@app.post("/game/pause", response_model=GameStateResponse)
async def game_pause() -> GameStateResponse:
    game_engine = _get_engine()
    if game_engine.state.game_over:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Game is over; restart to continue"
        )
    if not game_engine.state.started:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Game has not started; restart to begin"
        )
    game_engine.toggle_pause()
    _publish(game_engine)
    return GameStateResponse(**game_engine.render_view())


@app.post("/game/restart", response_model=GameStateResponse)
async def game_restart() -> GameStateResponse:
    game_engine = _get_engine()
    game_engine.restart()
    _publish(game_engine)
    return GameStateResponse(**game_engine.render_view())


@app.websocket("/game/ws")
async def game_ws(ws: WebSocket) -> None:
    await ws.accept()
    game_engine = _get_engine()
    async with game_clients_lock:
        game_clients.add(ws)
    try:
        await ws.send_json(game_engine.render_view())
        while True:
            try:
                raw = await ws.receive_json()
            except WebSocketDisconnect:
                break
            except Exception:
                logger.exception("Game websocket receive failed")
                break
            try:
                msg = ClientMessage.model_validate(raw)
            except ValidationError:
                logger.debug("Ignoring malformed client message: %r", raw)
                continue
            _apply_message(game_engine, msg)
    finally:
        async with game_clients_lock:
            game_clients.discard(ws)


# Static web UI
app.mount("/static", StaticFiles(directory=WEB_DIR / "static"), name="static")


@app.get("/")
def home() -> FileResponse:
    return FileResponse(WEB_DIR / "index.html")
