"""Pachislo FastAPI Application."""
import logging

from fastapi import FastAPI

from pachislo.config import settings
from pachislo.config_hash import get_config_hash
from pachislo.middleware import ErrorHandlerMiddleware
from pachislo.output import CompositeOutput, LoggingOutput, RecordingOutput
from pachislo.protocol import (
    CommandRequest,
    CommandResponse,
    CreateSessionRequest,
    SessionResponse,
)
from pachislo.session import GameSession
from pachislo.session_store import session_store
from pachislo.wire import dump_state


logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pachislo",
    version="0.1.0",
    description="Pachislo game engine sessions over HTTP",
    debug=settings.debug,
)

app.add_middleware(ErrorHandlerMiddleware)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/sessions")
def create_session(body: CreateSessionRequest | None = None) -> dict:
    """
    POST /sessions.

    Builds the session config (fails fast with INVALID_CONFIGURATION) and
    registers a new session in Uninitialized state.
    """
    body = body or CreateSessionRequest()
    config = body.to_game_config()

    recorder = RecordingOutput()
    session = GameSession(
        config,
        output=CompositeOutput([LoggingOutput(), recorder]),
        seed=body.seed if body.seed is not None else settings.rng_seed,
        reel_count=settings.reel_count,
        symbols=settings.symbols,
    )
    entry = session_store.add(session, recorder)

    return SessionResponse(
        sessionId=entry.session_id,
        configHash=get_config_hash(config),
        state=dump_state(session.state),
    ).model_dump()


@app.get("/sessions/{session_id}")
def get_session(session_id: str) -> dict:
    """GET /sessions/{id}: current state without advancing the game."""
    entry = session_store.get(session_id)
    return SessionResponse(
        sessionId=entry.session_id,
        configHash=get_config_hash(entry.session.config),
        state=dump_state(entry.session.state),
        finished=entry.session.finished,
    ).model_dump()


@app.post("/sessions/{session_id}/commands")
def run_command(session_id: str, body: CommandRequest) -> dict:
    """
    POST /sessions/{id}/commands.

    Applies one command and returns the control signal, the new state and
    every event the command emitted, in order.
    """
    entry = session_store.get(session_id)
    control, state, events = entry.execute(body.command)
    return CommandResponse(
        control=control,
        state=dump_state(state),
        events=events,
    ).model_dump(mode="json")


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> dict:
    """DELETE /sessions/{id}."""
    session_store.remove(session_id)
    return {"status": "deleted"}
