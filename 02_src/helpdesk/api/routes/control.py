"""Operator routes: wipe stored conversations, drive the scripted SIM."""

from typing import Protocol

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


class SimControl(Protocol):
    """The part of the SIM the control routes drive."""

    @property
    def is_running(self) -> bool:
        ...

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class SimStatusResponse(BaseModel):
    """Whether scripted conversations are being played."""

    configured: bool
    running: bool


# Set by main before the app is created
_sim_instance: SimControl | None = None


def set_sim_instance(sim: SimControl | None) -> None:
    """Set the global SIM instance."""
    global _sim_instance
    _sim_instance = sim


def get_sim_instance() -> SimControl | None:
    """Get the global SIM instance."""
    return _sim_instance


def _require_sim() -> SimControl:
    if _sim_instance is None:
        raise HTTPException(status_code=404, detail="SIM not configured")
    return _sim_instance


def create_control_router(app: IApplication) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> StatusResponse:
        """Clear profiles, dialog cursors, transcripts and traces.

        A running SIM is stopped first so it cannot write into the
        cleared store.
        """
        if _sim_instance is not None and _sim_instance.is_running:
            logger.info("Stopping SIM before reset")
            await _sim_instance.stop()
        await app.reset()
        return StatusResponse(status="ok")

    @router.get("/sim", response_model=SimStatusResponse)
    async def sim_status() -> SimStatusResponse:
        return SimStatusResponse(
            configured=_sim_instance is not None,
            running=bool(_sim_instance and _sim_instance.is_running),
        )

    @router.post("/sim/start", response_model=StatusResponse)
    async def start_sim() -> StatusResponse:
        """Start playing the scripted conversations."""
        sim = _require_sim()
        if sim.is_running:
            return StatusResponse(status="already_running")
        await sim.start()
        return StatusResponse(status="ok")

    @router.post("/sim/stop", response_model=StatusResponse)
    async def stop_sim() -> StatusResponse:
        """Stop the scripted conversations."""
        await _require_sim().stop()
        return StatusResponse(status="ok")

    return router
