"""Trace event routes: what the sequencer and agent did, per conversation."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...models import TraceEvent


class TraceEventResponse(BaseModel):
    """One recorded dialog or turn event."""

    id: str
    event_type: str
    actor: str
    conversation_id: str | None = None
    data: dict[str, Any]
    timestamp: datetime

    @classmethod
    def from_event(cls, event: TraceEvent) -> "TraceEventResponse":
        return cls(
            id=event.id,
            event_type=event.event_type,
            actor=event.actor,
            conversation_id=event.data.get("conversation_id"),
            data=event.data,
            timestamp=event.timestamp,
        )


def _parse_after(after: str | None) -> datetime | None:
    if not after:
        return None
    try:
        return datetime.fromisoformat(after)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid after timestamp: {after}") from None


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/trace-events", response_model=list[TraceEventResponse])
    async def get_trace_events(
        after: str | None = Query(None, description="ISO timestamp filter"),
        limit: int = Query(100, ge=1, le=1000),
        event_type: list[str] | None = Query(None, description="e.g. prompt_retried; repeatable"),
        actor: str | None = Query(None, description="e.g. dialogue_agent or dialog:report"),
        conversation_id: str | None = Query(None, description="Events of one conversation"),
    ) -> list[TraceEventResponse]:
        """Newest-first trace events."""
        events = await app.storage.get_trace_events(
            after=_parse_after(after),
            event_types=event_type or None,
            actor=actor,
            conversation_id=conversation_id,
            limit=limit,
        )
        return [TraceEventResponse.from_event(e) for e in events]

    @router.get(
        "/conversations/{conversation_id}/trace",
        response_model=list[TraceEventResponse],
    )
    async def get_conversation_trace(
        conversation_id: str,
        limit: int = Query(100, ge=1, le=1000),
    ) -> list[TraceEventResponse]:
        """Trace of one conversation in the order it happened."""
        events = await app.storage.get_trace_events(
            conversation_id=conversation_id, limit=limit
        )
        return [TraceEventResponse.from_event(e) for e in reversed(events)]

    return router
