"""Conversation state API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class ProfileResponse(BaseModel):
    """Stored entity profile."""

    entity: str | None
    continuation: bool


class TranscriptMessage(BaseModel):
    """One transcript entry."""

    id: str
    role: str
    content: str
    suggested_actions: list[str]
    timestamp: datetime


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_conversations_router(app: IApplication) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api/conversations", tags=["conversations"])

    @router.get("/{conversation_id}/profile", response_model=ProfileResponse)
    async def get_profile(conversation_id: str) -> dict:
        """Get the entity profile of a conversation."""
        profile = await app.dialogue_agent.get_profile(conversation_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile.to_dict()

    @router.get("/{conversation_id}/messages", response_model=list[TranscriptMessage])
    async def get_messages(conversation_id: str) -> list[dict]:
        """Get the transcript of a conversation."""
        messages = await app.dialogue_agent.get_transcript(conversation_id)
        return [
            {
                "id": m.id,
                "role": m.role,
                "content": m.content,
                "suggested_actions": m.suggested_actions,
                "timestamp": m.timestamp.isoformat(),
            }
            for m in messages
        ]

    @router.post("/{conversation_id}/cancel", response_model=StatusResponse)
    async def cancel_dialogs(conversation_id: str) -> dict:
        """Cancel every running dialog of a conversation."""
        try:
            result = await app.dialogue_agent.cancel(conversation_id)
            return {"status": result.status.value}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
