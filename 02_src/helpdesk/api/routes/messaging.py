"""Messaging API routes."""

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


class MessageRequest(BaseModel):
    """A user turn, already classified upstream."""

    conversation_id: str = Field(min_length=1)
    text: str = ""
    intent: str | None = None
    entity: str | None = None


class ReplyModel(BaseModel):
    """One bot reply."""

    text: str
    suggested_actions: list[str] = []


class MessageResponse(BaseModel):
    """Bot replies for the turn."""

    replies: list[ReplyModel]
    status: str
    continuation: bool
    active_dialog: str | None = None


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Run one turn of the conversation."""
        try:
            response = await app.dialogue_agent.handle_message(
                conversation_id=request.conversation_id,
                text=request.text,
                intent=request.intent,
                entity=request.entity,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error("Turn failed for %s: %s", request.conversation_id, e, exc_info=True)
            raise HTTPException(status_code=500, detail=str(e))

        return {
            "replies": [
                {"text": r.text, "suggested_actions": r.suggested_actions}
                for r in response.replies
            ],
            "status": response.status.value,
            "continuation": response.continuation,
            "active_dialog": response.active_dialog,
        }

    return router
