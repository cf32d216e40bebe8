"""DialogueAgent implementation."""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Protocol

from ..dialogs import IDialogSet
from ..logging_config import get_logger, log_context
from ..models import (
    DialogTurnStatus,
    EntityProfile,
    Message,
    Reply,
    TurnResponse,
    TurnResult,
)
from ..storage import IStorage
from ..topics import GREETING_DIALOG
from ..tracker import ITracker

logger = get_logger(__name__)


class IDialogueAgent(Protocol):
    """Handles user turns for all conversations."""

    async def handle_message(
        self,
        conversation_id: str,
        text: str,
        intent: str | None = None,
        entity: str | None = None,
    ) -> TurnResponse:
        """Run one turn: start or continue the conversation's dialog, return replies."""
        ...

    async def cancel(self, conversation_id: str) -> TurnResult:
        """Cancel every running dialog of the conversation."""
        ...

    async def get_profile(self, conversation_id: str) -> EntityProfile | None:
        """Get the stored entity profile."""
        ...

    async def get_transcript(self, conversation_id: str) -> list[Message]:
        """Get the stored transcript."""
        ...

    async def start(self) -> None:
        """Start accepting messages."""
        ...

    async def stop(self) -> None:
        """Stop accepting messages."""
        ...


class DialogueAgent:
    """Routes classified user turns into the scripted topic dialogs.

    Turns of one conversation are serialized with a per-conversation lock;
    different conversations run independently.
    """

    def __init__(
        self,
        dialog_set: IDialogSet,
        storage: IStorage,
        tracker: ITracker,
        greeting_dialog: str = GREETING_DIALOG,
    ):
        self._dialogs = dialog_set
        self._storage = storage
        self._tracker = tracker
        self._greeting_dialog = greeting_dialog

        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._running = False

    async def start(self) -> None:
        """Start accepting messages."""
        logger.info("Starting DialogueAgent")
        self._running = True

    async def stop(self) -> None:
        """Stop accepting messages."""
        logger.info("Stopping DialogueAgent")
        self._running = False

    @asynccontextmanager
    async def _conversation_turn(self, conversation_id: str):
        """Hold the conversation's lock; drop it once no turn uses it."""
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = self._locks[conversation_id] = asyncio.Lock()
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[conversation_id] -= 1
            if not self._lock_users[conversation_id]:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]

    async def handle_message(
        self,
        conversation_id: str,
        text: str,
        intent: str | None = None,
        entity: str | None = None,
    ) -> TurnResponse:
        """Run one turn: start or continue the conversation's dialog, return replies."""
        if not self._running:
            raise RuntimeError("DialogueAgent not started")
        if intent and not self._dialogs.has_topic(intent):
            raise ValueError(f"Unknown intent: {intent}")

        async with self._conversation_turn(conversation_id):
            return await self._handle_turn(conversation_id, text, intent, entity)

    async def _handle_turn(
        self,
        conversation_id: str,
        text: str,
        intent: str | None,
        entity: str | None,
    ) -> TurnResponse:
        logger.info(
            f"Message received in {conversation_id}: {text[:100]}",
            extra=log_context(
                conversation_id=conversation_id, intent=intent, entity=entity
            ),
        )

        await self._save_message(conversation_id, "user", Reply(text=text))
        await self._tracker.track(
            event_type="message_received",
            actor="dialogue_agent",
            data={
                "conversation_id": conversation_id,
                "text": text,
                "intent": intent,
                "entity": entity,
            },
        )

        if intent:
            # A classified intent switches topic and rebinds the entity
            profile = await self._bind_entity(conversation_id, entity)
            await self._dialogs.cancel_all(conversation_id)
            turn = await self._dialogs.begin(
                conversation_id, intent, {"entity_profile": profile.to_dict()}
            )
        else:
            turn = await self._dialogs.continue_dialog(conversation_id, text)
            if turn.status is DialogTurnStatus.EMPTY:
                turn = await self._dialogs.begin(
                    conversation_id,
                    self._greeting_dialog,
                    {"entity": entity.strip()} if entity and entity.strip() else {},
                )

        for reply in turn.replies:
            await self._save_message(conversation_id, "bot", reply)

        if not turn.replies:
            logger.warning(
                "Turn produced no replies",
                extra=log_context(conversation_id=conversation_id, intent=intent),
            )
            await self._tracker.track(
                event_type="silent_turn",
                actor="dialogue_agent",
                data={"conversation_id": conversation_id, "intent": intent},
            )

        profile = await self._storage.get_profile(conversation_id)
        response = TurnResponse(
            conversation_id=conversation_id,
            replies=turn.replies,
            status=turn.status,
            continuation=profile.continuation if profile else True,
            active_dialog=await self._dialogs.active_dialog(conversation_id),
        )

        await self._tracker.track(
            event_type="message_responded",
            actor="dialogue_agent",
            data={
                "conversation_id": conversation_id,
                "status": response.status.value,
                "reply_count": len(response.replies),
                "active_dialog": response.active_dialog,
            },
        )
        return response

    async def cancel(self, conversation_id: str) -> TurnResult:
        """Cancel every running dialog of the conversation."""
        if not self._running:
            raise RuntimeError("DialogueAgent not started")

        async with self._conversation_turn(conversation_id):
            return await self._dialogs.cancel_all(conversation_id)

    async def get_profile(self, conversation_id: str) -> EntityProfile | None:
        """Get the stored entity profile."""
        return await self._storage.get_profile(conversation_id)

    async def get_transcript(self, conversation_id: str) -> list[Message]:
        """Get the stored transcript."""
        return await self._storage.get_messages(conversation_id)

    async def _bind_entity(
        self, conversation_id: str, entity: str | None
    ) -> EntityProfile:
        """Overwrite the profile's entity with this turn's classification."""
        profile = await self._storage.get_profile(conversation_id) or EntityProfile()
        profile.entity = entity.strip() if entity and entity.strip() else None
        await self._storage.save_profile(conversation_id, profile)
        return profile

    async def _save_message(
        self, conversation_id: str, role: str, reply: Reply
    ) -> None:
        await self._storage.save_message(
            Message(
                id=str(uuid.uuid4()),
                conversation_id=conversation_id,
                role=role,
                content=reply.text,
                timestamp=datetime.now(timezone.utc),
                suggested_actions=list(reply.suggested_actions),
            )
        )
