"""State accessors bound to Storage, keyed by conversation id."""

from typing import Protocol

from ..models import DialogState, EntityProfile
from ..storage import IStorage


class IProfileAccessor(Protocol):
    """Per-conversation EntityProfile access."""

    async def get(self, conversation_id: str) -> EntityProfile | None:
        ...

    async def set(self, conversation_id: str, profile: EntityProfile) -> None:
        ...


class IDialogStateAccessor(Protocol):
    """Per-conversation dialog stack access."""

    async def get(self, conversation_id: str) -> DialogState | None:
        ...

    async def set(self, state: DialogState) -> None:
        ...

    async def delete(self, conversation_id: str) -> None:
        ...


class ProfileAccessor:
    """EntityProfile accessor backed by Storage."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def get(self, conversation_id: str) -> EntityProfile | None:
        return await self._storage.get_profile(conversation_id)

    async def set(self, conversation_id: str, profile: EntityProfile) -> None:
        await self._storage.save_profile(conversation_id, profile)


class DialogStateAccessor:
    """Dialog stack accessor backed by Storage; empty stacks are deleted."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def get(self, conversation_id: str) -> DialogState | None:
        return await self._storage.get_dialog_state(conversation_id)

    async def set(self, state: DialogState) -> None:
        if not state.stack:
            await self._storage.delete_dialog_state(state.conversation_id)
            return
        await self._storage.save_dialog_state(state)

    async def delete(self, conversation_id: str) -> None:
        await self._storage.delete_dialog_state(conversation_id)
