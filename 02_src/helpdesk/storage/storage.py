"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import (
    DialogInstance,
    DialogState,
    EntityProfile,
    Message,
    TraceEvent,
)


def _to_db_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _from_db_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class IStorage(Protocol):
    """Persistent storage for conversation state (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Profiles
    async def save_profile(self, conversation_id: str, profile: EntityProfile) -> None:
        """Upsert the entity profile of a conversation."""
        ...

    async def get_profile(self, conversation_id: str) -> EntityProfile | None:
        """Get the entity profile of a conversation."""
        ...

    # Dialog cursors
    async def save_dialog_state(self, state: DialogState) -> None:
        """Upsert the dialog stack of a conversation."""
        ...

    async def get_dialog_state(self, conversation_id: str) -> DialogState | None:
        """Get the dialog stack of a conversation."""
        ...

    async def delete_dialog_state(self, conversation_id: str) -> None:
        """Drop the dialog stack of a conversation."""
        ...

    # Transcript
    async def save_message(self, message: Message) -> None:
        """Append a transcript message."""
        ...

    async def get_messages(
        self, conversation_id: str, after: datetime | None = None
    ) -> list[Message]:
        """Get transcript messages, optionally after a timestamp."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        conversation_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters (conversation_id matches data.conversation_id)."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Profiles
    async def save_profile(self, conversation_id: str, profile: EntityProfile) -> None:
        """Upsert the entity profile of a conversation."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT OR REPLACE INTO profiles
            (conversation_id, entity, continuation, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
            """,
            (conversation_id, profile.entity, int(profile.continuation)),
        )
        await conn.commit()

    async def get_profile(self, conversation_id: str) -> EntityProfile | None:
        """Get the entity profile of a conversation."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT entity, continuation
            FROM profiles
            WHERE conversation_id = ?
            """,
            (conversation_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return EntityProfile(entity=row[0], continuation=bool(row[1]))

    # Dialog cursors
    async def save_dialog_state(self, state: DialogState) -> None:
        """Upsert the dialog stack of a conversation."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT OR REPLACE INTO dialog_states
            (conversation_id, stack, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            """,
            (state.conversation_id, json.dumps(state.to_json_stack())),
        )
        await conn.commit()

    async def get_dialog_state(self, conversation_id: str) -> DialogState | None:
        """Get the dialog stack of a conversation."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT conversation_id, stack
            FROM dialog_states
            WHERE conversation_id = ?
            """,
            (conversation_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return DialogState(
            conversation_id=row[0],
            stack=[DialogInstance.from_dict(item) for item in json.loads(row[1])],
        )

    async def delete_dialog_state(self, conversation_id: str) -> None:
        """Drop the dialog stack of a conversation."""
        conn = self._require_conn()

        await conn.execute(
            "DELETE FROM dialog_states WHERE conversation_id = ?",
            (conversation_id,),
        )
        await conn.commit()

    # Transcript
    async def save_message(self, message: Message) -> None:
        """Append a transcript message."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO messages
            (id, conversation_id, role, content, suggested_actions, timestamp)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                message.id or str(uuid.uuid4()),
                message.conversation_id,
                message.role,
                message.content,
                json.dumps(message.suggested_actions),
                _to_db_timestamp(message.timestamp),
            ),
        )
        await conn.commit()

    async def get_messages(
        self, conversation_id: str, after: datetime | None = None
    ) -> list[Message]:
        """Get transcript messages, optionally after a timestamp."""
        conn = self._require_conn()

        query = """
            SELECT id, conversation_id, role, content, suggested_actions, timestamp
            FROM messages
            WHERE conversation_id = ?
        """
        params: list = [conversation_id]
        if after:
            query += " AND timestamp > ?"
            params.append(_to_db_timestamp(after))
        # rowid keeps insertion order for equal timestamps within one turn
        query += " ORDER BY timestamp ASC, rowid ASC"

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            Message(
                id=row[0],
                conversation_id=row[1],
                role=row[2],
                content=row[3],
                suggested_actions=json.loads(row[4]),
                timestamp=_from_db_timestamp(row[5]),
            )
            for row in rows
        ]

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, data, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                json.dumps(event.data, default=str),
                _to_db_timestamp(event.timestamp),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        conversation_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters (newest first)."""
        conn = self._require_conn()

        conditions = []
        params: list = []

        if after:
            conditions.append("timestamp > ?")
            params.append(_to_db_timestamp(after))
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)
        if conversation_id:
            conditions.append("json_extract(data, '$.conversation_id') = ?")
            params.append(conversation_id)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row[0],
                event_type=row[1],
                actor=row[2],
                data=json.loads(row[3]),
                timestamp=_from_db_timestamp(row[4]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._require_conn()

        for table in ("profiles", "dialog_states", "messages", "trace_events"):
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
