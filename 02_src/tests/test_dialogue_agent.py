"""Tests for DialogueAgent."""

import asyncio

import pytest

from helpdesk.dialogue import DialogueAgent
from helpdesk.models import DialogTurnStatus, EntityProfile
from helpdesk.topics import LOGIN_DIALOG, REPORT_DIALOG, TRANSACTION_DIALOG
from helpdesk.topics.greeting import FALLBACK_TEXT, WELCOME_TEXT


class TestDialogueAgentHandle:
    """Tests for DialogueAgent.handle_message()."""

    @pytest.mark.asyncio
    async def test_handle_message_saves_user_message(self, dialogue_agent, storage):
        """Test that handle_message stores the user's text."""
        await dialogue_agent.handle_message("c1", "Hello")

        messages = await storage.get_messages("c1")
        assert messages[0].role == "user"
        assert messages[0].content == "Hello"

    @pytest.mark.asyncio
    async def test_handle_message_saves_bot_replies(self, dialogue_agent, storage):
        """Test that bot replies land in the transcript with their suggestions."""
        response = await dialogue_agent.handle_message("c1", "Hello")

        bot = [m for m in await storage.get_messages("c1") if m.role == "bot"]
        assert [m.content for m in bot] == [r.text for r in response.replies]
        assert bot[0].suggested_actions == response.replies[0].suggested_actions

    @pytest.mark.asyncio
    async def test_handle_message_tracks_events(self, dialogue_agent, storage):
        """Test that handle_message tracks TraceEvents."""
        await dialogue_agent.handle_message("c1", "Hello")

        events = await storage.get_trace_events(actor="dialogue_agent")
        event_types = [e.event_type for e in events]
        assert "message_received" in event_types
        assert "message_responded" in event_types

    @pytest.mark.asyncio
    async def test_no_intent_starts_greeting(self, dialogue_agent):
        """Test that an unclassified first turn gets the welcome menu."""
        response = await dialogue_agent.handle_message("c1", "Hello")

        assert [r.text for r in response.replies] == [WELCOME_TEXT]
        assert response.status is DialogTurnStatus.COMPLETE
        assert response.active_dialog is None

    @pytest.mark.asyncio
    async def test_entity_without_intent_is_routed(self, dialogue_agent):
        """Test that greeting hands a classified entity to its topic."""
        response = await dialogue_agent.handle_message("c1", "birt broken", entity="BIRT")

        assert response.replies[0].text == "Are you using Windows 10 ?"
        assert response.active_dialog == REPORT_DIALOG
        assert response.continuation is False

    @pytest.mark.asyncio
    async def test_unknown_entity_gets_fallback(self, dialogue_agent):
        response = await dialogue_agent.handle_message("c1", "coffee", entity="coffee")
        assert [r.text for r in response.replies] == [FALLBACK_TEXT]

    @pytest.mark.asyncio
    async def test_multiple_conversations_are_independent(self, dialogue_agent):
        """Test that each conversation keeps its own cursor."""
        await dialogue_agent.handle_message("c1", "x", intent=REPORT_DIALOG, entity="BIRT")
        await dialogue_agent.handle_message("c2", "x", intent=REPORT_DIALOG, entity="Qlikview")

        r1 = await dialogue_agent.handle_message("c1", "Yes")
        r2 = await dialogue_agent.handle_message("c2", "Access Denied")

        assert "windows 10" in r1.replies[0].text
        assert r2.replies[0].text.startswith("Please try the user name")


class TestDialogueAgentIntent:
    """Tests for classified intents."""

    @pytest.mark.asyncio
    async def test_intent_binds_entity(self, dialogue_agent):
        """Test that the turn's entity is written to the profile."""
        response = await dialogue_agent.handle_message(
            "c1", "cannot login", intent=LOGIN_DIALOG, entity="invalid"
        )

        assert response.replies[0].text.startswith("Please reset your password")
        profile = await dialogue_agent.get_profile("c1")
        assert profile.entity == "invalid"

    @pytest.mark.asyncio
    async def test_intent_without_entity_clears_stale_entity(self, dialogue_agent):
        """Test that a new intent never reuses the previous turn's entity."""
        await dialogue_agent.handle_message("c1", "x", intent=LOGIN_DIALOG, entity="ldap")

        response = await dialogue_agent.handle_message("c1", "login", intent=LOGIN_DIALOG)

        assert len(response.replies) == 1
        assert response.replies[0].suggested_actions
        assert (await dialogue_agent.get_profile("c1")).entity is None

    @pytest.mark.asyncio
    async def test_intent_cancels_running_dialog(self, dialogue_agent):
        """Test that switching topic drops the pending prompt."""
        first = await dialogue_agent.handle_message("c1", "x", intent=REPORT_DIALOG, entity="BIRT")
        assert first.active_dialog == REPORT_DIALOG

        response = await dialogue_agent.handle_message("c1", "x", intent=TRANSACTION_DIALOG)

        assert len(response.replies) == 3
        assert response.active_dialog is None

    @pytest.mark.asyncio
    async def test_unknown_intent_raises(self, dialogue_agent):
        with pytest.raises(ValueError, match="Unknown intent"):
            await dialogue_agent.handle_message("c1", "x", intent="weather")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("child_id", ["correction.supervisor", "correction.backup_approver"])
    async def test_child_waterfall_is_not_an_intent(self, dialogue_agent, storage, child_id):
        """Test that child waterfalls can only be reached through their topic."""
        with pytest.raises(ValueError, match="Unknown intent"):
            await dialogue_agent.handle_message("c2", "hi", intent=child_id, entity="ldap")

        assert await storage.get_dialog_state("c2") is None

    @pytest.mark.asyncio
    async def test_silent_turn_is_tracked(self, dialogue_agent, storage):
        """Test that a turn with no replies is logged and traced."""
        response = await dialogue_agent.handle_message(
            "c1", "x", intent=LOGIN_DIALOG, entity="printer"
        )

        assert response.replies == []
        events = await storage.get_trace_events(event_types=["silent_turn"])
        assert len(events) == 1


class TestDialogueAgentContinue:
    """Tests for resuming prompts."""

    @pytest.mark.asyncio
    async def test_reply_resumes_prompt(self, dialogue_agent):
        await dialogue_agent.handle_message("c1", "x", intent="assignment", entity="disabled")

        response = await dialogue_agent.handle_message("c1", "Yes")

        assert any("RP:102036" in r.text for r in response.replies)
        assert response.continuation is True
        assert response.status is DialogTurnStatus.COMPLETE

    @pytest.mark.asyncio
    async def test_invalid_reply_waits(self, dialogue_agent):
        first = await dialogue_agent.handle_message("c1", "x", intent="assignment", entity="disabled")

        response = await dialogue_agent.handle_message("c1", "maybe")

        assert response.status is DialogTurnStatus.WAITING
        assert response.replies[-1] == first.replies[-1]
        assert response.continuation is False

    @pytest.mark.asyncio
    async def test_concurrent_turns_are_serialized(self, dialogue_agent, storage):
        """Test that two replies to one prompt are handled one after another."""
        await dialogue_agent.handle_message("c1", "x", intent="assignment", entity="disabled")

        first, second = await asyncio.gather(
            dialogue_agent.handle_message("c1", "Yes"),
            dialogue_agent.handle_message("c1", "Hello"),
        )

        assert any("RP:102036" in r.text for r in first.replies)
        # The prompt was consumed, so the second turn starts the greeting
        assert second.replies[0].text == WELCOME_TEXT

    @pytest.mark.asyncio
    async def test_locks_released_after_turns(self, dialogue_agent):
        """Test that idle conversations keep no lock around."""
        await asyncio.gather(
            *[dialogue_agent.handle_message(f"c{i}", "Hello") for i in range(5)],
            dialogue_agent.handle_message("c0", "Hi again"),
        )
        await dialogue_agent.cancel("c1")

        assert dialogue_agent._locks == {}
        assert dialogue_agent._lock_users == {}

    @pytest.mark.asyncio
    async def test_lock_released_when_turn_fails(self, dialogue_agent, monkeypatch):
        async def boom(*args, **kwargs):
            raise RuntimeError("storage down")

        monkeypatch.setattr(dialogue_agent._dialogs, "continue_dialog", boom)
        with pytest.raises(RuntimeError, match="storage down"):
            await dialogue_agent.handle_message("c1", "Hello")

        assert dialogue_agent._locks == {}

    @pytest.mark.asyncio
    async def test_stop_keeps_lock_of_running_turn(self, dialogue_agent):
        """Test that stopping mid-turn does not hand out a fresh lock."""
        async with dialogue_agent._conversation_turn("c1"):
            lock = dialogue_agent._locks["c1"]
            await dialogue_agent.stop()
            await dialogue_agent.start()

            assert dialogue_agent._locks["c1"] is lock
            waiting = asyncio.create_task(dialogue_agent.handle_message("c1", "Hello"))
            await asyncio.sleep(0)
            assert not waiting.done()

        response = await waiting
        assert response.replies[0].text == WELCOME_TEXT
        assert dialogue_agent._locks == {}


class TestDialogueAgentLifecycle:
    """Tests for start/stop, cancel and transcript access."""

    @pytest.mark.asyncio
    async def test_not_started_raises(self, dialog_set, storage, tracker):
        agent = DialogueAgent(dialog_set=dialog_set, storage=storage, tracker=tracker)
        with pytest.raises(RuntimeError, match="not started"):
            await agent.handle_message("c1", "Hello")

    @pytest.mark.asyncio
    async def test_cancel_drops_dialogs(self, dialogue_agent):
        await dialogue_agent.handle_message("c1", "x", intent=REPORT_DIALOG, entity="BIRT")

        result = await dialogue_agent.cancel("c1")

        assert result.status is DialogTurnStatus.CANCELLED
        response = await dialogue_agent.handle_message("c1", "Yes")
        assert response.replies[0].text == WELCOME_TEXT

    @pytest.mark.asyncio
    async def test_cancel_without_dialog(self, dialogue_agent):
        result = await dialogue_agent.cancel("c1")
        assert result.status is DialogTurnStatus.EMPTY

    @pytest.mark.asyncio
    async def test_transcript_order(self, dialogue_agent):
        await dialogue_agent.handle_message("c1", "x", intent=TRANSACTION_DIALOG)

        transcript = await dialogue_agent.get_transcript("c1")
        assert [m.role for m in transcript] == ["user", "bot", "bot", "bot"]

    @pytest.mark.asyncio
    async def test_get_profile_missing(self, dialogue_agent):
        assert await dialogue_agent.get_profile("nobody") is None

    @pytest.mark.asyncio
    async def test_profile_continuation_reported(self, dialogue_agent, storage):
        await storage.save_profile("c1", EntityProfile(entity=None, continuation=False))
        response = await dialogue_agent.handle_message("c1", "x", intent=TRANSACTION_DIALOG)
        assert response.continuation is False
