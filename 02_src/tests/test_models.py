"""Tests for data models."""

from datetime import datetime, timezone

from helpdesk.models import (
    DialogInstance,
    DialogState,
    DialogTurnStatus,
    EntityProfile,
    Message,
    PendingPrompt,
    Reply,
    TraceEvent,
    normalize_category,
)


class TestEntityProfile:
    """Tests for EntityProfile model."""

    def test_defaults(self):
        """Test that a new profile has no entity and continuation on."""
        profile = EntityProfile()
        assert profile.entity is None
        assert profile.continuation is True

    def test_category_is_normalized(self):
        """Test that category trims and lower-cases the entity."""
        assert EntityProfile(entity="  BIRT ").category == "birt"
        assert EntityProfile().category == ""

    def test_dict_round_trip(self):
        """Test to_dict / from_dict keep both fields."""
        profile = EntityProfile(entity="ldap", continuation=False)
        assert EntityProfile.from_dict(profile.to_dict()) == profile

    def test_from_dict_treats_empty_entity_as_unset(self):
        """Test that an empty entity string becomes None."""
        assert EntityProfile.from_dict({"entity": ""}).entity is None
        assert EntityProfile.from_dict({}).continuation is True


class TestNormalizeCategory:
    """Tests for normalize_category()."""

    def test_handles_none(self):
        assert normalize_category(None) == ""

    def test_keeps_inner_spaces(self):
        assert normalize_category(" Not Authorized ") == "not authorized"


class TestDialogState:
    """Tests for DialogState / DialogInstance."""

    def test_active_is_top_of_stack(self):
        """Test that the last instance is the active one."""
        state = DialogState(
            conversation_id="c1",
            stack=[DialogInstance("greeting", 1), DialogInstance("report", 2)],
        )
        assert state.active.dialog_id == "report"

    def test_empty_stack_has_no_active(self):
        assert DialogState(conversation_id="c1").active is None

    def test_instance_from_dict_restores_pending_prompt(self):
        """Test that a serialized stack restores its pending prompt."""
        state = DialogState(
            conversation_id="c1",
            stack=[
                DialogInstance(
                    "report",
                    step_index=1,
                    options={"entity_profile": {"entity": "BIRT"}},
                    pending_prompt=PendingPrompt("confirm_prompt", "Windows?", ["Yes", "No"]),
                )
            ],
        )
        restored = DialogInstance.from_dict(state.to_json_stack()[0])
        assert restored == state.stack[0]
        assert restored.pending_prompt.choices == ["Yes", "No"]


class TestTurnStatus:
    """Tests for DialogTurnStatus."""

    def test_values(self):
        assert DialogTurnStatus.WAITING.value == "waiting"
        assert DialogTurnStatus("complete") is DialogTurnStatus.COMPLETE


class TestMessages:
    """Tests for Reply / Message / TraceEvent."""

    def test_reply_defaults_to_no_suggestions(self):
        assert Reply(text="Hi").suggested_actions == []

    def test_create_message(self):
        """Test creating a transcript message."""
        ts = datetime.now(timezone.utc)
        msg = Message(
            id="m1",
            conversation_id="c1",
            role="bot",
            content="Hello",
            timestamp=ts,
            suggested_actions=["Yes", "No"],
        )
        assert msg.role == "bot"
        assert msg.timestamp == ts
        assert msg.suggested_actions == ["Yes", "No"]

    def test_create_trace_event(self):
        """Test creating a TraceEvent."""
        ts = datetime.now(timezone.utc)
        event = TraceEvent(
            id="e1",
            event_type="dialog_started",
            actor="dialog:report",
            data={"conversation_id": "c1"},
            timestamp=ts,
        )
        assert event.actor == "dialog:report"
        assert event.data["conversation_id"] == "c1"
