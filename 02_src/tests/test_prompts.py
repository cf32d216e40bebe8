"""Tests for prompt primitives."""

import pytest

from helpdesk.dialogs import ChoicePrompt, PromptResult, TextPrompt, is_yes, validate_yes_no
from helpdesk.models import PendingPrompt

BROWSERS = PendingPrompt("confirm_prompt", "Which Browser you are logged in ?", ["Internet explorer", "Chrome", "Firefox"])


class TestChoicePrompt:
    """Tests for ChoicePrompt recognition and rendering."""

    def test_render_offers_choices(self):
        reply = ChoicePrompt("confirm_prompt").render(BROWSERS)
        assert reply.text == "Which Browser you are logged in ?"
        assert reply.suggested_actions == ["Internet explorer", "Chrome", "Firefox"]

    def test_match_is_case_insensitive_and_canonical(self):
        """Test that a differently cased reply yields the canonical choice."""
        recognition = ChoicePrompt("p").recognize(BROWSERS, "  internet EXPLORER ")
        assert recognition.accepted
        assert recognition.result == PromptResult("Internet explorer")

    def test_match_by_ordinal(self):
        recognition = ChoicePrompt("p").recognize(BROWSERS, "2")
        assert recognition.result.value == "Chrome"

    def test_out_of_range_ordinal_is_rejected(self):
        assert not ChoicePrompt("p").recognize(BROWSERS, "4").accepted

    @pytest.mark.parametrize("reply", ["²", "①", "³"])
    def test_digit_like_symbols_get_retry_message(self, reply):
        """Test that superscript and circled digits are re-asked, not parsed."""
        recognition = ChoicePrompt("p", retry_message="Pick one.").recognize(BROWSERS, reply)
        assert not recognition.accepted
        assert recognition.retry_message == "Pick one."

    def test_unknown_reply_is_rejected_with_retry_message(self):
        recognition = ChoicePrompt("p", retry_message="Pick one.").recognize(BROWSERS, "Safari")
        assert not recognition.accepted
        assert recognition.retry_message == "Pick one."


class TestTextPrompt:
    """Tests for TextPrompt validation."""

    def test_accepts_any_text_without_validator(self):
        recognition = TextPrompt("p").recognize(PendingPrompt("p", "Name?"), " Alice ")
        assert recognition.result.value == "Alice"

    def test_blank_text_is_rejected(self):
        assert not TextPrompt("p").recognize(PendingPrompt("p", "Name?"), "   ").accepted

    def test_validator_rejection_message_is_used(self):
        prompt = TextPrompt("p", validator=validate_yes_no)
        recognition = prompt.recognize(PendingPrompt("p", "Updated?"), "maybe")
        assert not recognition.accepted
        assert recognition.retry_message == "Please answer Yes or No."

    def test_validator_accepts(self):
        prompt = TextPrompt("p", validator=validate_yes_no)
        assert prompt.recognize(PendingPrompt("p", "Updated?"), "Yep").accepted


class TestYesNo:
    """Tests for yes/no helpers."""

    def test_is_yes(self):
        assert is_yes(PromptResult("Yes"))
        assert is_yes(PromptResult("y"))
        assert not is_yes(PromptResult("No"))
        assert not is_yes(None)
