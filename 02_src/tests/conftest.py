"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from helpdesk.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from helpdesk.tracker import Tracker

    return Tracker(storage=storage)


@pytest.fixture
def profile_accessor(storage):
    """Profile accessor over in-memory storage."""
    from helpdesk.dialogs import ProfileAccessor

    return ProfileAccessor(storage)


@pytest.fixture
def state_accessor(storage):
    """Dialog state accessor over in-memory storage."""
    from helpdesk.dialogs import DialogStateAccessor

    return DialogStateAccessor(storage)


@pytest.fixture
def dialog_set(profile_accessor, state_accessor, tracker):
    """DialogSet with every support topic registered."""
    from helpdesk.topics import build_dialog_set

    return build_dialog_set(profile_accessor, state_accessor, tracker)


@pytest.fixture
def set_entity(profile_accessor):
    """Store a profile with the given entity, as upstream classification would."""
    from helpdesk.models import EntityProfile

    async def _set(conversation_id: str, entity: str | None) -> None:
        await profile_accessor.set(conversation_id, EntityProfile(entity=entity))

    return _set


@pytest_asyncio.fixture
async def dialogue_agent(dialog_set, storage, tracker):
    """Create DialogueAgent for testing."""
    from helpdesk.dialogue import DialogueAgent

    agent = DialogueAgent(dialog_set=dialog_set, storage=storage, tracker=tracker)
    await agent.start()
    yield agent
    await agent.stop()
