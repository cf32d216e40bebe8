"""SIM implementation - scripted support conversations against the HTTP API."""

import asyncio
import random
from dataclasses import dataclass
from typing import Protocol

import httpx

from helpdesk.logging_config import get_logger
from helpdesk.tracker import ITracker

logger = get_logger(__name__)


@dataclass
class SimTurn:
    """One user turn as the upstream classifier would deliver it."""

    text: str
    intent: str | None = None
    entity: str | None = None


# conversation_id -> turns, played in order
SCENARIO: dict[str, list[SimTurn]] = {
    "sim_disabled": [
        SimTurn("Assign project button is greyed out", intent="assignment", entity="disabled"),
        SimTurn("Yes"),
    ],
    "sim_birt": [
        SimTurn("BIRT report is not opening", intent="report", entity="BIRT"),
        SimTurn("No"),
        SimTurn("Chrome"),
    ],
    "sim_login": [
        SimTurn("I can't log in", intent="login"),
        SimTurn("User Id not defined in LDAP", intent="login", entity="ldap"),
    ],
    "sim_supervisor": [
        SimTurn("Hello"),
        SimTurn("I need to change my approver", intent="correction", entity="approver"),
        SimTurn("Supervisor"),
        SimTurn("maybe"),
        SimTurn("No"),
    ],
}


class ISim(Protocol):
    """Generate scripted traffic."""

    async def start(self) -> None:
        """Start scripted scenario."""
        ...

    @property
    def is_running(self) -> bool:
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """Plays the scripted conversations concurrently, one turn at a time each."""

    def __init__(
        self,
        api_url: str = "http://localhost:8000",
        tracker: ITracker | None = None,
        scenario: dict[str, list[SimTurn]] | None = None,
        delay_range: tuple[float, float] = (1.0, 3.0),
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = api_url
        self._tracker = tracker
        self._scenario = scenario or SCENARIO
        self._delay_range = delay_range
        self._transport = transport
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None

    @property
    def is_running(self) -> bool:
        """True while scripted conversations are still being played."""
        return self._running

    def set_tracker(self, tracker: ITracker) -> None:
        """Inject tracker for SIM trace events."""
        self._tracker = tracker

    async def start(self) -> None:
        """Start scripted scenario."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient(
            base_url=self._api_url, timeout=10.0, transport=self._transport
        )
        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client:
            await self._client.aclose()
            self._client = None

    async def _run_scenario(self) -> None:
        summary = {
            "scenario": "scripted",
            "conversation_count": len(self._scenario),
            "turn_count": sum(len(turns) for turns in self._scenario.values()),
        }
        try:
            if self._tracker:
                await self._tracker.track("sim_started", "sim", summary)

            await asyncio.gather(
                *[
                    self._play_conversation(conversation_id, turns)
                    for conversation_id, turns in self._scenario.items()
                ]
            )
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False
            if self._tracker:
                await self._tracker.track("sim_completed", "sim", summary)

    async def _play_conversation(self, conversation_id: str, turns: list[SimTurn]) -> None:
        for turn in turns:
            if not self._running:
                break
            await self._send_turn(conversation_id, turn)
            await asyncio.sleep(random.uniform(*self._delay_range))

    async def _send_turn(self, conversation_id: str, turn: SimTurn) -> None:
        """Send a turn via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                "/api/messages",
                json={
                    "conversation_id": conversation_id,
                    "text": turn.text,
                    "intent": turn.intent,
                    "entity": turn.entity,
                },
            )

            if response.status_code == 200:
                data = response.json()
                logger.info("SIM: %s -> %s", conversation_id, turn.text)
                for reply in data.get("replies", []):
                    logger.info("SIM: %s <- %s", conversation_id, reply.get("text"))
            else:
                logger.error(
                    "SIM: Error sending turn for %s: %s",
                    conversation_id,
                    response.status_code,
                )

        except httpx.HTTPError as e:
            logger.error("SIM: Failed to send turn for %s: %s", conversation_id, e)
