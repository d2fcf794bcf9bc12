"""Voice console state: persona, draft, submission lifecycle and history."""

import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol

from loguru import logger

from voice.gateway import SynthesisResult
from voice.personas import Persona

from .client import SpeakClientError

EXAMPLES = (
    "Tell me a fun fact about space.",
    "Who's a good boy?",
)


class SpeakClient(Protocol):
    async def speak(self, text: str, persona: Persona) -> SynthesisResult:
        ...


class ConsolePhase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class HistoryEntry:
    """One successful synthesis, as shown in the history list."""

    id: str
    persona: Persona
    text: str
    audio_url: Optional[str]
    transcript: Optional[str]
    created_at: str


def _display_time(moment: datetime) -> str:
    return moment.strftime("%X")


class VoiceConsole:
    """Client-side state for one browsing session.

    Submission is a two-state machine (IDLE -> SUBMITTING -> IDLE). While
    SUBMITTING, further submissions are ignored; an in-flight call is never
    cancelled or queued.
    """

    def __init__(
        self,
        client: SpeakClient,
        clock: Callable[[], float] = time.time,
        display_time: Callable[[datetime], str] = _display_time
    ):
        self.client = client
        self.clock = clock
        self.display_time = display_time

        self.persona: Persona = Persona.DOG
        self.draft: str = ""
        self.phase: ConsolePhase = ConsolePhase.IDLE
        self.history: List[HistoryEntry] = []
        self.last_error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.phase is ConsolePhase.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return bool(self.draft.strip()) and not self.is_loading

    def select_persona(self, persona) -> None:
        self.persona = Persona.parse(persona)

    def set_draft(self, text: str) -> None:
        self.draft = text

    def insert_example(self, index: int) -> None:
        """Replace the draft with one of the fixed example prompts."""
        self.draft = EXAMPLES[index]

    def take_error(self) -> Optional[str]:
        """Return the pending error notification, clearing it."""
        error, self.last_error = self.last_error, None
        return error

    def _next_id(self, now: float) -> str:
        entry_id = int(now * 1000)
        if self.history and int(self.history[0].id) >= entry_id:
            entry_id = int(self.history[0].id) + 1
        return str(entry_id)

    async def submit(self) -> Optional[HistoryEntry]:
        """Send the draft to the gateway.

        Returns:
            The new history entry, or ``None`` when nothing was added (guard
            tripped or the call failed; see ``last_error``)
        """
        if not self.can_submit:
            return None

        text = self.draft
        persona = self.persona
        self.phase = ConsolePhase.SUBMITTING
        try:
            result = await self.client.speak(text, persona)
        except SpeakClientError as e:
            logger.error(f"Error generating voice: {e.message}")
            self.last_error = e.message
            return None
        finally:
            self.phase = ConsolePhase.IDLE

        now = self.clock()
        entry = HistoryEntry(
            id=self._next_id(now),
            persona=result.persona or persona,
            text=text,
            audio_url=result.audio_url,
            transcript=result.transcript or text,
            created_at=self.display_time(datetime.fromtimestamp(now))
        )
        self.history.insert(0, entry)
        self.draft = ""
        self.last_error = None
        return entry
