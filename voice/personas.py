"""Voice personas and their provider tuning."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .errors import InvalidInput

# Shared by every persona
STABILITY = 0.4
SIMILARITY_BOOST = 0.8


class Persona(str, Enum):
    """The two voice personalities a request can ask for."""

    DOG = "dog"
    PARROT = "parrot"

    @classmethod
    def parse(cls, value: Any) -> "Persona":
        """Convert a wire value into a Persona.

        Raises:
            InvalidInput: If the value is not a known persona
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            known = ", ".join(p.value for p in cls)
            raise InvalidInput(f"Unknown voiceType {value!r}. Expected one of: {known}.")

    @property
    def profile(self) -> "PersonaProfile":
        return PROFILES[self]

    @property
    def voice_id_setting(self) -> str:
        """Name of the environment variable holding this persona's voice id."""
        return f"ELEVENLABS_{self.value.upper()}_VOICE_ID"


@dataclass(frozen=True)
class PersonaProfile:
    """Display metadata and persona-tuned voice dials."""

    label: str
    icon: str
    traits: Tuple[str, ...]
    style: float
    use_speaker_boost: bool = True

    def voice_settings(self) -> Dict[str, Any]:
        """ElevenLabs ``voice_settings`` payload for this persona."""
        return {
            "stability": STABILITY,
            "similarity_boost": SIMILARITY_BOOST,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost
        }


PROFILES: Dict[Persona, PersonaProfile] = {
    Persona.DOG: PersonaProfile(
        label="Dog Voice Agent",
        icon="🐶",
        traits=("Playful, friendly", "Safety tips", "Loyal companion"),
        style=0.7,
    ),
    Persona.PARROT: PersonaProfile(
        label="Parrot Voice Agent",
        icon="🦜",
        traits=("Chirpy, curious", "Guide-like", "Repeats fun facts"),
        style=0.9,
    ),
}


def placeholder_for(persona: Persona) -> str:
    return f"Ask the {persona.value} anything in English..."
