"""Gateway configuration resolved from the process environment."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from .errors import ConfigurationError
from .personas import Persona

ROOT_DIR = Path(__file__).resolve().parents[1]

# Load environment variables from .env file in the repository root
load_dotenv(dotenv_path=ROOT_DIR / ".env")

DEFAULT_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_BASE_URL = "https://api.elevenlabs.io"


@dataclass(frozen=True)
class GatewayConfig:
    """Everything the gateway needs to reach ElevenLabs.

    Missing values are kept as ``None`` here and only reported when a
    request actually needs them.
    """

    api_key: Optional[str] = None
    model_id: str = DEFAULT_MODEL_ID
    base_url: str = DEFAULT_BASE_URL
    voice_ids: Dict[Persona, Optional[str]] = field(default_factory=dict)
    timeout_seconds: Optional[float] = None

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "GatewayConfig":
        env = os.environ if environ is None else environ

        timeout_seconds = None
        raw_timeout = env.get("ELEVENLABS_TIMEOUT_SECONDS")
        if raw_timeout:
            try:
                timeout_seconds = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid ELEVENLABS_TIMEOUT_SECONDS={raw_timeout!r}")

        return GatewayConfig(
            api_key=env.get("ELEVENLABS_API_KEY") or None,
            model_id=env.get("ELEVENLABS_MODEL_ID") or DEFAULT_MODEL_ID,
            base_url=(env.get("ELEVENLABS_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            voice_ids={
                persona: env.get(persona.voice_id_setting) or None
                for persona in Persona
            },
            timeout_seconds=timeout_seconds,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("ELEVENLABS_API_KEY is not set on the server.")
        return self.api_key

    def voice_id_for(self, persona: Persona) -> str:
        voice_id = self.voice_ids.get(persona)
        if not voice_id:
            raise ConfigurationError(
                f"Voice ID for {persona.value} is not configured. "
                f"Check {persona.voice_id_setting}."
            )
        return voice_id
