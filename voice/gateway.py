"""Synthesis gateway: validate, resolve persona configuration, call the
provider and hand back a self-contained audio reference."""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from loguru import logger

from .config import GatewayConfig
from .errors import InvalidInput
from .personas import Persona
from .tts import ElevenLabsTTS

AUDIO_MIME_TYPE = "audio/mpeg"


@dataclass(frozen=True)
class SynthesisResult:
    """Outcome of one successful synthesis."""

    audio_url: str
    transcript: str
    persona: Persona

    def to_payload(self) -> Dict[str, Any]:
        return {
            "audioUrl": self.audio_url,
            "transcript": self.transcript,
            "voiceType": self.persona.value
        }


def encode_audio_data_url(audio: bytes, mime_type: str = AUDIO_MIME_TYPE) -> str:
    """Embed audio bytes in a ``data:`` URL playable without another fetch."""
    return f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"


def decode_data_url(url: str) -> Tuple[str, bytes]:
    """Split a base64 ``data:`` URL into its MIME type and raw bytes.

    Raises:
        ValueError: If the URL is not a base64 data URL
    """
    if not url.startswith("data:"):
        raise ValueError("Not a data URL")
    header, sep, data = url[len("data:"):].partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Only base64 data URLs are supported")
    try:
        return header[:-len(";base64")], base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


class SynthesisGateway:
    """Turns one (text, persona) pair into playable audio.

    Configuration is read through ``config_loader`` on every call, so the
    gateway itself keeps no state between requests.
    """

    def __init__(
        self,
        config_loader: Callable[[], GatewayConfig] = GatewayConfig.from_env,
        tts_factory: Callable[..., ElevenLabsTTS] = ElevenLabsTTS
    ):
        self.config_loader = config_loader
        self.tts_factory = tts_factory

    def _client(self, config: GatewayConfig) -> ElevenLabsTTS:
        return self.tts_factory(
            api_key=config.require_api_key(),
            base_url=config.base_url,
            model_id=config.model_id,
            timeout_seconds=config.timeout_seconds
        )

    async def speak(self, text: Any, persona: Any = Persona.DOG) -> SynthesisResult:
        """Synthesize ``text`` with the voice configured for ``persona``.

        Raises:
            InvalidInput: Blank text or unknown persona
            ConfigurationError: Missing API key or persona voice id
            ProviderError: ElevenLabs did not return audio
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput("Text is required.")
        persona = Persona.parse(persona)

        config = self.config_loader()
        tts = self._client(config)
        voice_id = config.voice_id_for(persona)

        logger.info(f"Synthesizing {len(text)} characters as {persona.value} (model={config.model_id})")
        audio = await tts.synthesize(text, voice_id, persona.profile.voice_settings())

        return SynthesisResult(
            audio_url=encode_audio_data_url(audio),
            transcript=text,
            persona=persona
        )

    async def list_voices(self) -> List[Dict[str, Any]]:
        """Voices available to the configured ElevenLabs account."""
        config = self.config_loader()
        return await self._client(config).get_voices()
