"""Text-to-Speech (TTS) client for the ElevenLabs HTTP API

One request in, one MP3 out. Errors from the provider are raised as
ProviderError with the provider's status and raw body attached.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import aiohttp
from loguru import logger

from .config import DEFAULT_BASE_URL, DEFAULT_MODEL_ID
from .errors import ProviderError


def _succeeded(status: int) -> bool:
    return 200 <= status < 300


async def _error_body(response) -> str:
    # Error bodies are diagnostics only; never fail on bad encoding
    body = await response.read()
    return body.decode("utf-8", errors="replace")


class ElevenLabsTTS:
    """ElevenLabs Text-to-Speech Service

    Wraps the ``/v1/text-to-speech/{voice_id}`` endpoint and the voice
    listing. A fresh ``aiohttp.ClientSession`` is opened per call, so an
    instance holds no connection state between requests.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model_id: str = DEFAULT_MODEL_ID,
        timeout_seconds: Optional[float] = None,
        session_factory: Callable[..., aiohttp.ClientSession] = aiohttp.ClientSession
    ):
        """Initialize the ElevenLabs TTS client.

        Args:
            api_key: ElevenLabs API key
            base_url: Base URL for ElevenLabs API
            model_id: TTS model to use
            timeout_seconds: Total timeout for one call; ``None`` keeps the
                aiohttp default
            session_factory: Callable returning a ClientSession-like object
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model_id = model_id
        self.timeout_seconds = timeout_seconds
        self._session_factory = session_factory

    def _open_session(self):
        if self.timeout_seconds is None:
            return self._session_factory()
        return self._session_factory(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds)
        )

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        voice_settings: Dict[str, Any]
    ) -> bytes:
        """Synthesize speech from text.

        Args:
            text: Text to convert to speech, sent as-is
            voice_id: ElevenLabs voice to speak with
            voice_settings: stability, similarity_boost, style, use_speaker_boost

        Returns:
            Raw MP3 bytes

        Raises:
            ProviderError: If the provider answers with a non-2xx status or
                cannot be reached
        """
        url = f"{self.base_url}/v1/text-to-speech/{voice_id}"

        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": voice_settings
        }

        headers = {
            "xi-api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg"
        }

        try:
            async with self._open_session() as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if not _succeeded(response.status):
                        error_text = await _error_body(response)
                        logger.error(f"ElevenLabs TTS error: {response.status} {error_text}")
                        raise ProviderError(response.status, error_text)

                    audio_data = await response.read()
                    logger.debug(f"Received {len(audio_data)} bytes of audio for voice {voice_id}")
                    return audio_data

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"ElevenLabs request failed: {e!r}")
            raise ProviderError(None, str(e) or e.__class__.__name__) from e

    async def get_voices(self) -> List[Dict[str, Any]]:
        """Get available voices from ElevenLabs.

        Returns:
            List of voice dictionaries with 'id', 'name', 'language', 'gender'
            and 'accent' keys
        """
        url = f"{self.base_url}/v1/voices"
        headers = {"xi-api-key": self.api_key}

        try:
            async with self._open_session() as session:
                async with session.get(url, headers=headers) as response:
                    if not _succeeded(response.status):
                        error_text = await _error_body(response)
                        logger.error(f"Failed to fetch voices: {response.status} {error_text}")
                        raise ProviderError(
                            response.status,
                            error_text,
                            message="Failed to list voices from ElevenLabs."
                        )

                    data = await response.json()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"ElevenLabs voice listing failed: {e!r}")
            raise ProviderError(
                None,
                str(e) or e.__class__.__name__,
                message="Failed to list voices from ElevenLabs."
            ) from e

        voices = []
        for voice in data.get("voices", []):
            if not voice.get("voice_id"):
                continue
            labels = voice.get("labels") or {}
            voices.append({
                "id": voice["voice_id"],
                "name": voice.get("name") or "",
                "language": labels.get("language", "en"),
                "gender": labels.get("gender", ""),
                "accent": labels.get("accent", "")
            })
        return voices
