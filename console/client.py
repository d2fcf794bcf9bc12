"""Transports the console uses to reach the synthesis gateway."""

import asyncio
from typing import Optional

import aiohttp
from loguru import logger

from voice.errors import InternalError, SpeakError
from voice.gateway import SynthesisGateway, SynthesisResult
from voice.personas import Persona

GENERIC_FAILURE = "Something went wrong. Please try again."
NETWORK_FAILURE = "Something went wrong, please try again."


class SpeakClientError(Exception):
    """A synthesis attempt failed; ``message`` is safe to show the user."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class LocalSpeakClient:
    """Calls a gateway living in the same process."""

    def __init__(self, gateway: SynthesisGateway):
        self.gateway = gateway

    async def speak(self, text: str, persona: Persona) -> SynthesisResult:
        try:
            return await self.gateway.speak(text, persona)
        except SpeakError as e:
            raise SpeakClientError(e.message, status=e.status_code) from e
        except Exception as e:
            logger.exception(f"Unexpected failure calling the gateway: {e}")
            error = InternalError()
            raise SpeakClientError(error.message, status=error.status_code) from e


class HttpSpeakClient:
    """Calls ``POST /api/speak`` on a running server."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout_seconds: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _open_session(self) -> aiohttp.ClientSession:
        if self.timeout_seconds is None:
            return aiohttp.ClientSession()
        return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout_seconds))

    async def speak(self, text: str, persona: Persona) -> SynthesisResult:
        url = f"{self.base_url}/api/speak"
        try:
            async with self._open_session() as session:
                async with session.post(url, json={"text": text, "voiceType": persona.value}) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = {}
                    if not isinstance(data, dict):
                        data = {}

                    if response.status >= 400:
                        logger.error(f"Error from /api/speak: {response.status} {data}")
                        raise SpeakClientError(data.get("error") or GENERIC_FAILURE, status=response.status)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error generating voice: {e!r}")
            raise SpeakClientError(NETWORK_FAILURE) from e

        if "audioUrl" not in data:
            logger.error(f"Malformed response from /api/speak: {data}")
            raise SpeakClientError(GENERIC_FAILURE)

        try:
            returned_persona = Persona.parse(data.get("voiceType") or persona)
        except SpeakError:
            returned_persona = persona

        return SynthesisResult(
            audio_url=data["audioUrl"],
            transcript=data.get("transcript") or text,
            persona=returned_persona
        )
