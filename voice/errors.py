"""Error taxonomy for speech synthesis requests.

Every error knows the HTTP status it maps to and how it is rendered as a
JSON body, so the API layer needs a single exception handler.
"""

from typing import Any, Dict, Optional


class SpeakError(Exception):
    """Base class for errors raised while serving a synthesis request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidInput(SpeakError):
    """The caller sent something we cannot synthesize."""

    status_code = 400


class ConfigurationError(SpeakError):
    """A required server-side setting is missing."""

    status_code = 500


class ProviderError(SpeakError):
    """The text-to-speech provider did not return audio.

    Carries the provider's status (``None`` for transport failures) and the
    raw error body for diagnostics.
    """

    status_code = 502

    def __init__(
        self,
        status: Optional[int],
        detail: str,
        message: str = "Failed to generate speech from ElevenLabs."
    ):
        super().__init__(message)
        self.status = status
        self.detail = detail

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "detail": self.detail}


class InternalError(SpeakError):
    """Anything we did not anticipate."""

    status_code = 500

    def __init__(self, message: str = "Unexpected server error."):
        super().__init__(message)
