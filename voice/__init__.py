"""
Voice module: persona-aware speech synthesis through ElevenLabs
"""

from .config import GatewayConfig
from .errors import (
    ConfigurationError,
    InternalError,
    InvalidInput,
    ProviderError,
    SpeakError,
)
from .gateway import (
    SynthesisGateway,
    SynthesisResult,
    decode_data_url,
    encode_audio_data_url,
)
from .personas import Persona
from .tts import ElevenLabsTTS

__all__ = [
    "ConfigurationError",
    "ElevenLabsTTS",
    "GatewayConfig",
    "InternalError",
    "InvalidInput",
    "Persona",
    "ProviderError",
    "SpeakError",
    "SynthesisGateway",
    "SynthesisResult",
    "decode_data_url",
    "encode_audio_data_url",
]
