import sys
from pathlib import Path

import pytest
from loguru import logger

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voice.config import GatewayConfig  # noqa: E402
from voice.gateway import SynthesisGateway  # noqa: E402
from voice.personas import Persona  # noqa: E402

AUDIO = b"ID3\x04\x00\x00fake-mp3-frames\xff\xfb\x90\x00\x00"


class FakeTTSFactory:
    """Stands in for ElevenLabsTTS and records what the gateway asked for."""

    def __init__(self, audio: bytes = AUDIO, error: Exception = None):
        self.audio = audio
        self.error = error
        self.created = []
        self.calls = []
        self.voices = [
            {"id": "dog-voice", "name": "Rex", "language": "en", "gender": "male", "accent": ""},
        ]

    def __call__(self, **kwargs):
        self.created.append(kwargs)
        return _FakeTTS(self)


class _FakeTTS:
    def __init__(self, factory: FakeTTSFactory):
        self.factory = factory

    async def synthesize(self, text, voice_id, voice_settings):
        self.factory.calls.append((text, voice_id, voice_settings))
        if self.factory.error is not None:
            raise self.factory.error
        return self.factory.audio

    async def get_voices(self):
        if self.factory.error is not None:
            raise self.factory.error
        return self.factory.voices


def make_config(**overrides) -> GatewayConfig:
    values = {
        "api_key": "test-key",
        "voice_ids": {Persona.DOG: "dog-voice", Persona.PARROT: "parrot-voice"},
    }
    values.update(overrides)
    return GatewayConfig(**values)


@pytest.fixture
def error_logs():
    """Collect loguru records at ERROR and above while a test runs."""
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="ERROR")
    yield records
    logger.remove(sink_id)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def tts_factory():
    return FakeTTSFactory()


@pytest.fixture
def gateway(config, tts_factory):
    return SynthesisGateway(config_loader=lambda: config, tts_factory=tts_factory)
