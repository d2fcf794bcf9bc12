# tests/test_console.py
import asyncio

import pytest

from console.client import LocalSpeakClient, SpeakClientError
from console.state import EXAMPLES, ConsolePhase, VoiceConsole
from voice.errors import InvalidInput
from voice.gateway import SynthesisGateway, SynthesisResult
from voice.personas import Persona

from conftest import make_config


class FakeClient:
    """Scripted speak client; optionally blocks until released."""

    def __init__(self, result=None, error=None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []

    async def speak(self, text, persona):
        self.calls.append((text, persona))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return SynthesisResult(audio_url="data:audio/mpeg;base64,AAAA", transcript=text, persona=persona)


def _console(client, now=1_700_000_000.0):
    return VoiceConsole(client, clock=lambda: now, display_time=lambda moment: "10:00:00 AM")


def test_initial_state():
    console = _console(FakeClient())

    assert console.persona is Persona.DOG
    assert console.draft == ""
    assert console.phase is ConsolePhase.IDLE
    assert console.history == []
    assert not console.can_submit


def test_persona_and_example_are_independent():
    console = _console(FakeClient())

    console.set_draft("my own words")
    console.select_persona("parrot")
    assert console.draft == "my own words"

    console.insert_example(0)
    assert console.persona is Persona.PARROT
    assert console.draft == EXAMPLES[0] == "Tell me a fun fact about space."

    console.insert_example(1)
    console.select_persona(Persona.DOG)
    assert console.draft == "Who's a good boy?"


def test_select_unknown_persona_keeps_selection():
    console = _console(FakeClient())

    with pytest.raises(InvalidInput):
        console.select_persona("cat")
    assert console.persona is Persona.DOG


@pytest.mark.parametrize("draft", ["", "   ", "\n"])
def test_blank_submit_is_a_no_op(draft):
    client = FakeClient()
    console = _console(client)
    console.set_draft(draft)

    assert asyncio.run(console.submit()) is None
    assert client.calls == []
    assert console.history == []


def test_successful_submit_prepends_entry_and_clears_draft():
    client = FakeClient()
    console = _console(client)
    console.select_persona("parrot")
    console.set_draft("Pretty bird")

    entry = asyncio.run(console.submit())

    assert client.calls == [("Pretty bird", Persona.PARROT)]
    assert console.history == [entry]
    assert entry.id == "1700000000000"
    assert entry.persona is Persona.PARROT
    assert entry.text == "Pretty bird"
    assert entry.transcript == "Pretty bird"
    assert entry.audio_url == "data:audio/mpeg;base64,AAAA"
    assert entry.created_at == "10:00:00 AM"
    assert console.draft == ""
    assert console.phase is ConsolePhase.IDLE


def test_history_is_newest_first_with_unique_ids():
    console = _console(FakeClient())

    for text in ("first", "second", "third"):
        console.set_draft(text)
        asyncio.run(console.submit())

    assert [entry.text for entry in console.history] == ["third", "second", "first"]
    assert len({entry.id for entry in console.history}) == 3


def test_entry_uses_persona_from_response():
    result = SynthesisResult(audio_url="data:audio/mpeg;base64,AAAA", transcript="", persona=Persona.PARROT)
    console = _console(FakeClient(result=result))
    console.set_draft("hello")

    entry = asyncio.run(console.submit())

    assert entry.persona is Persona.PARROT
    # Empty transcript falls back to the draft
    assert entry.transcript == "hello"


def test_failed_submit_keeps_history_and_draft():
    console = _console(FakeClient())
    console.set_draft("kept")
    asyncio.run(console.submit())

    console.client = FakeClient(error=SpeakClientError("Failed to generate speech from ElevenLabs.", status=502))
    console.set_draft("will fail")

    assert asyncio.run(console.submit()) is None
    assert [entry.text for entry in console.history] == ["kept"]
    assert console.draft == "will fail"
    assert console.phase is ConsolePhase.IDLE
    assert console.take_error() == "Failed to generate speech from ElevenLabs."
    assert console.take_error() is None


def test_submit_while_in_flight_is_a_no_op():
    async def scenario():
        gate = asyncio.Event()
        client = FakeClient(gate=gate)
        console = _console(client)
        console.set_draft("Who's a good boy?")

        first = asyncio.create_task(console.submit())
        await asyncio.sleep(0)
        assert console.is_loading
        assert not console.can_submit

        assert await console.submit() is None
        assert len(client.calls) == 1
        assert console.history == []

        gate.set()
        entry = await first
        return console, client, entry

    console, client, entry = asyncio.run(scenario())

    assert len(client.calls) == 1
    assert console.history == [entry]
    assert not console.is_loading


def test_local_client_translates_gateway_errors():
    gateway = SynthesisGateway(config_loader=lambda: make_config(api_key=None))
    client = LocalSpeakClient(gateway)

    with pytest.raises(SpeakClientError) as excinfo:
        asyncio.run(client.speak("Hello", Persona.DOG))

    assert excinfo.value.message == "ELEVENLABS_API_KEY is not set on the server."
    assert excinfo.value.status == 500


def test_local_client_hides_unexpected_errors(tts_factory):
    tts_factory.error = RuntimeError("kaboom")
    gateway = SynthesisGateway(config_loader=make_config, tts_factory=tts_factory)

    with pytest.raises(SpeakClientError) as excinfo:
        asyncio.run(LocalSpeakClient(gateway).speak("Hello", Persona.DOG))

    assert excinfo.value.message == "Unexpected server error."
    assert excinfo.value.status == 500
