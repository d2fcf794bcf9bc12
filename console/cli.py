"""Command-line voice console: send text to a running server and save the audio."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from voice.gateway import decode_data_url
from voice.personas import Persona

from .client import HttpSpeakClient
from .state import VoiceConsole


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a dog or parrot voice clip through the Animal Voice Agent API."
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to speak. Omit it when using --example.",
    )
    parser.add_argument(
        "--voice",
        choices=[p.value for p in Persona],
        default=Persona.DOG.value,
        help="Persona to speak with (default: dog).",
    )
    parser.add_argument(
        "--example",
        type=int,
        choices=[1, 2],
        default=None,
        help="Use one of the built-in example prompts instead of TEXT.",
    )
    parser.add_argument(
        "--server",
        default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("speech.mp3"),
        help="Where to save the synthesized audio (default: speech.mp3).",
    )
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, console: VoiceConsole) -> int:
    console.select_persona(args.voice)
    if args.example is not None:
        console.insert_example(args.example - 1)
    else:
        console.set_draft(args.text or "")

    if not console.can_submit:
        print("Nothing to say: pass TEXT or --example.", file=sys.stderr)
        return 2

    entry = await console.submit()
    if entry is None:
        print(f"Error: {console.take_error()}", file=sys.stderr)
        return 1

    if entry.audio_url:
        _, audio = decode_data_url(entry.audio_url)
        args.output.write_bytes(audio)

    print(f"{entry.persona.profile.icon} {entry.persona.value.capitalize()} Agent  {entry.created_at}")
    print(f'"{entry.text}"')
    if entry.transcript:
        print(f"Transcript: {entry.transcript}")
    print(f"Audio written to: {args.output.resolve()}")
    return 0


def main(argv: Optional[List[str]] = None, console: Optional[VoiceConsole] = None) -> int:
    args = _parse_args(argv)
    if console is None:
        console = VoiceConsole(HttpSpeakClient(args.server))
    return asyncio.run(_run(args, console))


if __name__ == "__main__":
    sys.exit(main())
