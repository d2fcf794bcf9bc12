"""Server-side rendering of the voice console page."""

import json
from html import escape
from typing import List, Optional

from voice.personas import Persona, placeholder_for

from .state import EXAMPLES, HistoryEntry, VoiceConsole

TITLE = "Animal Voice Agent"
EMPTY_HISTORY = "No history yet. Start by generating a voice!"


def _persona_card(persona: Persona, selected: bool) -> str:
    profile = persona.profile
    traits = "".join(f"<li>{escape(trait)}</li>" for trait in profile.traits)
    css_class = "persona selected" if selected else "persona"
    return (
        f'<button type="submit" formaction="/console/persona" name="persona" value="{persona.value}" '
        f'class="{css_class}" aria-pressed="{"true" if selected else "false"}">'
        f'<div class="icon">{profile.icon}</div>'
        f"<h3>{escape(profile.label)}</h3>"
        f"<ul>{traits}</ul>"
        "</button>"
    )


def render_history_entry(entry: HistoryEntry) -> str:
    """One history card: who spoke, when, what was asked and the result."""
    parts = [
        f'<article class="entry" id="entry-{escape(entry.id)}">',
        '<header>',
        f'<span class="icon">{entry.persona.profile.icon}</span> ',
        f'<span class="label">{escape(entry.persona.value.capitalize())} Agent</span>',
        f'<time>{escape(entry.created_at)}</time>',
        '</header>',
        f'<blockquote>"{escape(entry.text)}"</blockquote>',
    ]
    if entry.audio_url:
        parts.append(
            f'<audio controls src="{escape(entry.audio_url)}">'
            "Your browser does not support the audio element."
            "</audio>"
        )
    if entry.transcript:
        parts.append(
            '<div class="transcript"><span>Transcript</span>'
            f"<p>{escape(entry.transcript)}</p></div>"
        )
    parts.append("</article>")
    return "".join(parts)


def render_history(history: List[HistoryEntry]) -> str:
    if not history:
        return f'<div class="empty">{EMPTY_HISTORY}</div>'
    return "".join(render_history_entry(entry) for entry in history)


def _alert(error: str) -> str:
    # json.dumps keeps the message a valid JS string; "</" would end the script
    message = json.dumps(error).replace("</", "<\\/")
    return (
        f'<div class="error" role="alert">{escape(error)}</div>'
        f"<script>alert({message});</script>"
    )


def render_console_page(console: VoiceConsole, error: Optional[str] = None) -> str:
    """Full HTML page for the console's current state."""
    cards = "".join(_persona_card(p, p is console.persona) for p in Persona)
    examples = "".join(
        f'<button type="submit" formaction="/console/example" name="index" value="{i}">Example {i + 1}</button>'
        for i in range(len(EXAMPLES))
    )
    # The draft is typed client-side, so only the in-flight state disables input
    disabled = " disabled" if console.is_loading else ""
    submit_label = "Generating..." if console.is_loading else "Generate Voice"

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{TITLE}</title></head><body><main>"
        f"<header><h1>{TITLE}</h1><span>Hackathon Prototype</span>"
        "<p>Talk to playful AI agents with dog and parrot voices.</p></header>"
        f'{_alert(error) if error else ""}'
        # One form so persona and example buttons also post the typed draft
        '<form method="post" action="/console/submit">'
        f'<section class="personas">{cards}</section>'
        '<section class="compose">'
        f'<textarea name="text" placeholder="{escape(placeholder_for(console.persona))}"{disabled}>'
        f"{escape(console.draft)}</textarea>"
        f'<div class="examples">{examples}</div>'
        f'<button type="submit"{disabled}>{submit_label}</button>'
        "</section>"
        "</form>"
        f'<section class="history"><h2>History</h2>{render_history(console.history)}</section>'
        "</main></body></html>"
    )
