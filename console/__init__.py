"""
Voice console: session-local form state, history and its surfaces
"""

from .client import HttpSpeakClient, LocalSpeakClient, SpeakClientError
from .sessions import ConsoleSessions
from .state import EXAMPLES, ConsolePhase, HistoryEntry, VoiceConsole

__all__ = [
    "EXAMPLES",
    "ConsolePhase",
    "ConsoleSessions",
    "HistoryEntry",
    "HttpSpeakClient",
    "LocalSpeakClient",
    "SpeakClientError",
    "VoiceConsole",
]
