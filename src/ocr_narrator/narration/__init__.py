"""Narration gating and speech output tracking."""

from ocr_narrator.narration.gate import (
    Decision,
    Emit,
    GateState,
    NarrationGate,
    Suppress,
    SuppressReason,
)
from ocr_narrator.narration.speech import Narrator, SpeechMonitor, SpeechSink

__all__ = [
    "Decision",
    "Emit",
    "GateState",
    "NarrationGate",
    "Suppress",
    "SuppressReason",
    "Narrator",
    "SpeechMonitor",
    "SpeechSink",
]
