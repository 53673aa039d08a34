"""Throttle deciding which corrected fragments get narrated.

The recognizer reports the same page several times a second with small
jitter in each reading. The gate lets a fragment through only when it is
non-blank, the cooldown since the last narration has passed, the speech
output is idle, and the text differs enough from what was last narrated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ocr_narrator.config import EngineConfig
from ocr_narrator.logging import get_logger
from ocr_narrator.vocabulary.distance import similarity

logger = get_logger(__name__)


class SuppressReason(str, Enum):
    """Why a candidate was not narrated."""

    BLANK = "blank"
    COOLDOWN = "cooldown"
    BUSY = "busy"
    DUPLICATE = "duplicate"
    RECOGNITION_FAILED = "recognition_failed"


@dataclass(frozen=True)
class Emit:
    """Narrate `text` now."""

    text: str


@dataclass(frozen=True)
class Suppress:
    """Do nothing for this frame."""

    reason: SuppressReason


Decision = Union[Emit, Suppress]


@dataclass
class GateState:
    """What the gate last let through, and when."""

    last_emitted_text: str = ""
    last_emit_time_ms: int = 0

    @property
    def has_emitted(self) -> bool:
        """True once at least one fragment has been emitted."""
        return bool(self.last_emitted_text)


class NarrationGate:
    """Stateful emit-or-suppress decision over corrected fragments.

    Only `evaluate` mutates the state, and only when it returns Emit.
    Callers must not evaluate two candidates concurrently.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.state = GateState()

    def evaluate(self, candidate: str, now_ms: int, output_busy: bool) -> Decision:
        """Decide whether to narrate a corrected fragment.

        Args:
            candidate: Corrected fragment
            now_ms: Current wall-clock time in milliseconds
            output_busy: Whether speech output is still narrating

        Returns:
            Emit(candidate) or Suppress(reason)
        """
        if not candidate.strip():
            return Suppress(SuppressReason.BLANK)

        # Nothing has been emitted yet, so there is no cooldown to wait out
        if self.state.has_emitted:
            elapsed = now_ms - self.state.last_emit_time_ms
            if elapsed < self.config.cooldown_ms:
                return Suppress(SuppressReason.COOLDOWN)

        score = similarity(candidate, self.state.last_emitted_text)

        if output_busy:
            return Suppress(SuppressReason.BUSY)

        if score >= self.config.duplicate_threshold:
            logger.debug(
                "Suppressed near-duplicate fragment",
                extra={"score": score, "candidate": candidate},
            )
            return Suppress(SuppressReason.DUPLICATE)

        self.state.last_emitted_text = candidate
        self.state.last_emit_time_ms = now_ms
        logger.info(f"Narrating: {candidate}", extra={"score": score})
        return Emit(candidate)

    def reset(self) -> None:
        """Forget the last narration, as at session start."""
        self.state = GateState()
