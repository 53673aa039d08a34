"""One narration session: dictionary, correction cache and gate together.

A host creates a single SessionEngine when the camera starts and feeds it
every recognized fragment from its frame callback. The engine expects at
most one frame in flight at a time; hosts that analyse frames concurrently
should enable `thread_safe` in the config.
"""

from __future__ import annotations

import threading
import time
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path

from ocr_narrator.config import EngineConfig
from ocr_narrator.logging import get_logger
from ocr_narrator.narration.gate import (
    Decision,
    Emit,
    NarrationGate,
    Suppress,
    SuppressReason,
)
from ocr_narrator.narration.speech import SpeechMonitor
from ocr_narrator.vocabulary.correction import CorrectionStats, FragmentCorrector, WordCorrector
from ocr_narrator.vocabulary.dictionary import Dictionary, load_dictionary

logger = get_logger(__name__)


def now_millis() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class FrameResult:
    """Outcome of processing one recognized frame."""

    raw_text: str
    corrected_text: str
    decision: Decision
    time_ms: int

    @property
    def emitted(self) -> bool:
        return isinstance(self.decision, Emit)


class SessionEngine:
    """Turns raw recognizer output into narration decisions.

    Example:
        engine = SessionEngine(Dictionary(["kucing", "makan", "ikan"]))
        result = engine.process_frame("kuc1ng makann ikan", now_ms=10_000)
        result.decision  # Emit(text="kucing makan ikan")
    """

    def __init__(
        self,
        dictionary: Dictionary,
        config: EngineConfig | None = None,
        speech_monitor: SpeechMonitor | None = None,
    ):
        """Initialize a session.

        Args:
            dictionary: Reference words for correction
            config: Engine settings; defaults apply when None
            speech_monitor: Source of the output-busy flag when callers
                do not pass one to `process_frame`
        """
        self.config = config or EngineConfig()
        self.dictionary = dictionary
        self.corrector = WordCorrector(dictionary, self.config)
        self.fragments = FragmentCorrector(self.corrector)
        self.gate = NarrationGate(self.config)
        self.speech_monitor = speech_monitor
        self._lock = threading.Lock() if self.config.thread_safe else nullcontext()

    @classmethod
    def from_file(
        cls,
        dictionary_path: Path | str | None,
        config: EngineConfig | None = None,
        speech_monitor: SpeechMonitor | None = None,
    ) -> "SessionEngine":
        """Create a session from a dictionary file.

        A missing or unreadable file yields a session that never corrects.
        """
        return cls(load_dictionary(dictionary_path), config, speech_monitor)

    @property
    def stats(self) -> CorrectionStats:
        return self.corrector.stats

    def _output_busy(self, output_busy: bool | None) -> bool:
        if output_busy is not None:
            return output_busy
        return self.speech_monitor.busy if self.speech_monitor else False

    def process_frame(
        self,
        raw_text: str,
        now_ms: int | None = None,
        output_busy: bool | None = None,
    ) -> FrameResult:
        """Correct a recognized fragment and decide whether to narrate it.

        Args:
            raw_text: Recognizer output for one frame
            now_ms: Frame time in milliseconds; wall clock when None
            output_busy: Whether speech is still playing; taken from the
                speech monitor when None

        Returns:
            FrameResult carrying the corrected text and the decision
        """
        if now_ms is None:
            now_ms = now_millis()

        with self._lock:
            corrected = self.fragments.correct_fragment(raw_text.strip())
            decision = self.gate.evaluate(corrected, now_ms, self._output_busy(output_busy))

        if isinstance(decision, Suppress):
            logger.debug(
                f"Suppressed frame ({decision.reason.value})",
                extra={"corrected": corrected},
            )

        return FrameResult(
            raw_text=raw_text,
            corrected_text=corrected,
            decision=decision,
            time_ms=now_ms,
        )

    def recognition_failed(self, error: BaseException | str, now_ms: int | None = None) -> FrameResult:
        """Record a frame whose text recognition failed.

        Gate state is left untouched.

        Args:
            error: The recognizer's error or message
            now_ms: Frame time in milliseconds; wall clock when None

        Returns:
            FrameResult suppressed with RECOGNITION_FAILED
        """
        if now_ms is None:
            now_ms = now_millis()

        logger.warning(f"Text recognition failed: {error}")
        return FrameResult(
            raw_text="",
            corrected_text="",
            decision=Suppress(SuppressReason.RECOGNITION_FAILED),
            time_ms=now_ms,
        )

    def reset(self) -> None:
        """Forget the last narration. The correction cache is kept."""
        with self._lock:
            self.gate.reset()
