"""Host-side glue between narration decisions and a speech engine.

The engine never synthesizes speech. Hosts plug in whatever text-to-speech
backend they have through `SpeechSink`, forward its utterance callbacks to a
`SpeechMonitor` so the gate knows when output is busy, and hand each frame
result to a `Narrator`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

from ocr_narrator.logging import get_logger
from ocr_narrator.narration.gate import Emit

if TYPE_CHECKING:
    from ocr_narrator.session import FrameResult

logger = get_logger(__name__)


class SpeechSink(Protocol):
    """A text-to-speech backend."""

    @property
    def is_ready(self) -> bool:
        """Whether the backend finished initializing and can speak."""
        ...

    def speak(self, text: str) -> None:
        """Start narrating `text`, replacing anything queued."""
        ...


class SpeechMonitor:
    """Tracks whether the speech output is mid-utterance.

    Wire `on_start`, `on_done` and `on_error` to the speech backend's
    utterance progress callbacks.
    """

    def __init__(self) -> None:
        self._busy = False
        self.current_utterance: str | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    def on_start(self, utterance_id: str | None = None) -> None:
        self._busy = True
        self.current_utterance = utterance_id

    def on_done(self, utterance_id: str | None = None) -> None:
        self._busy = False
        self.current_utterance = None

    def on_error(self, utterance_id: str | None = None) -> None:
        logger.warning("Speech output reported an error", extra={"utterance": utterance_id})
        self._busy = False
        self.current_utterance = None


class Narrator:
    """Acts on frame results: shows and speaks emitted text."""

    def __init__(
        self,
        sink: SpeechSink | None = None,
        display: Callable[[str], None] | None = None,
    ):
        """Initialize narrator.

        Args:
            sink: Speech backend; emitted text is only displayed without one
            display: Callback receiving each emitted fragment for display
        """
        self.sink = sink
        self.display = display

    def handle(self, result: "FrameResult") -> bool:
        """Display and speak the result's text if the gate emitted it.

        Args:
            result: Outcome of one processed frame

        Returns:
            True if the text was handed to the speech sink
        """
        decision = result.decision
        if not isinstance(decision, Emit):
            return False

        if self.display is not None:
            self.display(decision.text)

        if self.sink is None:
            return False

        if not self.sink.is_ready:
            logger.info("Speech output not ready; narration skipped")
            return False

        self.sink.speak(decision.text)
        return True
