"""Replay recorded recognizer output through a session.

A trace is a JSON Lines file with one recognized frame per line:

    {"time_ms": 1000, "text": "kuc1ng makann ikan", "busy": false}
    {"time_ms": 1500, "error": "recognizer timed out"}

Useful for tuning thresholds against real camera sessions without a camera.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ocr_narrator.errors import ErrorContext, ResourceError, TraceFormatError
from ocr_narrator.logging import get_logger
from ocr_narrator.narration.gate import Suppress
from ocr_narrator.session import FrameResult, SessionEngine

logger = get_logger(__name__)


class FrameRecord(BaseModel):
    """One recorded frame."""

    time_ms: int = Field(ge=0)
    text: str = ""
    busy: bool = False
    error: str | None = None


@dataclass
class ReplaySummary:
    """Results of replaying a trace."""

    results: list[FrameResult] = field(default_factory=list)

    @property
    def emitted(self) -> list[str]:
        return [r.corrected_text for r in self.results if r.emitted]

    def counts(self) -> dict[str, int]:
        """Number of frames per outcome ("emit" or a suppress reason)."""
        counter: Counter[str] = Counter()
        for result in self.results:
            if isinstance(result.decision, Suppress):
                counter[result.decision.reason.value] += 1
            else:
                counter["emit"] += 1
        return dict(counter)


def load_trace(path: Path | str) -> list[FrameRecord]:
    """Load frames from a JSON Lines trace.

    Blank lines are ignored.

    Args:
        path: Trace file path

    Returns:
        Frames in file order

    Raises:
        ResourceError: If the file does not exist or cannot be read
        TraceFormatError: If a line is not a valid frame record
    """
    path = Path(path)
    if not path.is_file():
        raise ResourceError(f"Trace file not found: {path}")

    frames = []
    try:
        with ErrorContext("load trace", context={"path": str(path)}), open(path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise TraceFormatError(
                        "Frame record is not valid UTF-8",
                        line_number=line_number,
                        context={"path": str(path)},
                    ) from e
                if not line.strip():
                    continue
                try:
                    frames.append(FrameRecord.model_validate_json(line))
                except PydanticValidationError as e:
                    first = e.errors()[0]
                    raise TraceFormatError(
                        f"Malformed frame record: {first['msg']}",
                        line_number=line_number,
                        context={"path": str(path)},
                    ) from e
    except OSError as e:
        raise ResourceError(
            f"Could not read trace file: {e}",
            context={"path": str(path)},
        ) from e

    return frames


def replay(engine: SessionEngine, frames: list[FrameRecord]) -> ReplaySummary:
    """Feed recorded frames through a session in order.

    Args:
        engine: Session to drive
        frames: Recorded frames

    Returns:
        ReplaySummary with one result per frame
    """
    summary = ReplaySummary()
    for frame in frames:
        if frame.error is not None:
            result = engine.recognition_failed(frame.error, now_ms=frame.time_ms)
        else:
            result = engine.process_frame(frame.text, now_ms=frame.time_ms, output_busy=frame.busy)
        summary.results.append(result)

    logger.info(f"Replayed {len(frames)} frames", extra=summary.counts())
    return summary
