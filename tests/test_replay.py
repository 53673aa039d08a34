"""Tests for trace loading and replay."""

import json

import pytest

from ocr_narrator.errors import ResourceError, TraceFormatError
from ocr_narrator.replay import FrameRecord, load_trace, replay
from ocr_narrator.session import SessionEngine
from ocr_narrator.vocabulary.dictionary import Dictionary

FRAMES = [
    {"time_ms": 1000, "text": "kuc1ng makann ikan"},
    {"time_ms": 1500, "text": "kucing makan ikan"},
    {"time_ms": 3500, "text": "kuc1ng makan ikan"},
    {"time_ms": 4000, "error": "recognizer timed out"},
    {"time_ms": 5000, "text": "selamat pagi", "busy": True},
    {"time_ms": 6000, "text": "selamat pagi"},
]


@pytest.fixture
def trace_file(tmp_path):
    path = tmp_path / "session.jsonl"
    lines = [json.dumps(frame) for frame in FRAMES]
    lines.insert(2, "")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestLoadTrace:
    """Tests for load_trace."""

    def test_loads_frames_skipping_blank_lines(self, trace_file):
        frames = load_trace(trace_file)

        assert len(frames) == 6
        assert frames[0] == FrameRecord(time_ms=1000, text="kuc1ng makann ikan")
        assert frames[3].error == "recognizer timed out"
        assert frames[4].busy is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(ResourceError):
            load_trace(tmp_path / "missing.jsonl")

    def test_invalid_json_reports_line(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        path.write_text('{"time_ms": 1, "text": "halo"}\n{not json\n', encoding="utf-8")

        with pytest.raises(TraceFormatError) as exc_info:
            load_trace(path)

        assert exc_info.value.line_number == 2

    def test_invalid_record_reports_line(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        path.write_text('{"time_ms": -5, "text": "halo"}\n', encoding="utf-8")

        with pytest.raises(TraceFormatError) as exc_info:
            load_trace(path)

        assert exc_info.value.line_number == 1

    def test_undecodable_line_reports_line(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        path.write_bytes(b'{"time_ms": 1, "text": "halo"}\n{"time_ms": 2, "text": "kuc\xffng"}\n')

        with pytest.raises(TraceFormatError, match="UTF-8") as exc_info:
            load_trace(path)

        assert exc_info.value.line_number == 2

    def test_read_failure(self, tmp_path, monkeypatch):
        path = tmp_path / "session.jsonl"
        path.write_text('{"time_ms": 1, "text": "halo"}\n', encoding="utf-8")

        def broken_open(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("ocr_narrator.replay.open", broken_open, raising=False)

        with pytest.raises(ResourceError, match="Could not read trace file") as exc_info:
            load_trace(path)

        assert exc_info.value.context == {"path": str(path)}


class TestReplay:
    """Tests for replay."""

    def test_replay_outcomes(self, trace_file):
        engine = SessionEngine(Dictionary(["kucing", "makan", "ikan"]))

        summary = replay(engine, load_trace(trace_file))

        reasons = [
            "emit" if r.emitted else r.decision.reason.value for r in summary.results
        ]
        assert reasons == ["emit", "cooldown", "duplicate", "recognition_failed", "busy", "emit"]
        assert summary.emitted == ["kucing makan ikan", "selamat pagi"]
        assert summary.counts() == {
            "emit": 2,
            "cooldown": 1,
            "duplicate": 1,
            "recognition_failed": 1,
            "busy": 1,
        }

    def test_empty_trace(self):
        summary = replay(SessionEngine(Dictionary()), [])

        assert summary.results == []
        assert summary.counts() == {}
