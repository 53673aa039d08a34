"""Tests for the narration gate."""

import pytest

from ocr_narrator.config import EngineConfig
from ocr_narrator.narration.gate import (
    Emit,
    GateState,
    NarrationGate,
    Suppress,
    SuppressReason,
)


@pytest.fixture
def gate():
    return NarrationGate()


def emitted_gate(text, time_ms=0, **config):
    gate = NarrationGate(EngineConfig(**config))
    gate.state = GateState(last_emitted_text=text, last_emit_time_ms=time_ms)
    return gate


class TestInitialState:
    """Tests for a freshly created gate."""

    def test_initial_state(self, gate):
        assert gate.state.last_emitted_text == ""
        assert gate.state.last_emit_time_ms == 0
        assert not gate.state.has_emitted

    def test_fresh_gate_emits(self, gate):
        decision = gate.evaluate("selamat pagi", now_ms=10_000, output_busy=False)

        assert decision == Emit("selamat pagi")
        assert gate.state.last_emitted_text == "selamat pagi"
        assert gate.state.last_emit_time_ms == 10_000
        assert gate.state.has_emitted

    def test_no_cooldown_before_first_emit(self, gate):
        assert gate.evaluate("selamat pagi", now_ms=0, output_busy=False) == Emit("selamat pagi")


class TestSuppression:
    """Tests for each suppression rule."""

    @pytest.mark.parametrize("candidate", ["", " ", "\n\t "])
    def test_blank(self, gate, candidate):
        decision = gate.evaluate(candidate, now_ms=10_000, output_busy=False)

        assert decision == Suppress(SuppressReason.BLANK)
        assert gate.state == GateState()

    def test_identical_to_last_narration(self):
        gate = emitted_gate("halo dunia")

        decision = gate.evaluate("halo dunia", now_ms=60_000, output_busy=False)

        assert decision == Suppress(SuppressReason.DUPLICATE)
        assert gate.state.last_emit_time_ms == 0

    def test_ocr_jitter_is_duplicate(self):
        # 90 against the last narration
        gate = emitted_gate("halo dunia")

        decision = gate.evaluate("halo duniaa", now_ms=60_000, output_busy=False)

        assert decision == Suppress(SuppressReason.DUPLICATE)

    def test_busy_output(self, gate):
        decision = gate.evaluate("selamat pagi", now_ms=10_000, output_busy=True)

        assert decision == Suppress(SuppressReason.BUSY)
        assert gate.state == GateState()

    def test_busy_wins_over_new_text_after_emit(self):
        gate = emitted_gate("halo dunia", time_ms=1_000)

        decision = gate.evaluate("selamat pagi", now_ms=60_000, output_busy=True)

        assert decision == Suppress(SuppressReason.BUSY)
        assert gate.state.last_emitted_text == "halo dunia"

    def test_cooldown(self, gate):
        gate.evaluate("halo dunia", now_ms=10_000, output_busy=False)

        decision = gate.evaluate("selamat pagi", now_ms=11_999, output_busy=False)

        assert decision == Suppress(SuppressReason.COOLDOWN)
        assert gate.state.last_emitted_text == "halo dunia"

    def test_cooldown_elapsed(self, gate):
        gate.evaluate("halo dunia", now_ms=10_000, output_busy=False)

        decision = gate.evaluate("selamat pagi", now_ms=12_000, output_busy=False)

        assert decision == Emit("selamat pagi")
        assert gate.state.last_emit_time_ms == 12_000

    def test_cooldown_configurable(self):
        gate = NarrationGate(EngineConfig(cooldown_ms=0))
        gate.evaluate("halo dunia", now_ms=10_000, output_busy=False)

        assert gate.evaluate("selamat pagi", now_ms=10_000, output_busy=False) == Emit("selamat pagi")


class TestEmission:
    """Tests for candidates that should be narrated."""

    def test_different_text_emits(self):
        # "halo semua" scores 60 against "halo dunia"
        gate = emitted_gate("halo dunia")

        decision = gate.evaluate("halo semua", now_ms=60_000, output_busy=False)

        assert decision == Emit("halo semua")
        assert gate.state.last_emitted_text == "halo semua"

    def test_duplicate_threshold_configurable(self):
        gate = emitted_gate("halo dunia", duplicate_threshold=100)

        assert gate.evaluate("halo duniaa", now_ms=60_000, output_busy=False) == Emit("halo duniaa")

    def test_suppress_never_mutates_state(self):
        gate = emitted_gate("halo dunia", time_ms=5_000)
        before = GateState(**vars(gate.state))

        gate.evaluate("", now_ms=60_000, output_busy=False)
        gate.evaluate("halo dunia", now_ms=60_000, output_busy=False)
        gate.evaluate("selamat pagi", now_ms=60_000, output_busy=True)
        gate.evaluate("selamat pagi", now_ms=6_000, output_busy=False)

        assert gate.state == before

    def test_reset(self):
        gate = emitted_gate("halo dunia", time_ms=5_000)

        gate.reset()

        assert gate.state == GateState()
        assert gate.evaluate("halo dunia", now_ms=5_001, output_busy=False) == Emit("halo dunia")
