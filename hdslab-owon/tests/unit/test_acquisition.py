"""Tests for trigger state, waveform decode and the acquisition engine."""

from __future__ import annotations

import logging
import time

import pytest

from hdslab_core.queue import PendingWaveformQueue
from hdslab_core.types.instrument import TriggerMode
from hdslab_scpi import ScpiConnection

from hdslab_owon.acquisition import (
    AcquisitionEngine,
    SampleDepthQuery,
    TriggerState,
    decode_samples,
)
from hdslab_owon.config import AcquisitionConfig
from hdslab_owon.emulator import Hds200Emulator, make_hds2102s_emulator


def _make_engine(
    config: AcquisitionConfig | None = None, depth: int = 4000
) -> tuple[AcquisitionEngine, Hds200Emulator, PendingWaveformQueue]:
    """Create an engine on an emulator with a fixed memory depth."""
    emu = make_hds2102s_emulator()
    conn = ScpiConnection(emu, check_errors=False)
    queue = PendingWaveformQueue()
    engine = AcquisitionEngine(conn, queue, lambda: depth, config)
    return engine, emu, queue


class TestTriggerState:
    """Transitions are pure functions of the current state."""

    @pytest.mark.parametrize("state", list(TriggerState))
    def test_start(self, state: TriggerState) -> None:
        assert state.start() is TriggerState.ARMED

    @pytest.mark.parametrize("state", list(TriggerState))
    def test_start_single(self, state: TriggerState) -> None:
        assert state.start_single() is TriggerState.ARMED_ONE_SHOT

    @pytest.mark.parametrize("state", list(TriggerState))
    def test_stop(self, state: TriggerState) -> None:
        assert state.stop() is TriggerState.DISARMED

    def test_after_acquisition(self) -> None:
        assert TriggerState.ARMED_ONE_SHOT.after_acquisition() is TriggerState.DISARMED
        assert TriggerState.ARMED.after_acquisition() is TriggerState.ARMED
        assert TriggerState.DISARMED.after_acquisition() is TriggerState.DISARMED

    def test_armed(self) -> None:
        assert TriggerState.ARMED.armed
        assert TriggerState.ARMED_ONE_SHOT.armed
        assert not TriggerState.DISARMED.armed


class TestDecodeSamples:
    """Tests for decode_samples."""

    def test_reference_block(self) -> None:
        block = b"\x00\x40" * 600
        samples = decode_samples(block)
        assert len(samples) == 600
        assert all(s == pytest.approx(16384 / 65535 * 0.5) for s in samples)

    def test_signed_little_endian(self) -> None:
        samples = decode_samples(b"\xff\x7f\x00\x80\xff\xff", full_scale=1.0)
        assert samples == pytest.approx((32767 / 65535, -32768 / 65535, -1 / 65535))

    def test_full_scale(self) -> None:
        assert decode_samples(b"\x00\x40", full_scale=2.0)[0] == pytest.approx(16384 / 65535 * 2.0)

    def test_odd_trailing_byte_ignored(self) -> None:
        assert len(decode_samples(b"\x00\x40\x00")) == 1

    def test_empty(self) -> None:
        assert decode_samples(b"") == ()


class TestSampleDepthQuery:
    def test_reads_thousands(self) -> None:
        emu = make_hds2102s_emulator()
        conn = ScpiConnection(emu, check_errors=False)
        assert SampleDepthQuery(conn).fetch() == 4000
        emu.write(":ACQ:DEPM 8K")
        assert SampleDepthQuery(conn).fetch() == 8000


class TestTriggerControl:
    """Tests for arming and polling."""

    def test_initially_disarmed(self) -> None:
        engine, _, _ = _make_engine()
        assert engine.state is TriggerState.DISARMED
        assert engine.poll_trigger() is TriggerMode.STOP
        assert not engine.is_trigger_armed()

    def test_start_reports_triggered(self) -> None:
        engine, _, _ = _make_engine()
        engine.start()
        assert engine.poll_trigger() is TriggerMode.TRIGGERED
        assert engine.is_trigger_armed()

    def test_force_trigger_arms_one_shot(self) -> None:
        engine, _, _ = _make_engine()
        engine.force_trigger()
        assert engine.state is TriggerState.ARMED_ONE_SHOT

    def test_stop(self) -> None:
        engine, _, _ = _make_engine()
        engine.start()
        engine.stop()
        assert engine.poll_trigger() is TriggerMode.STOP

    def test_trigger_control_sends_nothing(self) -> None:
        engine, emu, _ = _make_engine()
        engine.start()
        engine.start_single_trigger()
        engine.stop()
        assert emu.history == []


class TestAcquireData:
    """Tests for acquire_data."""

    def test_disarmed_does_nothing(self) -> None:
        engine, emu, queue = _make_engine()
        assert engine.acquire_data() is False
        assert emu.history == []
        assert len(queue) == 0

    def test_fetches_header_then_channel(self) -> None:
        engine, emu, _ = _make_engine()
        engine.start()
        engine.acquire_data()
        assert emu.history == [":DAT:WAV:SCR:HEAD?", ":DAT:WAV:SCR:CH1?"]

    def test_one_shot_is_idempotent(self) -> None:
        engine, emu, queue = _make_engine()
        engine.start_single_trigger()
        assert engine.acquire_data() is True
        assert engine.state is TriggerState.DISARMED
        sent = len(emu.history)
        assert engine.acquire_data() is False
        assert len(queue) == 1
        assert len(emu.history) == sent

    def test_continuous_stays_armed(self) -> None:
        engine, _, queue = _make_engine()
        engine.start()
        assert engine.acquire_data()
        assert engine.acquire_data()
        assert engine.state is TriggerState.ARMED
        assert len(queue) == 2

    def test_record_contents(self) -> None:
        engine, emu, _ = _make_engine()
        emu.set_waveform_bytes(b"\x00\x40" * 600)
        engine.start_single_trigger()
        before = time.time()
        engine.acquire_data()
        waveforms = engine.pop_waveforms()
        assert waveforms is not None
        assert list(waveforms) == ["CH1"]
        record = waveforms["CH1"]
        assert len(record) == 600
        assert record.samples[0] == pytest.approx(16384 / 65535 * 0.5)
        assert record.sample_interval == pytest.approx(1 / 50e3)
        assert before - 1 <= record.start_seconds <= time.time()
        assert 0.0 <= record.start_fraction < 1.0

    def test_configured_scale_rate_and_channel(self) -> None:
        config = AcquisitionConfig(full_scale_volts=5.0, sample_rate_hz=1e6, channel=2)
        engine, emu, _ = _make_engine(config)
        emu.set_waveform([16384, -16384], channel=2)
        engine.start()
        engine.acquire_data()
        record = engine.pop_waveforms()["CH2"]  # type: ignore[index]
        assert record.samples == pytest.approx((16384 / 65535 * 5.0, -16384 / 65535 * 5.0))
        assert record.sample_interval == pytest.approx(1e-6)
        assert emu.history[-1] == ":DAT:WAV:SCR:CH2?"

    def test_capped_at_sample_depth(self) -> None:
        engine, emu, _ = _make_engine(depth=4000)
        emu.set_waveform([1] * 5000)
        engine.start()
        engine.acquire_data()
        assert len(engine.pop_waveforms()["CH1"]) == 4000  # type: ignore[index]

    def test_empty_block_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        engine, emu, _ = _make_engine()
        emu.set_waveform_bytes(b"")
        engine.start()
        with caplog.at_level(logging.WARNING, logger="hdslab_owon.acquisition"):
            assert engine.acquire_data() is True
        assert "Empty waveform block" in caplog.text
        assert len(engine.pop_waveforms()["CH1"]) == 0  # type: ignore[index]

    def test_pop_empty(self) -> None:
        engine, _, _ = _make_engine()
        assert engine.pop_waveforms() is None
