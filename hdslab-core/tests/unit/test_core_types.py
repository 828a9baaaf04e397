"""Tests for hdslab_core types and interfaces."""

from __future__ import annotations

from datetime import timezone

import pytest

from hdslab_core import (
    FunctionGenerator,
    HdslabError,
    InstrumentType,
    MeasurementMode,
    Multimeter,
    Oscilloscope,
    SerializationError,
    StateError,
)
from hdslab_core.types.common import ChannelId, InstrumentIdentity, Timestamp
from hdslab_core.types.waveform import WaveformRecord


class TestTimestamp:
    """Tests for Timestamp."""

    def test_split_whole_and_fraction(self) -> None:
        ts = Timestamp(unix_ns=1_700_000_000_250_000_000)
        seconds, fraction = ts.split()
        assert seconds == 1_700_000_000
        assert fraction == pytest.approx(0.25)

    def test_split_exact_second(self) -> None:
        assert Timestamp(unix_ns=5_000_000_000).split() == (5, 0.0)

    def test_now_is_recent(self) -> None:
        ts = Timestamp.now()
        assert ts.unix_seconds > 1_600_000_000

    def test_to_datetime_is_utc(self) -> None:
        dt = Timestamp(unix_ns=0).to_datetime()
        assert dt.tzinfo == timezone.utc
        assert dt.year == 1970


class TestInstrumentIdentity:
    def test_frozen(self) -> None:
        ident = InstrumentIdentity("OWON", "HDS2102S", "SN1", "V1")
        with pytest.raises(AttributeError):
            ident.model = "X"  # type: ignore[misc]


class TestMeasurementMode:
    """Tests for MeasurementMode helpers."""

    @pytest.mark.parametrize("mode", [MeasurementMode.DC_VOLTAGE, MeasurementMode.AC_VOLTAGE])
    def test_voltage_modes(self, mode: MeasurementMode) -> None:
        assert mode.is_voltage
        assert not mode.is_current

    @pytest.mark.parametrize("mode", [MeasurementMode.DC_CURRENT, MeasurementMode.AC_CURRENT])
    def test_current_modes(self, mode: MeasurementMode) -> None:
        assert mode.is_current
        assert not mode.is_voltage

    def test_resistance_is_neither(self) -> None:
        assert not MeasurementMode.RESISTANCE.is_voltage
        assert not MeasurementMode.RESISTANCE.is_current


class TestInstrumentType:
    def test_flags_combine(self) -> None:
        types = InstrumentType.DMM | InstrumentType.OSCILLOSCOPE
        assert InstrumentType.DMM in types
        assert InstrumentType.FUNCTION not in types


class TestWaveformRecord:
    """Tests for WaveformRecord."""

    def test_len_and_duration(self) -> None:
        record = WaveformRecord(
            channel=ChannelId("CH1"),
            samples=(0.0, 0.1, 0.2, 0.3),
            sample_interval=0.5,
            start_seconds=10,
            start_fraction=0.0,
        )
        assert len(record) == 4
        assert record.duration == pytest.approx(2.0)
        assert record.times() == pytest.approx((0.0, 0.5, 1.0, 1.5))
        assert record.trigger_phase == 0.0


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(SerializationError, HdslabError)
        assert issubclass(StateError, HdslabError)


class _StubMeter:
    """Minimal structural Multimeter implementation."""

    def get_measurement_types(self) -> frozenset[MeasurementMode]:
        return frozenset()

    def get_mode(self) -> MeasurementMode:
        return MeasurementMode.DC_VOLTAGE

    def set_mode(self, mode: MeasurementMode) -> bool:
        return True

    def get_ranges(self, mode: MeasurementMode) -> tuple[str, ...]:
        return ()

    def get_range(self) -> str:
        return ""

    def set_range(self, label: str) -> bool:
        return True

    def get_auto_range(self) -> bool:
        return False

    def set_auto_range(self, enable: bool) -> None:
        pass

    def read_value(self) -> float:
        return 0.0

    def get_digits(self) -> int:
        return 6


class TestProtocols:
    """Runtime protocol checks."""

    def test_structural_meter_matches(self) -> None:
        assert isinstance(_StubMeter(), Multimeter)

    def test_meter_is_not_scope_or_generator(self) -> None:
        assert not isinstance(_StubMeter(), Oscilloscope)
        assert not isinstance(_StubMeter(), FunctionGenerator)
