"""Tests for the HDS200 emulator."""

from __future__ import annotations

import pytest

from hdslab_core.types.instrument import MeasurementMode

from hdslab_owon.emulator import (
    Hds200Emulator,
    Hds200EmulatorConfig,
    make_hds2102_emulator,
    make_hds2102s_emulator,
)


def _query(emu: Hds200Emulator, message: str) -> str:
    emu.write(message)
    return emu.read()


class TestEmulatorConfig:
    def test_has_awg_from_model(self) -> None:
        assert Hds200EmulatorConfig("OWON,HDS2102S,1,V1").has_awg
        assert not Hds200EmulatorConfig("OWON,HDS2102,1,V1").has_awg
        assert not Hds200EmulatorConfig("garbage").has_awg

    def test_validation(self) -> None:
        with pytest.raises(ValueError, match="identity"):
            Hds200EmulatorConfig("")
        with pytest.raises(ValueError, match="sample_depth"):
            Hds200EmulatorConfig("OWON,HDS2102S,1,V1", sample_depth=6000)


class TestMeter:
    """Meter mode and range behaviour."""

    def test_identity(self) -> None:
        assert _query(make_hds2102s_emulator("SN9"), "*IDN?") == "OWON,HDS2102S,SN9,V2.1.0"

    def test_mode_replies_are_partial(self) -> None:
        emu = make_hds2102s_emulator()
        emu.write(":DMM:CONF:CURR AC")
        assert _query(emu, ":DMM:CONF?") == "CURR"
        assert _query(emu, ":DMM:CONF:VOLT?") == "NONE"
        assert _query(emu, ":DMM:CONF:CURR?") == "ACA"

    def test_range_cycle_wraps(self) -> None:
        emu = make_hds2102s_emulator()
        seen = []
        for _ in range(5):
            seen.append(_query(emu, ":DMM:RANGE?"))
            emu.write(":DMM:RANGE ON")
        assert seen == ["2V", "20V", "200V", "1000V", "2V"]

    def test_relay_resets_position(self) -> None:
        emu = make_hds2102s_emulator()
        emu.write(":DMM:RANGE ON")
        emu.write(":DMM:RANGE mV")
        assert _query(emu, ":DMM:RANGE?") == "200mV"
        emu.write(":DMM:RANGE V")
        assert _query(emu, ":DMM:RANGE?") == "2V"

    def test_mode_change_resets_range_and_auto(self) -> None:
        emu = make_hds2102s_emulator()
        emu.write(":DMM:RANGE ON")
        emu.write(":DMM:AUTO ON")
        assert emu.auto_range
        emu.write(":DMM:CONF RES")
        assert emu.mode is MeasurementMode.RESISTANCE
        assert not emu.auto_range
        assert _query(emu, ":DMM:RANGE?") == "200Ω"

    def test_measurement(self) -> None:
        emu = make_hds2102s_emulator()
        emu.set_measurement(1.23456)
        assert _query(emu, ":DMM:MEAS?") == "1.2346"

    def test_set_range_cycle_requires_labels(self) -> None:
        with pytest.raises(ValueError):
            make_hds2102s_emulator().set_range_cycle(MeasurementMode.RESISTANCE, [])


class TestScopeAndAwg:
    def test_waveform_blocks(self) -> None:
        emu = make_hds2102s_emulator()
        emu.set_waveform([1, -1], channel=2)
        emu.write(":DAT:WAV:SCR:CH2?")
        assert emu.read_raw() == b"\x01\x00\xff\xff"
        assert emu.read_raw() == b""

    def test_header_block(self) -> None:
        emu = make_hds2102s_emulator()
        emu.write(":DAT:WAV:SCR:HEAD?")
        assert emu.read_raw().startswith(b"{")

    def test_depth(self) -> None:
        emu = make_hds2102s_emulator()
        assert _query(emu, ":ACQ:DEPM?") == "4K"
        emu.write(":ACQ:DEPM 8K")
        assert emu.sample_depth == 8000
        emu.write(":ACQ:DEPM 6K")
        assert emu.sample_depth == 8000
        assert emu.unrecognized == [":ACQ:DEPM 6K"]

    def test_awg_only_on_s_models(self) -> None:
        emu = make_hds2102_emulator()
        emu.write(":FUNC:AMP 1.0")
        assert emu.unrecognized == [":FUNC:AMP 1.0"]
        emu_s = make_hds2102s_emulator()
        emu_s.write(":FUNC:AMP 1.0")
        assert emu_s.unrecognized == []
        assert emu_s.awg.amplitude == 1.0

    def test_unknown_commands_recorded(self) -> None:
        emu = make_hds2102s_emulator()
        emu.write(":BOGUS 1")
        emu.write(":BOGUS?")
        emu.write(":CH1:COUP XX")
        assert emu.unrecognized == [":BOGUS 1", ":BOGUS?", ":CH1:COUP XX"]
