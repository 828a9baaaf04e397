"""Tests for meter mode classification, resolution and selection."""

from __future__ import annotations

import logging

import pytest

from hdslab_core.types.instrument import MeasurementMode
from hdslab_scpi import ScpiConnection

from hdslab_owon.emulator import Hds200Emulator, make_hds2102s_emulator
from hdslab_owon.mode import (
    MODE_COMMANDS,
    SUPPORTED_MODES,
    ModeQuery,
    ModeReading,
    ModeResolver,
    classify_mode,
)


def _make_resolver(
    cache_enabled: bool = True,
) -> tuple[ModeResolver, Hds200Emulator, list[float]]:
    """Create a resolver backed by an emulator, recording settle delays."""
    emu = make_hds2102s_emulator()
    sleeps: list[float] = []
    conn = ScpiConnection(emu, check_errors=False, sleep=sleeps.append)
    return ModeResolver(conn, cache_enabled=cache_enabled), emu, sleeps


class TestClassifyMode:
    """classify_mode is a pure function of the three replies."""

    @pytest.mark.parametrize(
        ("conf", "expected"),
        [
            ("RS", MeasurementMode.CONTINUITY),
            ("R", MeasurementMode.RESISTANCE),
            ("C", MeasurementMode.CAPACITANCE),
            ("DIODE", MeasurementMode.DIODE),
        ],
    )
    def test_conf_tokens(self, conf: str, expected: MeasurementMode) -> None:
        assert classify_mode(conf, "garbage", "garbage") is expected

    def test_conf_wins_over_later_replies(self) -> None:
        assert classify_mode("RS", "DCV", "ACA") is MeasurementMode.CONTINUITY

    @pytest.mark.parametrize(
        ("volt", "expected"),
        [("DCV", MeasurementMode.DC_VOLTAGE), ("ACV", MeasurementMode.AC_VOLTAGE)],
    )
    def test_volt_tokens(self, volt: str, expected: MeasurementMode) -> None:
        assert classify_mode("VOLT", volt, "ACA") is expected

    @pytest.mark.parametrize(
        ("curr", "expected"),
        [("DCA", MeasurementMode.DC_CURRENT), ("ACA", MeasurementMode.AC_CURRENT)],
    )
    def test_curr_tokens(self, curr: str, expected: MeasurementMode) -> None:
        assert classify_mode("CURR", "NONE", curr) is expected

    def test_tokens_only_count_for_their_query(self) -> None:
        # A voltage token in the conf reply is not a match
        assert classify_mode("DCV", "R", "RS") is None

    def test_no_match(self) -> None:
        assert classify_mode("X", "Y", "Z") is None

    def test_whitespace_and_case_tolerated(self) -> None:
        assert classify_mode(" diode\n") is MeasurementMode.DIODE

    def test_unqueried_replies(self) -> None:
        assert classify_mode("VOLT") is None
        assert classify_mode("VOLT", "ACV") is MeasurementMode.AC_VOLTAGE


class TestModeQuery:
    """Query ordering of the fetch capability."""

    def test_conf_match_issues_single_query(self) -> None:
        emu = make_hds2102s_emulator()
        conn = ScpiConnection(emu, check_errors=False, sleep=lambda s: None)
        conn.command(":DMM:CONF RES")
        before = len(emu.history)
        assert ModeQuery(conn).fetch() == ModeReading(MeasurementMode.RESISTANCE)
        assert emu.history[before:] == [":DMM:CONF?"]

    def test_current_issues_all_three_in_order(self) -> None:
        emu = make_hds2102s_emulator()
        conn = ScpiConnection(emu, check_errors=False, sleep=lambda s: None)
        conn.command(":DMM:CONF:CURR AC")
        before = len(emu.history)
        assert ModeQuery(conn).fetch().mode is MeasurementMode.AC_CURRENT
        assert emu.history[before:] == [":DMM:CONF?", ":DMM:CONF:VOLT?", ":DMM:CONF:CURR?"]

    def test_fallback_is_flagged_unresolved(self, caplog: pytest.LogCaptureFixture) -> None:
        emu = make_hds2102s_emulator()
        emu.set_mode_replies("ERR", "ERR", "ERR")
        conn = ScpiConnection(emu, check_errors=False)
        with caplog.at_level(logging.WARNING, logger="hdslab_owon.mode"):
            reading = ModeQuery(conn).fetch()
        assert reading == ModeReading(MeasurementMode.DC_VOLTAGE, resolved=False)
        assert "Unrecognised meter mode" in caplog.text


class TestModeResolver:
    """Tests for ModeResolver."""

    @pytest.mark.parametrize("mode", sorted(SUPPORTED_MODES, key=lambda m: m.value))
    def test_set_then_get_without_query(self, mode: MeasurementMode) -> None:
        resolver, emu, sleeps = _make_resolver()
        assert resolver.set_mode(mode) is True
        sent = len(emu.history)
        assert resolver.get_mode() is mode
        assert len(emu.history) == sent
        assert emu.history[-1] == MODE_COMMANDS[mode]
        assert emu.mode is mode
        assert sleeps == [0.4]

    def test_set_mode_sends_exactly_one_command(self) -> None:
        resolver, emu, _ = _make_resolver()
        resolver.set_mode(MeasurementMode.CAPACITANCE)
        assert emu.history == [":DMM:CONF CAP"]

    @pytest.mark.parametrize("mode", [MeasurementMode.FREQUENCY, MeasurementMode.TEMPERATURE])
    def test_unsupported_mode_is_noop(
        self, mode: MeasurementMode, caplog: pytest.LogCaptureFixture
    ) -> None:
        resolver, emu, sleeps = _make_resolver()
        resolver.set_mode(MeasurementMode.DIODE)
        emu_history = emu.history
        with caplog.at_level(logging.WARNING, logger="hdslab_owon.mode"):
            assert resolver.set_mode(mode) is False
        assert emu.history == emu_history
        assert resolver.get_mode() is MeasurementMode.DIODE
        assert sleeps == [0.4]
        assert "not supported" in caplog.text

    def test_lazy_resolution_on_first_get(self) -> None:
        resolver, emu, _ = _make_resolver()
        assert not resolver.cache.valid
        assert resolver.get_mode() is MeasurementMode.DC_VOLTAGE
        assert resolver.mode_resolved
        queries = len(emu.history)
        resolver.get_mode()
        assert len(emu.history) == queries

    def test_cache_disabled_queries_every_time(self) -> None:
        resolver, emu, _ = _make_resolver(cache_enabled=False)
        resolver.get_mode()
        first = len(emu.history)
        resolver.get_mode()
        assert len(emu.history) == 2 * first

    def test_invalidate_requeries(self) -> None:
        resolver, emu, _ = _make_resolver()
        resolver.set_mode(MeasurementMode.RESISTANCE)
        emu.write(":DMM:CONF DIOD")
        assert resolver.get_mode() is MeasurementMode.RESISTANCE
        resolver.invalidate()
        assert resolver.get_mode() is MeasurementMode.DIODE

    def test_unresolved_reading_exposed(self) -> None:
        resolver, emu, _ = _make_resolver()
        emu.set_mode_replies("?", "?", "?")
        assert resolver.get_mode() is MeasurementMode.DC_VOLTAGE
        assert resolver.mode_resolved is False

    def test_set_mode_clears_unresolved_flag(self) -> None:
        resolver, emu, _ = _make_resolver()
        emu.set_mode_replies("?", "?", "?")
        resolver.get_mode()
        resolver.set_mode(MeasurementMode.DC_VOLTAGE)
        assert resolver.get_reading() == ModeReading(MeasurementMode.DC_VOLTAGE, resolved=True)
