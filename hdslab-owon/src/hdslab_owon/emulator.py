"""OWON HDS200 emulator.

Provides an in-process emulator implementing the ``ScpiTransport`` protocol,
including binary block replies for waveform fetches. The meter's range
behaviour follows the device: the coarse relay is selected explicitly and
fine ranges are reached only by cycling, wrapping at the end of the list.
"""

from __future__ import annotations

import logging
import re
import struct
from dataclasses import dataclass, field
from typing import Callable, Sequence

from hdslab_core.types.instrument import MeasurementMode

logger = logging.getLogger(__name__)

_CONF_COMMANDS: dict[str, MeasurementMode] = {
    "VOLT DC": MeasurementMode.DC_VOLTAGE,
    "VOLT AC": MeasurementMode.AC_VOLTAGE,
    "CURR DC": MeasurementMode.DC_CURRENT,
    "CURR AC": MeasurementMode.AC_CURRENT,
    "RES": MeasurementMode.RESISTANCE,
    "CAP": MeasurementMode.CAPACITANCE,
    "CONT": MeasurementMode.CONTINUITY,
    "DIOD": MeasurementMode.DIODE,
}

_CONF_REPLIES: dict[MeasurementMode, str] = {
    MeasurementMode.DC_VOLTAGE: "VOLT",
    MeasurementMode.AC_VOLTAGE: "VOLT",
    MeasurementMode.DC_CURRENT: "CURR",
    MeasurementMode.AC_CURRENT: "CURR",
    MeasurementMode.RESISTANCE: "R",
    MeasurementMode.CAPACITANCE: "C",
    MeasurementMode.CONTINUITY: "RS",
    MeasurementMode.DIODE: "DIODE",
}

# (high relay cycle, low relay cycle, unit)
_RANGE_CYCLES: dict[MeasurementMode, tuple[tuple[str, ...], tuple[str, ...], str]] = {
    MeasurementMode.DC_VOLTAGE: (("2", "20", "200", "1000"), ("200m",), "V"),
    MeasurementMode.AC_VOLTAGE: (("2", "20", "200", "750"), ("200m",), "V"),
    MeasurementMode.DC_CURRENT: (("10",), ("200m",), "A"),
    MeasurementMode.AC_CURRENT: (("10",), ("200m",), "A"),
    MeasurementMode.RESISTANCE: (("200", "2k", "20k", "200k", "2M", "20M", "100M"), (), "Ω"),
    MeasurementMode.CAPACITANCE: (("2n",), (), "F"),
    MeasurementMode.CONTINUITY: (("200",), (), "Ω"),
    MeasurementMode.DIODE: (("2",), (), "V"),
}

_SHAPES: frozenset[str] = frozenset({"SINE", "SQU", "RAMP", "PULS", "StairDn", "StairUp", "StairUD"})

_CHANNEL_RE = re.compile(r"^:CH([12]):(DISP|COUP|PROB)$")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Hds200EmulatorConfig:
    """Configuration for an HDS200 emulator instance.

    Args:
        identity: ``*IDN?`` response string. The model field decides whether
            the generator commands are accepted (models ending in ``S``).
        sample_depth: Initial memory depth in samples (4000 or 8000).
    """

    identity: str
    sample_depth: int = 4000

    def __post_init__(self) -> None:
        if not self.identity:
            raise ValueError("identity must be non-empty")
        if self.sample_depth not in (4000, 8000):
            raise ValueError("sample_depth must be 4000 or 8000")

    @property
    def has_awg(self) -> bool:
        fields = [p.strip() for p in self.identity.split(",")]
        return len(fields) > 1 and fields[1].endswith("S")


# ---------------------------------------------------------------------------
# Internal state
# ---------------------------------------------------------------------------


@dataclass
class _ScopeChannel:
    displayed: bool = True
    coupling: str = "DC"
    probe: str = "1X"


@dataclass
class AwgOutput:
    """Generator settings as last written to the emulator."""

    enabled: bool = False
    amplitude: float = 0.5
    offset: float = 0.0
    frequency: float = 1000.0
    duty: float = 0.5
    shape: str = "SINE"


@dataclass
class _MeterState:
    mode: MeasurementMode = MeasurementMode.DC_VOLTAGE
    low_relay: bool = False
    position: int = 0
    auto: bool = False
    readings: dict[MeasurementMode, float] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Emulator
# ---------------------------------------------------------------------------


class Hds200Emulator:
    """In-process HDS200 emulator implementing ``ScpiTransport``.

    Args:
        config: Emulator configuration.
    """

    def __init__(self, config: Hds200EmulatorConfig) -> None:
        self._config = config
        self._meter = _MeterState()
        self._channels = {1: _ScopeChannel(), 2: _ScopeChannel(displayed=False)}
        self._depth_k = config.sample_depth // 1000
        self._awg = AwgOutput()
        self._waveforms: dict[int, bytes] = {1: bytes(1200), 2: bytes(1200)}
        self._header = b'{"TIMEBASE":{"SCALE":"500us","HOFFSET":0},"SAMPLE":{"DEPMEM":"4K"}}'
        self._range_overrides: dict[MeasurementMode, tuple[str, ...]] = {}
        self._mode_replies: tuple[str, str, str] | None = None
        self._response = ""
        self._raw = b""
        self._history: list[str] = []
        self._unrecognized: list[str] = []

        self._set_handlers: dict[str, Callable[[str], None]] = {
            ":DMM:CONF": self._set_conf,
            ":DMM:CONF:VOLT": lambda args: self._set_conf(f"VOLT {args}"),
            ":DMM:CONF:CURR": lambda args: self._set_conf(f"CURR {args}"),
            ":DMM:RANGE": self._set_range,
            ":DMM:AUTO": self._set_auto,
            ":ACQ:DEPM": self._set_depth,
        }
        self._query_handlers: dict[str, Callable[[], str]] = {
            "*IDN?": lambda: self._config.identity,
            ":DMM:CONF?": lambda: self._mode_reply(0),
            ":DMM:CONF:VOLT?": lambda: self._mode_reply(1),
            ":DMM:CONF:CURR?": lambda: self._mode_reply(2),
            ":DMM:RANGE?": self._get_range,
            ":DMM:MEAS?": self._measure,
            ":ACQ:DEPM?": lambda: f"{self._depth_k}K",
        }
        if config.has_awg:
            self._set_handlers.update(
                {
                    ":CHAN": self._set_awg_output,
                    ":FUNC": self._set_awg_shape,
                    ":FUNC:AMP": lambda args: self._set_awg_value("amplitude", args),
                    ":FUNC:OFF": lambda args: self._set_awg_value("offset", args),
                    ":FUNC:FREQ": lambda args: self._set_awg_value("frequency", args),
                    ":FUNC:DTY": lambda args: self._set_awg_value("duty", args),
                }
            )

    # -- Transport interface ------------------------------------------------

    def write(self, message: str) -> None:
        """Process a command or query string."""
        line = message.strip()
        if not line:
            return
        self._history.append(line)

        if line.upper().startswith(":DAT:WAV:SCR:"):
            self._raw = self._waveform_block(line.upper())
            return

        if "?" in line:
            header = line[: line.index("?") + 1].upper()
            handler = self._query_handlers.get(header)
            if handler is not None:
                self._response = handler()
            elif not self._channel_query(header):
                self._reject(line)
            return

        parts = line.split(None, 1)
        header = parts[0].upper()
        args = parts[1].strip() if len(parts) > 1 else ""
        handler_set = self._set_handlers.get(header)
        if handler_set is not None:
            handler_set(args)
        elif not self._channel_command(header, args):
            self._reject(line)

    def read(self) -> str:
        """Return and clear the buffered text response."""
        resp = self._response
        self._response = ""
        return resp

    def read_raw(self) -> bytes:
        """Return and clear the buffered block payload."""
        data = self._raw
        self._raw = b""
        return data

    def close(self) -> None:
        """Close the emulator (no-op for in-process transport)."""

    # -- Test helpers -------------------------------------------------------

    @property
    def history(self) -> list[str]:
        """Every command and query received, in order."""
        return list(self._history)

    @property
    def unrecognized(self) -> list[str]:
        """Commands the emulator did not understand."""
        return list(self._unrecognized)

    @property
    def mode(self) -> MeasurementMode:
        return self._meter.mode

    @property
    def auto_range(self) -> bool:
        return self._meter.auto

    @property
    def sample_depth(self) -> int:
        return self._depth_k * 1000

    @property
    def awg(self) -> AwgOutput:
        return self._awg

    def set_measurement(self, value: float, mode: MeasurementMode | None = None) -> None:
        """Set the reading returned by ``:DMM:MEAS?`` in *mode* (default: active)."""
        self._meter.readings[mode or self._meter.mode] = value

    def set_range_cycle(self, mode: MeasurementMode, labels: Sequence[str]) -> None:
        """Replace the fine-range cycle of *mode* (on the high relay)."""
        if not labels:
            raise ValueError("labels must be non-empty")
        self._range_overrides[mode] = tuple(labels)
        self._meter.position = 0

    def set_mode_replies(self, conf: str, volt: str, curr: str) -> None:
        """Force the replies to the three mode queries."""
        self._mode_replies = (conf, volt, curr)

    def set_waveform(self, samples: Sequence[int], channel: int = 1) -> None:
        """Set the raw int16 samples returned for *channel*."""
        self._waveforms[channel] = struct.pack(f"<{len(samples)}h", *samples)

    def set_waveform_bytes(self, data: bytes, channel: int = 1) -> None:
        """Set the raw block payload returned for *channel*."""
        self._waveforms[channel] = bytes(data)

    def set_channel_reply(
        self, channel: int, *, coupling: str | None = None, probe: str | None = None
    ) -> None:
        """Override the coupling or probe token reported for *channel*."""
        ch = self._channels[channel]
        if coupling is not None:
            ch.coupling = coupling
        if probe is not None:
            ch.probe = probe

    # -- Meter --------------------------------------------------------------

    def _cycle(self) -> tuple[tuple[str, ...], str]:
        mode = self._meter.mode
        high, low, unit = _RANGE_CYCLES[mode]
        high = self._range_overrides.get(mode, high)
        if self._meter.low_relay and low:
            return low, unit
        return high, unit

    def _set_conf(self, args: str) -> None:
        mode = _CONF_COMMANDS.get(" ".join(args.upper().split()))
        if mode is None:
            self._reject(f":DMM:CONF {args}")
            return
        self._meter.mode = mode
        self._meter.low_relay = False
        self._meter.position = 0
        self._meter.auto = False

    def _mode_reply(self, index: int) -> str:
        if self._mode_replies is not None:
            return self._mode_replies[index]
        mode = self._meter.mode
        if index == 0:
            return _CONF_REPLIES[mode]
        if index == 1 and mode is MeasurementMode.DC_VOLTAGE:
            return "DCV"
        if index == 1 and mode is MeasurementMode.AC_VOLTAGE:
            return "ACV"
        if index == 2 and mode is MeasurementMode.DC_CURRENT:
            return "DCA"
        if index == 2 and mode is MeasurementMode.AC_CURRENT:
            return "ACA"
        return "NONE"

    def _set_range(self, args: str) -> None:
        token = args.strip()
        meter = self._meter
        if token.upper() == "ON":
            labels, _unit = self._cycle()
            meter.position = (meter.position + 1) % len(labels)
            meter.auto = False
        elif token in ("mV", "mA"):
            meter.low_relay = True
            meter.position = 0
            meter.auto = False
        elif token in ("V", "A"):
            meter.low_relay = False
            meter.position = 0
            meter.auto = False
        else:
            self._reject(f":DMM:RANGE {args}")

    def _set_auto(self, args: str) -> None:
        if args.strip().upper() == "ON":
            self._meter.auto = True
        else:
            self._reject(f":DMM:AUTO {args}")

    def _get_range(self) -> str:
        labels, unit = self._cycle()
        return labels[self._meter.position % len(labels)] + unit

    def _measure(self) -> str:
        return f"{self._meter.readings.get(self._meter.mode, 0.0):.4f}"

    # -- Scope --------------------------------------------------------------

    def _channel_query(self, header: str) -> bool:
        match = _CHANNEL_RE.match(header.rstrip("?"))
        if match is None:
            return False
        ch = self._channels[int(match.group(1))]
        item = match.group(2)
        if item == "DISP":
            self._response = "ON" if ch.displayed else "OFF"
        elif item == "COUP":
            self._response = ch.coupling
        else:
            self._response = ch.probe
        return True

    def _channel_command(self, header: str, args: str) -> bool:
        match = _CHANNEL_RE.match(header)
        if match is None:
            return False
        ch = self._channels[int(match.group(1))]
        item = match.group(2)
        token = args.upper()
        if item == "DISP" and token in ("ON", "OFF"):
            ch.displayed = token == "ON"
        elif item == "COUP" and token in ("DC", "AC", "GND"):
            ch.coupling = token
        elif item == "PROB" and token in ("1X", "10X", "100X", "1000X"):
            ch.probe = token
        else:
            self._reject(f"{header} {args}")
        return True

    def _set_depth(self, args: str) -> None:
        token = args.strip().upper().rstrip("K")
        if token not in ("4", "8"):
            self._reject(f":ACQ:DEPM {args}")
            return
        self._depth_k = int(token)

    def _waveform_block(self, header: str) -> bytes:
        if header == ":DAT:WAV:SCR:HEAD?":
            return self._header
        match = re.match(r"^:DAT:WAV:SCR:CH([12])\?$", header)
        if match is None:
            self._reject(header)
            return b""
        return self._waveforms[int(match.group(1))]

    # -- AWG ----------------------------------------------------------------

    def _set_awg_output(self, args: str) -> None:
        token = args.strip().upper()
        if token not in ("ON", "OFF"):
            self._reject(f":CHAN {args}")
            return
        self._awg.enabled = token == "ON"

    def _set_awg_shape(self, args: str) -> None:
        token = args.strip()
        if token not in _SHAPES:
            self._reject(f":FUNC {args}")
            return
        self._awg.shape = token

    def _set_awg_value(self, name: str, args: str) -> None:
        try:
            value = float(args.strip())
        except ValueError:
            self._reject(f"{name} {args}")
            return
        setattr(self._awg, name, value)

    # -- Private helpers ----------------------------------------------------

    def _reject(self, line: str) -> None:
        logger.debug("HDS200 emulator ignoring %r", line)
        self._unrecognized.append(line)


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def make_hds2102s_emulator(serial: str = "HDS2102S0001") -> Hds200Emulator:
    """Create an HDS2102S emulator (two scope channels, meter, AWG)."""
    return Hds200Emulator(Hds200EmulatorConfig(identity=f"OWON,HDS2102S,{serial},V2.1.0"))


def make_hds2102_emulator(serial: str = "HDS21020001") -> Hds200Emulator:
    """Create an HDS2102 emulator (two scope channels and meter, no AWG)."""
    return Hds200Emulator(Hds200EmulatorConfig(identity=f"OWON,HDS2102,{serial},V2.1.0"))
