"""Driver configuration for the OWON HDS200.

Settle times, range-cycling bound, caching and acquisition scaling can be
tuned from a YAML file. Missing sections and keys fall back to defaults.

Example YAML:
    settle:
      mode: 0.4
      relay: 0.78
      auto_range: 0.8
      range_cycle: 0.4

    max_range_cycles: 20
    cache_enabled: true
    rate_limit_s: 0.001
    timeout_ms: 5000

    acquisition:
      full_scale_volts: 0.5
      sample_rate_hz: 50000
      channel: 1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

# Shortest delays observed to work reliably on the device.
MIN_MODE_SETTLE = 0.35
MIN_RELAY_SETTLE = 0.775
MIN_CYCLE_SETTLE = 0.35


@dataclass(frozen=True)
class SettleTimes:
    """Delays applied after state-changing commands, in seconds.

    Attributes:
        mode: After selecting a measurement mode.
        relay: After switching the coarse V/mV or A/mA input relay.
        auto_range: After enabling auto-range.
        range_cycle: After each step of blind range cycling.
    """

    mode: float = 0.4
    relay: float = 0.78
    auto_range: float = 0.8
    range_cycle: float = 0.4

    def __post_init__(self) -> None:
        if self.mode < MIN_MODE_SETTLE:
            raise ValueError(f"mode settle must be >= {MIN_MODE_SETTLE} s, got {self.mode}")
        if self.relay < MIN_RELAY_SETTLE:
            raise ValueError(f"relay settle must be >= {MIN_RELAY_SETTLE} s, got {self.relay}")
        if self.auto_range < 0:
            raise ValueError(f"auto_range settle must be >= 0, got {self.auto_range}")
        if self.range_cycle < MIN_CYCLE_SETTLE:
            raise ValueError(
                f"range_cycle settle must be >= {MIN_CYCLE_SETTLE} s, got {self.range_cycle}"
            )


@dataclass(frozen=True)
class AcquisitionConfig:
    """Waveform decode parameters.

    The device does not report its vertical scale or timebase over the
    command channel, so these are supplied by configuration.

    Attributes:
        full_scale_volts: Voltage corresponding to a raw sample of 65535.
        sample_rate_hz: Sample rate used to derive the sample interval.
        channel: Scope channel fetched on each acquisition (1 or 2).
    """

    full_scale_volts: float = 0.5
    sample_rate_hz: float = 50e3
    channel: int = 1

    def __post_init__(self) -> None:
        if self.full_scale_volts <= 0:
            raise ValueError(f"full_scale_volts must be > 0, got {self.full_scale_volts}")
        if self.sample_rate_hz <= 0:
            raise ValueError(f"sample_rate_hz must be > 0, got {self.sample_rate_hz}")
        if self.channel not in (1, 2):
            raise ValueError(f"channel must be 1 or 2, got {self.channel}")

    @property
    def sample_interval(self) -> float:
        """Time between samples, in seconds."""
        return 1.0 / self.sample_rate_hz


@dataclass(frozen=True)
class Hds200Config:
    """Complete HDS200 driver configuration.

    Attributes:
        settle: Settle delays for state-changing commands.
        max_range_cycles: Upper bound on cycle commands per range selection.
        cache_enabled: Whether cached mode and depth are reused between reads.
        rate_limit_s: Minimum spacing between consecutive writes.
        timeout_ms: VISA I/O timeout.
        acquisition: Waveform decode parameters.
    """

    settle: SettleTimes = field(default_factory=SettleTimes)
    max_range_cycles: int = 20
    cache_enabled: bool = True
    rate_limit_s: float = 0.001
    timeout_ms: int = 5000
    acquisition: AcquisitionConfig = field(default_factory=AcquisitionConfig)

    def __post_init__(self) -> None:
        if self.max_range_cycles < 1:
            raise ValueError(f"max_range_cycles must be >= 1, got {self.max_range_cycles}")
        if self.rate_limit_s < 0:
            raise ValueError(f"rate_limit_s must be >= 0, got {self.rate_limit_s}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{name} must be a mapping")
    return value


def config_from_dict(data: Mapping[str, Any]) -> Hds200Config:
    """Build a configuration from an already-parsed mapping.

    Args:
        data: Mapping with the layout shown in the module docstring.

    Returns:
        Parsed Hds200Config.

    Raises:
        ValueError: If a section has the wrong shape or a value is invalid.
    """
    settle_data = _section(data, "settle")
    defaults = SettleTimes()
    settle = SettleTimes(
        mode=float(settle_data.get("mode", defaults.mode)),
        relay=float(settle_data.get("relay", defaults.relay)),
        auto_range=float(settle_data.get("auto_range", defaults.auto_range)),
        range_cycle=float(settle_data.get("range_cycle", defaults.range_cycle)),
    )

    acq_data = _section(data, "acquisition")
    acq_defaults = AcquisitionConfig()
    acquisition = AcquisitionConfig(
        full_scale_volts=float(acq_data.get("full_scale_volts", acq_defaults.full_scale_volts)),
        sample_rate_hz=float(acq_data.get("sample_rate_hz", acq_defaults.sample_rate_hz)),
        channel=int(acq_data.get("channel", acq_defaults.channel)),
    )

    base = Hds200Config()
    return Hds200Config(
        settle=settle,
        max_range_cycles=int(data.get("max_range_cycles", base.max_range_cycles)),
        cache_enabled=bool(data.get("cache_enabled", base.cache_enabled)),
        rate_limit_s=float(data.get("rate_limit_s", base.rate_limit_s)),
        timeout_ms=int(data.get("timeout_ms", base.timeout_ms)),
        acquisition=acquisition,
    )


def load_config(path: str | Path) -> Hds200Config:
    """Load driver configuration from a YAML file.

    An empty file yields the defaults.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        Parsed Hds200Config.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the file is not a mapping or a value is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"HDS200 config not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Hds200Config()
    if not isinstance(data, dict):
        raise ValueError("HDS200 config must be a YAML mapping")
    return config_from_dict(data)
