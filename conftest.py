"""Root conftest.py for the hdslab monorepo.

Puts every package's ``src`` directory on ``sys.path`` so the suite runs
from a plain checkout, and registers the shared markers.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from _pytest.config import Config


PROJECT_ROOT = Path(__file__).parent
for pkg_dir in PROJECT_ROOT.glob("hdslab-*/src"):
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


def pytest_configure(config: Config) -> None:
    """Register custom markers.

    Args:
        config: pytest configuration object.
    """
    config.addinivalue_line(
        "markers",
        "integration: Integration test requiring a real HDS200",
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow-running test",
    )


def pytest_report_header(config: Config) -> list[str]:
    """Add suite and coverage info to the pytest header."""
    lines = ["hdslab monorepo test suite"]
    if getattr(config.option, "cov_source", None):
        lines.append("Coverage: enabled")
    return lines
