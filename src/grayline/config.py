"""Runtime configuration: styling defaults and environment-driven settings.

Values come from environment variables (a ``.env`` file is honoured when the
entry point calls ``load_dotenv()``):

    GRAYLINE_ORACLE         "analytic" (default) or "skyfield"
    GRAYLINE_DATA_DIR       Directory holding de421.bsp and cities.json (default: <repo>/resources)
    GRAYLINE_RESOLUTION     Terminator samples across 360° (default 360)
    GRAYLINE_TOLERANCE      Binary search stop width in degrees (default 0.1)
    GRAYLINE_MAX_ITERATIONS Oracle query cap per longitude (default 30)
    GRAYLINE_BRACKET_CHECK  "0" disables the endpoint sign check
    GRAYLINE_LOG_LEVEL      Logging level name for the CLI (default WARNING)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT = Path(__file__).parent.parent.parent

ORACLES = ("analytic", "skyfield")


@dataclass(frozen=True)
class TerminatorStyle:
    """Terminator path styling. Sunset orange by default."""

    color: str = "#FF6B35"
    width: float = 2
    opacity: float = 0.9
    resolution: int = 360  # Full-quality curve
    layer_resolution: int = 180  # What the map layer actually draws

    def __post_init__(self):
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"Invalid opacity: {self.opacity}. Must be within [0, 1]")
        if self.width <= 0:
            raise ValueError(f"Invalid width: {self.width}. Must be positive")
        if self.resolution < 1 or self.layer_resolution < 1:
            raise ValueError(
                f"Invalid resolution: {self.resolution}/{self.layer_resolution}. "
                "Must be at least 1"
            )


@dataclass(frozen=True)
class Settings:
    """Oracle choice and terminator search parameters."""

    oracle: str = "analytic"
    data_dir: Path = _ROOT / "resources"
    tolerance: float = 0.1
    max_iterations: int = 30
    bracket_check: bool = True
    log_level: str = "WARNING"
    style: TerminatorStyle = field(default_factory=TerminatorStyle)

    def __post_init__(self):
        if self.oracle not in ORACLES:
            raise ValueError(
                f"Invalid oracle: {self.oracle}. Must be one of {ORACLES}"
            )
        if self.tolerance <= 0:
            raise ValueError(f"Invalid tolerance: {self.tolerance}. Must be positive")
        min_iterations = 2 if self.bracket_check else 1
        if self.max_iterations < min_iterations:
            raise ValueError(
                f"Invalid max_iterations: {self.max_iterations}. "
                f"Must be at least {min_iterations}"
                + (" when the pole check is on" if self.bracket_check else "")
            )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        ValueError: When a variable is present but malformed or out of range.
    """
    style = TerminatorStyle(
        resolution=int(os.environ.get("GRAYLINE_RESOLUTION", "360")),
    )
    return Settings(
        oracle=os.environ.get("GRAYLINE_ORACLE", "analytic").strip().lower(),
        data_dir=Path(os.environ.get("GRAYLINE_DATA_DIR", str(_ROOT / "resources"))),
        tolerance=float(os.environ.get("GRAYLINE_TOLERANCE", "0.1")),
        max_iterations=int(os.environ.get("GRAYLINE_MAX_ITERATIONS", "30")),
        bracket_check=_env_bool("GRAYLINE_BRACKET_CHECK", True),
        log_level=os.environ.get("GRAYLINE_LOG_LEVEL", "WARNING").upper(),
        style=style,
    )
