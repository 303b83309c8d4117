"""
Environment-driven settings for tools and embedding applications.

Variables:
- CPAMM_SHARE_DECIMALS: decimals of newly provisioned share mints (0-18, default 6)
- CPAMM_LOG_LEVEL: logging level name for `configure_logging` (default INFO)

Malformed values fall back to defaults; out-of-range integers are clamped.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from ..core.pool import EngineConfig
from ..kernels.python.cp_curve_v1 import PRECISION


_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class Settings:
    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = "INFO"


def load_settings() -> Settings:
    level = _env_str("CPAMM_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    return Settings(
        engine=EngineConfig(share_decimals=_env_int("CPAMM_SHARE_DECIMALS", PRECISION, lo=0, hi=18)),
        log_level=level,
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=getattr(logging, settings.log_level), format=_LOG_FORMAT)
