from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from renumber.core.persistence import STATE_KEY


def _default_data_dir() -> Path:
    return Path.home() / ".renumber"


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings. ``RENUMBER_HOME`` moves the data directory,
    ``RENUMBER_LOG_LEVEL`` sets the log level by name."""

    data_dir: Path = field(default_factory=_default_data_dir)
    storage_key: str = STATE_KEY
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        data_dir = env.get("RENUMBER_HOME")
        level_name = env.get("RENUMBER_LOG_LEVEL", "").strip().upper()
        level = logging.getLevelName(level_name) if level_name else logging.INFO
        if not isinstance(level, int):
            level = logging.INFO
        return cls(
            data_dir=Path(data_dir).expanduser() if data_dir else _default_data_dir(),
            log_level=level,
        )
