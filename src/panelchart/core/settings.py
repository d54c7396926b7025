"""Environment settings, YAML option files and CLI logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from panelchart.core.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _env(key: str, default: str) -> str:
    v = os.getenv(key)
    return v.strip() if v and v.strip() else default


def _env_flag(key: str) -> bool:
    return _env(key, "0").lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    debug: bool = False
    outputs_dir: Path = Path("outputs")
    options_file: Path | None = None


def get_settings() -> Settings:
    """Read settings from the environment (and a .env file, if present)."""
    load_dotenv()
    options_file = _env("PANELCHART_OPTIONS_FILE", "")
    return Settings(
        debug=_env_flag("PANELCHART_DEBUG"),
        outputs_dir=Path(_env("PANELCHART_OUTPUTS_DIR", "outputs")).resolve(),
        options_file=Path(options_file) if options_file else None,
    )


def load_options_file(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Options file not found: {path}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Options file must hold a mapping: {path}")
    return data


def configure_logging(debug: bool = False) -> logging.Logger:
    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger("panelchart")
    logger.setLevel(level)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(ch)
    logger.propagate = False
    return logger
