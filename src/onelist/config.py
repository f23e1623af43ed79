"""Settings and the persisted task-folder configuration.

Environment variables (all optional):
  ONELIST_CONFIG     path of the JSON config file (default ~/.task-cli-config.json)
  ONELIST_TASK_DIR   task folder, overrides the one stored in the config file
  ONELIST_LOG_LEVEL  console log level (default WARNING)
  ONELIST_LOG_FILE   write a DEBUG log to this file
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "ONELIST"
CONFIG_FILE = ".task-cli-config.json"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    """Path from env var ``name`` with ``~`` expanded, or ``default``."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_level(name: str, default: int) -> int:
    """Logging level named by env var ``name``, or ``default``."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


@dataclass
class Config:
    """The on-disk config record: just the chosen task folder."""

    task_folder: str = ""


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from ONELIST_* environment variables."""

    config_path: Path
    task_dir_override: Optional[Path]
    log_level: int
    log_file: Optional[Path]


def get_settings() -> Settings:
    """Build Settings from the environment."""
    return Settings(
        config_path=_env_path(_k("CONFIG"), Path.home() / CONFIG_FILE),
        task_dir_override=_env_path(_k("TASK_DIR"), None),
        log_level=_env_level(_k("LOG_LEVEL"), logging.WARNING),
        log_file=_env_path(_k("LOG_FILE"), None),
    )


def load_config(path: Path) -> Config:
    """Read the config file, creating an empty one if it is missing."""
    if not path.exists():
        config = Config()
        try:
            save_config(config, path)
        except ConfigError as exc:
            logger.warning("%s", exc)
        return config
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc.strerror or exc}") from exc
    except ValueError as exc:
        raise ConfigError(f"Config {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must hold an object")
    folder = data.get("task_folder") or ""
    if not isinstance(folder, str):
        raise ConfigError(f"Config {path}: task_folder must be a string")
    return Config(task_folder=folder)


def save_config(config: Config, path: Path) -> None:
    """Write the config record as JSON."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"task_folder": config.task_folder}), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write config {path}: {exc.strerror or exc}") from exc


def resolve_task_dir(settings: Settings, config: Config) -> str:
    """The folder the core should use; empty string when none is configured."""
    if settings.task_dir_override is not None:
        return str(settings.task_dir_override)
    return config.task_folder


def normalize_folder(folder: str) -> str:
    """Expand ``~`` and make ``folder`` absolute; it must exist."""
    path = Path(folder).expanduser().resolve()
    if not path.is_dir():
        raise ConfigError(f"Folder not found: {path}")
    return str(path)
