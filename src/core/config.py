from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "HISTSIFT_CONFIG"
DEFAULT_BROWSER = "firefox"


@dataclass(slots=True)
class LoggingConfig:
    """Logging configuration from config.yml."""

    level: str = "INFO"
    log_max_mb: int = 5
    log_backup_count: int = 3


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration resolved from disk."""

    config_path: Path
    default_browser: str = DEFAULT_BROWSER
    min_query_length: int = 2
    strip_query_params: bool = False
    staleness_seconds: float = 0
    snapshot_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()) / "histsift")
    logs_dir: Path = field(default_factory=lambda: default_config_dir() / "logs")
    # browser -> OS -> path template
    browsers: Dict[str, Dict[str, str]] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "histsift"


def default_config_path() -> Path:
    """Config file location, honouring ``HISTSIFT_CONFIG``."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return default_config_dir() / "config.yml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle) or {}
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level.")
        return content


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _non_negative(value: Any, default: float, key: str, path: Path) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' in {path} must be a number") from None
    return max(0.0, number)


def _as_bool(value: Any, default: bool, key: str, path: Path) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
    elif isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"'{key}' in {path} must be true or false")


def _browser_overrides(raw: Any, path: Path) -> Dict[str, Dict[str, str]]:
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"'browsers' in {path} must map browser names to OS paths.")
    overrides: Dict[str, Dict[str, str]] = {}
    for browser, per_os in raw.items():
        if isinstance(per_os, str):
            # A bare string applies to every OS
            per_os = {"linux": per_os, "darwin": per_os, "windows": per_os}
        if not isinstance(per_os, dict):
            raise ValueError(f"Paths for '{browser}' in {path} must be a mapping.")
        overrides[str(browser)] = {str(k): str(v or "") for k, v in per_os.items()}
    return overrides


def load_app_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from disk, providing sensible defaults.

    Raises:
        ValueError: Malformed config file
        NotConfiguredError: A configured browser has no schema dialect
    """
    from history.dialects import validate_profiles

    config_path = Path(path) if path else default_config_path()
    data = _load_yaml(config_path)

    defaults = AppConfig(config_path=config_path)

    logging_cfg = data.get("logging", {}) or {}
    logging_config = LoggingConfig(
        level=str(logging_cfg.get("level", "INFO")).upper(),
        log_max_mb=int(_non_negative(
            logging_cfg.get("log_max_mb"), 5, "logging.log_max_mb", config_path
        )),
        log_backup_count=int(_non_negative(
            logging_cfg.get("log_backup_count"), 3, "logging.log_backup_count", config_path
        )),
    )

    snapshot_dir = data.get("snapshot_dir") or ""
    logs_dir = data.get("logs_dir") or ""

    config = AppConfig(
        config_path=config_path,
        default_browser=str(data.get("default_browser") or DEFAULT_BROWSER),
        min_query_length=int(_non_negative(
            data.get("min_query_length"), 2, "min_query_length", config_path
        )),
        strip_query_params=_as_bool(
            data.get("strip_query_params"), False, "strip_query_params", config_path
        ),
        staleness_seconds=_non_negative(
            data.get("staleness_seconds"), 0, "staleness_seconds", config_path
        ),
        snapshot_dir=Path(snapshot_dir).expanduser() if snapshot_dir else defaults.snapshot_dir,
        logs_dir=Path(logs_dir).expanduser() if logs_dir else defaults.logs_dir,
        browsers=_browser_overrides(data.get("browsers"), config_path),
        logging=logging_config,
    )

    validate_profiles([config.default_browser, *config.browsers])
    return config
