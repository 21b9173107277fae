"""
Tests for config.yml loading.
"""

import tempfile
from pathlib import Path

import pytest

from core.config import (
    CONFIG_ENV_VAR,
    AppConfig,
    default_config_path,
    load_app_config,
)
from history import NotConfiguredError


def _write(tmp_path, text):
    path = tmp_path / "config.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_app_config(tmp_path / "absent.yml")

    assert isinstance(config, AppConfig)
    assert config.default_browser == "firefox"
    assert config.min_query_length == 2
    assert config.strip_query_params is False
    assert config.staleness_seconds == 0
    assert config.snapshot_dir == Path(tempfile.gettempdir()) / "histsift"
    assert config.browsers == {}
    assert config.logging.level == "INFO"


def test_full_config(tmp_path):
    path = _write(tmp_path, f"""
default_browser: qutebrowser
min_query_length: 3
strip_query_params: true
staleness_seconds: 300
snapshot_dir: {tmp_path / 'snaps'}
logs_dir: {tmp_path / 'logs'}
browsers:
  firefox:
    linux: "~/.mozilla/firefox/*.dev-edition-default/places.sqlite"
    windows: ""
  qutebrowser: "/opt/qb/history.sqlite"
logging:
  level: debug
  log_max_mb: 1
  log_backup_count: 2
""")

    config = load_app_config(path)

    assert config.config_path == path
    assert config.default_browser == "qutebrowser"
    assert config.min_query_length == 3
    assert config.strip_query_params is True
    assert config.staleness_seconds == 300
    assert config.snapshot_dir == tmp_path / "snaps"
    assert config.logs_dir == tmp_path / "logs"
    assert config.browsers["firefox"] == {
        "linux": "~/.mozilla/firefox/*.dev-edition-default/places.sqlite",
        "windows": "",
    }
    assert config.browsers["qutebrowser"]["darwin"] == "/opt/qb/history.sqlite"
    assert config.logging.level == "DEBUG"
    assert config.logging.log_max_mb == 1
    assert config.logging.log_backup_count == 2


def test_negative_numbers_clamped(tmp_path):
    path = _write(tmp_path, "min_query_length: -4\nstaleness_seconds: -10\n")
    config = load_app_config(path)
    assert config.min_query_length == 0
    assert config.staleness_seconds == 0


def test_top_level_must_be_mapping(tmp_path):
    path = _write(tmp_path, "- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_app_config(path)


def test_unknown_default_browser_fails_fast(tmp_path):
    path = _write(tmp_path, "default_browser: netscape\n")
    with pytest.raises(NotConfiguredError, match="netscape"):
        load_app_config(path)


def test_unknown_browser_override_fails_fast(tmp_path):
    path = _write(tmp_path, "browsers:\n  lynx:\n    linux: /tmp/x\n")
    with pytest.raises(NotConfiguredError, match="lynx"):
        load_app_config(path)


def test_config_path_from_environment(tmp_path, monkeypatch):
    target = tmp_path / "elsewhere.yml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(target))
    assert default_config_path() == target


def test_default_path_honours_xdg(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_path() == tmp_path / "histsift" / "config.yml"


@pytest.mark.parametrize("raw, expected", [
    ("false", False), ('"false"', False), ("no", False), ("0", False),
    ('"yes"', True), ("On", True), ("1", True),
])
def test_strip_query_params_words(tmp_path, raw, expected):
    path = _write(tmp_path, f"strip_query_params: {raw}\n")
    assert load_app_config(path).strip_query_params is expected


def test_strip_query_params_rejects_other_values(tmp_path):
    path = _write(tmp_path, "strip_query_params: maybe\n")
    with pytest.raises(ValueError, match="strip_query_params.*true or false"):
        load_app_config(path)


def test_quoted_numbers_accepted(tmp_path):
    path = _write(tmp_path, 'min_query_length: "3"\nstaleness_seconds: "60"\n')
    config = load_app_config(path)
    assert config.min_query_length == 3
    assert config.staleness_seconds == 60


def test_non_numeric_value_names_the_key(tmp_path):
    path = _write(tmp_path, "logging:\n  log_max_mb: lots\n")
    with pytest.raises(ValueError, match="logging.log_max_mb.*must be a number"):
        load_app_config(path)
