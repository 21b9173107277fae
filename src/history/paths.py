"""
Path resolution for browser history databases.

Turns a browser identifier and OS into a concrete history file:
- Environment variable expansion (``~``, ``$VAR``, ``${VAR}``, ``%VAR%``)
- Glob expansion for randomized profile folders, first match in sorted order
- Per-browser/per-OS template overrides from configuration
"""

from __future__ import annotations

import glob
import os
import re
import sys
from pathlib import Path
from typing import Mapping, Optional

from core.logging import get_logger

from ._patterns import OS_KINDS, get_profile
from .exceptions import NotConfiguredError, PathNotFoundError

LOGGER = get_logger("history.paths")

TemplateOverrides = Mapping[str, Mapping[str, str]]

_PERCENT_VAR = re.compile(r"%([^%/\\]+)%")
_DOLLAR_VAR = re.compile(r"\$(?:\{([^}]+)\}|([A-Za-z_][A-Za-z0-9_]*))")


def current_os_kind() -> str:
    """Map ``sys.platform`` onto one of ``linux``, ``darwin``, ``windows``."""
    if sys.platform.startswith("win") or sys.platform == "cygwin":
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    return "linux"


def expand_env_vars(
    template: str,
    environ: Optional[Mapping[str, str]] = None,
    escape: bool = False,
) -> str:
    """
    Expand environment variables in a path template.

    Unknown variables are left in place so the path simply fails to match.
    With ``escape``, substituted values are glob-escaped so only the
    template's own wildcards stay magic.

    Example:
        >>> expand_env_vars("%APPDATA%/Mozilla", {"APPDATA": "C:/Users/jo/AppData/Roaming"})
        "C:/Users/jo/AppData/Roaming/Mozilla"
    """
    env = os.environ if environ is None else environ
    quote = glob.escape if escape else (lambda value: value)

    def _percent(match: re.Match) -> str:
        name = match.group(1)
        for key in (name, name.upper()):
            if key in env:
                return quote(env[key])
        return match.group(0)

    def _dollar(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        return quote(env[name]) if name in env else match.group(0)

    result = _PERCENT_VAR.sub(_percent, template)
    result = _DOLLAR_VAR.sub(_dollar, result)

    if result == "~" or result.startswith(("~/", "~\\")):
        home = env.get("HOME") or env.get("USERPROFILE") or str(Path.home())
        result = quote(home) + result[1:]

    return result.replace("\\", "/")


def get_template(
    browser: str,
    os_kind: str,
    overrides: Optional[TemplateOverrides] = None,
) -> str:
    """
    Return the path template for a browser on an OS.

    Configured overrides take precedence over the bundled templates. A
    blank override explicitly disables the browser on that OS.

    Raises:
        NotConfiguredError: Unknown browser or OS, or no template
    """
    if os_kind not in OS_KINDS:
        raise NotConfiguredError(browser, os_kind, "unknown operating system")

    profile = get_profile(browser)
    browser_overrides = (overrides or {}).get(browser) or {}
    if os_kind in browser_overrides:
        template = (browser_overrides[os_kind] or "").strip()
    else:
        template = profile.template_for(os_kind) or ""

    if not template:
        raise NotConfiguredError(browser, os_kind, "no history path template")
    return template


def resolve(
    browser: str,
    os_kind: Optional[str] = None,
    overrides: Optional[TemplateOverrides] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Resolve a browser's live history database path.

    Args:
        browser: Browser identifier (e.g. ``firefox``)
        os_kind: ``linux``, ``darwin`` or ``windows`` (default: current OS)
        overrides: Config overrides, browser -> OS -> template
        environ: Environment used for variable expansion (default: os.environ)

    Returns:
        Path to an existing history file

    Raises:
        NotConfiguredError: No template for this browser and OS
        PathNotFoundError: Nothing on disk matches the template
    """
    os_kind = os_kind or current_os_kind()
    template = get_template(browser, os_kind, overrides)
    pattern = expand_env_vars(template, environ)

    if glob.has_magic(template):
        escaped = expand_env_vars(template, environ, escape=True)
        matches = sorted(p for p in glob.glob(escaped) if os.path.isfile(p))
        if not matches:
            raise PathNotFoundError(browser, pattern)
        if len(matches) > 1:
            LOGGER.debug("%d profiles match %s, using %s", len(matches), pattern, matches[0])
        return Path(matches[0])

    path = Path(pattern)
    if not path.is_file():
        raise PathNotFoundError(browser, pattern)
    return path
