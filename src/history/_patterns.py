"""
History database path templates per browser and operating system.

Templates may contain ``~``, ``$VAR``/``${VAR}`` and ``%VAR%`` environment
variables plus glob wildcards for profile folders whose name differs per
installation (Firefox's randomized ``xxxxxxxx.default-release``). An empty
template means the browser has no known history location on that OS.

Usage:
    from history._patterns import BROWSER_PROFILES, get_profile

    template = get_profile("firefox").template_for("linux")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .dialects import SchemaDialect, get_dialect
from .exceptions import NotConfiguredError

OS_KINDS = ("linux", "darwin", "windows")


@dataclass(frozen=True)
class BrowserProfile:
    """A browser identifier with its path templates and schema dialect."""

    browser: str
    display_name: str
    paths: Mapping[str, str] = field(default_factory=dict)

    @property
    def dialect(self) -> SchemaDialect:
        return get_dialect(self.browser)

    def template_for(self, os_kind: str) -> Optional[str]:
        """Return the non-empty template for an OS, or None."""
        template = (self.paths.get(os_kind) or "").strip()
        return template or None


BROWSER_PROFILES: Dict[str, BrowserProfile] = {
    # =========================================================================
    # Chromium family
    # =========================================================================
    "chrome": BrowserProfile(
        browser="chrome",
        display_name="Google Chrome",
        paths={
            "linux": "~/.config/google-chrome/Default/History",
            "darwin": "~/Library/Application Support/Google/Chrome/Default/History",
            "windows": "%LOCALAPPDATA%/Google/Chrome/User Data/Default/History",
        },
    ),
    "chromium": BrowserProfile(
        browser="chromium",
        display_name="Chromium",
        paths={
            "linux": "~/.config/chromium/Default/History",
            "darwin": "~/Library/Application Support/Chromium/Default/History",
            "windows": "%LOCALAPPDATA%/Chromium/User Data/Default/History",
        },
    ),
    "brave": BrowserProfile(
        browser="brave",
        display_name="Brave",
        paths={
            "linux": "~/.config/BraveSoftware/Brave-Browser/Default/History",
            "darwin": "~/Library/Application Support/BraveSoftware/Brave-Browser/Default/History",
            "windows": "%LOCALAPPDATA%/BraveSoftware/Brave-Browser/User Data/Default/History",
        },
    ),
    "edge": BrowserProfile(
        browser="edge",
        display_name="Microsoft Edge",
        paths={
            "linux": "~/.config/microsoft-edge/Default/History",
            "darwin": "~/Library/Application Support/Microsoft Edge/Default/History",
            "windows": "%LOCALAPPDATA%/Microsoft/Edge/User Data/Default/History",
        },
    ),
    "vivaldi": BrowserProfile(
        browser="vivaldi",
        display_name="Vivaldi",
        paths={
            "linux": "~/.config/vivaldi/Default/History",
            "darwin": "~/Library/Application Support/Vivaldi/Default/History",
            "windows": "%LOCALAPPDATA%/Vivaldi/User Data/Default/History",
        },
    ),
    # =========================================================================
    # Firefox (randomized profile folder)
    # =========================================================================
    "firefox": BrowserProfile(
        browser="firefox",
        display_name="Mozilla Firefox",
        paths={
            "linux": "~/.mozilla/firefox/*.default-release/places.sqlite",
            "darwin": "~/Library/Application Support/Firefox/Profiles/*.default-release/places.sqlite",
            "windows": "%APPDATA%/Mozilla/Firefox/Profiles/*.default-release/places.sqlite",
        },
    ),
    # =========================================================================
    # Safari (macOS only)
    # =========================================================================
    "safari": BrowserProfile(
        browser="safari",
        display_name="Safari",
        paths={
            "linux": "",
            "darwin": "~/Library/Safari/History.db",
            "windows": "",
        },
    ),
    # =========================================================================
    # qutebrowser
    # =========================================================================
    "qutebrowser": BrowserProfile(
        browser="qutebrowser",
        display_name="qutebrowser",
        paths={
            "linux": "~/.local/share/qutebrowser/history.sqlite",
            "darwin": "~/Library/Application Support/qutebrowser/history.sqlite",
            "windows": "",
        },
    ),
}


def get_profile(browser: str) -> BrowserProfile:
    """Return the bundled profile for a browser identifier."""
    try:
        return BROWSER_PROFILES[browser]
    except KeyError:
        raise NotConfiguredError(browser, reason="unknown browser") from None


def get_all_browsers() -> List[str]:
    """Return all browser identifiers with bundled path templates."""
    return list(BROWSER_PROFILES.keys())


def get_browser_display_name(browser: str) -> str:
    """Return a human-friendly browser name, falling back to the identifier."""
    profile = BROWSER_PROFILES.get(browser)
    return profile.display_name if profile else browser
