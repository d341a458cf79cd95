"""Tests for environment-driven browser settings."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from browser_settings import (  # noqa: E402  pylint: disable=wrong-import-position
    DEFAULT_CACHE_DIR,
    DEFAULT_LAUNCH_TIMEOUT_MS,
    BrowserSettings,
    load_browser_settings,
)


def test_defaults_with_empty_environment() -> None:
    settings = load_browser_settings({})

    assert settings.cache_dir == DEFAULT_CACHE_DIR
    assert settings.chrome_version == "127.0.6533.88"
    assert settings.executable_override is None
    assert settings.skip_download is False
    assert settings.launch_timeout_ms == DEFAULT_LAUNCH_TIMEOUT_MS
    assert "--no-sandbox" in settings.chrome_args


def test_cache_dir_env_keys_in_priority_order() -> None:
    env = {"PUPPETEER_CACHE_DIR": "/srv/puppeteer", "PLAYWRIGHT_BROWSERS_PATH": "  /srv/ms-playwright "}

    assert load_browser_settings(env).cache_dir == "/srv/ms-playwright"
    assert load_browser_settings({"PUPPETEER_CACHE_DIR": "/srv/puppeteer"}).cache_dir == "/srv/puppeteer"


def test_skip_download_flag_parsing() -> None:
    assert load_browser_settings({"PLAYWRIGHT_SKIP_BROWSER_DOWNLOAD": "1"}).skip_download is True
    assert load_browser_settings({"PUPPETEER_SKIP_CHROMIUM_DOWNLOAD": "false"}).skip_download is False
    assert load_browser_settings({"PUPPETEER_SKIP_CHROMIUM_DOWNLOAD": "maybe"}).skip_download is False


def test_invalid_timeouts_fall_back_to_defaults() -> None:
    env = {
        "BROWSER_LAUNCH_TIMEOUT_MS": "soon",
        "BROWSER_DOWNLOAD_TIMEOUT_MS": "-5",
        "BROWSER_INSTALL_TIMEOUT_S": "120",
    }

    settings = load_browser_settings(env)

    assert settings.launch_timeout_ms == DEFAULT_LAUNCH_TIMEOUT_MS
    assert settings.download_timeout_ms == 60000
    assert settings.install_timeout_s == 120


def test_executable_override_and_version() -> None:
    env = {"CHROME_EXECUTABLE_PATH": "/opt/chrome/chrome", "CHROME_VERSION": "128.0.6613.84"}

    settings = load_browser_settings(env)

    assert settings.executable_override == "/opt/chrome/chrome"
    assert settings.chrome_version == "128.0.6613.84"


def test_cache_roots_are_expanded_and_deduplicated() -> None:
    settings = BrowserSettings(cache_dir="/a", extra_cache_dirs=("/b", "/a", "~/.cache/ms-playwright"))

    roots = settings.cache_roots

    assert roots[:2] == ("/a", "/b")
    assert len(roots) == 3
    assert not roots[2].startswith("~")
