"""Tests for the Playwright CLI download helpers."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

import playwright_install  # noqa: E402  pylint: disable=wrong-import-position
from browser_settings import BrowserSettings  # noqa: E402  pylint: disable=wrong-import-position


def test_install_environment_targets_cache_dir() -> None:
    settings = BrowserSettings(cache_dir="/opt/render/.cache/puppeteer")
    base = {
        "PATH": "/usr/bin",
        "PLAYWRIGHT_SKIP_BROWSER_DOWNLOAD": "1",
        "PUPPETEER_SKIP_CHROMIUM_DOWNLOAD": "true",
    }

    env = playwright_install.build_install_environment(settings, base)

    assert env == {"PATH": "/usr/bin", "PLAYWRIGHT_BROWSERS_PATH": "/opt/render/.cache/puppeteer"}
    assert "PLAYWRIGHT_SKIP_BROWSER_DOWNLOAD" in base


def test_install_falls_through_failed_commands(monkeypatch) -> None:
    calls = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        if command[0] == "playwright":
            raise FileNotFoundError(command[0])
        if "--with-deps" not in command:
            raise subprocess.CalledProcessError(1, command, output="", stderr="no space left")
        return subprocess.CompletedProcess(command, 0, stdout="downloaded", stderr="")

    monkeypatch.setattr(playwright_install.subprocess, "run", fake_run)
    settings = BrowserSettings(cache_dir="/tmp/browsers", install_timeout_s=42)

    assert playwright_install.install_chromium(settings) is True
    assert len(calls) == 4
    assert calls[-1][0] == [sys.executable, "-m", "playwright", "install", "--with-deps", "chromium"]
    assert calls[-1][1]["timeout"] == 42
    assert calls[-1][1]["env"]["PLAYWRIGHT_BROWSERS_PATH"] == "/tmp/browsers"


def test_install_reports_failure_when_every_command_fails(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

    monkeypatch.setattr(playwright_install.subprocess, "run", fake_run)

    assert playwright_install.install_chromium(BrowserSettings()) is False


def test_missing_browser_error_detection() -> None:
    err = RuntimeError("BrowserType.launch: Executable doesn't exist at /root/.cache/ms-playwright/chromium-1124")

    assert playwright_install.is_missing_browser_error(err) is True
    assert playwright_install.is_missing_browser_error(RuntimeError("Timeout 30000ms exceeded")) is False
    assert playwright_install.is_missing_browser_error(None) is False
