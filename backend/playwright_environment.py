"""Utilities for launching and inspecting Playwright's Chromium on a deploy host."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

import psutil
from playwright.async_api import async_playwright

from browser_settings import CHROME_ARGS, DEFAULT_LAUNCH_TIMEOUT_MS
from playwright_install import is_missing_browser_error


logger = logging.getLogger(__name__)

_BROWSER_NAMES = ("chrome", "chromium", "headless_shell")


class BrowserLauncher(Protocol):
    async def launch(self, executable_path: Optional[str] = None, timeout_ms: Optional[int] = None) -> Any: ...


@dataclass
class LaunchResult:
    ok: bool
    executable_path: Optional[str] = None
    version: Optional[str] = None
    error: Optional[str] = None
    missing_browser: bool = False


class PlaywrightLauncher:
    """Owns one Playwright driver and launches headless Chromium on demand.

    Use as ``async with PlaywrightLauncher() as launcher``; every browser it
    returns must be closed by the caller.
    """

    def __init__(
        self,
        args: Sequence[str] = CHROME_ARGS,
        timeout_ms: int = DEFAULT_LAUNCH_TIMEOUT_MS,
        headless: bool = True,
    ) -> None:
        self.args = list(args)
        self.timeout_ms = timeout_ms
        self.headless = headless
        self._manager = None
        self._playwright = None

    async def __aenter__(self) -> "PlaywrightLauncher":
        self._manager = async_playwright()
        self._playwright = await self._manager.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._playwright is not None:
            await self._playwright.stop()
        self._playwright = None
        self._manager = None

    async def launch(self, executable_path: Optional[str] = None, timeout_ms: Optional[int] = None):
        if self._playwright is None:
            raise RuntimeError("PlaywrightLauncher used outside 'async with'")

        options: Dict[str, Any] = {
            "headless": self.headless,
            "args": self.args,
            "timeout": timeout_ms or self.timeout_ms,
            "chromium_sandbox": False,
        }
        if executable_path:
            options["executable_path"] = executable_path

        logger.debug("Launching Chromium with %s chrome flags", len(self.args))
        return await self._playwright.chromium.launch(**options)


async def smoke_test(
    launcher: BrowserLauncher,
    executable_path: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> LaunchResult:
    """Launch a browser, read its version and close it again.

    The browser is closed even when the version query fails. Launch errors
    are returned in the result rather than raised.
    """
    label = executable_path or "<playwright default>"
    try:
        browser = await launcher.launch(executable_path=executable_path, timeout_ms=timeout_ms)
    except Exception as e:
        logger.warning("Failed to launch Chrome (%s): %s", label, e)
        return LaunchResult(
            ok=False,
            executable_path=executable_path,
            error=str(e),
            missing_browser=is_missing_browser_error(e),
        )

    try:
        version = browser.version
        logger.info("Chrome is working (%s): %s", label, version)
        return LaunchResult(ok=True, executable_path=executable_path, version=version)
    except Exception as e:
        logger.warning("Chrome launched but version check failed (%s): %s", label, e)
        return LaunchResult(ok=False, executable_path=executable_path, error=str(e))
    finally:
        try:
            await browser.close()
        except Exception as e:
            logger.warning("Failed to close browser (%s): %s", label, e)


def list_browser_processes() -> List[Dict[str, Any]]:
    """Return ``pid``/``name`` for running Chrome/Chromium processes."""
    own_pid = os.getpid()
    found = []
    for proc in psutil.process_iter(["pid", "name", "cmdline"]):
        try:
            if proc.info.get("pid") == own_pid:
                continue
            name = proc.info.get("name") or ""
            cmdline = proc.info.get("cmdline") or []
            program = os.path.basename(cmdline[0]) if cmdline else ""
            haystack = f"{name} {program}".lower()
            if any(b in haystack for b in _BROWSER_NAMES):
                found.append({"pid": proc.info.get("pid"), "name": name})
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return found


__all__ = [
    "BrowserLauncher",
    "LaunchResult",
    "PlaywrightLauncher",
    "list_browser_processes",
    "smoke_test",
]
