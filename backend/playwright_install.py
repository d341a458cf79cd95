"""Utility helpers for downloading Chromium through the Playwright CLI."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Dict, Iterable, Mapping

from browser_settings import SKIP_DOWNLOAD_ENV_KEYS, BrowserSettings

# Known fragments that indicate the Playwright browser executable is missing.
_MISSING_BROWSER_MARKERS: tuple[str, ...] = (
    "executable doesn't exist at",
    "playwright install",
    "download new browsers",
    "browser has not been found",
)


def is_missing_browser_error(exc: BaseException | None) -> bool:
    """Return ``True`` when *exc* suggests the Playwright browser is missing."""
    if exc is None:
        return False
    message = str(exc) or ""
    lowered = message.lower()
    return any(marker in lowered for marker in _MISSING_BROWSER_MARKERS)


def build_install_environment(
    settings: BrowserSettings,
    base: Mapping[str, str] | None = None,
) -> Dict[str, str]:
    """Environment for the installer: download into the cache dir, never skip."""
    env = dict(os.environ if base is None else base)
    env["PLAYWRIGHT_BROWSERS_PATH"] = settings.cache_dir
    for key in SKIP_DOWNLOAD_ENV_KEYS:
        env.pop(key, None)
    return env


def _run_install_command(
    command: Iterable[str],
    logger: logging.Logger | None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> bool:
    """Execute *command* and report success, capturing stdout/stderr for logs."""
    command = list(command)
    try:
        completed = subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            env=dict(env) if env is not None else None,
            timeout=timeout,
        )
    except FileNotFoundError:
        if logger:
            logger.debug("Playwright CLI not found when running %s", " ".join(command))
        return False
    except subprocess.TimeoutExpired:
        if logger:
            logger.error("Playwright install command timed out after %ss (%s)", timeout, " ".join(command))
        return False
    except subprocess.CalledProcessError as err:
        if logger:
            stderr = (err.stderr or err.stdout or str(err)).strip()
            logger.error("Playwright install command failed (%s): %s", " ".join(command), stderr)
        return False

    if logger:
        stdout = (completed.stdout or "").strip()
        stderr = (completed.stderr or "").strip()
        logger.info("Successfully executed '%s'", " ".join(command))
        if stdout:
            logger.debug(stdout)
        if stderr:
            logger.debug(stderr)
    return True


def install_chromium(
    settings: BrowserSettings,
    logger: logging.Logger | None = None,
    browser: str = "chromium",
) -> bool:
    """Download the Playwright *browser* into ``settings.cache_dir``.

    Returns ``True`` if one of the installation commands completed successfully.
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    env = build_install_environment(settings)
    commands = [
        ("playwright", "install", browser),
        ("playwright", "install", "--with-deps", browser),
        (sys.executable, "-m", "playwright", "install", browser),
        (sys.executable, "-m", "playwright", "install", "--with-deps", browser),
    ]

    logger.info("Downloading %s into %s", browser, settings.cache_dir)
    for command in commands:
        if _run_install_command(command, logger, env=env, timeout=settings.install_timeout_s):
            return True

    logger.error("Unable to install Playwright %s browser automatically", browser)
    return False
