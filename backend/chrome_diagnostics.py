"""Read-only inspection of the browser cache and a default Playwright launch."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from browser_settings import BrowserSettings
from chrome_locator import list_version_directories
from playwright_environment import LaunchResult, PlaywrightLauncher, smoke_test


logger = logging.getLogger(__name__)

EXECUTABLE_SUFFIXES = (
    os.path.join("chrome-linux64", "chrome"),
    os.path.join("chrome-linux", "chrome"),
    "chrome",
)


@dataclass
class CacheReport:
    cache_dir: str
    exists: bool = False
    contents: List[str] = field(default_factory=list)
    chrome_dir_exists: bool = False
    chrome_contents: List[str] = field(default_factory=list)
    # (version directory, executable path or None)
    versions: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def executables(self) -> List[str]:
        return [path for _, path in self.versions if path]


def _find_version_executable(version_dir: str) -> Optional[str]:
    for suffix in EXECUTABLE_SUFFIXES:
        candidate = os.path.join(version_dir, suffix)
        if os.path.isfile(candidate):
            return candidate
    return None


def inspect_cache_directory(cache_dir: str) -> CacheReport:
    report = CacheReport(cache_dir=cache_dir)
    report.exists = os.path.isdir(cache_dir)
    if not report.exists:
        return report

    try:
        report.contents = sorted(os.listdir(cache_dir))
    except OSError as e:
        report.error = str(e)
        logger.warning("Error reading cache directory %s: %s", cache_dir, e)
        return report

    chrome_dir = os.path.join(cache_dir, "chrome")
    report.chrome_dir_exists = os.path.isdir(chrome_dir)
    if not report.chrome_dir_exists:
        return report

    report.chrome_contents = list_version_directories(chrome_dir)
    for name in report.chrome_contents:
        report.versions.append((name, _find_version_executable(os.path.join(chrome_dir, name))))
    return report


async def check_default_launch(settings: BrowserSettings) -> LaunchResult:
    """Smoke-test Playwright's own Chromium resolution."""
    try:
        async with PlaywrightLauncher(
            args=settings.chrome_args,
            timeout_ms=settings.launch_timeout_ms,
        ) as launcher:
            return await smoke_test(launcher)
    except Exception as e:
        logger.error("Failed to start Playwright: %s", e)
        return LaunchResult(ok=False, error=str(e))


__all__ = ["CacheReport", "check_default_launch", "inspect_cache_directory"]
