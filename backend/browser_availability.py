"""Make sure a working headless Chrome is available before the app needs one.

``ensure_browser`` walks an ordered tuple of strategies (cached binary,
Playwright's default, forced download, system install). Each strategy gets
the shared :class:`EnsureContext` and returns a successful
:class:`LaunchResult` or ``None`` to hand over to the next one. The resolved
executable path comes back in :class:`BrowserAvailability`; nothing is stored
in ``os.environ``.
"""
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Set, Tuple

from browser_settings import BrowserSettings, load_browser_settings
from chrome_locator import build_download_candidates, find_chrome_executable
from playwright_environment import BrowserLauncher, LaunchResult, PlaywrightLauncher, smoke_test
from playwright_install import install_chromium


logger = logging.getLogger(__name__)

Installer = Callable[[BrowserSettings], bool]


@dataclass
class EnsureContext:
    settings: BrowserSettings
    launcher: BrowserLauncher
    installer: Installer
    tried_paths: Set[str] = field(default_factory=set)

    async def try_launch(self, executable_path: Optional[str], timeout_ms: Optional[int] = None) -> LaunchResult:
        if executable_path:
            self.tried_paths.add(executable_path)
        return await smoke_test(
            self.launcher,
            executable_path=executable_path,
            timeout_ms=timeout_ms or self.settings.launch_timeout_ms,
        )


@dataclass
class BrowserAvailability:
    available: bool
    executable_path: Optional[str] = None
    version: Optional[str] = None
    tier: Optional[str] = None
    attempts: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.available


Strategy = Callable[[EnsureContext], Awaitable[Optional[LaunchResult]]]


async def use_cached_binary(ctx: EnsureContext) -> Optional[LaunchResult]:
    path = find_chrome_executable(settings=ctx.settings)
    if not path:
        return None

    result = await ctx.try_launch(path)
    return result if result.ok else None


async def use_default_launch(ctx: EnsureContext) -> Optional[LaunchResult]:
    logger.info("Testing default Playwright Chrome...")
    result = await ctx.try_launch(None)
    if result.missing_browser:
        logger.info("Playwright's bundled Chromium is not downloaded yet")
    return result if result.ok else None


async def download_browser(ctx: EnsureContext) -> Optional[LaunchResult]:
    settings = ctx.settings
    if settings.skip_download:
        logger.info("Browser download disabled; skipping download")
        return None

    logger.info("Attempting to download Chrome into %s...", settings.cache_dir)
    loop = asyncio.get_running_loop()
    installed = await loop.run_in_executor(None, ctx.installer, settings)
    if not installed:
        logger.error("Chrome download failed")
        return None

    downloaded = find_chrome_executable(
        build_download_candidates(settings.cache_dir, settings.chrome_version),
        exclude=ctx.tried_paths,
    )
    if downloaded is None:
        logger.warning("Download finished but no binary found under %s; trying library default", settings.cache_dir)

    result = await ctx.try_launch(downloaded, timeout_ms=settings.download_timeout_ms)
    if result.ok:
        logger.info("Chrome installation verified")
        return result
    return None


async def use_system_binary(ctx: EnsureContext) -> Optional[LaunchResult]:
    logger.info("Checking for system Chrome...")
    for chrome_path in ctx.settings.system_paths:
        if chrome_path in ctx.tried_paths or not os.path.isfile(chrome_path):
            continue

        logger.info("Found system Chrome: %s", chrome_path)
        result = await ctx.try_launch(chrome_path)
        if result.ok:
            logger.info("System Chrome verified")
            return result
    return None


DEFAULT_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("cached", use_cached_binary),
    ("default", use_default_launch),
    ("download", download_browser),
    ("system", use_system_binary),
)


async def _run_strategies(ctx: EnsureContext, strategies: Sequence[Tuple[str, Strategy]]) -> BrowserAvailability:
    attempts: List[str] = []
    for name, strategy in strategies:
        attempts.append(name)
        try:
            result = await strategy(ctx)
        except Exception as e:
            logger.error("Browser strategy '%s' failed unexpectedly: %s", name, e)
            continue

        if result is not None and result.ok:
            return BrowserAvailability(
                available=True,
                executable_path=result.executable_path,
                version=result.version,
                tier=name,
                attempts=attempts,
            )
        logger.info("Browser strategy '%s' did not produce a working Chrome", name)

    logger.error("All Chrome availability strategies failed")
    return BrowserAvailability(available=False, attempts=attempts)


async def ensure_browser(
    settings: BrowserSettings | None = None,
    launcher: BrowserLauncher | None = None,
    installer: Installer | None = None,
    strategies: Sequence[Tuple[str, Strategy]] = DEFAULT_STRATEGIES,
) -> BrowserAvailability:
    """Run the availability strategies in order until one yields a working Chrome.

    Never raises. When *launcher* is omitted a :class:`PlaywrightLauncher` is
    started for the duration of the call.
    """
    if settings is None:
        settings = load_browser_settings()
    if installer is None:
        installer = install_chromium

    logger.info("Starting Chrome availability check...")
    try:
        if launcher is not None:
            ctx = EnsureContext(settings=settings, launcher=launcher, installer=installer)
            return await _run_strategies(ctx, strategies)

        async with PlaywrightLauncher(
            args=settings.chrome_args,
            timeout_ms=settings.launch_timeout_ms,
        ) as playwright_launcher:
            ctx = EnsureContext(settings=settings, launcher=playwright_launcher, installer=installer)
            return await _run_strategies(ctx, strategies)
    except Exception as e:
        logger.error("Chrome availability check failed: %s", e)
        return BrowserAvailability(available=False)


async def ensure_browser_available(
    settings: BrowserSettings | None = None,
    launcher: BrowserLauncher | None = None,
    installer: Installer | None = None,
    strategies: Sequence[Tuple[str, Strategy]] = DEFAULT_STRATEGIES,
) -> bool:
    """Boolean form of :func:`ensure_browser`."""
    result = await ensure_browser(settings=settings, launcher=launcher, installer=installer, strategies=strategies)
    return result.available


__all__ = [
    "DEFAULT_STRATEGIES",
    "BrowserAvailability",
    "EnsureContext",
    "download_browser",
    "ensure_browser",
    "ensure_browser_available",
    "use_cached_binary",
    "use_default_launch",
    "use_system_binary",
]
