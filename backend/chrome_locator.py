"""Find a headless Chrome binary among cached and system install locations.

Candidates are plain paths checked in order. A candidate may carry one ``*``
in a single path segment (``chrome/linux-*/chrome-linux64/chrome``); the
directory before that segment is listed and every matching subdirectory is
tried with the remaining suffix, newest version first.
"""
from __future__ import annotations

import fnmatch
import logging
import os
import re
from typing import Iterable, List, Optional

from browser_settings import BrowserSettings, load_browser_settings


logger = logging.getLogger(__name__)

WILDCARD = "*"

# Layouts relative to a cache root. ``{version}`` is filled with the pinned
# version and with the wildcard marker.
CACHE_LAYOUTS = (
    "chrome/linux-{version}/chrome-linux64/chrome",
    "chrome/linux-{version}/chrome-linux/chrome",
    "chrome/linux-{version}/chrome",
    "chrome-headless-shell/linux-{version}/chrome-headless-shell-linux64/chrome-headless-shell",
)
# Playwright's own cache uses build numbers, never the Chrome version.
PLAYWRIGHT_LAYOUTS = (
    "chromium-*/chrome-linux64/chrome",
    "chromium-*/chrome-linux/chrome",
    "chromium_headless_shell-*/chrome-headless-shell-linux64/chrome-headless-shell",
    "chromium_headless_shell-*/chrome-linux/headless_shell",
)

_NUMBER_RE = re.compile(r"(\d+)")


def _natural_key(name: str):
    return [int(part) if part.isdigit() else part for part in _NUMBER_RE.split(name)]


def _is_file(path: str) -> bool:
    try:
        return os.path.isfile(path)
    except (OSError, ValueError):
        return False


def build_cache_candidates(cache_root: str, chrome_version: str | None = None) -> List[str]:
    """Versioned cache candidates under *cache_root*, pinned version before wildcard."""
    versions = [chrome_version, WILDCARD] if chrome_version else [WILDCARD]
    candidates = []
    for layout in CACHE_LAYOUTS:
        for version in versions:
            candidates.append(os.path.join(cache_root, layout.format(version=version)))
    candidates.extend(os.path.join(cache_root, layout) for layout in PLAYWRIGHT_LAYOUTS)
    return candidates


def build_download_candidates(cache_root: str, chrome_version: str | None = None) -> List[str]:
    """Candidates for a fresh ``playwright install`` into *cache_root*, its own layouts first."""
    candidates = [os.path.join(cache_root, layout) for layout in PLAYWRIGHT_LAYOUTS]
    candidates.extend(c for c in build_cache_candidates(cache_root, chrome_version) if c not in candidates)
    return candidates


def build_candidate_paths(settings: BrowserSettings | None = None) -> List[str]:
    """Return the ordered candidate list for *settings*.

    The explicit executable override comes first, then every cache root's
    layouts, then the conventional system install locations.
    """
    if settings is None:
        settings = load_browser_settings()

    candidates: List[str] = []
    if settings.executable_override:
        candidates.append(settings.executable_override)
    for root in settings.cache_roots:
        candidates.extend(build_cache_candidates(root, settings.chrome_version))
    candidates.extend(settings.system_paths)
    return list(dict.fromkeys(candidates))


def list_version_directories(directory: str, pattern: str = WILDCARD) -> List[str]:
    """Subdirectory names of *directory* matching *pattern*, newest first.

    A missing or unreadable directory has no subdirectories.
    """
    try:
        entries = os.listdir(directory)
    except (OSError, ValueError) as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return []

    matches = []
    for name in entries:
        if not fnmatch.fnmatchcase(name, pattern):
            continue
        try:
            if os.path.isdir(os.path.join(directory, name)):
                matches.append(name)
        except OSError:
            continue
    return sorted(matches, key=_natural_key, reverse=True)


def _split_wildcard(candidate: str):
    """Split *candidate* into (base dir, wildcard segment, suffix)."""
    marker = candidate.index(WILDCARD)
    base_end = candidate.rfind(os.sep, 0, marker)
    segment_end = candidate.find(os.sep, marker)
    if segment_end == -1:
        segment_end = len(candidate)

    base = candidate[:base_end] if base_end > 0 else (os.sep if base_end == 0 else os.curdir)
    segment = candidate[base_end + 1:segment_end]
    suffix = candidate[segment_end + 1:]
    return base, segment, suffix


def expand_wildcard_candidate(candidate: str) -> List[str]:
    """Every existing file matching a wildcard *candidate*, newest version first."""
    base, segment, suffix = _split_wildcard(candidate)
    if not os.path.isdir(base):
        return []

    found = []
    for name in list_version_directories(base, segment):
        path = os.path.join(base, name, suffix) if suffix else os.path.join(base, name)
        if _is_file(path):
            found.append(path)
    return found


def find_chrome_executable(
    candidates: Optional[Iterable[str]] = None,
    settings: BrowserSettings | None = None,
    exclude: Iterable[str] = (),
) -> Optional[str]:
    """Return the first candidate that exists on disk, or ``None``.

    Paths in *exclude* are treated as absent.
    """
    skipped = set(exclude)
    if candidates is None:
        candidates = build_candidate_paths(settings)

    logger.info("Searching for Chrome executable...")
    for candidate in candidates:
        if not candidate:
            continue
        logger.debug("Checking: %s", candidate)
        if WILDCARD in candidate:
            matches = [m for m in expand_wildcard_candidate(candidate) if m not in skipped]
            if matches:
                logger.info("Found Chrome executable: %s", matches[0])
                return matches[0]
        elif candidate not in skipped and _is_file(candidate):
            logger.info("Found Chrome executable: %s", candidate)
            return candidate

    logger.info("No Chrome executable found")
    return None


__all__ = [
    "build_cache_candidates",
    "build_download_candidates",
    "build_candidate_paths",
    "expand_wildcard_candidate",
    "find_chrome_executable",
    "list_version_directories",
]
