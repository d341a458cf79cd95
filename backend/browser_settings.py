import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = "/opt/render/.cache/puppeteer"
DEFAULT_CHROME_VERSION = "127.0.6533.88"
DEFAULT_LAUNCH_TIMEOUT_MS = 30000
DEFAULT_DOWNLOAD_TIMEOUT_MS = 60000
DEFAULT_INSTALL_TIMEOUT_S = 10 * 60

CACHE_DIR_ENV_KEYS = (
    "PLAYWRIGHT_BROWSERS_PATH",
    "PUPPETEER_CACHE_DIR",
    "CHROME_CACHE_DIR",
)
SKIP_DOWNLOAD_ENV_KEYS = (
    "PLAYWRIGHT_SKIP_BROWSER_DOWNLOAD",
    "PUPPETEER_SKIP_CHROMIUM_DOWNLOAD",
)
EXECUTABLE_PATH_ENV_KEY = "CHROME_EXECUTABLE_PATH"

# Cache roots that deploy hosts have been seen to use, checked after the configured one.
KNOWN_CACHE_DIRS = (
    "/opt/render/.cache/puppeteer",
    "/opt/render/project/.cache/puppeteer",
    "~/.cache/ms-playwright",
)

SYSTEM_CHROME_PATHS = (
    "/usr/bin/google-chrome-stable",
    "/usr/bin/google-chrome",
    "/usr/bin/chromium-browser",
    "/usr/bin/chromium",
)

CHROME_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
    "--no-zygote",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class BrowserSettings:
    cache_dir: str = DEFAULT_CACHE_DIR
    extra_cache_dirs: Tuple[str, ...] = KNOWN_CACHE_DIRS
    chrome_version: str = DEFAULT_CHROME_VERSION
    executable_override: Optional[str] = None
    skip_download: bool = False
    launch_timeout_ms: int = DEFAULT_LAUNCH_TIMEOUT_MS
    download_timeout_ms: int = DEFAULT_DOWNLOAD_TIMEOUT_MS
    install_timeout_s: int = DEFAULT_INSTALL_TIMEOUT_S
    system_paths: Tuple[str, ...] = SYSTEM_CHROME_PATHS
    chrome_args: Tuple[str, ...] = field(default=CHROME_ARGS)

    @property
    def cache_roots(self) -> Tuple[str, ...]:
        """Configured cache dir first, then the known defaults, without repeats."""
        roots = [self.cache_dir, *self.extra_cache_dirs]
        expanded = [os.path.expanduser(root) for root in roots if root]
        return tuple(dict.fromkeys(expanded))


def _first_env_value(environ: Mapping[str, str], keys) -> Tuple[Optional[str], Optional[str]]:
    for key in keys:
        val = environ.get(key)
        if val is not None and val.strip():
            return key, val.strip()
    return None, None


def _parse_flag(value: str | None, source: str | None, default: bool) -> bool:
    if value is None:
        return default

    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    logger.warning(
        "Invalid boolean value '%s' from %s. Falling back to %s.",
        value,
        source,
        default,
    )
    return default


def _parse_positive_int(environ: Mapping[str, str], key: str, fallback: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return fallback

    try:
        parsed = int(raw.strip())
    except ValueError:
        parsed = 0

    if parsed <= 0:
        logger.warning(
            "Invalid value '%s' for %s. Falling back to %s.",
            raw,
            key,
            fallback,
        )
        return fallback
    return parsed


def load_browser_settings(environ: Mapping[str, str] | None = None) -> BrowserSettings:
    """Read browser bootstrap settings from *environ* (``os.environ`` by default)."""
    if environ is None:
        environ = os.environ

    cache_key, cache_dir = _first_env_value(environ, CACHE_DIR_ENV_KEYS)
    if cache_dir:
        logger.debug("Using browser cache dir %s from %s", cache_dir, cache_key)
    else:
        cache_dir = DEFAULT_CACHE_DIR

    skip_key, skip_raw = _first_env_value(environ, SKIP_DOWNLOAD_ENV_KEYS)
    override = (environ.get(EXECUTABLE_PATH_ENV_KEY) or "").strip() or None

    settings = BrowserSettings(
        cache_dir=cache_dir,
        chrome_version=(environ.get("CHROME_VERSION") or "").strip() or DEFAULT_CHROME_VERSION,
        executable_override=override,
        skip_download=_parse_flag(skip_raw, skip_key, False),
        launch_timeout_ms=_parse_positive_int(environ, "BROWSER_LAUNCH_TIMEOUT_MS", DEFAULT_LAUNCH_TIMEOUT_MS),
        download_timeout_ms=_parse_positive_int(environ, "BROWSER_DOWNLOAD_TIMEOUT_MS", DEFAULT_DOWNLOAD_TIMEOUT_MS),
        install_timeout_s=_parse_positive_int(environ, "BROWSER_INSTALL_TIMEOUT_S", DEFAULT_INSTALL_TIMEOUT_S),
    )

    logger.info(
        "Browser settings: cache_dir=%s, skip_download=%s, launch_timeout=%sms",
        settings.cache_dir,
        settings.skip_download,
        settings.launch_timeout_ms,
    )
    return settings
