import logging
import os
import sys


LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure_logging(stream=None) -> None:
    """Configure logging consistently for deploy hooks and local runs."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()

    try:
        root.setLevel(getattr(logging, log_level, logging.INFO))
    except Exception:
        root.setLevel(logging.INFO)

    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('psutil').setLevel(logging.WARNING)
