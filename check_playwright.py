#!/usr/bin/env python3
"""
Debug script to check the Playwright installation and Chrome availability.
Lists the browser cache directories and tries one default launch.
"""

import asyncio
import sys
import traceback
from pathlib import Path

# Add backend to path so we can import the modules
backend_path = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_path))

from browser_settings import load_browser_settings  # noqa: E402
from chrome_diagnostics import check_default_launch, inspect_cache_directory  # noqa: E402
from logging_utils import configure_logging  # noqa: E402


def print_cache_report(report):
    print(f"📁 Checking cache directory: {report.cache_dir}")
    if not report.exists:
        print("❌ Cache directory does not exist")
        return
    print("✅ Cache directory exists")

    if report.error:
        print(f"❌ Error reading cache directory: {report.error}")
        return
    print(f"📋 Cache directory contents: {', '.join(report.contents) or '(empty)'}")

    if not report.chrome_dir_exists:
        print("❌ Chrome directory not found")
        return
    print("✅ Chrome directory found")
    print(f"📋 Chrome directory contents: {', '.join(report.chrome_contents) or '(empty)'}")

    for version, executable in report.versions:
        if executable:
            print(f"✅ Found Chrome executable: {executable}")
        else:
            print(f"❌ Chrome executable not found in: {version}")


def main() -> int:
    configure_logging()
    print("🔍 Checking Playwright installation...")

    try:
        settings = load_browser_settings()
        for cache_dir in settings.cache_roots:
            print_cache_report(inspect_cache_directory(cache_dir))
            print("")

        print("🚀 Attempting to launch Playwright Chromium...")
        result = asyncio.run(check_default_launch(settings))
    except Exception as e:
        print(f"❌ Error checking Playwright: {e}")
        traceback.print_exc()
        return 1

    if result.ok:
        print(f"✅ Playwright launched successfully: {result.version}")
        print("✅ Browser closed successfully")
        return 0

    print(f"❌ Failed to launch Playwright: {result.error}")
    if result.missing_browser:
        print("📦 Playwright's Chromium is not downloaded; run ensure_chrome.py to install it")
    return 1


if __name__ == "__main__":
    sys.exit(main())
