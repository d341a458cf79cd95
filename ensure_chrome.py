#!/usr/bin/env python3
"""
Runtime Chrome installer for the deploy host.
Run this before the server starts so a working headless Chrome is available.
"""

import asyncio
import sys
import traceback
from pathlib import Path

# Add backend to path so we can import the modules
backend_path = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_path))

from browser_availability import ensure_browser  # noqa: E402
from logging_utils import configure_logging  # noqa: E402


def main() -> int:
    configure_logging()
    print("🔧 [Chrome Installer] Starting Chrome availability check...")

    try:
        result = asyncio.run(ensure_browser())
    except Exception as e:
        print(f"💥 [Chrome Installer] Unexpected error: {e}")
        traceback.print_exc()
        return 1

    if result:
        print(f"✅ [Chrome Installer] Chrome is working: {result.version} (via {result.tier})")
        if result.executable_path:
            print(f"📍 [Chrome Installer] Executable: {result.executable_path}")
            print(f"   Pass it on with CHROME_EXECUTABLE_PATH={result.executable_path}")
        print("🎉 [Chrome Installer] Chrome is ready!")
        return 0

    print(f"❌ [Chrome Installer] Tried: {', '.join(result.attempts) or 'nothing'}")
    print("💥 [Chrome Installer] Chrome installation failed!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
