#!/usr/bin/env python3
"""
Manual harness to verify the Chrome installation fix end to end:
locate the binary, run the availability check, then load a real page
with the resolved executable.
"""

import asyncio
import sys
import traceback
from pathlib import Path

# Add backend to path so we can import the modules
backend_path = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_path))

from browser_availability import ensure_browser  # noqa: E402
from browser_settings import load_browser_settings  # noqa: E402
from chrome_locator import find_chrome_executable  # noqa: E402
from logging_utils import configure_logging  # noqa: E402
from playwright_environment import PlaywrightLauncher, list_browser_processes  # noqa: E402

TEST_URL = "https://example.com"


async def load_test_page(settings, executable_path):
    async with PlaywrightLauncher(args=settings.chrome_args, timeout_ms=settings.launch_timeout_ms) as launcher:
        if executable_path:
            print(f"Using Chrome executable: {executable_path}")
        browser = await launcher.launch(executable_path=executable_path)
        try:
            print("✅ Playwright launch successful")
            print(f"🌐 Browser version: {browser.version}")
            page = await browser.new_page()
            await page.goto(TEST_URL, wait_until="networkidle", timeout=30000)
            print(f"📄 Page title: {await page.title()}")
        finally:
            await browser.close()
            print("✅ Browser closed successfully")


async def run_checks() -> bool:
    settings = load_browser_settings()

    print("Test 1: Finding Chrome executable...")
    executable = find_chrome_executable(settings=settings)
    if executable:
        print(f"✅ Chrome executable found: {executable}")
    else:
        print("❌ Chrome executable not found")
    print("")

    print("Test 2: Running ensure_browser...")
    availability = await ensure_browser(settings)
    if availability:
        print(f"✅ ensure_browser succeeded via {availability.tier}")
    else:
        print("❌ ensure_browser failed")
    leftovers = list_browser_processes()
    if leftovers:
        print(f"⚠️  {len(leftovers)} browser process(es) still running: {[p['pid'] for p in leftovers]}")
    print("")

    print("Test 3: Testing Playwright launch...")
    page_ok = True
    try:
        await load_test_page(settings, availability.executable_path)
    except Exception as e:
        print(f"❌ Playwright launch failed: {e}")
        page_ok = False

    print("")
    print("🎯 Test completed!")
    return availability.available and page_ok


def main() -> int:
    configure_logging()
    print("🧪 Testing Chrome installation fix...")
    print("")
    try:
        ok = asyncio.run(run_checks())
    except Exception as e:
        print(f"💥 Test failed: {e}")
        traceback.print_exc()
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
