#!/usr/bin/env python3
"""
Chrome Delegate Tests
=====================

Process launch, debugging-port polling and guaranteed termination.

Run:
    python -m unittest tests.test_chrome_delegate
"""

import asyncio
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chat_image_parser.delegates import ChromeDelegate
from chat_image_parser.errors import BrowserUnavailable


class FakeProcess:
    def __init__(self, honours_sigterm=True):
        self.pid = 4242
        self.returncode = None
        self.honours_sigterm = honours_sigterm
        self.terminated = False
        self.killed = False
        self._exited = asyncio.Event()

    def terminate(self):
        self.terminated = True
        if self.honours_sigterm:
            self._exit(-15)

    def kill(self):
        self.killed = True
        self._exit(-9)

    def _exit(self, code):
        self.returncode = code
        self._exited.set()

    async def wait(self):
        await self._exited.wait()
        return self.returncode


def make_chrome(**kwargs):
    options = dict(
        chrome_path="chrome",
        debug_port=9222,
        profile_dir=Path("/tmp/chrome-debug-profile"),
        connect_attempts=5,
        connect_delay=0,
        shutdown_timeout=0.05,
    )
    options.update(kwargs)
    return ChromeDelegate(**options)


class TestChromeDelegate(unittest.IsolatedAsyncioTestCase):

    def test_launch_args(self):
        args = make_chrome().launch_args()
        self.assertIn("--remote-debugging-port=9222", args)
        self.assertIn("--user-data-dir=/tmp/chrome-debug-profile", args)
        self.assertIn("--no-first-run", args)

    async def test_missing_binary(self):
        chrome = make_chrome(chrome_path="/nonexistent/google-chrome")
        with self.assertRaises(BrowserUnavailable):
            await chrome.start()

    async def test_port_never_ready_gives_up_after_fixed_attempts(self):
        process = FakeProcess()
        chrome = make_chrome(connect_attempts=5)
        probe = AsyncMock(return_value=False)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)), \
                patch.object(ChromeDelegate, "_debugger_ready", probe):
            with self.assertRaises(BrowserUnavailable):
                await chrome.start()
        self.assertEqual(probe.await_count, 5)

        await chrome.stop()
        self.assertTrue(process.terminated)

    async def test_port_ready_on_third_probe(self):
        process = FakeProcess()
        chrome = make_chrome()
        probe = AsyncMock(side_effect=[False, False, True])
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as spawn, \
                patch.object(ChromeDelegate, "_debugger_ready", probe):
            await chrome.start()

        self.assertEqual(probe.await_count, 3)
        self.assertEqual(spawn.await_args.args[0], "chrome")
        await chrome.stop()
        self.assertTrue(process.terminated)
        self.assertFalse(process.killed)

    async def test_early_exit_is_reported(self):
        process = FakeProcess()
        process.returncode = 1
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with self.assertRaises(BrowserUnavailable):
                await make_chrome().start()

    async def test_stop_kills_process_ignoring_sigterm(self):
        process = FakeProcess(honours_sigterm=False)
        chrome = make_chrome()
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)), \
                patch.object(ChromeDelegate, "_debugger_ready", AsyncMock(return_value=True)):
            await chrome.start()

        await chrome.stop()

        self.assertTrue(process.terminated)
        self.assertTrue(process.killed)

    async def test_process_terminated_even_if_disconnect_fails(self):
        process = FakeProcess()
        chrome = make_chrome()
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)), \
                patch.object(ChromeDelegate, "_debugger_ready", AsyncMock(return_value=True)):
            await chrome.start()
        chrome._browser = MagicMock(close=AsyncMock(side_effect=ConnectionResetError("pipe closed")))
        chrome._playwright = MagicMock(stop=AsyncMock(side_effect=RuntimeError("driver gone")))

        await chrome.stop()

        self.assertTrue(process.terminated)
        self.assertIsNone(chrome._browser)
        self.assertIsNone(chrome._playwright)

    async def test_stop_is_idempotent(self):
        chrome = make_chrome()
        await chrome.stop()
        await chrome.stop()


if __name__ == "__main__":
    unittest.main()
