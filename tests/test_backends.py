"""Unit tests for the per-backend command handlers."""

from __future__ import annotations

import ast

import pytest

from basescript.compiler.backends import HANDLERS, get_handler
from basescript.compiler.backends.base import scan_config
from basescript.compiler.backends.selenium import _key_constant
from basescript.compiler.types import Backend, CommandName


class TestRegistry:
    def test_every_backend_has_a_handler(self):
        assert set(HANDLERS) == set(Backend)

    def test_get_handler_by_tag(self):
        assert get_handler("playwright").backend is Backend.PLAYWRIGHT

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            get_handler("cypress")

    @pytest.mark.parametrize("backend", list(Backend))
    def test_handles_whole_vocabulary(self, backend):
        handler = HANDLERS[backend]
        samples = {
            CommandName.FRAMEWORK: backend.value,
            CommandName.BROWSER: {"mode": "launch", "launch": {}},
            CommandName.NEW_PAGE: True,
            CommandName.EMULATE: {"device": "iPhone 13"},
            CommandName.GOTO: {"url": "https://example.com"},
            CommandName.WAIT: {"timeout": "1s"},
            CommandName.WAIT_FOR_SELECTOR: {"selector": "a"},
            CommandName.SCREENSHOT: {"path": "a.png"},
            CommandName.TYPE: {"selector": "a", "text": "b"},
            CommandName.CLICK: {"selector": "a"},
            CommandName.PRESS: {"key": "Enter"},
            CommandName.FOCUS: {"selector": "a"},
            CommandName.HOVER: {"selector": "a"},
            CommandName.SCROLL: {"by": {"dx": 0, "dy": 1}},
            CommandName.ASSERT: {"selector": "a", "exists": True},
            CommandName.BASELINE_SCAN: {"availability": ["low"], "year": 2023},
            CommandName.CLOSE: True,
            CommandName.TEARDOWN: {"operation": "close"},
        }
        assert set(samples) == set(CommandName)
        for name, value in samples.items():
            assert handler.handle(name.value, value) is not None, name

    def test_unknown_name_returns_none(self):
        assert get_handler("puppeteer").handle("teleport", {}) is None

    @pytest.mark.parametrize("backend", list(Backend))
    def test_new_page_false_is_a_no_op(self, backend):
        block = HANDLERS[backend].handle("newPage", False)
        assert block == "# newPage: disabled\npass"
        ast.parse(block)

    @pytest.mark.parametrize("backend", list(Backend))
    def test_new_page_true_opens_a_page(self, backend):
        block = HANDLERS[backend].handle("newPage", True)
        assert "disabled" not in block
        assert "new_page" in block or "newPage" in block or "new_window" in block


class TestPuppeteer:
    def setup_method(self):
        self.handler = get_handler("puppeteer")

    def test_launch_options(self):
        block = self.handler.handle(
            "browser",
            {"mode": "launch", "launch": {"headless": True, "viewport": {"width": 800, "height": 600}}},
        )
        assert "await launch({'headless': True, 'defaultViewport': {'width': 800, 'height': 600}})" in block
        assert block.endswith("page = await browser.newPage()")

    def test_type_delay_in_ms(self):
        block = self.handler.handle("type", {"selector": "#q", "text": "hi", "delay": "1s"})
        assert block == "await page.type('#q', 'hi', {'delay': 1000})"

    def test_emulate_unsupported(self):
        block = self.handler.handle("emulate", {"device": "iPhone 13"})
        assert block.startswith("# emulate: not supported")

    def test_baseline_scan(self):
        block = self.handler.handle("baseline_scan", {"availability": ["low", False], "year": 2023})
        assert block.startswith("await baseline_scan_pipeline(page, ")
        assert block.endswith(", 'puppeteer')")


class TestPlaywright:
    def setup_method(self):
        self.handler = get_handler("playwright")

    def test_wait_until_is_mapped(self):
        block = self.handler.handle("goto", {"url": "https://example.com", "waitUntil": "networkidle2"})
        assert block == "await page.goto('https://example.com', wait_until='networkidle')"

    def test_connect_reuses_context(self):
        block = self.handler.handle("browser", {"mode": "connect", "connect": {"wsUrl": "ws://x"}})
        assert "connect_over_cdp('ws://x')" in block
        assert "browser.contexts[0]" in block

    def test_disconnect_leaves_browser_running(self):
        block = self.handler.handle("teardown", {"operation": "disconnect"})
        assert block == "await playwright.stop()"

    def test_screenshot_kwargs(self):
        block = self.handler.handle("screenshot", {"path": "a.png", "fullPage": True})
        assert block == "await page.screenshot(path='a.png', full_page=True)"

    def test_emulate_looks_up_device_without_raising(self):
        block = self.handler.handle("emulate", {"device": "Nokia 3310"})
        assert "playwright.devices.get('Nokia 3310')" in block
        assert "playwright.devices[" not in block
        assert "logging.warning(" in block
        assert "await page.set_viewport_size(device[\"viewport\"])" in block

    def test_emulate_block_is_valid_inside_main(self):
        block = self.handler.handle("emulate", {"device": "iPhone 13"})
        body = "\n".join("    " + line for line in block.splitlines())
        ast.parse(f"async def main():\n{body}\n")


class TestSelenium:
    def setup_method(self):
        self.handler = get_handler("selenium")

    def test_assertion_is_synchronous(self):
        block = self.handler.handle("assert", {"selector": "h1", "exists": True})
        assert block == "check_assertion(driver, {'selector': 'h1', 'exists': True})"

    def test_scan_receives_driver(self):
        block = self.handler.handle("baseline_scan", {"availability": ["high"], "year": 2020})
        assert block.startswith("await baseline_scan_pipeline(driver, ")

    def test_press_maps_key_names(self):
        block = self.handler.handle("press", {"key": "ArrowDown"})
        assert "getattr(Keys, 'ARROW_DOWN', 'ArrowDown')" in block

    @pytest.mark.parametrize("key, constant", [("Enter", "ENTER"), ("ArrowUp", "ARROW_UP"), ("Tab", "TAB")])
    def test_key_constant(self, key, constant):
        assert _key_constant(key) == constant

    def test_teardown_always_quits(self):
        assert self.handler.handle("teardown", {"operation": "close"}) == "driver.quit()"
        assert self.handler.handle("teardown", {"operation": "disconnect"}) == "driver.quit()"

    def test_launch_block_is_valid_python(self):
        block = self.handler.handle(
            "browser",
            {"mode": "launch", "launch": {"headless": True, "executablePath": "/usr/bin/chromium"}},
        )
        ast.parse(block)
        assert 'options.add_argument("--headless=new")' in block


class TestScanConfig:
    def test_false_availability_enables_not_baseline(self):
        config = scan_config({"availability": ["low", False], "year": 2023})
        assert config == {
            "includeAvailability": ["low"],
            "baselineYearThreshold": 2023,
            "includeNotBaseline": True,
            "strictness": "relaxed",
            "delay": None,
        }

    def test_without_false_excludes_not_baseline(self):
        config = scan_config({"availability": ["high"], "year": 2020, "delay": "5s", "strictness": "strict"})
        assert config["includeNotBaseline"] is False
        assert config["includeAvailability"] == ["high"]
        assert config["delay"] == "5s"
        assert config["strictness"] == "strict"

    def test_string_false(self):
        assert scan_config({"availability": ["false"], "year": 2020})["includeNotBaseline"] is True
