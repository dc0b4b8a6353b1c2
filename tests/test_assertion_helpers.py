"""Unit tests for the check_assertion helper each compiled program defines.

The compiled source is executed with the browser libraries replaced by
mocks, then the helper is driven with mocked pages and drivers.
"""

from __future__ import annotations

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from basescript.compiler.compiler import compile_script
from basescript.errors import AssertionFailure

SCRIPT = """
framework: {framework}
browser:
  mode: launch
  launch:
    headless: true
steps:
  - assert:
      selector: h1
      exists: true
"""

BACKEND_MODULES = {
    "playwright": ["playwright", "playwright.async_api"],
    "puppeteer": ["pyppeteer"],
    "selenium": [
        "selenium",
        "selenium.webdriver",
        "selenium.webdriver.common",
        "selenium.webdriver.common.action_chains",
        "selenium.webdriver.common.actions",
        "selenium.webdriver.common.actions.action_builder",
        "selenium.webdriver.common.by",
        "selenium.webdriver.common.keys",
        "selenium.webdriver.support",
        "selenium.webdriver.support.expected_conditions",
        "selenium.webdriver.support.ui",
    ],
}


def load_program(framework: str) -> dict:
    """Execute a compiled program without running main() and return its globals."""
    program = compile_script(SCRIPT.format(framework=framework))
    namespace = {"__name__": "compiled_program"}
    stubs = {name: MagicMock() for name in BACKEND_MODULES[framework]}
    with patch.dict(sys.modules, stubs), patch("logging.basicConfig"):
        exec(compile(program.source, "<compiled program>", "exec"), namespace)
    return namespace


class TestPlaywrightAssertionHelper:
    def setup_method(self):
        self.check_assertion = load_program("playwright")["check_assertion"]
        self.element = MagicMock()
        self.element.text_content = AsyncMock(return_value="  Example Domain \n")
        self.element.is_visible = AsyncMock(return_value=True)
        self.page = MagicMock()
        self.page.wait_for_selector = AsyncMock()
        self.page.query_selector = AsyncMock(return_value=self.element)

    @pytest.mark.asyncio
    async def test_missing_element_raises(self):
        self.page.query_selector.return_value = None
        with pytest.raises(AssertionFailure, match="Element not found: #nope"):
            await self.check_assertion(self.page, {"selector": "#nope", "contains": "x"})

    @pytest.mark.asyncio
    async def test_exists_false_passes_for_missing_element(self):
        self.page.query_selector.return_value = None
        assert await self.check_assertion(self.page, {"selector": "#nope", "exists": False}) is True

    @pytest.mark.asyncio
    async def test_text_is_trimmed(self):
        assert await self.check_assertion(self.page, {"selector": "h1", "equals": "Example Domain"}) is True

    @pytest.mark.asyncio
    async def test_timeout_waits_in_milliseconds(self):
        await self.check_assertion(self.page, {"selector": "h1", "exists": True, "timeout": "2s"})
        self.page.wait_for_selector.assert_awaited_once_with("h1", timeout=2000)

    @pytest.mark.asyncio
    async def test_failed_wait_is_a_failure(self, caplog):
        self.page.wait_for_selector.side_effect = Exception("Timeout 2000ms exceeded")
        options = {"selector": "h1", "exists": True, "timeout": "2s", "throwOnFail": False}
        assert await self.check_assertion(self.page, options) is False
        assert "Assertion error: Timeout 2000ms exceeded" in caplog.text
        self.page.query_selector.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_visible_asks_the_element(self):
        assert await self.check_assertion(self.page, {"selector": "h1", "visible": True}) is True
        self.element.is_visible.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_hidden_element_fails_visible(self):
        self.element.is_visible.return_value = False
        with pytest.raises(AssertionFailure, match="Expected element to be visible"):
            await self.check_assertion(self.page, {"selector": "h1", "visible": True})

    @pytest.mark.asyncio
    async def test_visibility_not_queried_for_text_assertions(self):
        await self.check_assertion(self.page, {"selector": "h1", "contains": "Example"})
        self.element.is_visible.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_pattern_is_a_failure(self):
        options = {"selector": "h1", "matches": "([unclosed", "throwOnFail": False}
        assert await self.check_assertion(self.page, options) is False


class TestPuppeteerAssertionHelper:
    def setup_method(self):
        self.check_assertion = load_program("puppeteer")["check_assertion"]
        self.element = MagicMock()
        self.element.isIntersectingViewport = AsyncMock(return_value=True)
        self.page = MagicMock()
        self.page.waitForSelector = AsyncMock()
        self.page.querySelector = AsyncMock(return_value=self.element)
        self.page.querySelectorEval = AsyncMock(return_value="Example Domain")

    @pytest.mark.asyncio
    async def test_missing_element_raises(self):
        self.page.querySelector.return_value = None
        with pytest.raises(AssertionFailure, match="Element not found: #nope"):
            await self.check_assertion(self.page, {"selector": "#nope", "equals": "x"})
        self.page.querySelectorEval.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exists_false_passes_for_missing_element(self):
        self.page.querySelector.return_value = None
        assert await self.check_assertion(self.page, {"selector": "#nope", "exists": False}) is True

    @pytest.mark.asyncio
    async def test_text_read_in_page(self):
        assert await self.check_assertion(self.page, {"selector": "h1", "contains": "Domain"}) is True
        selector, script = self.page.querySelectorEval.await_args.args
        assert selector == "h1"
        assert ".trim()" in script

    @pytest.mark.asyncio
    async def test_timeout_waits_in_milliseconds(self):
        await self.check_assertion(self.page, {"selector": "h1", "exists": True, "timeout": "500ms"})
        self.page.waitForSelector.assert_awaited_once_with("h1", {"timeout": 500})

    @pytest.mark.asyncio
    async def test_failed_wait_is_a_failure(self, caplog):
        self.page.waitForSelector.side_effect = Exception("waiting for selector `h1` failed")
        options = {"selector": "h1", "exists": True, "timeout": "1s", "throwOnFail": False}
        assert await self.check_assertion(self.page, options) is False
        assert "Assertion error: waiting for selector `h1` failed" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_wait_raises_by_default(self):
        self.page.waitForSelector.side_effect = Exception("timeout")
        with pytest.raises(AssertionFailure, match="Assertion error: timeout"):
            await self.check_assertion(self.page, {"selector": "h1", "exists": True, "timeout": "1s"})

    @pytest.mark.asyncio
    async def test_visible_checks_viewport_intersection(self):
        self.element.isIntersectingViewport.return_value = False
        assert await self.check_assertion(self.page, {"selector": "h1", "visible": False}) is True
        self.element.isIntersectingViewport.assert_awaited_once()


class TestSeleniumAssertionHelper:
    def setup_method(self):
        self.namespace = load_program("selenium")
        self.check_assertion = self.namespace["check_assertion"]
        self.element = MagicMock()
        self.element.text = "\n  Example Domain  "
        self.element.is_displayed.return_value = True
        self.driver = MagicMock()
        self.driver.find_elements.return_value = [self.element]

    def test_helper_is_synchronous(self):
        assert self.check_assertion(self.driver, {"selector": "h1", "exists": True}) is True

    def test_missing_element_raises(self):
        self.driver.find_elements.return_value = []
        with pytest.raises(AssertionFailure, match="Element not found: #nope"):
            self.check_assertion(self.driver, {"selector": "#nope", "matches": "x"})

    def test_exists_false_passes_for_missing_element(self):
        self.driver.find_elements.return_value = []
        assert self.check_assertion(self.driver, {"selector": "#nope", "exists": False}) is True

    def test_first_match_by_css_selector(self):
        other = MagicMock(text="Other")
        self.driver.find_elements.return_value = [self.element, other]
        assert self.check_assertion(self.driver, {"selector": "h1", "equals": "Example Domain"}) is True
        self.driver.find_elements.assert_called_once_with(self.namespace["By"].CSS_SELECTOR, "h1")

    def test_timeout_in_seconds(self):
        wait = self.namespace["WebDriverWait"]
        self.check_assertion(self.driver, {"selector": "h1", "exists": True, "timeout": "1500ms"})
        wait.assert_called_once_with(self.driver, 1.5)
        wait.return_value.until.assert_called_once()

    def test_failed_wait_is_a_failure(self, caplog):
        self.namespace["WebDriverWait"].return_value.until.side_effect = Exception("Message: timed out")
        options = {"selector": "h1", "exists": True, "timeout": "1s", "throwOnFail": False}
        assert self.check_assertion(self.driver, options) is False
        assert "Assertion error: Message: timed out" in caplog.text
        self.driver.find_elements.assert_not_called()

    def test_visible_asks_the_element(self):
        self.element.is_displayed.return_value = False
        with pytest.raises(AssertionFailure, match="Expected element to be visible"):
            self.check_assertion(self.driver, {"selector": "h1", "visible": True})
        self.element.is_displayed.assert_called_once_with()
