"""Puppeteer backend, targeting the pyppeteer port."""

from __future__ import annotations

from typing import Any

from basescript.compiler.backends.base import (
    SCROLL_BY_JS,
    SCROLL_INTO_VIEW_JS,
    SCROLL_TO_JS,
    BackendHandler,
    disabled,
    py,
    unsupported,
)
from basescript.compiler.types import Backend, CommandName
from basescript.durations import parse_timeout

_ASSERTION_SOURCE = '''\
async def check_assertion(page, options):
    """Locate the element with Puppeteer primitives and evaluate the assertion."""
    selector = options["selector"]
    try:
        if options.get("timeout"):
            await page.waitForSelector(selector, {"timeout": parse_timeout(options["timeout"])})
        element = await page.querySelector(selector)
        text = ""
        if element:
            text = await page.querySelectorEval(selector, "el => (el.textContent || '').trim()")
        visible = await element.isIntersectingViewport() if element and "visible" in options else False
        passed, message = evaluate_assertion(options, element is not None, text, visible)
    except Exception as exc:
        passed, message = False, f"Assertion error: {exc}"
    return settle_assertion(options, passed, message)
'''


class PuppeteerHandler(BackendHandler):
    backend = Backend.PUPPETEER

    def imports(self) -> str:
        return "from pyppeteer import connect, launch"

    def assertion_helper(self) -> str:
        return _ASSERTION_SOURCE

    def handle_browser(self, value: dict) -> str:
        if value["mode"] == "launch":
            launch = value.get("launch") or {}
            options: dict[str, Any] = {"headless": launch.get("headless", False)}
            if launch.get("executablePath") is not None:
                options["executablePath"] = launch["executablePath"]
            if launch.get("viewport") is not None:
                options["defaultViewport"] = launch["viewport"]
            opener = f"browser = await launch({py(options)})"
        else:
            endpoint = {"browserWSEndpoint": value["connect"]["wsUrl"]}
            opener = f"browser = await connect({py(endpoint)})"
        return f"{opener}\npage = await browser.newPage()"

    def handle_new_page(self, value: Any) -> str:
        if value is False:
            return disabled(CommandName.NEW_PAGE)
        return "page = await browser.newPage()"

    def handle_emulate(self, value: dict) -> str:
        # pyppeteer ships no device descriptor table
        return unsupported(CommandName.EMULATE, self.backend)

    def handle_goto(self, value: dict) -> str:
        options = {"waitUntil": value.get("waitUntil", "load")}
        return f"await page.goto({py(value['url'])}, {py(options)})"

    def handle_wait_for_selector(self, value: dict) -> str:
        return f"await page.waitForSelector({py(value['selector'])})"

    def handle_screenshot(self, value: dict) -> str:
        options: dict[str, Any] = {"path": value["path"]}
        if value.get("fullPage") is not None:
            options["fullPage"] = value["fullPage"]
        return f"await page.screenshot({py(options)})"

    def handle_type(self, value: dict) -> str:
        options = {"delay": parse_timeout(value.get("delay", "0ms"))}
        return f"await page.type({py(value['selector'])}, {py(value['text'])}, {py(options)})"

    def handle_click(self, value: dict) -> str:
        if value.get("selector") is not None:
            return f"await page.click({py(value['selector'])})"
        coords = value["coords"]
        return f"await page.mouse.click({py(coords['x'])}, {py(coords['y'])})"

    def handle_press(self, value: dict) -> str:
        return f"await page.keyboard.press({py(value['key'])})"

    def handle_focus(self, value: dict) -> str:
        return f"await page.focus({py(value['selector'])})"

    def handle_hover(self, value: dict) -> str:
        return f"await page.hover({py(value['selector'])})"

    def handle_scroll(self, value: dict) -> str:
        target = value.get("to")
        if target is not None:
            if target.get("selector") is not None:
                return f"await page.evaluate({py(SCROLL_INTO_VIEW_JS)}, {py(target['selector'])})"
            return f"await page.evaluate({py(SCROLL_TO_JS)}, {py(target['coords'])})"
        return f"await page.evaluate({py(SCROLL_BY_JS)}, {py(value['by'])})"

    def handle_close(self, value: Any) -> str:
        return "await page.close()"

    def handle_teardown(self, value: dict) -> str:
        if value["operation"] == "close":
            return "await browser.close()"
        return "await browser.disconnect()"
