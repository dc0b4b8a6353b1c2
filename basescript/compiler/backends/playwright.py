"""Playwright (async Python API) backend."""

from __future__ import annotations

from typing import Any

from basescript.compiler.backends.base import (
    SCROLL_BY_JS,
    SCROLL_INTO_VIEW_JS,
    SCROLL_TO_JS,
    BackendHandler,
    disabled,
    kwargs,
    py,
)
from basescript.compiler.types import Backend, CommandName
from basescript.durations import parse_timeout

_ASSERTION_SOURCE = '''\
async def check_assertion(page, options):
    """Locate the element with Playwright primitives and evaluate the assertion."""
    selector = options["selector"]
    try:
        if options.get("timeout"):
            await page.wait_for_selector(selector, timeout=parse_timeout(options["timeout"]))
        element = await page.query_selector(selector)
        text = ((await element.text_content()) or "").strip() if element else ""
        visible = await element.is_visible() if element and "visible" in options else False
        passed, message = evaluate_assertion(options, element is not None, text, visible)
    except Exception as exc:
        passed, message = False, f"Assertion error: {exc}"
    return settle_assertion(options, passed, message)
'''

# Puppeteer-style load events mapped onto Playwright's
_WAIT_UNTIL = {
    "load": "load",
    "domcontentloaded": "domcontentloaded",
    "networkidle0": "networkidle",
    "networkidle2": "networkidle",
}


class PlaywrightHandler(BackendHandler):
    backend = Backend.PLAYWRIGHT

    def imports(self) -> str:
        return "from playwright.async_api import async_playwright"

    def assertion_helper(self) -> str:
        return _ASSERTION_SOURCE

    def handle_browser(self, value: dict) -> str:
        lines = ["playwright = await async_playwright().start()"]
        if value["mode"] == "launch":
            launch = value.get("launch") or {}
            options = kwargs({
                "headless": launch.get("headless", False),
                "executable_path": launch.get("executablePath"),
            })
            lines.append(f"browser = await playwright.chromium.launch({options})")
            lines.append(f"context = await browser.new_context({kwargs({'viewport': launch.get('viewport')})})")
        else:
            ws_url = value["connect"]["wsUrl"]
            lines.append(f"browser = await playwright.chromium.connect_over_cdp({py(ws_url)})")
            lines.append("context = browser.contexts[0] if browser.contexts else await browser.new_context()")
        lines.append("page = await context.new_page()")
        return "\n".join(lines)

    def handle_new_page(self, value: Any) -> str:
        if value is False:
            return disabled(CommandName.NEW_PAGE)
        return "page = await context.new_page()"

    def handle_emulate(self, value: dict) -> str:
        # Viewport only; user agent and touch are fixed at context creation
        device = py(value["device"])
        return (
            f"device = playwright.devices.get({device})\n"
            "if device is None:\n"
            f"    logging.warning(\"Unknown device %r, viewport left unchanged\", {device})\n"
            "else:\n"
            "    await page.set_viewport_size(device[\"viewport\"])"
        )

    def handle_goto(self, value: dict) -> str:
        wait_until = _WAIT_UNTIL.get(value.get("waitUntil", "load"), "load")
        return f"await page.goto({py(value['url'])}, wait_until={py(wait_until)})"

    def handle_wait_for_selector(self, value: dict) -> str:
        return f"await page.wait_for_selector({py(value['selector'])})"

    def handle_screenshot(self, value: dict) -> str:
        options = kwargs({"path": value["path"], "full_page": value.get("fullPage")})
        return f"await page.screenshot({options})"

    def handle_type(self, value: dict) -> str:
        selector = py(value["selector"])
        delay = parse_timeout(value.get("delay", "0ms"))
        return (
            f'await page.fill({selector}, "")\n'
            f"await page.locator({selector}).press_sequentially({py(value['text'])}, delay={delay})"
        )

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
            return "await browser.close()\nawait playwright.stop()"
        # Stopping the driver drops the CDP connection and leaves the browser running
        return "await playwright.stop()"
