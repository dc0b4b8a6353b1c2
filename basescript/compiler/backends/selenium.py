"""Selenium WebDriver backend. Calls are synchronous inside the async entry point."""

from __future__ import annotations

import re
from typing import Any

from basescript.compiler.backends.base import BackendHandler, disabled, py, unsupported
from basescript.compiler.types import Backend, CommandName

_IMPORTS = """\
from selenium import webdriver
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.actions.action_builder import ActionBuilder
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait"""

_ASSERTION_SOURCE = '''\
def check_assertion(driver, options):
    """Locate the element with WebDriver primitives and evaluate the assertion."""
    selector = options["selector"]
    try:
        if options.get("timeout"):
            WebDriverWait(driver, parse_timeout(options["timeout"]) / 1000).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, selector))
            )
        elements = driver.find_elements(By.CSS_SELECTOR, selector)
        element = elements[0] if elements else None
        text = element.text.strip() if element else ""
        visible = element.is_displayed() if element and "visible" in options else False
        passed, message = evaluate_assertion(options, element is not None, text, visible)
    except Exception as exc:
        passed, message = False, f"Assertion error: {exc}"
    return settle_assertion(options, passed, message)
'''

_WAIT_FOR_SELECTOR_TIMEOUT_S = 10

_SCROLL_INTO_VIEW_SCRIPT = (
    "const el = document.querySelector(arguments[0]); "
    "if (el) { el.scrollIntoView({ behavior: 'smooth', block: 'center' }); }"
)
_SCROLL_TO_SCRIPT = "window.scrollTo(arguments[0], arguments[1]);"
_SCROLL_BY_SCRIPT = "window.scrollBy(arguments[0], arguments[1]);"


def _key_constant(key: str) -> str:
    """Map a key name such as ArrowDown onto the ARROW_DOWN naming of selenium Keys."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).upper()


def _find(selector: str) -> str:
    return f"driver.find_element(By.CSS_SELECTOR, {py(selector)})"


class SeleniumHandler(BackendHandler):
    backend = Backend.SELENIUM
    target = "driver"

    def imports(self) -> str:
        return _IMPORTS

    def assertion_helper(self) -> str:
        return _ASSERTION_SOURCE

    def handle_browser(self, value: dict) -> str:
        if value["mode"] != "launch":
            ws_url = value["connect"]["wsUrl"]
            return (
                f"driver = webdriver.Remote(command_executor={py(ws_url)}, "
                f"options=webdriver.ChromeOptions())"
            )

        launch = value.get("launch") or {}
        lines = ["options = webdriver.ChromeOptions()"]
        if launch.get("headless"):
            lines.append('options.add_argument("--headless=new")')
        if launch.get("executablePath") is not None:
            lines.append(f"options.binary_location = {py(launch['executablePath'])}")
        lines.append("driver = webdriver.Chrome(options=options)")
        viewport = launch.get("viewport")
        if viewport is not None:
            lines.append(f"driver.set_window_size({py(viewport['width'])}, {py(viewport['height'])})")
        return "\n".join(lines)

    def handle_new_page(self, value: Any) -> str:
        if value is False:
            return disabled(CommandName.NEW_PAGE)
        return 'driver.switch_to.new_window("tab")'

    def handle_emulate(self, value: dict) -> str:
        # Needs mobileEmulation in ChromeOptions before the session starts
        return unsupported(CommandName.EMULATE, self.backend)

    def handle_goto(self, value: dict) -> str:
        return f"driver.get({py(value['url'])})"

    def handle_wait_for_selector(self, value: dict) -> str:
        return (
            f"WebDriverWait(driver, {_WAIT_FOR_SELECTOR_TIMEOUT_S}).until("
            f"EC.presence_of_element_located((By.CSS_SELECTOR, {py(value['selector'])})))"
        )

    def handle_screenshot(self, value: dict) -> str:
        return f"driver.save_screenshot({py(value['path'])})"

    def handle_type(self, value: dict) -> str:
        element = _find(value["selector"])
        return f"{element}.clear()\n{element}.send_keys({py(value['text'])})"

    def handle_click(self, value: dict) -> str:
        if value.get("selector") is not None:
            return f"{_find(value['selector'])}.click()"
        coords = value["coords"]
        return (
            "actions = ActionBuilder(driver)\n"
            f"actions.pointer_action.move_to_location({int(coords['x'])}, {int(coords['y'])})\n"
            "actions.pointer_action.click()\n"
            "actions.perform()"
        )

    def handle_press(self, value: dict) -> str:
        key = value["key"]
        return (
            f"ActionChains(driver).send_keys("
            f"getattr(Keys, {py(_key_constant(key))}, {py(key)})).perform()"
        )

    def handle_focus(self, value: dict) -> str:
        return f'driver.execute_script("arguments[0].focus();", {_find(value["selector"])})'

    def handle_hover(self, value: dict) -> str:
        return f"ActionChains(driver).move_to_element({_find(value['selector'])}).perform()"

    def handle_scroll(self, value: dict) -> str:
        target = value.get("to")
        if target is not None:
            if target.get("selector") is not None:
                return f"driver.execute_script({py(_SCROLL_INTO_VIEW_SCRIPT)}, {py(target['selector'])})"
            coords = target["coords"]
            return f"driver.execute_script({py(_SCROLL_TO_SCRIPT)}, {py(coords['x'])}, {py(coords['y'])})"
        by = value["by"]
        return f"driver.execute_script({py(_SCROLL_BY_SCRIPT)}, {py(by['dx'])}, {py(by['dy'])})"

    def handle_assert(self, value: dict) -> str:
        return f"check_assertion(driver, {py(value)})"

    def handle_close(self, value: Any) -> str:
        return "driver.close()"

    def handle_teardown(self, value: dict) -> str:
        # A remote session ends either way; the grid itself keeps running
        return "driver.quit()"
