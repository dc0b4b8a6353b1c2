"""Backend handler interface and the pieces every backend shares."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from basescript.compiler.types import Backend, CommandName

_PROLOGUE_TEMPLATE = '''\
"""Compiled BaseScript program ({backend} backend)."""

import asyncio
import logging

{imports}

from basescript.baseline import baseline_scan_pipeline
from basescript.durations import parse_timeout, sleep
from basescript.runtime import evaluate_assertion, settle_assertion

logging.basicConfig(level=logging.INFO, format="%(message)s")


{helpers}'''

ENTRYPOINT_OPEN = "async def main():"

ENTRYPOINT_CLOSE = '''\
if __name__ == "__main__":
    asyncio.run(main())
'''

# Page scripts shared by the evaluate()-style backends
SCROLL_INTO_VIEW_JS = (
    "(selector) => { const el = document.querySelector(selector); "
    "if (el) { el.scrollIntoView({ behavior: 'smooth', block: 'center' }); } }"
)
SCROLL_TO_JS = "(coords) => { window.scrollTo(coords.x, coords.y); }"
SCROLL_BY_JS = "(by) => { window.scrollBy(by.dx, by.dy); }"


def py(value: Any) -> str:
    """Render a value as a Python literal for the generated program."""
    return repr(value)


def kwargs(options: dict[str, Any]) -> str:
    """Render ``name=value`` call arguments, skipping ``None`` values."""
    return ", ".join(f"{key}={py(val)}" for key, val in options.items() if val is not None)


def unsupported(command: CommandName, backend: Backend) -> str:
    """Explicit no-op block for a command the backend cannot express."""
    return f"# {command.value}: not supported by the {backend.value} backend\npass"


def disabled(command: CommandName) -> str:
    """No-op block for a command switched off with ``false`` in the script."""
    return f"# {command.value}: disabled\npass"


def scan_config(value: dict[str, Any]) -> dict[str, Any]:
    """Serialize a ``baseline_scan`` payload into the runtime AnalysisConfig."""
    availability = ["false" if item is False else str(item) for item in value.get("availability", [])]
    return {
        "includeAvailability": [item for item in availability if item in ("low", "high")],
        "baselineYearThreshold": value.get("year"),
        "includeNotBaseline": "false" in availability,
        "strictness": value.get("strictness") or "relaxed",
        "delay": value.get("delay"),
    }


class BackendHandler(ABC):
    """
    Translates one IR command at a time into program text for one backend.

    Dispatch goes through a static ``CommandName → method`` table, so the
    "no handler" case is an explicit branch in :meth:`handle` rather than a
    failed attribute lookup. Blocks are written for the body of ``main()``;
    the synthesizer takes care of indentation.
    """

    backend: Backend
    # Variable holding the object that commands act on ("page" or "driver")
    target: str = "page"

    def __init__(self) -> None:
        self._dispatch: dict[CommandName, Callable[[Any], str | None]] = {
            CommandName.FRAMEWORK: self.handle_framework,
            CommandName.BROWSER: self.handle_browser,
            CommandName.NEW_PAGE: self.handle_new_page,
            CommandName.EMULATE: self.handle_emulate,
            CommandName.GOTO: self.handle_goto,
            CommandName.WAIT: self.handle_wait,
            CommandName.WAIT_FOR_SELECTOR: self.handle_wait_for_selector,
            CommandName.SCREENSHOT: self.handle_screenshot,
            CommandName.TYPE: self.handle_type,
            CommandName.CLICK: self.handle_click,
            CommandName.PRESS: self.handle_press,
            CommandName.FOCUS: self.handle_focus,
            CommandName.HOVER: self.handle_hover,
            CommandName.SCROLL: self.handle_scroll,
            CommandName.ASSERT: self.handle_assert,
            CommandName.BASELINE_SCAN: self.handle_baseline_scan,
            CommandName.CLOSE: self.handle_close,
            CommandName.TEARDOWN: self.handle_teardown,
        }

    def handle(self, name: str, value: Any) -> str | None:
        """Return the block for a command, or ``None`` when there is no handler."""
        try:
            command = CommandName(name)
        except ValueError:
            return None
        method = self._dispatch.get(command)
        if method is None:
            return None
        return method(value)

    def acknowledge(self, name: str) -> str:
        return f"print({py(f'✅ Step {name}')}, flush=True)"

    # ------------------------------------------------------------------
    # Shared across backends
    # ------------------------------------------------------------------

    def handle_framework(self, value: Any) -> str:
        return _PROLOGUE_TEMPLATE.format(
            backend=self.backend.value,
            imports=self.imports(),
            helpers=self.assertion_helper(),
        )

    def handle_wait(self, value: dict) -> str:
        return f"await sleep({py(value['timeout'])})"

    def handle_assert(self, value: dict) -> str:
        return f"await check_assertion({self.target}, {py(value)})"

    def handle_baseline_scan(self, value: dict) -> str:
        return (
            f"await baseline_scan_pipeline({self.target}, "
            f"{py(scan_config(value))}, {py(self.backend.value)})"
        )

    # ------------------------------------------------------------------
    # Backend specific
    # ------------------------------------------------------------------

    @abstractmethod
    def imports(self) -> str: ...

    @abstractmethod
    def assertion_helper(self) -> str: ...

    @abstractmethod
    def handle_browser(self, value: dict) -> str: ...

    @abstractmethod
    def handle_new_page(self, value: Any) -> str: ...

    @abstractmethod
    def handle_emulate(self, value: dict) -> str: ...

    @abstractmethod
    def handle_goto(self, value: dict) -> str: ...

    @abstractmethod
    def handle_wait_for_selector(self, value: dict) -> str: ...

    @abstractmethod
    def handle_screenshot(self, value: dict) -> str: ...

    @abstractmethod
    def handle_type(self, value: dict) -> str: ...

    @abstractmethod
    def handle_click(self, value: dict) -> str: ...

    @abstractmethod
    def handle_press(self, value: dict) -> str: ...

    @abstractmethod
    def handle_focus(self, value: dict) -> str: ...

    @abstractmethod
    def handle_hover(self, value: dict) -> str: ...

    @abstractmethod
    def handle_scroll(self, value: dict) -> str: ...

    @abstractmethod
    def handle_close(self, value: Any) -> str: ...

    @abstractmethod
    def handle_teardown(self, value: dict) -> str: ...
