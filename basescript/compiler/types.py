"""Compiler type definitions."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Backend(str, Enum):
    PUPPETEER = "puppeteer"
    PLAYWRIGHT = "playwright"
    SELENIUM = "selenium"


class ConnectionMode(str, Enum):
    LAUNCH = "launch"
    CONNECT = "connect"


class TeardownOperation(str, Enum):
    CLOSE = "close"
    DISCONNECT = "disconnect"


class CommandName(str, Enum):
    """Closed command vocabulary shared by every backend."""

    FRAMEWORK = "framework"
    BROWSER = "browser"
    NEW_PAGE = "newPage"
    EMULATE = "emulate"
    GOTO = "goto"
    WAIT = "wait"
    WAIT_FOR_SELECTOR = "waitForSelector"
    SCREENSHOT = "screenshot"
    TYPE = "type"
    CLICK = "click"
    PRESS = "press"
    FOCUS = "focus"
    HOVER = "hover"
    SCROLL = "scroll"
    ASSERT = "assert"
    BASELINE_SCAN = "baseline_scan"
    CLOSE = "close"
    TEARDOWN = "teardown"


# Commands allowed inside ``steps``
STEP_COMMANDS: frozenset[CommandName] = frozenset(CommandName) - {
    CommandName.FRAMEWORK,
    CommandName.BROWSER,
    CommandName.TEARDOWN,
}


@dataclass(frozen=True)
class Command:
    name: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class CompiledProgram:
    backend: Backend
    source: str
    step_count: int = 0  # acknowledged blocks, prologue included
    fingerprint: str = ""
    warnings: list[str] = field(default_factory=list)


def make_fingerprint(source: str) -> str:
    """sha256 of the program text; equal fingerprints mean identical programs."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()
