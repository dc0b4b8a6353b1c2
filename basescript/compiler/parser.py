"""Script text → validated document → IR (ordered command sequence)."""

from __future__ import annotations

from typing import Any

import yaml

from basescript.compiler.schema import validate_document
from basescript.compiler.types import Command, CommandName, ConnectionMode, TeardownOperation
from basescript.errors import SchemaViolation


def parse_script(text: str) -> dict[str, Any]:
    """Deserialize YAML script text and validate it against the grammar."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaViolation("<document>", f"invalid YAML: {exc}") from exc
    return validate_document(document)


def generate_ir(document: dict[str, Any]) -> tuple[Command, ...]:
    """
    Flatten a validated document into the IR.

    Order is always: ``framework``, ``browser``, the steps as declared, then
    the synthesized teardown. Teardown closes the browser for ``launch`` mode
    and only disconnects from it otherwise.
    """
    browser = document[CommandName.BROWSER.value]
    ir: list[Command] = [
        Command(name=CommandName.FRAMEWORK.value, value=document[CommandName.FRAMEWORK.value]),
        Command(name=CommandName.BROWSER.value, value=browser),
    ]

    for step in document.get("steps") or []:
        name, value = next(iter(step.items()))
        ir.append(Command(name=name, value=value))

    mode = browser.get("mode", ConnectionMode.LAUNCH.value)
    operation = (
        TeardownOperation.CLOSE if mode == ConnectionMode.LAUNCH.value else TeardownOperation.DISCONNECT
    )
    ir.append(Command(name=CommandName.TEARDOWN.value, value={"operation": operation.value}))
    return tuple(ir)
