"""Script grammar: pydantic models for the document and every step payload."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from basescript.compiler.types import CommandName, STEP_COMMANDS
from basescript.errors import SchemaViolation

# Same loose grammar as the duration parser: digits, optional unit
Duration = Annotated[str, StringConstraints(pattern=r"\d+")]

WaitUntil = Literal["domcontentloaded", "networkidle0", "networkidle2", "load"]

# YAML reads an unquoted ``false`` as a boolean
Availability = Union[Literal["high", "low", "false"], Literal[False]]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Coords(_Payload):
    x: float
    y: float


class Offset(_Payload):
    dx: float
    dy: float


class Viewport(_Payload):
    width: int
    height: int


# ----------------------------------------------------------------------------
# Connection configuration
# ----------------------------------------------------------------------------


class LaunchOptions(_Payload):
    executablePath: str | None = None
    headless: bool = False
    viewport: Viewport | None = None


class ConnectOptions(_Payload):
    wsUrl: str


class LaunchConfig(_Payload):
    mode: Literal["launch"]
    launch: LaunchOptions
    connect: Any = None

    @model_validator(mode="after")
    def _single_choice(self) -> LaunchConfig:
        if self.connect is not None:
            raise ValueError("'connect' must not be given when mode is 'launch'")
        return self


class ConnectConfig(_Payload):
    mode: Literal["connect"]
    connect: ConnectOptions
    launch: Any = None

    @model_validator(mode="after")
    def _single_choice(self) -> ConnectConfig:
        if self.launch is not None:
            raise ValueError("'launch' must not be given when mode is 'connect'")
        return self


BrowserConfig = Annotated[Union[LaunchConfig, ConnectConfig], Field(discriminator="mode")]


class ScriptDocument(_Payload):
    framework: Literal["puppeteer", "playwright", "selenium"]
    browser: BrowserConfig
    steps: list[Any] | None = None


# ----------------------------------------------------------------------------
# Step payloads
# ----------------------------------------------------------------------------


class EmulateStep(_Payload):
    device: str


class GotoStep(_Payload):
    url: AnyUrl
    waitUntil: WaitUntil = "load"


class WaitStep(_Payload):
    timeout: Duration


class SelectorStep(_Payload):
    selector: str


class ScreenshotStep(_Payload):
    path: str
    fullPage: bool | None = None


class TypeStep(_Payload):
    selector: str
    text: str
    delay: Duration = "0ms"


class ClickStep(_Payload):
    selector: str | None = None
    coords: Coords | None = None

    @model_validator(mode="after")
    def _target_given(self) -> ClickStep:
        if self.selector is None and self.coords is None:
            raise ValueError("Either selector or coords must be provided")
        return self


class PressStep(_Payload):
    key: str


class ScrollTarget(_Payload):
    selector: str | None = None
    coords: Coords | None = None

    @model_validator(mode="after")
    def _target_given(self) -> ScrollTarget:
        if self.selector is None and self.coords is None:
            raise ValueError("Either selector or coords must be provided")
        return self


class ScrollStep(_Payload):
    to: ScrollTarget | None = None
    by: Offset | None = None

    @model_validator(mode="after")
    def _one_direction(self) -> ScrollStep:
        if (self.to is None) == (self.by is None):
            raise ValueError("Exactly one of 'to' or 'by' must be provided")
        return self


class AssertStep(_Payload):
    selector: str
    exists: bool | None = None
    contains: str | None = None
    equals: str | None = None
    matches: str | None = None
    visible: bool | None = None
    timeout: Duration | None = None
    throwOnFail: bool | None = None

    @model_validator(mode="after")
    def _kind_given(self) -> AssertStep:
        kinds = (self.exists, self.contains, self.equals, self.matches, self.visible)
        if all(kind is None for kind in kinds):
            raise ValueError(
                "One of 'exists', 'contains', 'equals', 'matches' or 'visible' must be provided"
            )
        return self


class BaselineScanStep(_Payload):
    availability: list[Availability]
    year: int
    delay: Duration | None = None
    strictness: str | None = None


_STEP_SCHEMAS: dict[CommandName, TypeAdapter] = {
    CommandName.NEW_PAGE: TypeAdapter(bool),
    CommandName.EMULATE: TypeAdapter(EmulateStep),
    CommandName.GOTO: TypeAdapter(GotoStep),
    CommandName.WAIT: TypeAdapter(WaitStep),
    CommandName.WAIT_FOR_SELECTOR: TypeAdapter(SelectorStep),
    CommandName.SCREENSHOT: TypeAdapter(ScreenshotStep),
    CommandName.TYPE: TypeAdapter(TypeStep),
    CommandName.CLICK: TypeAdapter(ClickStep),
    CommandName.PRESS: TypeAdapter(PressStep),
    CommandName.FOCUS: TypeAdapter(SelectorStep),
    CommandName.HOVER: TypeAdapter(SelectorStep),
    CommandName.SCROLL: TypeAdapter(ScrollStep),
    CommandName.ASSERT: TypeAdapter(AssertStep),
    CommandName.BASELINE_SCAN: TypeAdapter(BaselineScanStep),
    CommandName.CLOSE: TypeAdapter(bool),
}


def _violation(exc: ValidationError, prefix: str) -> SchemaViolation:
    """Turn the first pydantic error into a SchemaViolation naming the field."""
    first = exc.errors()[0]
    parts = [prefix] if prefix else []
    parts.extend(str(p) for p in first["loc"])
    return SchemaViolation(".".join(parts) or "<document>", first["msg"])


def validate_step(index: int, step: Any) -> None:
    field = f"steps.{index}"
    if not isinstance(step, dict) or len(step) != 1:
        raise SchemaViolation(field, "each step must be a mapping with exactly one command")

    name = next(iter(step))
    try:
        command = CommandName(name)
    except ValueError:
        command = None
    if command not in STEP_COMMANDS:
        raise SchemaViolation(f"{field}.{name}", f"unknown command {name!r}")

    try:
        _STEP_SCHEMAS[command].validate_python(step[name])
    except ValidationError as exc:
        raise _violation(exc, f"{field}.{name}") from exc


def validate_document(document: Any) -> dict[str, Any]:
    """
    Check *document* against the script grammar.

    Returns the document itself, unchanged. Raises SchemaViolation naming the
    first offending field; nothing is generated for an invalid document.
    """
    if not isinstance(document, dict):
        raise SchemaViolation("<document>", "expected a mapping at the top level")

    try:
        ScriptDocument.model_validate(document)
    except ValidationError as exc:
        raise _violation(exc, "") from exc

    for index, step in enumerate(document.get("steps") or []):
        validate_step(index, step)

    return document
