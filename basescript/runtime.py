"""Backend-independent helpers imported by compiled programs.

Each backend prologue defines a ``check_assertion`` helper that locates the
element with its own primitives and then hands the observed facts to
:func:`evaluate_assertion` and :func:`settle_assertion`.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from basescript.errors import AssertionFailure

logger = logging.getLogger(__name__)

# Evaluation precedence when a step names more than one kind
ASSERTION_KINDS: tuple[str, ...] = ("contains", "equals", "matches", "exists", "visible")

# An assert step without ``throwOnFail`` stops the program on failure.
DEFAULT_THROW_ON_FAIL = True


def throw_on_fail(options: dict[str, Any]) -> bool:
    """Only an explicit ``throwOnFail: false`` lets the program continue."""
    value = options.get("throwOnFail")
    if value is None:
        return DEFAULT_THROW_ON_FAIL
    return value is not False


def evaluate_assertion(
    options: dict[str, Any],
    found: bool,
    text: str = "",
    visible: bool = False,
) -> tuple[bool, str]:
    """
    Evaluate the assertion described by *options* against observed facts.

    Returns ``(passed, message)``. A missing element fails every kind except
    ``exists: false``.
    """
    selector = options.get("selector", "")
    if not found and options.get("exists") is not False:
        return False, f"Element not found: {selector}"

    if options.get("contains") is not None:
        expected = options["contains"]
        return expected in text, f'Expected text to contain "{expected}", but got: "{text}"'

    if options.get("equals") is not None:
        expected = options["equals"]
        return text == expected, f'Expected text to equal "{expected}", but got: "{text}"'

    if options.get("matches") is not None:
        pattern = options["matches"]
        return (
            re.search(pattern, text) is not None,
            f'Expected text to match pattern /{pattern}/, but got: "{text}"',
        )

    if options.get("exists") is not None:
        expected = bool(options["exists"])
        return found == expected, f"Expected element to {'exist' if expected else 'not exist'}"

    if options.get("visible") is not None:
        expected = bool(options["visible"])
        return visible == expected, f"Expected element to be {'visible' if expected else 'hidden'}"

    return False, f"No assertion kind given for {selector}"


def settle_assertion(options: dict[str, Any], passed: bool, message: str) -> bool:
    """Log the outcome and raise :class:`AssertionFailure` when the policy says stop."""
    if passed:
        logger.info("✅ Assertion passed: %s", options.get("selector", ""))
        return True

    logger.error("❌ Assertion failed: %s", message)
    if throw_on_fail(options):
        raise AssertionFailure(f"Assertion failed: {message}")
    return False
