"""Marks elements behind reported selectors directly in the live page."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Sequence

from basescript.baseline.types import ReportEntry

logger = logging.getLogger(__name__)

_STYLE_ID = "baseline-scan-style"

_INJECT_STYLE_JS = """\
if (document.getElementById(styleId)) { return false; }
const style = document.createElement('style');
style.id = styleId;
style.textContent = `
  .baseline-issue-badge {
    position: absolute; top: -10px; right: -10px; z-index: 10000;
    min-width: 20px; height: 20px; padding: 0 6px; border-radius: 10px;
    color: #fff; font: 600 12px/20px system-ui, sans-serif; text-align: center;
    box-shadow: 0 2px 6px rgba(0, 0, 0, 0.3); pointer-events: none;
  }
`;
document.head.appendChild(style);
return true;"""

_HIGHLIGHT_JS = """\
const elements = document.querySelectorAll(selector);
const statuses = issues.map((issue) => issue.status);
let color = '#44aa44';
if (statuses.includes('Not Baseline')) { color = '#ff4444'; }
else if (statuses.includes('Low Baseline')) { color = '#ff8800'; }
elements.forEach((el) => {
  el.style.outline = `3px solid ${color}`;
  el.style.outlineOffset = '2px';
  el.style.cursor = 'help';
  if (window.getComputedStyle(el).position === 'static') { el.style.position = 'relative'; }
  const previous = el.querySelector(':scope > .baseline-issue-badge');
  if (previous) { previous.remove(); }
  const badge = document.createElement('div');
  badge.className = 'baseline-issue-badge';
  badge.textContent = String(issues.length);
  badge.style.background = color;
  el.appendChild(badge);
  el.setAttribute('data-baseline-issues', JSON.stringify(issues));
  el.setAttribute('title', issues.map((i) => `${i.property} (${i.status})`).join('\\n'));
});
return elements.length;"""


def page_script(framework: str, body: str, params: Sequence[str]) -> str:
    """
    Wrap a function *body* in the calling convention of each backend.

    Playwright's ``evaluate`` takes a single argument, so parameters arrive
    as one array. pyppeteer spreads its arguments. Selenium runs the body
    as a function and exposes them through ``arguments``.
    """
    names = ", ".join(params)
    if framework == "selenium":
        return f"const [{names}] = arguments;\n{body}" if params else body
    if framework == "playwright":
        return f"([{names}]) => {{\n{body}\n}}"
    return f"({names}) => {{\n{body}\n}}"


async def evaluate_in_page(
    browser_object: Any,
    framework: str,
    body: str,
    params: Sequence[str] = (),
    args: Sequence[Any] = (),
) -> Any:
    """Run a page script through the backend's evaluation primitive."""
    script = page_script(framework, body, params)
    if framework == "selenium":
        result = browser_object.execute_script(script, *args)
    elif framework == "playwright":
        result = browser_object.evaluate(script, list(args))
    else:
        result = browser_object.evaluate(script, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def highlight_elements(browser_object: Any, report: list[ReportEntry], framework: str) -> int:
    """
    Outline every element matched by a reported selector.

    The colour follows the most severe status among the selector's issues.
    At-rule entries are skipped. A selector the page cannot query is logged
    and skipped; the rest of the report is still applied. Returns the number
    of entries highlighted.
    """
    await evaluate_in_page(browser_object, framework, _INJECT_STYLE_JS, ("styleId",), (_STYLE_ID,))

    highlighted = 0
    for entry in report:
        if entry.is_at_rule:
            continue
        issues = [issue.to_dict() for issue in entry.issues]
        try:
            await evaluate_in_page(
                browser_object, framework, _HIGHLIGHT_JS, ("selector", "issues"), (entry.selector, issues)
            )
        except Exception as exc:
            logger.warning("Error highlighting selector %r: %s", entry.selector, exc)
            continue
        highlighted += 1
    return highlighted
