"""Plain-text rendering of a Baseline analysis report."""

from __future__ import annotations

import json
import textwrap
from urllib.parse import quote

from basescript.baseline.types import AnalysisConfig, BaselineStatus, Issue, ReportEntry

_RULE = "=" * 80
_SECTION_RULE = "-" * 60
_MAX_SELECTOR = 50

_ICONS = {
    BaselineStatus.NOT_BASELINE: "🔴",
    BaselineStatus.LOW_BASELINE: "🟡",
    BaselineStatus.HIGH_BASELINE: "🟢",
}

_RECOMMENDATIONS = {
    BaselineStatus.NOT_BASELINE: (
        "Not Baseline Issues:",
        [
            "Consider providing fallbacks for older browsers",
            "Test on the browser versions you target",
            "Watch for support status changes",
        ],
    ),
    BaselineStatus.LOW_BASELINE: (
        "Low Baseline Issues:",
        [
            "These features only recently became Baseline",
            "Fallbacks may still be needed for older browsers",
            "Prefer progressive enhancement",
        ],
    ),
    BaselineStatus.HIGH_BASELINE: (
        "High Baseline Features:",
        [
            "These features are widely supported",
            "Generally safe to use without fallbacks",
        ],
    ),
}


def _reference_name(prop: str) -> str:
    """``display: subgrid`` → ``display``; ``@container`` → ``container``."""
    return prop.split(":")[0].lstrip("@").strip()


def _truncate(selector: str) -> str:
    if len(selector) > _MAX_SELECTOR:
        return selector[: _MAX_SELECTOR - 3] + "..."
    return selector


def _feature_lines(index: int, feature_id: str, hits: list[tuple[str, Issue]]) -> list[str]:
    first = hits[0][1]
    lines = ["", f"{index}. Feature: {feature_id}"]

    if first.description:
        wrapped = textwrap.wrap(first.description, width=70)
        lines.append(f"   📝 {wrapped[0]}")
        lines.extend(f"      {line}" for line in wrapped[1:])
    if first.baseline_year:
        lines.append(f"   📅 Baseline since: {first.baseline_year}")
    if first.browser_compat_summary:
        lines.append(f"   🌐 Browser support: {first.browser_compat_summary}")
    if first.compat_key:
        lines.append(f"   🔑 Compat key: {first.compat_key}")

    versions = [f"{browser.capitalize()} {version}+" for browser, version in first.browser_compat.items() if version]
    if versions:
        lines.append(f"   🌐 Browser versions: {', '.join(versions)}")

    name = _reference_name(first.property)
    lines.append("   🔗 References:")
    lines.append(f"      MDN: https://developer.mozilla.org/en-US/docs/Web/CSS/{name}")
    lines.append(f"      Web Features: https://web-platform-dx.github.io/web-features/{feature_id}")
    lines.append(f"      Can I Use: https://caniuse.com/?search={quote(name)}")

    by_selector: dict[str, list[str]] = {}
    for selector, issue in hits:
        by_selector.setdefault(selector, []).append(issue.property)
    lines.append(f"   📍 Found in {len(by_selector)} selector(s):")
    for selector, properties in by_selector.items():
        lines.append(f"      • {_truncate(selector)}")
        lines.append(f"        Properties: {', '.join(properties)}")
    return lines


def format_report(report: list[ReportEntry], config: AnalysisConfig) -> str:
    """Render *report* grouped by status, then by feature, followed by recommendations."""
    groups: dict[BaselineStatus, list[tuple[str, Issue]]] = {status: [] for status in BaselineStatus}
    for entry in report:
        for issue in entry.issues:
            groups[issue.status].append((entry.selector, issue))
    total = sum(len(hits) for hits in groups.values())

    lines = [
        "",
        _RULE,
        "🎯 BASELINE ANALYSIS REPORT",
        _RULE,
        "",
        "📋 Configuration:",
        f"   Include Availability: {', '.join(sorted(config.include_availability)) or 'none'}",
        f"   Baseline Year Threshold: {config.baseline_year_threshold or 'None'}",
        f"   Include Not Baseline: {config.include_not_baseline}",
        f"   Strictness: {config.strictness}",
        "",
        "📊 Summary:",
        f"   Total Selectors Analyzed: {len(report)}",
        f"   Total Issues Found: {total}",
    ]
    lines.extend(f"   {_ICONS[status]} {status.value}: {len(hits)}" for status, hits in groups.items())

    for status, hits in groups.items():
        if not hits:
            continue
        lines += ["", _SECTION_RULE, f"{_ICONS[status]} {status.value.upper()} ({len(hits)} issues)", _SECTION_RULE]
        by_feature: dict[str, list[tuple[str, Issue]]] = {}
        for selector, issue in hits:
            by_feature.setdefault(issue.feature_id, []).append((selector, issue))
        for index, (feature_id, feature_hits) in enumerate(by_feature.items(), start=1):
            lines.extend(_feature_lines(index, feature_id, feature_hits))

    lines += ["", _RULE, "💡 RECOMMENDATIONS", _RULE]
    for status, hits in groups.items():
        if not hits:
            continue
        heading, advice = _RECOMMENDATIONS[status]
        lines += ["", f"{_ICONS[status]} {heading}"]
        lines.extend(f"   • {item}" for item in advice)
    if total == 0:
        lines += ["", "No compatibility issues matched the current configuration."]

    lines += [
        "",
        "📚 Resources:",
        "   • MDN Web Docs: https://developer.mozilla.org/",
        "   • Can I Use: https://caniuse.com/",
        "   • Web Features: https://web-platform-dx.github.io/web-features/",
        "   • Baseline: https://web.dev/baseline/",
        "",
        _RULE,
    ]
    return "\n".join(lines)


def report_to_json(report: list[ReportEntry]) -> str:
    """Serialize *report* with the same field names the page sees on highlighted elements."""
    return json.dumps([entry.to_dict() for entry in report], ensure_ascii=False, indent=2)
