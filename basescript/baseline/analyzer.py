"""Walks parsed CSS and reports syntax that maps onto tracked Baseline features."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import tinycss2

from basescript.baseline.types import AnalysisConfig, FeatureRecord, Issue, ReportEntry

logger = logging.getLogger(__name__)

_CSS_WIDE_KEYWORDS = frozenset({"inherit", "initial", "unset", "revert", "revert-layer"})

# Keywords valid for nearly every property; never worth a lookup
_UNIVERSAL_KEYWORDS = frozenset({
    "auto", "none", "normal", "transparent", "currentcolor",
    "solid", "dashed", "dotted", "hidden", "visible",
    "absolute", "relative", "fixed", "static",
    "block", "inline", "inline-block",
    "left", "right", "center", "top", "bottom",
    "bold", "italic", "both", "pointer", "default",
    "black", "white",
})

_UNITS = frozenset({
    "px", "em", "rem", "%", "vh", "vw", "vmin", "vmax",
    "s", "ms", "deg", "rad", "turn", "fr",
    "pt", "pc", "in", "cm", "mm", "ch", "ex", "dpi", "dppx",
})

_IGNORED_IDENTIFIERS = _CSS_WIDE_KEYWORDS | _UNIVERSAL_KEYWORDS | _UNITS

# At-rules whose block holds rules rather than declarations
_GROUPING_AT_RULES = frozenset({
    "media", "supports", "container", "layer", "document", "-moz-document", "scope", "starting-style",
})

STYLE_QUERY_KEYS = ("container.style_queries_for_custom_properties", "container-style-queries")

_BLOCK_TYPES = ("() block", "[] block", "{} block")


def parse_stylesheet(css: str) -> list:
    """Parse stylesheet text into tinycss2 rule nodes."""
    rules = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    errors = [rule for rule in rules if rule.type == "error"]
    if errors:
        logger.debug("Skipped %d unparsable CSS fragments", len(errors))
    return [rule for rule in rules if rule.type != "error"]


def _collapse(tokens: Iterable) -> str:
    return " ".join(tinycss2.serialize(tokens).split())


def _pseudo_names(tokens: Iterable) -> list[str]:
    """Names following ``:`` or ``::`` in a selector, including those nested in :is() and friends."""
    names: list[str] = []
    after_colon = False
    for token in tokens:
        if token.type == "literal" and token.value == ":":
            after_colon = True
            continue
        if after_colon and token.type == "ident":
            names.append(token.value)
        elif token.type == "function":
            if after_colon:
                names.append(token.name)
            names.extend(_pseudo_names(token.arguments))
        after_colon = False
    return names


class _Analysis:
    """Accumulates issues per selector during one walk."""

    def __init__(self, lookup: Mapping[str, FeatureRecord]) -> None:
        self.lookup = lookup
        self.issues: dict[str, list[Issue]] = {}
        self.seen: dict[str, set[tuple[str, str]]] = {}

    def add(self, selector: str, record: FeatureRecord, prop: str) -> None:
        issue = Issue.from_record(record, prop)
        seen = self.seen.setdefault(selector, set())
        if issue.identity in seen:
            return
        seen.add(issue.identity)
        self.issues.setdefault(selector, []).append(issue)

    def walk(self, nodes: Iterable) -> None:
        for node in nodes:
            if node.type == "qualified-rule":
                self.qualified_rule(node)
            elif node.type == "at-rule":
                self.at_rule(node)

    def qualified_rule(self, rule) -> None:
        selector = _collapse(rule.prelude)
        for name in _pseudo_names(rule.prelude):
            record = self.lookup.get(name.lower())
            if record is not None:
                self.add(selector, record, f":{name}")
        self.block(rule.content, selector)

    def at_rule(self, rule) -> None:
        name = rule.lower_at_keyword
        prelude = _collapse(rule.prelude).lower()
        selector = f"@{name} {prelude}".strip()

        if name == "container" and ("style(" in prelude or "--" in prelude):
            keys: tuple[str, ...] = STYLE_QUERY_KEYS
        else:
            keys = (name,)
        record = next((self.lookup[key] for key in keys if key in self.lookup), None)
        if record is not None:
            self.add(selector, record, f"@{name}")

        if rule.content is None:
            return
        if name in _GROUPING_AT_RULES:
            self.walk(tinycss2.parse_rule_list(rule.content, skip_comments=True, skip_whitespace=True))
        else:
            self.block(rule.content, selector)

    def block(self, content: list, selector: str) -> None:
        items = tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)
        for item in items:
            if item.type == "declaration":
                self.declaration(item, selector)
            elif item.type in ("qualified-rule", "at-rule"):
                self.walk([item])

    def declaration(self, declaration, selector: str) -> None:
        prop = declaration.lower_name
        if prop.startswith("--"):
            return
        record = self.lookup.get(prop)
        if record is not None:
            self.add(selector, record, prop)
        self.value(declaration.value, prop, selector)

    def value(self, tokens: Iterable, prop: str, selector: str) -> None:
        for token in tokens:
            if token.type == "function":
                name = token.lower_name
                record = self.lookup.get(name)
                if record is not None:
                    self.add(selector, record, f"{prop}: {name}()")
                self.value(token.arguments, prop, selector)
            elif token.type == "ident":
                ident = token.lower_value
                if ident.startswith("--") or ident in _IGNORED_IDENTIFIERS:
                    continue
                record = self.lookup.get(ident)
                if record is not None:
                    self.add(selector, record, f"{prop}: {ident}")
            elif token.type in _BLOCK_TYPES:
                self.value(token.content, prop, selector)


def analyze(rules: Iterable, lookup: Mapping[str, FeatureRecord], config: AnalysisConfig) -> list[ReportEntry]:
    """
    Report every selector whose rule uses a feature in *lookup*.

    Issues are deduplicated per selector on ``(feature_id, property)`` and
    filtered against *config* once more before the report is returned, so a
    lookup map built with looser settings cannot leak statuses into it.
    Selectors left without issues are dropped.
    """
    analysis = _Analysis(lookup)
    analysis.walk(rules)

    report = []
    for selector, issues in analysis.issues.items():
        kept = [issue for issue in issues if config.includes(issue.status)]
        if kept:
            report.append(ReportEntry(selector=selector, issues=kept))
    logger.debug("Analysis found issues under %d selectors", len(report))
    return report


def analyze_css(css: str, lookup: Mapping[str, FeatureRecord], config: AnalysisConfig) -> list[ReportEntry]:
    return analyze(parse_stylesheet(css), lookup, config)
