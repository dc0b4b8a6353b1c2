"""Shared fixtures: a small web-features registry and script documents."""

from __future__ import annotations

import pytest

from basescript.baseline.registry import FeatureRegistry

REGISTRY_DATA = {
    "features": {
        "aspect-ratio": {
            "description": "The aspect-ratio CSS property sets a preferred width to height ratio.",
            "compat_features": ["css.properties.aspect-ratio"],
            "status": {
                "baseline": "high",
                "baseline_low_date": "2021-09-20",
                "baseline_high_date": "2024-03-20",
                "support": {"chrome": "88", "edge": "88", "firefox": "89", "safari": "15"},
            },
        },
        "has": {
            "description": "The :has() pseudo-class matches an element if any selectors match its descendants.",
            "compat_features": ["css.selectors.has"],
            "status": {
                "baseline": "low",
                "baseline_low_date": "2023-12-19",
                "support": {"chrome": "105", "chrome_android": "105", "safari": "15.4", "safari_ios": "15.4"},
            },
        },
        "subgrid": {
            "description": "Nested grids can use the tracks of their parent grid.",
            "compat_features": ["css.properties.grid-template-columns.subgrid"],
            "status": {
                "baseline": "low",
                "baseline_low_date": "2023-09-15",
                "support": {"chrome": "117", "firefox": "71", "safari": "16"},
            },
        },
        "container-style-queries": {
            "description": "Container style queries apply styles based on custom property values.",
            "compat_features": ["css.at-rules.container.style_queries_for_custom_properties"],
            "status": {"baseline": False, "support": {"chrome": "111", "edge": "111"}},
        },
        "container-queries": {
            "description": "Container size queries.",
            "compat_features": ["css.at-rules.container"],
            "status": {"baseline": "low", "baseline_low_date": "2023-02-14", "support": {"chrome": "105"}},
        },
        "anchor-positioning": {
            "description": "Anchor positioning places an element relative to another.",
            "compat_features": ["css.properties.anchor-name", "css.functions.anchor"],
            "status": {"baseline": False, "support": {"chrome": "125"}},
        },
        "field-sizing": {
            "description": "The field-sizing property lets form controls grow with their content.",
            "compat_features": ["css.properties.field-sizing"],
            "status": {"baseline": False, "support": {}},
        },
        "fetch": {
            "description": "Not a CSS feature.",
            "compat_features": ["api.fetch"],
            "status": {"baseline": "high", "baseline_high_date": "2017-03-27"},
        },
        "no-compat": {
            "description": "Entry without compat keys.",
            "status": {"baseline": False},
        },
    }
}


@pytest.fixture
def registry() -> FeatureRegistry:
    return FeatureRegistry.from_data(REGISTRY_DATA)


def _document(framework="puppeteer", mode="launch", steps=None) -> dict:
    if mode == "launch":
        browser = {"mode": "launch", "launch": {"headless": True}}
    else:
        browser = {"mode": "connect", "connect": {"wsUrl": "ws://x"}}
    document = {"framework": framework, "browser": browser}
    if steps is not None:
        document["steps"] = steps
    return document


@pytest.fixture
def make_document():
    return _document


@pytest.fixture
def registry_data() -> dict:
    return REGISTRY_DATA
