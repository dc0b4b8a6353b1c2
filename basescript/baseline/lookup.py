"""Builds the identifier → FeatureRecord map the analyzer matches CSS syntax against."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Mapping

from basescript.baseline.registry import FeatureRegistry
from basescript.baseline.types import AnalysisConfig, BaselineStatus, FeatureRecord

logger = logging.getLogger(__name__)

# Second segment of a compat key, e.g. css.properties.aspect-ratio
_CSS_CATEGORIES = frozenset({"properties", "at-rules", "selectors", "types", "functions"})

# Mobile releases fold into their desktop family
_BROWSER_FAMILIES = {
    "chrome": "chrome",
    "chrome_android": "chrome",
    "firefox": "firefox",
    "firefox_android": "firefox",
    "safari": "safari",
    "safari_ios": "safari",
    "edge": "edge",
}

_YEAR_RE = re.compile(r"\d{4}")
_VERSION_RE = re.compile(r"\d+(\.\d+)?")


def status_label(baseline: Any) -> BaselineStatus | None:
    """Map the registry's ``status.baseline`` value onto a BaselineStatus."""
    if baseline is False:
        return BaselineStatus.NOT_BASELINE
    if baseline == "low":
        return BaselineStatus.LOW_BASELINE
    if baseline is True or baseline == "high":
        return BaselineStatus.HIGH_BASELINE
    return None


def _year(date: Any) -> int | None:
    # Dates may carry a range marker, e.g. "≤2020-03-24"
    match = _YEAR_RE.search(str(date)) if date else None
    return int(match.group()) if match else None


def baseline_year(status: Mapping[str, Any]) -> str | None:
    year = _year(status.get("baseline_high_date") or status.get("baseline_low_date"))
    return str(year) if year is not None else None


def _version_key(version: str) -> float:
    match = _VERSION_RE.search(version)
    return float(match.group()) if match else math.inf


def browser_compat_info(status: Mapping[str, Any]) -> dict[str, str | None]:
    """Earliest supporting version per desktop browser family."""
    compat: dict[str, str | None] = {"chrome": None, "firefox": None, "safari": None, "edge": None}
    support = status.get("support")
    if not isinstance(support, Mapping):
        return compat
    for browser, version in support.items():
        family = _BROWSER_FAMILIES.get(browser)
        if family is None or not isinstance(version, str) or not version:
            continue
        existing = compat[family]
        if existing is None or _version_key(version) < _version_key(existing):
            compat[family] = version
    return compat


def browser_compat_summary(compat: Mapping[str, str | None]) -> str:
    supported = sum(1 for version in compat.values() if version)
    if supported == 0:
        return "Limited browser support"
    if supported >= 3:
        return "Good browser support"
    return "Partial browser support"


def should_include(status: BaselineStatus | None, status_data: Mapping[str, Any], config: AnalysisConfig) -> bool:
    if status is None or not config.includes(status):
        return False
    if config.baseline_year_threshold:
        year = _year(status_data.get("baseline_high_date"))
        if year is not None and year < config.baseline_year_threshold:
            return False
    return True


def lookup_key(compat_key: str) -> str | None:
    """``css.properties.aspect-ratio`` → ``aspect-ratio``; None for keys outside the CSS categories."""
    parts = compat_key.split(".")
    if len(parts) < 3 or parts[1] not in _CSS_CATEGORIES:
        return None
    return ".".join(parts[2:]).lower()


def build_lookup_map(registry: FeatureRegistry, config: AnalysisConfig) -> dict[str, FeatureRecord]:
    """
    Index every usable registry entry by the CSS identifiers it covers.

    When two features claim the same identifier the more restrictive status
    wins (Not Baseline > Low Baseline > High Baseline); on equal status the
    later entry replaces the earlier one.
    """
    lookup: dict[str, FeatureRecord] = {}
    skipped = 0

    for feature_id, entry in registry.items():
        if not isinstance(entry, Mapping) or not isinstance(entry.get("status", {}), Mapping):
            skipped += 1
            continue
        status_data = entry.get("status") or {}
        compat_features = entry.get("compat_features")
        if compat_features is not None and not isinstance(compat_features, list):
            skipped += 1
            continue

        status = status_label(status_data.get("baseline"))
        if not compat_features or not should_include(status, status_data, config):
            continue

        compat = browser_compat_info(status_data)
        for compat_key in compat_features:
            key = lookup_key(str(compat_key))
            if key is None:
                continue
            existing = lookup.get(key)
            if existing is not None and status.restrictiveness < existing.status.restrictiveness:
                continue
            lookup[key] = FeatureRecord(
                feature_id=feature_id,
                status=status,
                description=entry.get("description") or "",
                baseline_year=baseline_year(status_data),
                browser_compat=compat,
                browser_compat_summary=browser_compat_summary(compat),
                compat_key=str(compat_key),
            )

    if skipped:
        logger.debug("Skipped %d malformed registry entries", skipped)
    logger.debug("Lookup map holds %d identifiers", len(lookup))
    return lookup
