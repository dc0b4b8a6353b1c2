"""Baseline analysis type definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BaselineStatus(str, Enum):
    NOT_BASELINE = "Not Baseline"
    LOW_BASELINE = "Low Baseline"
    HIGH_BASELINE = "High Baseline"

    @property
    def restrictiveness(self) -> int:
        """Higher means less widely supported; used to resolve key collisions."""
        return _RESTRICTIVENESS[self]


_RESTRICTIVENESS = {
    BaselineStatus.HIGH_BASELINE: 0,
    BaselineStatus.LOW_BASELINE: 1,
    BaselineStatus.NOT_BASELINE: 2,
}


@dataclass(frozen=True)
class FeatureRecord:
    feature_id: str
    status: BaselineStatus
    description: str = ""
    baseline_year: str | None = None
    browser_compat: dict[str, str | None] = field(default_factory=dict)
    browser_compat_summary: str = ""
    compat_key: str = ""


@dataclass(frozen=True)
class AnalysisConfig:
    """Filters applied both while building the lookup map and to the final report."""

    include_availability: frozenset[str] = frozenset({"low"})
    baseline_year_threshold: int | None = None
    include_not_baseline: bool = True
    strictness: str = "normal"
    delay: str | None = None  # post-scan pause, duration token

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisConfig:
        """Build from the camelCase mapping a compiled program passes in."""
        year = data.get("baselineYearThreshold")
        availability = data.get("includeAvailability")
        if availability is None:
            availability = cls.include_availability
        return cls(
            include_availability=frozenset(item for item in availability if item in ("low", "high")),
            baseline_year_threshold=int(year) if year else None,
            include_not_baseline=bool(data.get("includeNotBaseline", True)),
            strictness=data.get("strictness") or "normal",
            delay=data.get("delay"),
        )

    def includes(self, status: BaselineStatus) -> bool:
        if status is BaselineStatus.NOT_BASELINE:
            return self.include_not_baseline
        if status is BaselineStatus.LOW_BASELINE:
            return "low" in self.include_availability
        return "high" in self.include_availability


@dataclass(frozen=True)
class Issue:
    property: str  # offending syntax as written, e.g. ":has" or "display: subgrid"
    status: BaselineStatus
    feature_id: str
    baseline_year: str | None = None
    description: str = ""
    browser_compat: dict[str, str | None] = field(default_factory=dict)
    browser_compat_summary: str = ""
    compat_key: str = ""  # web-features key that matched, e.g. "css.properties.display.subgrid"

    @classmethod
    def from_record(cls, record: FeatureRecord, prop: str) -> Issue:
        return cls(
            property=prop,
            status=record.status,
            feature_id=record.feature_id,
            baseline_year=record.baseline_year,
            description=record.description,
            browser_compat=record.browser_compat,
            browser_compat_summary=record.browser_compat_summary,
            compat_key=record.compat_key,
        )

    @property
    def identity(self) -> tuple[str, str]:
        """Two issues with the same identity are duplicates within one selector."""
        return (self.feature_id, self.property)

    def to_dict(self) -> dict[str, Any]:
        return {
            "property": self.property,
            "status": self.status.value,
            "featureId": self.feature_id,
            "baselineYear": self.baseline_year,
            "description": self.description,
            "browserCompat": dict(self.browser_compat),
            "browserCompatSummary": self.browser_compat_summary,
            "compatKey": self.compat_key,
        }


@dataclass
class ReportEntry:
    selector: str
    issues: list[Issue] = field(default_factory=list)

    @property
    def is_at_rule(self) -> bool:
        """At-rule entries carry a leading ``@`` and are never highlighted."""
        return self.selector.startswith("@")

    def to_dict(self) -> dict[str, Any]:
        return {"selector": self.selector, "issues": [i.to_dict() for i in self.issues]}
