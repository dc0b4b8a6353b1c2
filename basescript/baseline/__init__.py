"""Baseline compatibility analysis of a live page's CSS."""

from basescript.baseline.analyzer import analyze, analyze_css, parse_stylesheet
from basescript.baseline.lookup import build_lookup_map
from basescript.baseline.pipeline import baseline_scan_pipeline
from basescript.baseline.registry import FeatureRegistry, load_registry_file
from basescript.baseline.report import format_report, report_to_json
from basescript.baseline.types import AnalysisConfig, BaselineStatus, FeatureRecord, Issue, ReportEntry

__all__ = [
    "AnalysisConfig",
    "BaselineStatus",
    "FeatureRecord",
    "FeatureRegistry",
    "Issue",
    "ReportEntry",
    "analyze",
    "analyze_css",
    "baseline_scan_pipeline",
    "build_lookup_map",
    "format_report",
    "load_registry_file",
    "parse_stylesheet",
    "report_to_json",
]
