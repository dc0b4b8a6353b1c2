"""The ``baseline_scan`` step as compiled programs run it."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from basescript.baseline.analyzer import analyze, parse_stylesheet
from basescript.baseline.highlight import evaluate_in_page, highlight_elements
from basescript.baseline.lookup import build_lookup_map
from basescript.baseline.registry import FeatureRegistry, load_registry
from basescript.baseline.report import format_report, report_to_json
from basescript.baseline.types import AnalysisConfig, ReportEntry
from basescript.config import ScanSettings
from basescript.durations import sleep

logger = logging.getLogger(__name__)

_DEFAULT_DELAY = "1m"

_STYLESHEET_URLS_JS = "return Array.from(document.styleSheets).map((sheet) => sheet.href).filter(Boolean);"


async def collect_stylesheet_urls(browser_object: Any, framework: str) -> list[str]:
    """URLs of every linked stylesheet in the current document."""
    urls = await evaluate_in_page(browser_object, framework, _STYLESHEET_URLS_JS)
    return [str(url) for url in urls or []]


async def fetch_stylesheets(session: aiohttp.ClientSession, urls: list[str]) -> str:
    """Download each stylesheet and concatenate them in document order."""
    chunks = []
    for url in urls:
        async with session.get(url) as response:
            response.raise_for_status()
            chunks.append(await response.text())
        logger.debug("Fetched stylesheet %s", url)
    return "\n".join(chunks)


async def baseline_scan_pipeline(
    browser_object: Any,
    config: dict[str, Any] | AnalysisConfig,
    framework: str = "puppeteer",
    registry: FeatureRegistry | None = None,
    settings: ScanSettings | None = None,
) -> list[ReportEntry]:
    """
    Scan the current page's stylesheets for Baseline compatibility issues.

    Collects the linked stylesheets through *browser_object* (a page, or a
    WebDriver for selenium), analyzes them against the registry, logs the
    formatted report, highlights the affected elements and then pauses for
    ``delay`` so the result can be inspected.

    A failing scan is logged and returns an empty report; the surrounding
    program keeps running.
    """
    analysis = config if isinstance(config, AnalysisConfig) else AnalysisConfig.from_dict(config)
    settings = settings or ScanSettings.from_env()

    try:
        timeout = aiohttp.ClientTimeout(total=settings.fetch_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            urls = await collect_stylesheet_urls(browser_object, framework)
            logger.debug("Found %d stylesheets", len(urls))
            css = await fetch_stylesheets(session, urls)
            if registry is None:
                registry = await load_registry(settings, session)

        lookup = build_lookup_map(registry, analysis)
        report = analyze(parse_stylesheet(css), lookup, analysis)
        logger.info(format_report(report, analysis))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Report entries: %s", report_to_json(report))

        await highlight_elements(browser_object, report, framework)
        await sleep(analysis.delay or _DEFAULT_DELAY)
    except Exception as exc:
        logger.error("Error performing baseline_scan: %s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return []
    return report
