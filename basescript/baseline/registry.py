"""Read-only view over the web-features compatibility data."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import aiohttp

from basescript.config import ScanSettings
from basescript.errors import RegistryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureRegistry:
    """
    Immutable mapping of feature id to its web-features entry.

    Entries are kept as the raw JSON objects; the lookup builder decides
    which of them are usable.
    """

    features: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", MappingProxyType(dict(self.features)))

    @classmethod
    def from_data(cls, data: Any) -> FeatureRegistry:
        """Accept either the bare feature map or the full ``data.json`` with a ``features`` key."""
        if isinstance(data, Mapping) and isinstance(data.get("features"), Mapping):
            data = data["features"]
        if not isinstance(data, Mapping):
            raise RegistryError(f"registry must be a JSON object, got {type(data).__name__}")
        return cls(features=data)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(self.features.items())

    def __len__(self) -> int:
        return len(self.features)


def load_registry_file(path: str) -> FeatureRegistry:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise RegistryError(f"cannot read registry {path}: {exc}") from exc
    registry = FeatureRegistry.from_data(data)
    logger.debug("Loaded %d features from %s", len(registry), path)
    return registry


async def fetch_registry(session: aiohttp.ClientSession, url: str) -> FeatureRegistry:
    try:
        async with session.get(url) as response:
            response.raise_for_status()
            data = await response.json(content_type=None)
    except (aiohttp.ClientError, json.JSONDecodeError) as exc:
        raise RegistryError(f"cannot fetch registry {url}: {exc}") from exc
    registry = FeatureRegistry.from_data(data)
    logger.debug("Fetched %d features from %s", len(registry), url)
    return registry


async def load_registry(settings: ScanSettings, session: aiohttp.ClientSession) -> FeatureRegistry:
    """Local file when ``registry_path`` is set, otherwise the configured URL."""
    if settings.registry_path:
        return load_registry_file(settings.registry_path)
    return await fetch_registry(session, settings.registry_url)
