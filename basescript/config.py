"""Runtime settings for the Baseline scan, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_REGISTRY_URL = "https://unpkg.com/web-features/data.json"
_DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(frozen=True)
class ScanSettings:
    """
    Where the compatibility registry comes from and how long fetches may take.

    ``registry_path`` wins over ``registry_url`` when both are set.
    """

    registry_path: str | None = None
    registry_url: str = _DEFAULT_REGISTRY_URL
    fetch_timeout: float = _DEFAULT_FETCH_TIMEOUT

    @classmethod
    def from_env(cls) -> ScanSettings:
        timeout = os.environ.get("BASESCRIPT_FETCH_TIMEOUT")
        return cls(
            registry_path=os.environ.get("BASESCRIPT_REGISTRY_PATH") or None,
            registry_url=os.environ.get("BASESCRIPT_REGISTRY_URL") or _DEFAULT_REGISTRY_URL,
            fetch_timeout=float(timeout) if timeout else _DEFAULT_FETCH_TIMEOUT,
        )
