"""Configuration for the ATLAS Widget."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from atlas_widget import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://atlas.example.com/api"


@dataclass
class WidgetConfig:
    """Widget settings: environment first, hardcoded production fallback."""

    api_base_url: str = DEFAULT_API_URL
    timeout: float = 15.0
    health_timeout: float = 5.0
    widget_version: str = __version__

    @classmethod
    def from_env(cls) -> WidgetConfig:
        cfg = cls()
        url = os.environ.get("ATLAS_API_URL", "").strip()
        if url:
            cfg.api_base_url = url
        raw_timeout = os.environ.get("ATLAS_TIMEOUT")
        if raw_timeout:
            try:
                cfg.timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Ignoring invalid ATLAS_TIMEOUT=%r", raw_timeout)
        cfg.api_base_url = cfg.api_base_url.rstrip("/")
        return cfg
