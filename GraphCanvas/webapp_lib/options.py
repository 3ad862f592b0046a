# webapp_lib/options.py
"""
Feature switches for the graph service.

One configurable app replaces the three historical variants:
  plain renderer     -> ServiceOptions.plain()
  rate limit + CORS + content-hash caching + reset -> ServiceOptions() (default)
  captioned images   -> enable_captions=True
"""
from __future__ import annotations
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServiceOptions:
    enable_rate_limit: bool = True
    enable_cors: bool = True
    enable_caching: bool = True
    enable_captions: bool = False
    enable_reset: bool = True
    transparent_background: bool = True
    draw_axes: bool = False
    legacy_timestamps: bool = False
    title: str = "Graph Akademik"
    subtitle: str = "Kelompok 2"
    rate_limit: int = 1
    rate_window_ms: int = 1000

    @classmethod
    def from_env(cls) -> "ServiceOptions":
        return cls(
            enable_rate_limit=_env_flag("GRAPH_ENABLE_RATE_LIMIT", True),
            enable_cors=_env_flag("GRAPH_ENABLE_CORS", True),
            enable_caching=_env_flag("GRAPH_ENABLE_CACHING", True),
            enable_captions=_env_flag("GRAPH_ENABLE_CAPTIONS", False),
            enable_reset=_env_flag("GRAPH_ENABLE_RESET", True),
            transparent_background=_env_flag("GRAPH_TRANSPARENT_BACKGROUND", True),
            draw_axes=_env_flag("GRAPH_DRAW_AXES", False),
            legacy_timestamps=_env_flag("GRAPH_LEGACY_TIMESTAMPS", False),
            title=os.getenv("GRAPH_TITLE", "Graph Akademik"),
            subtitle=os.getenv("GRAPH_SUBTITLE", "Kelompok 2"),
            rate_limit=int(os.getenv("GRAPH_RATE_LIMIT", "1")),
            rate_window_ms=int(os.getenv("GRAPH_RATE_WINDOW_MS", "1000")),
        )

    @classmethod
    def plain(cls) -> "ServiceOptions":
        """The original single-file renderer: white canvas with axes, no extras."""
        return cls(
            enable_rate_limit=False,
            enable_cors=False,
            enable_caching=False,
            enable_reset=False,
            transparent_background=False,
            draw_axes=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
