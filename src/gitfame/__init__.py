from __future__ import annotations

from .collect import StatsAggregator, collect_stats
from .config import Config, build_config
from .models import AuthorRecord, GitFameError
from .ranking import sort_stats
from .render import render

__all__ = [
    "AuthorRecord",
    "Config",
    "GitFameError",
    "StatsAggregator",
    "build_config",
    "collect_stats",
    "render",
    "sort_stats",
]
