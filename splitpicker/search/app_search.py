"""
App Search - Typo-tolerant filtering of the application list.

Uses rapidfuzz weighted ratio against application names, so "firefx"
still finds Firefox.
"""

from typing import Sequence

from loguru import logger
from rapidfuzz import fuzz, process, utils

from ..services.applications import ApplicationDescriptor


class AppSearch:
    """Filter application descriptors by a search query."""

    def __init__(self, max_results: int = 30, fuzzy_threshold: int = 50):
        self.max_results = max_results
        self.fuzzy_threshold = fuzzy_threshold

    @classmethod
    def from_settings(cls, settings: dict) -> "AppSearch":
        search = settings["search"]
        return cls(max_results=search["max_results"], fuzzy_threshold=search["fuzzy_threshold"])

    def filter(self, apps: Sequence[ApplicationDescriptor], query: str) -> list[ApplicationDescriptor]:
        """
        Get the applications matching a query, best match first.

        Args:
            apps: Enumerated applications
            query: Search text; blank returns apps unchanged

        Returns:
            Matching descriptors, at most max_results
        """
        if not query or not query.strip():
            return list(apps)

        # Keyed by path so apps sharing a name stay distinct
        choices = {app.path: app.name for app in apps}
        by_path = {app.path: app for app in apps}

        matches = process.extract(
            query.strip(),
            choices,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            limit=self.max_results,
            score_cutoff=self.fuzzy_threshold,
        )

        # matches: list of (matched_name, score, path)
        logger.debug(f"Search '{query}' matched {len(matches)} of {len(apps)} apps")
        return [by_path[path] for _name, _score, path in matches]
