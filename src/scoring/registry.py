"""Scorer registry for managing the category scorers."""
from __future__ import annotations

from src.models.analysis import CategoryScore
from src.models.content import ExtractedContent
from src.scoring.base import BaseScorer


class ScorerRegistry:
    """Registry for managing and running category scorers.

    Usage:
        registry = ScorerRegistry()
        registry.register(MyScorer())
        scores = registry.run_all(content)
    """

    def __init__(self):
        self._scorers: dict[str, BaseScorer] = {}

    def register(self, scorer: BaseScorer) -> None:
        """Register a scorer instance.

        Args:
            scorer: Scorer instance to register
        """
        self._scorers[scorer.scorer_id] = scorer

    def unregister(self, scorer_id: str) -> None:
        """Unregister a scorer by ID.

        Args:
            scorer_id: ID of scorer to remove
        """
        self._scorers.pop(scorer_id, None)

    def get(self, scorer_id: str) -> BaseScorer | None:
        """Get a scorer by ID.

        Args:
            scorer_id: ID of scorer to retrieve

        Returns:
            Scorer instance or None if not found
        """
        return self._scorers.get(scorer_id)

    def list_all(self) -> list[BaseScorer]:
        """List all registered scorers in registration order."""
        return list(self._scorers.values())

    def ids(self) -> list[str]:
        return list(self._scorers)

    def run(self, scorer_id: str, content: ExtractedContent) -> CategoryScore | None:
        """Run a specific scorer.

        Returns:
            CategoryScore or None if scorer not found
        """
        scorer = self._scorers.get(scorer_id)
        if scorer is None:
            return None
        return scorer.score(content)

    def run_all(self, content: ExtractedContent) -> dict[str, CategoryScore]:
        """Run all registered scorers.

        Args:
            content: Extracted page snapshot

        Returns:
            Mapping of scorer id to CategoryScore
        """
        return {
            scorer_id: scorer.score(content)
            for scorer_id, scorer in self._scorers.items()
        }


# Global registry instance
scorer_registry = ScorerRegistry()
