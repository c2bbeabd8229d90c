"""Base classes and shared arithmetic for category scorers."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.config.settings import settings
from src.models.analysis import CategoryScore, Priority, Recommendation, Status
from src.models.content import ExtractedContent, MeasuredPerformance


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    """Round half-up, then clamp into [low, high]."""
    return max(low, min(high, round_half_up(value)))


def mean(values: list[int]) -> int:
    """Integer mean with half-up rounding. Empty input scores 0."""
    if not values:
        return 0
    total = sum(values)
    return (2 * total + len(values)) // (2 * len(values))


def weighted(pairs: list[tuple[int, int]]) -> int:
    """Weighted sum of (percent_weight, value) pairs with half-up rounding.

    Weights are integer percentages so the sum stays exact.
    """
    return (sum(weight * value for weight, value in pairs) + 50) // 100


def status_for(score: int) -> Status:
    """Map a 0-100 score onto its status band."""
    scoring = settings.scoring
    if score >= scoring.excellent_threshold:
        return "excellent"
    if score >= scoring.good_threshold:
        return "good"
    if score >= scoring.needs_improvement_threshold:
        return "needs-improvement"
    if score >= scoring.poor_threshold:
        return "poor"
    return "critical"


def load_time_band(seconds: float) -> int:
    """Score an estimated load time in seconds."""
    if seconds <= 1.0:
        return 90
    if seconds <= 2.0:
        return 75
    if seconds <= 3.0:
        return 60
    return 40


def page_speed_score(content: ExtractedContent) -> int:
    """Measured performance score, else the estimated load-time band."""
    performance = content.performance
    if isinstance(performance, MeasuredPerformance):
        return clamp(performance.score)
    return load_time_band(content.technical.estimated_load_time)


@dataclass(frozen=True)
class MetricAdvice:
    """Canned finding and recommendation for one sub-metric.

    Attributes:
        finding: Appended to findings when the metric is below threshold
        text: Recommendation text
        implementation: How to implement the fix
        expected_impact: What improves once fixed
        time_to_implement: Rough effort estimate
    """
    finding: str
    text: str
    implementation: str = ""
    expected_impact: str = ""
    time_to_implement: str = ""


class BaseScorer(ABC):
    """Abstract base class for the category scorers.

    Subclasses must implement:
    - scorer_id: Key used in weights, thresholds and the report
    - name: Human-readable category name
    - score(): Compute the CategoryScore for one page
    """

    # Sub-metric name -> advice emitted when the metric is below threshold
    advice: dict[str, MetricAdvice] = {}

    @property
    @abstractmethod
    def scorer_id(self) -> str:
        """Unique identifier for this category."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this category."""
        pass

    @property
    def description(self) -> str:
        """Optional description of what this scorer measures."""
        return ""

    @property
    def weight(self) -> float:
        """Share of the overall score (0-1)."""
        return settings.scoring.weights.get(self.scorer_id, 0) / 100

    @abstractmethod
    def score(self, content: ExtractedContent) -> CategoryScore:
        """Score one page.

        Args:
            content: Extracted page snapshot

        Returns:
            CategoryScore subclass with its named sub-metrics
        """
        pass

    def advise(self, metrics: dict[str, int]) -> tuple[list[str], list[Recommendation]]:
        """Build findings and recommendations for metrics below threshold.

        Metrics are visited in the order given; each low metric adds exactly
        one finding and one recommendation.
        """
        threshold = settings.scoring.recommendation_threshold
        findings: list[str] = []
        recommendations: list[Recommendation] = []
        for metric, value in metrics.items():
            advice = self.advice.get(metric)
            if advice is None or value >= threshold:
                continue
            priority: Priority = "high" if value < settings.scoring.high_priority_below else "medium"
            findings.append(advice.finding)
            recommendations.append(
                Recommendation(
                    text=advice.text,
                    priority=priority,
                    category=self.name,
                    implementation=advice.implementation,
                    expected_impact=advice.expected_impact,
                    time_to_implement=advice.time_to_implement,
                )
            )
        return findings, recommendations
