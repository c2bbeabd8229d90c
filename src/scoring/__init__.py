"""Category scorers and the aggregator."""
from src.scoring.aggregator import calculate_overall_score, generate_content_improvements
from src.scoring.base import BaseScorer, MetricAdvice, status_for
from src.scoring.content_scorers import (
    AIOptimizationScorer,
    ContentQualityScorer,
    EEATScorer,
    register_content_scorers,
)
from src.scoring.registry import ScorerRegistry, scorer_registry
from src.scoring.technical_scorers import (
    MobileOptimizationScorer,
    SchemaAnalysisScorer,
    TechnicalCrawlabilityScorer,
    TechnicalSEOScorer,
    register_technical_scorers,
)

register_technical_scorers(scorer_registry)
register_content_scorers(scorer_registry)

__all__ = [
    "BaseScorer",
    "MetricAdvice",
    "ScorerRegistry",
    "scorer_registry",
    "status_for",
    "calculate_overall_score",
    "generate_content_improvements",
    "TechnicalSEOScorer",
    "ContentQualityScorer",
    "AIOptimizationScorer",
    "EEATScorer",
    "TechnicalCrawlabilityScorer",
    "MobileOptimizationScorer",
    "SchemaAnalysisScorer",
]
