"""Pydantic models for extracted content and analysis results."""
from src.models.analysis import (
    AIOptimization,
    CategoryScore,
    ContentImprovement,
    ContentQuality,
    DebugInfo,
    EEATSignals,
    MobileOptimization,
    Recommendation,
    SchemaAnalysis,
    TechnicalCrawlability,
    TechnicalSEO,
    WebsiteAnalysis,
)
from src.models.content import (
    AI_BOTS,
    AISignals,
    CrawledRobots,
    EstimatedPerformance,
    ExtractedContent,
    Heading,
    Image,
    Link,
    ManualRobots,
    MeasuredPerformance,
    MobileSignals,
    StructuredDataSignals,
    TechnicalSignals,
    UXSignals,
)

__all__ = [
    "AI_BOTS",
    "AIOptimization",
    "AISignals",
    "CategoryScore",
    "ContentImprovement",
    "ContentQuality",
    "CrawledRobots",
    "DebugInfo",
    "EEATSignals",
    "EstimatedPerformance",
    "ExtractedContent",
    "Heading",
    "Image",
    "Link",
    "ManualRobots",
    "MeasuredPerformance",
    "MobileOptimization",
    "MobileSignals",
    "Recommendation",
    "SchemaAnalysis",
    "StructuredDataSignals",
    "TechnicalCrawlability",
    "TechnicalSEO",
    "TechnicalSignals",
    "UXSignals",
    "WebsiteAnalysis",
]
