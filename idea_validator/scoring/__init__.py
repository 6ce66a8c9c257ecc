"""Opportunity metrics and chart layout"""

from .layout import ChartLayout, HeatmapChart, PlacedBubble, select_bubble
from .opportunity import BubbleDatum, OpportunityScorer, derive_all_metrics, derive_metrics
from .validation import ValidationResult, ingest_validation, parse_explanation, parse_score

__all__ = [
    "BubbleDatum",
    "OpportunityScorer",
    "derive_metrics",
    "derive_all_metrics",
    "ChartLayout",
    "HeatmapChart",
    "PlacedBubble",
    "select_bubble",
    "ValidationResult",
    "ingest_validation",
    "parse_score",
    "parse_explanation",
]
