"""Opportunity metric engine for the market opportunity heatmap."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..storage.models import ValidatedIdea

MARKET_SIZE_KEYWORDS = ("market", "industry", "billion", "million", "large", "growing")
GROWTH_KEYWORDS = ("growth", "increasing", "trend", "rising", "expanding", "potential")
COMPETITION_KEYWORDS = ("competition", "competitive", "competitors", "saturated", "crowded")

EASY_COLOR = "#7FE0C3"  # mint
MEDIUM_COLOR = "#6BA4FF"  # blue
HARD_COLOR = "#FF6B8A"  # pink

MIN_RADIUS = 30
MAX_RADIUS = 100


@dataclass(frozen=True)
class BubbleDatum:
    """One idea placed on the opportunity chart."""

    id: str
    summary: str
    score: int

    market_size: int
    growth_rate: int
    competition_intensity: int
    entry_difficulty: int

    x: int  # competition intensity
    y: int  # growth rate
    radius: float  # pixels, 30-100

    color: str
    difficulty_band: str  # "easy", "medium", "hard"


class OpportunityScorer:
    """Derive chart metrics for a validated idea from its market analysis.

    Three metrics come from keyword presence in the analysis text, each
    distinct keyword counting once:
    - Market size: 15 per hit over a base of 20
    - Growth rate: 15 per hit over a base of 20
    - Competition intensity: 12 per hit over a base of 25

    Entry difficulty is the complement of the validation score. All four
    metrics are capped to 0-100.

    Colour bands by entry difficulty:
    - 0-34: Easy
    - 35-64: Medium
    - 65-100: Hard
    """

    KEYWORDS = {
        "market_size": MARKET_SIZE_KEYWORDS,
        "growth_rate": GROWTH_KEYWORDS,
        "competition_intensity": COMPETITION_KEYWORDS,
    }

    WEIGHTS = {
        "market_size": 15,
        "growth_rate": 15,
        "competition_intensity": 12,
    }

    OFFSETS = {
        "market_size": 20,
        "growth_rate": 20,
        "competition_intensity": 25,
    }

    COLORS = {
        "easy": EASY_COLOR,
        "medium": MEDIUM_COLOR,
        "hard": HARD_COLOR,
    }

    def __init__(self, config: Optional[Dict] = None):
        """Initialize opportunity scorer.

        Args:
            config: Optional configuration dictionary
        """
        self.easy_below = 35
        self.medium_below = 65

        if config:
            opportunity_config = config.get("opportunity") or {}

            # Overrides are merged key by key over the defaults
            keywords = {**self.KEYWORDS, **(opportunity_config.get("keywords") or {})}
            self.KEYWORDS = {name: tuple(words) for name, words in keywords.items()}
            self.WEIGHTS = {**self.WEIGHTS, **(opportunity_config.get("weights") or {})}
            self.OFFSETS = {**self.OFFSETS, **(opportunity_config.get("offsets") or {})}
            self.COLORS = {**self.COLORS, **(opportunity_config.get("colors") or {})}
            self.easy_below = opportunity_config.get("easy_below", 35)
            self.medium_below = opportunity_config.get("medium_below", 65)

    def calculate(self, idea: ValidatedIdea) -> BubbleDatum:
        """Calculate chart metrics for a single idea.

        Args:
            idea: Validated idea

        Returns:
            BubbleDatum instance
        """
        analysis = (idea.market_analysis or "").lower()

        market_size = self._keyword_metric(analysis, "market_size")
        growth_rate = self._keyword_metric(analysis, "growth_rate")
        competition_intensity = self._keyword_metric(analysis, "competition_intensity")

        # Lower score = harder entry
        entry_difficulty = _clamp(100 - int(idea.score))

        band = self._classify(entry_difficulty)

        return BubbleDatum(
            id=idea.id,
            summary=idea.summary,
            score=idea.score,
            market_size=market_size,
            growth_rate=growth_rate,
            competition_intensity=competition_intensity,
            entry_difficulty=entry_difficulty,
            x=competition_intensity,
            y=growth_rate,
            radius=self._radius(market_size),
            color=self.COLORS[band],
            difficulty_band=band,
        )

    def calculate_all(self, ideas: Sequence[ValidatedIdea]) -> List[BubbleDatum]:
        """Calculate chart metrics for every idea, keeping input order."""
        return [self.calculate(idea) for idea in ideas]

    def _keyword_metric(self, analysis: str, metric: str) -> int:
        """Score one metric from distinct keyword hits in lower-cased text.

        Args:
            analysis: Lower-cased market analysis
            metric: Metric name

        Returns:
            Score from 0-100
        """
        hits = sum(1 for keyword in self.KEYWORDS[metric] if keyword in analysis)
        return _clamp(hits * self.WEIGHTS[metric] + self.OFFSETS[metric])

    def _radius(self, market_size: int) -> float:
        return MIN_RADIUS + (market_size / 100) * (MAX_RADIUS - MIN_RADIUS)

    def _classify(self, entry_difficulty: int) -> str:
        if entry_difficulty < self.easy_below:
            return "easy"
        elif entry_difficulty < self.medium_below:
            return "medium"
        else:
            return "hard"


def _clamp(value: int) -> int:
    return max(0, min(100, value))


_default_scorer = OpportunityScorer()


def derive_metrics(idea: ValidatedIdea) -> BubbleDatum:
    """Derive the bubble for one idea using the default keyword sets."""
    return _default_scorer.calculate(idea)


def derive_all_metrics(ideas: Sequence[ValidatedIdea]) -> List[BubbleDatum]:
    """Derive bubbles for a sequence of ideas, preserving order."""
    return _default_scorer.calculate_all(ideas)
