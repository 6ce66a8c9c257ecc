"""Ingestion of results produced by the idea validation flow."""

import re
from datetime import datetime
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..errors import IdeaTooShortError
from ..storage.models import ValidatedIdea

SCORE_PATTERN = re.compile(r"SCORE:\s*(\d+)")
EXPLANATION_PATTERN = re.compile(r"EXPLANATION:([\s\S]*)")

MIN_IDEA_LENGTH = 50


def parse_score(text: str) -> int:
    """Extract the numeric score from a scoring response.

    Args:
        text: Raw scoring response, expected to contain "SCORE: <n>"

    Returns:
        Score capped to 0-100, or 0 when no score is present
    """
    match = SCORE_PATTERN.search(text or "")
    if not match:
        logger.warning("No SCORE marker found in scoring response")
        return 0
    return min(100, int(match.group(1)))


def parse_explanation(text: str) -> str:
    """Return the text following "EXPLANATION:", or the whole text."""
    match = EXPLANATION_PATTERN.search(text or "")
    if not match:
        return text or ""
    return match.group(1).strip()


class ValidationResult(BaseModel):
    """Payload returned by the validation flow.

    Either ``score`` or the raw ``scoreText`` must be given; the latter is
    parsed for its score and explanation.
    """

    id: Optional[str] = None
    summary: str
    market_analysis: str = Field(default="", alias="marketAnalysis")
    action_plan: str = Field(default="", alias="actionPlan")
    score: Optional[int] = Field(default=None, ge=0, le=100)
    score_text: Optional[str] = Field(default=None, alias="scoreText")
    score_explanation: Optional[str] = Field(default=None, alias="scoreExplanation")
    sources: List[str] = Field(default_factory=list)
    idea_input: Optional[str] = Field(default=None, alias="ideaInput")
    timestamp: Optional[datetime] = None

    model_config = {"populate_by_name": True}


def ingest_validation(
    result: ValidationResult, min_idea_length: int = MIN_IDEA_LENGTH
) -> ValidatedIdea:
    """Turn a validation result into a storable idea.

    Args:
        result: Validation payload
        min_idea_length: Minimum length of the raw idea input, when present

    Returns:
        ValidatedIdea instance

    Raises:
        IdeaTooShortError: If the raw idea input is too short
    """
    if result.idea_input is not None and len(result.idea_input) < min_idea_length:
        raise IdeaTooShortError(len(result.idea_input), min_idea_length)

    score = result.score
    explanation = result.score_explanation
    if score is None:
        score = parse_score(result.score_text or "")
    if explanation is None:
        explanation = parse_explanation(result.score_text or "")

    fields = {
        "summary": result.summary,
        "market_analysis": result.market_analysis,
        "action_plan": result.action_plan,
        "score": score,
        "score_explanation": explanation,
        "sources": result.sources,
        "idea_input": result.idea_input,
    }
    if result.id:
        fields["id"] = result.id
    if result.timestamp:
        fields["timestamp"] = result.timestamp

    idea = ValidatedIdea(**fields)
    logger.debug(f"Ingested idea {idea.id} with score {idea.score}")
    return idea
