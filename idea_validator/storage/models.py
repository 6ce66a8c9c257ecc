"""Data models for Idea Validator."""

import uuid
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


# ============================================================================
# Pydantic Models (for data transfer)
# ============================================================================


class ValidatedIdea(BaseModel):
    """A startup idea that went through the validation flow.

    Field names follow Python conventions; the camelCase aliases match the
    JSON the browser client has always stored, so both spellings load.
    """

    id: str = Field(default_factory=_new_id)
    summary: str = ""
    market_analysis: str = Field(default="", alias="marketAnalysis")
    action_plan: str = Field(default="", alias="actionPlan")
    score: int = 0  # 0-100, assigned by the validation flow
    score_explanation: str = Field(default="", alias="scoreExplanation")
    sources: List[str] = Field(default_factory=list)
    idea_input: Optional[str] = Field(default=None, alias="ideaInput")
    timestamp: datetime = Field(default_factory=_utcnow)

    model_config = {"populate_by_name": True}

    def to_storage(self) -> dict:
        """Serialize using the camelCase keys of the stored history."""
        return self.model_dump(by_alias=True, mode="json")


class ChatSource(BaseModel):
    """Citation attached to an assistant chat message."""

    id: int
    url: str
    title: str


class ChatMessage(BaseModel):
    """One turn of the market research chat."""

    role: Literal["user", "assistant"]
    content: str
    sources: Optional[List[ChatSource]] = None
    timestamp: datetime = Field(default_factory=_utcnow)


# ============================================================================
# SQLAlchemy Models (for database)
# ============================================================================


class KeyValueEntry(Base):
    """Single key of the persisted key-value store."""

    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)
    value = Column(JSON)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<KeyValueEntry(key='{self.key}')>"
