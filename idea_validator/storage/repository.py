"""Idea history, chat and settings kept in a key-value store"""

import math
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from ..errors import IdeaNotFoundError, UnknownStorageKeyError
from ..scoring.opportunity import BubbleDatum, OpportunityScorer
from .base import (
    API_KEYS,
    AUTHENTICATED,
    MARKET_RESEARCH_CHAT,
    REPORT_KEYS,
    VALIDATED_IDEAS,
    KeyValueStore,
    MemoryStore,
)
from .database import SQLStore
from .models import ChatMessage, ValidatedIdea

UNICORN_SCORE = 90


class IdeaRepository:
    """Typed access to everything the app persists.

    Ideas are kept most recent first and capped at ``history_limit``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        history_limit: int = 10,
        scorer: Optional[OpportunityScorer] = None,
    ):
        self.store = store
        self.history_limit = history_limit
        self.scorer = scorer or OpportunityScorer()

    # ------------------------------------------------------------------
    # Validated ideas
    # ------------------------------------------------------------------

    def list_ideas(self) -> List[ValidatedIdea]:
        """Load the idea history, most recent first."""
        raw = self.store.get(VALIDATED_IDEAS)
        if raw is None:
            return []

        # Older clients stored a single result instead of a list
        if not isinstance(raw, list):
            raw = [raw]

        ideas = []
        missing_ids = False
        for item in raw:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed stored idea: {item!r}")
                continue
            try:
                ideas.append(ValidatedIdea.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored idea: {e}")
                continue
            if not item.get("id"):
                missing_ids = True

        if missing_ids:
            # Persist generated ids so they stay stable across loads
            self._save_ideas(ideas)

        return ideas

    def get_idea(self, idea_id: str) -> ValidatedIdea:
        for idea in self.list_ideas():
            if idea.id == idea_id:
                return idea
        raise IdeaNotFoundError(idea_id)

    def add_idea(self, idea: ValidatedIdea) -> ValidatedIdea:
        """Prepend an idea to the history, dropping the oldest beyond the limit."""
        ideas = [existing for existing in self.list_ideas() if existing.id != idea.id]
        ideas.insert(0, idea)
        if len(ideas) > self.history_limit:
            logger.debug(f"Trimming idea history to {self.history_limit} entries")
            ideas = ideas[: self.history_limit]
        self._save_ideas(ideas)
        logger.info(f"Stored idea {idea.id} (score {idea.score})")
        return idea

    def delete_idea(self, idea_id: str) -> bool:
        ideas = self.list_ideas()
        remaining = [idea for idea in ideas if idea.id != idea_id]
        if len(remaining) == len(ideas):
            return False
        self._save_ideas(remaining)
        return True

    def bubbles(self) -> List[BubbleDatum]:
        """Derive chart bubbles for the current history."""
        return self.scorer.calculate_all(self.list_ideas())

    def dashboard_stats(self) -> Dict[str, int]:
        """Summary figures for the dashboard.

        The average score rounds halves up; ideas scoring 90 or more count
        as unicorns.
        """
        ideas = self.list_ideas()
        average = 0
        if ideas:
            average = math.floor(sum(idea.score for idea in ideas) / len(ideas) + 0.5)

        return {
            "total_ideas": len(ideas),
            "average_score": average,
            "unicorns": sum(1 for idea in ideas if idea.score >= UNICORN_SCORE),
        }

    def _save_ideas(self, ideas: List[ValidatedIdea]) -> None:
        self.store.set(VALIDATED_IDEAS, [idea.to_storage() for idea in ideas])

    # ------------------------------------------------------------------
    # Market research chat
    # ------------------------------------------------------------------

    def chat_history(self) -> List[ChatMessage]:
        raw = self.store.get(MARKET_RESEARCH_CHAT) or []
        messages = []
        for item in raw:
            try:
                messages.append(ChatMessage.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid chat message: {e}")
        return messages

    def append_chat(self, message: ChatMessage) -> List[ChatMessage]:
        messages = self.chat_history()
        messages.append(message)
        self.store.set(
            MARKET_RESEARCH_CHAT,
            [m.model_dump(mode="json", exclude_none=True) for m in messages],
        )
        return messages

    def clear_chat(self) -> None:
        self.store.delete(MARKET_RESEARCH_CHAT)

    # ------------------------------------------------------------------
    # Settings, auth and tool reports
    # ------------------------------------------------------------------

    def set_api_key(self, provider: str, key: str) -> None:
        self.store.set(self._api_key_name(provider), key)

    def get_api_key(self, provider: str) -> Optional[str]:
        return self.store.get(self._api_key_name(provider)) or None

    def login(self, email: str, password: str) -> bool:
        """Sign in. Any credentials are accepted."""
        self.store.set(AUTHENTICATED, "true")
        logger.info(f"Signed in as {email or 'anonymous'}")
        return True

    def logout(self) -> None:
        self.store.delete(AUTHENTICATED)

    def is_authenticated(self) -> bool:
        return self.store.get(AUTHENTICATED) == "true"

    def save_report(self, tool: str, data: Any) -> None:
        self.store.set(self._report_key(tool), data)

    def get_report(self, tool: str) -> Any:
        return self.store.get(self._report_key(tool))

    def reset(self) -> None:
        """Forget everything, including API keys."""
        self.store.clear()
        logger.info("Storage reset")

    def _api_key_name(self, provider: str) -> str:
        try:
            return API_KEYS[provider]
        except KeyError:
            raise UnknownStorageKeyError(f"Unknown API provider: {provider}") from None

    def _report_key(self, tool: str) -> str:
        try:
            return REPORT_KEYS[tool]
        except KeyError:
            raise UnknownStorageKeyError(f"Unknown tool: {tool}") from None


def build_repository(config) -> IdeaRepository:
    """Create a repository from the application configuration.

    Args:
        config: Config instance

    Returns:
        IdeaRepository backed by the configured store
    """
    backend = config.storage.backend
    if backend == "memory":
        store = MemoryStore()
    elif backend == "sql":
        store = SQLStore(config.database.url, echo=config.database.echo)
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    return IdeaRepository(
        store,
        history_limit=config.storage.history_limit,
        scorer=OpportunityScorer(config.model_dump()),
    )
