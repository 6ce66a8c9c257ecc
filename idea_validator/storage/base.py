"""Key-value storage abstraction."""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

# Storage keys shared with the browser client
AUTHENTICATED = "authenticated"
PERPLEXITY_API_KEY = "perplexity_api_key"
ANTHROPIC_API_KEY = "anthropic_api_key"
VALIDATED_IDEAS = "validated_ideas"
MARKET_RESEARCH_CHAT = "market_research_chat"

API_KEYS = {
    "perplexity": PERPLEXITY_API_KEY,
    "anthropic": ANTHROPIC_API_KEY,
}

REPORT_KEYS = {
    "gap_finder": "gap_finder_data",
    "industry_reports": "industry_report_data",
    "persona_builder": "persona_builder_data",
    "tam_calculator": "tam_calculator_data",
    "trend_radar": "trend_radar_data",
}


class KeyValueStore(ABC):
    """Minimal get/set/clear store for JSON-serialisable values."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""

    def __contains__(self, key: str) -> bool:
        return key in self.keys()


class MemoryStore(KeyValueStore):
    """Dict-backed store, values are copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)
