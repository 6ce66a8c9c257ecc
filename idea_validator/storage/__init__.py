"""Data storage and persistence layer"""

from .base import KeyValueStore, MemoryStore
from .database import SQLStore
from .models import ChatMessage, ChatSource, KeyValueEntry, ValidatedIdea

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLStore",
    "ChatMessage",
    "ChatSource",
    "KeyValueEntry",
    "ValidatedIdea",
]
