"""Exception types raised by Idea Validator."""


class IdeaValidatorError(Exception):
    """Base class for all Idea Validator errors."""


class IdeaTooShortError(IdeaValidatorError):
    """Raw idea text is below the minimum length accepted for validation."""

    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Please provide more details about your idea "
            f"(minimum {minimum} characters, got {length})"
        )


class IdeaNotFoundError(IdeaValidatorError):
    """No stored idea has the requested id."""

    def __init__(self, idea_id: str):
        self.idea_id = idea_id
        super().__init__(f"Idea not found: {idea_id}")


class UnknownStorageKeyError(IdeaValidatorError, ValueError):
    """A provider or tool name does not map to a storage key."""
