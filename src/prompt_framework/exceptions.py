"""
Custom exceptions for the prompt enhancement engine.
"""


class PromptBoostError(Exception):
    """Base exception for prompt enhancement errors."""
    pass


class ValidationError(PromptBoostError):
    """Raised when a required input is empty or malformed."""
    pass


class SessionStateError(PromptBoostError):
    """Raised when a command is not valid in the session's current phase."""
    pass


class RoundIncompleteError(SessionStateError):
    """Raised when a round is confirmed below its minimum answer count."""

    def __init__(self, answered: int, required: int):
        self.answered = answered
        self.required = required
        super().__init__(
            f"Round needs at least {required} answers, got {answered}"
        )


class RoundLimitError(SessionStateError):
    """Raised when advancing past the mode's last round or iteration."""
    pass


class SynthesisInProgressError(SessionStateError):
    """Raised when a command arrives while a generation call is pending."""
    pass


class SynthesisError(PromptBoostError):
    """Raised when the generation collaborator call does not yield a usable result."""
    pass


class NetworkError(SynthesisError):
    """Raised when the generation collaborator is unreachable or errors out."""
    pass


class ParseError(SynthesisError):
    """Raised when the collaborator response contains no parsable JSON object."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class SchemaError(SynthesisError):
    """Raised when the JSON response is missing required fields."""

    def __init__(self, message: str, kind: str = "", errors=None):
        self.kind = kind
        self.errors = errors or []
        super().__init__(message)


class VersionNotFoundError(PromptBoostError):
    """Raised when a prompt version id is unknown."""
    pass


class PersistenceError(PromptBoostError):
    """Raised when the prompt store fails to save, load or delete."""
    pass
