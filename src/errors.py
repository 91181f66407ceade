"""Exception hierarchy for the deck tools.

Provides structured error handling with specific exception types
for different failure modes.
"""

from typing import Any, Optional, Sequence


class DeckToolError(Exception):
    """Base exception for all deck tool errors.

    All custom exceptions inherit from this base class for easy catching.
    """

    pass


class NetworkError(DeckToolError):
    """Network-related errors (downloads, API calls, timeouts)."""

    pass


class CardDataError(DeckToolError):
    """Card database errors (malformed cache, bad override file shape)."""

    def __init__(self, message: str, path: Optional[Any] = None):
        self.path = path
        super().__init__(message)


class ConfigurationError(DeckToolError):
    """Configuration errors (unknown game, invalid option values)."""

    pass


class ValidationError(DeckToolError):
    """Validation errors (invalid input, malformed data)."""

    pass


class DeckParsingError(ValidationError):
    """Deck file errors (empty input, no card entries)."""

    pass


class CardResolutionError(ValidationError):
    """A single deck entry could not be mapped to a card."""

    def __init__(self, message: str, entry: Any = None):
        self.entry = entry
        super().__init__(message)


class CardNotFoundError(CardResolutionError):
    """The entry's code or name matched zero cards."""

    def __init__(self, message: str, reference: str, entry: Any = None):
        self.reference = reference
        super().__init__(message, entry)


class AmbiguousCodeError(CardResolutionError):
    """A short code matches cards from more than one set."""

    def __init__(self, message: str, code: str, entry: Any = None):
        self.code = code
        super().__init__(message, entry)


class AmbiguousCardError(CardResolutionError):
    """A name matched several cards and hints could not narrow it to one.

    Attributes:
        candidates: Every remaining candidate card, in database order
    """

    def __init__(self, message: str, entry: Any, candidates: Sequence[Any]):
        self.candidates = list(candidates)
        super().__init__(message, entry)


class DeckResolutionError(ValidationError):
    """Every resolution failure of a deck, reported together.

    Attributes:
        failures: The individual CardResolutionError instances, sorted
    """

    def __init__(self, message: str, failures: Sequence[CardResolutionError]):
        self.failures = list(failures)
        super().__init__(message)
