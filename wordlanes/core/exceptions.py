"""Custom exception hierarchy for puzzle generation."""


class WordLanesError(Exception):
    """Base exception for generator failures."""


class DictionaryLoadError(WordLanesError):
    """Raised when the word list cannot be read or is empty."""


class SelectionError(WordLanesError):
    """Raised when not enough connected words could be drawn from the pool."""


class PackingError(WordLanesError):
    """Raised when the selected words cannot be interlocked on a board."""


class AssignmentError(WordLanesError):
    """Raised when letter cells cannot be matched to outside slots."""


class WaveStallError(AssignmentError):
    """Raised when a matching wave assigns nothing while cells remain."""


class ValidationError(WordLanesError):
    """Raised when puzzle integrity checks fail or input is malformed."""


class GenerationError(WordLanesError):
    """Raised when the attempt budget is exhausted without a puzzle."""


class PlacementError(WordLanesError):
    """Raised when a token move breaks the lane rules."""
