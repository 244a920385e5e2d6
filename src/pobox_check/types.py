"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field


class PatternError(ValueError):
    """A pattern fragment is not a valid regular expression."""

    def __init__(self, fragment: str, reason: str) -> None:
        super().__init__(f"invalid pattern {fragment!r}: {reason}")
        self.fragment = fragment
        self.reason = reason


class ConfigError(ValueError):
    """Malformed classifier configuration."""


class AddressTooLong(ValueError):
    """An address exceeds the configured ``max_length``."""

    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(f"address is {length} characters, limit is {max_length}")
        self.length = length
        self.max_length = max_length


@dataclass(frozen=True, slots=True)
class Span:
    """A single pattern match, half-open ``[start, end)``."""
    start: int
    end: int
    text: str

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and self.end > other.start


@dataclass(slots=True)
class Verdict:
    """Full result of classifying one address (see ``Classifier.explain``)."""
    text: str
    strict: bool                                        # is_pobox
    relaxed: bool                                       # is_pobox_relaxed
    blacklist: list[Span] = field(default_factory=list)
    whitelist: list[Span] = field(default_factory=list)
    neutralized: list[Span] = field(default_factory=list)  # blacklist hits covered by whitelist
    remainder: list[str] = field(default_factory=list)     # tokens left after stripping
