"""Classifier: the main API.  Blacklist hits flag a P.O. box, whitelist
hits vouch for a real street.

Usage:
    from pobox_check import Classifier

    clf = Classifier()                       # default English + German lists
    clf.is_pobox("P.O. Box 17")              # True
    clf.is_pobox("Post Road 123")            # False, "Post" is part of a street
    clf.is_pobox("Au 7, PF 33")              # False, a street precedes the box

    clf.whitelist.append(r"\\bPostweg\\b")   # recompiled on the spot
"""

from __future__ import annotations
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Iterable

from .pattern_set import PatternSet, as_fragments
from .patterns import DEFAULT_BLACKLIST, DEFAULT_WHITELIST, compile_patterns, find_spans
from .types import AddressTooLong, ConfigError, Span, Verdict

logger = logging.getLogger(__name__)

REMAINDER_SCOPES = ("leading", "anywhere")

# Everything that is neither a letter nor whitespace
_NON_LETTER = re.compile(r"[^\w\s]|[\d_]")


@dataclass
class ClassifierConfig:
    """Configuration for the Classifier."""
    blacklist: list[str] = field(default_factory=lambda: list(DEFAULT_BLACKLIST))
    whitelist: list[str] = field(default_factory=lambda: list(DEFAULT_WHITELIST))
    # Which text the strict-mode remainder check looks at:
    #   "leading":  only text before the first unneutralized blacklist hit
    #   "anywhere": the whole address
    remainder_scope: str = "leading"
    max_length: int = 1024            # longer input raises AddressTooLong


@dataclass(frozen=True)
class _Compiled:
    blacklist: re.Pattern
    whitelist: re.Pattern
    versions: tuple[int, int]


class Classifier:
    """Strict and relaxed P.O.-box classification.

    Strict: a blacklist hit counts unless a whitelist hit overlaps it, and
    the address is still accepted if a word of two or more letters is left
    once all hits are stripped out (before the box, or anywhere, depending
    on ``remainder_scope``).
    Relaxed: any whitelist hit accepts, otherwise any blacklist hit rejects.

    Classification only reads an immutable snapshot of both compiled lists,
    so it is thread-safe against concurrent list mutation and ``reload``.
    """

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self.config = config or ClassifierConfig()
        if self.config.remainder_scope not in REMAINDER_SCOPES:
            raise ConfigError(
                f"remainder_scope must be one of {REMAINDER_SCOPES}, "
                f"got {self.config.remainder_scope!r}"
            )
        if self.config.max_length < 1:
            raise ConfigError(f"max_length must be positive, got {self.config.max_length}")

        self._lock = threading.Lock()
        self.blacklist = PatternSet(self.config.blacklist)
        self.whitelist = PatternSet(self.config.whitelist)
        self._compiled = self._snapshot()

    # ------------------------------------------------------------------
    # Compiled state
    # ------------------------------------------------------------------

    def _snapshot(self) -> _Compiled:
        black_version, black = self.blacklist.state
        white_version, white = self.whitelist.state
        logger.debug(
            "pattern snapshot: %d blacklist / %d whitelist",
            len(self.blacklist), len(self.whitelist),
        )
        return _Compiled(black, white, (black_version, white_version))

    def _current(self) -> _Compiled:
        compiled = self._compiled
        if compiled.versions != (self.blacklist.version, self.whitelist.version):
            with self._lock:
                self._compiled = compiled = self._snapshot()
        return compiled

    def update(self) -> None:
        """Recompile both lists from their current contents."""
        with self._lock:
            self.blacklist.recompile()
            self.whitelist.recompile()
            self._compiled = self._snapshot()

    def reload(self, blacklist: Iterable[str], whitelist: Iterable[str]) -> None:
        """Replace both lists at once.

        Both lists are compiled before anything is swapped in; on
        PatternError the previous lists stay active.
        """
        black = as_fragments(blacklist)
        white = as_fragments(whitelist)
        black_re = compile_patterns(black)
        white_re = compile_patterns(white)
        with self._lock:
            self.blacklist.replace_compiled(black, black_re)
            self.whitelist.replace_compiled(white, white_re)
            self._compiled = self._snapshot()
        logger.info("reloaded patterns: %d blacklist, %d whitelist", len(black), len(white))

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _prepare(self, text: str) -> str:
        if not isinstance(text, str):
            raise TypeError(f"address must be a string, got {type(text).__name__}")
        if len(text) > self.config.max_length:
            # never classify a prefix: a box hidden past the limit would pass
            raise AddressTooLong(len(text), self.config.max_length)
        return text

    def explain(self, text: str) -> Verdict:
        """Classify *text* in both modes and return every intermediate result."""
        text = self._prepare(text)
        compiled = self._current()

        black = list(find_spans(compiled.blacklist, text))
        white = list(find_spans(compiled.whitelist, text))

        # --- Strict ---
        live = [b for b in black if not any(b.overlaps(w) for w in white)]
        neutralized = [b for b in black if b not in live]
        remainder: list[str] = []
        if live:
            end = live[0].start if self.config.remainder_scope == "leading" else len(text)
            remainder = _remainder(text, live + white, end)
        strict = bool(live) and not any(len(token) > 1 for token in remainder)

        # --- Relaxed ---
        relaxed = bool(black) and not white

        logger.debug("%r: strict=%s relaxed=%s remainder=%s", text, strict, relaxed, remainder)
        return Verdict(
            text=text,
            strict=strict,
            relaxed=relaxed,
            blacklist=black,
            whitelist=white,
            neutralized=neutralized,
            remainder=remainder,
        )

    def is_pobox(self, text: str) -> bool:
        """True if *text* looks like a P.O. box (strict mode)."""
        return self.explain(text).strict

    def is_pobox_relaxed(self, text: str) -> bool:
        """True if *text* looks like a P.O. box (relaxed mode).

        A whitelist hit anywhere wins over any blacklist hit.
        """
        text = self._prepare(text)
        compiled = self._current()
        if any(find_spans(compiled.whitelist, text)):
            return False
        return any(find_spans(compiled.blacklist, text))

    classify_strict = is_pobox
    classify_relaxed = is_pobox_relaxed

    def classify(self, text: str, *, relaxed: bool = False) -> bool:
        return self.is_pobox_relaxed(text) if relaxed else self.is_pobox(text)


def _remainder(text: str, spans: list[Span], end: int) -> list[str]:
    """Tokens of ``text[:end]`` left after cutting out *spans* and every
    non-letter character."""
    removed = bytearray(len(text))
    for span in spans:
        removed[span.start:span.end] = b"\x01" * (span.end - span.start)
    kept = "".join(ch for ch, gone in zip(text[:end], removed) if not gone)
    return _NON_LETTER.sub("", kept).split()
