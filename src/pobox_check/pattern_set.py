"""PatternSet: an ordered, mutable list of regex fragments that is always
compiled.

Every mutation is validated by compiling the prospective list before it is
committed, so a PatternSet can never hold a fragment that fails to compile
and its ``matcher`` is never stale.  ``version`` increases on every commit;
the Classifier compares versions to notice that a list changed under it.

Usage:
    ps = PatternSet([r"\\bBOX\\b"])
    ps.append(r"\\bPOSTFACH\\b")   # recompiles
    ps.append("(")                # raises PatternError, ps unchanged
"""

from __future__ import annotations
import re
import threading
from collections.abc import MutableSequence
from typing import Iterable

from .patterns import compile_patterns


def as_fragments(values: Iterable[str]) -> list[str]:
    if isinstance(values, str):
        raise TypeError("expected a sequence of pattern strings, got a single string")
    return list(values)


class PatternSet(MutableSequence):
    """Ordered list of pattern fragments plus their compiled alternation."""

    __slots__ = ("_fragments", "_state", "_lock")

    def __init__(self, fragments: Iterable[str] = ()) -> None:
        fragments = as_fragments(fragments)
        self._lock = threading.Lock()
        self._fragments: list[str] = fragments
        # (version, matcher) swapped as one tuple so readers never see a mix
        self._state: tuple[int, re.Pattern] = (0, compile_patterns(fragments))

    # ------------------------------------------------------------------
    # Compiled view
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._state[0]

    @property
    def matcher(self) -> re.Pattern:
        return self._state[1]

    @property
    def state(self) -> tuple[int, re.Pattern]:
        """``(version, matcher)`` read atomically."""
        return self._state

    def recompile(self) -> None:
        """Compile the current fragments again and bump the version."""
        with self._lock:
            self._commit(list(self._fragments), compile_patterns(self._fragments))

    def _commit(self, fragments: list[str], matcher: re.Pattern) -> None:
        # caller holds self._lock
        self._fragments = fragments
        self._state = (self._state[0] + 1, matcher)

    def replace_compiled(self, fragments: list[str], matcher: re.Pattern) -> None:
        """Install a list together with its matcher from ``compile_patterns``.

        Lets a caller compile several lists first and swap them in only once
        all of them compiled.
        """
        with self._lock:
            self._commit(fragments, matcher)

    def _mutate(self, op) -> None:
        with self._lock:
            candidate = list(self._fragments)
            op(candidate)
            self._commit(candidate, compile_patterns(candidate))

    # ------------------------------------------------------------------
    # MutableSequence API
    # ------------------------------------------------------------------

    def __getitem__(self, index):
        return self._fragments[index]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = as_fragments(value)

        def op(items: list[str]) -> None:
            items[index] = value
        self._mutate(op)

    def __delitem__(self, index) -> None:
        def op(items: list[str]) -> None:
            del items[index]
        self._mutate(op)

    def __len__(self) -> int:
        return len(self._fragments)

    def insert(self, index: int, value: str) -> None:
        self._mutate(lambda items: items.insert(index, value))

    def extend(self, values: Iterable[str]) -> None:
        """Append several fragments in one step (all or nothing)."""
        values = as_fragments(values)
        self._mutate(lambda items: items.extend(values))

    def clear(self) -> None:
        self._mutate(lambda items: items.clear())

    def replace(self, values: Iterable[str]) -> None:
        """Replace the whole list (all or nothing)."""
        values = as_fragments(values)

        def op(items: list[str]) -> None:
            items[:] = values
        self._mutate(op)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PatternSet):
            return self._fragments == other._fragments
        if isinstance(other, (list, tuple)):
            return self._fragments == list(other)
        return NotImplemented

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"PatternSet({self._fragments!r}, version={self.version})"
