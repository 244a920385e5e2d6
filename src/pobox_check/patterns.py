"""Default P.O.-box vocabulary plus the compile/scan primitives.

Every entry is a regex fragment, not literal text.  Fragments of one list
are OR-ed together into a single case-insensitive pattern, so a list is
scanned in one ``finditer`` pass no matter how many entries it has.
Keep the quantifiers bounded: addresses are short, but the lists are
user-replaceable and run on untrusted input.
"""

from __future__ import annotations
import re
from typing import Iterable, Iterator

from .types import PatternError, Span

# Blacklist: a hit suggests the text names a P.O. box.
DEFAULT_BLACKLIST: tuple[str, ...] = (
    r"\bBOX\b",
    r"\bPOB\b",
    r"\bPOST\b",
    r"\bPOSTBOX\b",
    r"\bPOSTSCHACHTEL\b",
    r"\bPOSTFACH\b",
    r"\bPOSTLAGERND\b",
    r"\bPOSTBUS\b",
    r"\bPOBOX\b",
    # PO, P O, P.O., P. O., P.O.B., PO BOX, P.O.BOX, P. O. BOX ...
    r"\bP\.?\s?O\b\.?(?:\s?B(?:OX)?\b\.?)?",
    # PF 123, P.F. 123, PF-123 (but not "Pf-Karl-Platz")
    r"\bP\.?F\b\.?[\s-]+\d+",
)

_STREET_WORDS = (
    "Road", "Rd", "Street", "St", "Avenue", "Av", "Alley", "Drive", "Grove",
    "Walk", "Parkway", "Row", "Lane", "Bridge", "Boulevard", "Square",
    "Garden", "Stra(?:ss|ß)e", "Gasse", "Allee", "Platz",
)

# Whitelist: deliverable-address phrases that contain a blacklisted token.
DEFAULT_WHITELIST: tuple[str, ...] = (
    # Pf-Karl-Platz, Pf. Weg ... (PF followed by a letter, not a box number)
    r"\bPf\b\.?[\s-]+(?=[^\W\d_])",
    r"\b(?:Alte|An\s+der(?:\s+alten)?)\s+Post\b",
    r"\bPost[-\s](?:" + "|".join(_STREET_WORDS) + r")\b",
)

# Compiled form of an empty list: never matches.
_NEVER = re.compile(r"(?!)")

# \1 ... \99 or (?(1)...) not preceded by an escaping backslash
_NUMBERED_GROUP_REF = re.compile(r"(?<!\\)(?:\\\\)*(?:\\[1-9]|\(\?\(\d)")


def compile_patterns(fragments: Iterable[str]) -> re.Pattern:
    """Join *fragments* into one case-insensitive, unanchored alternation.

    Each fragment is validated on its own first so that the error names the
    entry at fault.  Fragments that refer to a group by number (``\\1``,
    ``(?(1)...)``) are rejected: after joining, group 1 is some other
    fragment's group.  Raises PatternError.
    """
    fragments = list(fragments)
    for fragment in fragments:
        if not isinstance(fragment, str):
            raise PatternError(repr(fragment), "pattern must be a string")
        try:
            compiled = re.compile(fragment, re.IGNORECASE)
        except re.error as e:
            raise PatternError(fragment, str(e)) from e
        # group numbers shift once fragments are joined; names do not
        if compiled.groups and _NUMBERED_GROUP_REF.search(fragment):
            raise PatternError(
                fragment, "numbered group references break inside the combined "
                "pattern, use a named group and (?P=name)"
            )

    if not fragments:
        return _NEVER

    combined = "|".join(f"(?:{fragment})" for fragment in fragments)
    try:
        return re.compile(combined, re.IGNORECASE)
    except re.error as e:
        # Individually valid, jointly not (e.g. a repeated named group)
        raise PatternError(combined, str(e)) from e


def find_spans(matcher: re.Pattern, text: str) -> Iterator[Span]:
    """Yield non-overlapping matches of *matcher* left to right.

    Zero-width matches (lookaround-only or empty fragments) are skipped;
    they cover no characters and cannot be removed or overlapped.
    """
    for m in matcher.finditer(text):
        if m.end() > m.start():
            yield Span(start=m.start(), end=m.end(), text=m.group())
