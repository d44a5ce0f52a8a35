"""
Case insensitive header names.

WARC (like HTTP) header field names compare without regard to ASCII
case, so "Content-Length" and "content-length" name the same field.
"""

from typing import Any


def _ascii_lower(s: str) -> str:
    # str.lower() also folds non-ASCII letters; field names are ASCII
    # tokens, so leave anything else untouched.
    if s.isascii():
        return s.lower()
    return "".join(c.lower() if c.isascii() else c for c in s)


class CaseString:
    """
    A str wrapper that compares and hashes on its ASCII lowercased form.

    >>> CaseString("WARC-Type") == "warc-type"
    True
    >>> CaseString("WARC-Type") == CaseString("WARC-TYPE")
    True
    >>> str(CaseString("WARC-Type"))
    'warc-type'

    The spelling it was created with is kept in "original" (for
    messages and listings) but plays no part in comparisons.
    """

    __slots__ = ("_normalized", "original")

    def __init__(self, s: str):
        self.original = s
        self._normalized = _ascii_lower(s)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, CaseString):
            return self._normalized == other._normalized
        if isinstance(other, str):
            return self._normalized == _ascii_lower(other)
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    def __hash__(self) -> int:
        # same as hash of the lowercased str, so a dict keyed by
        # CaseString can be looked up with a lowercase str.
        return hash(self._normalized)

    def __str__(self) -> str:
        return self._normalized

    def __repr__(self) -> str:
        return f"CaseString({self.original!r})"
