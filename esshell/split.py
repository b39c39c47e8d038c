"""Splitting strings into words on separator characters."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from esshell.term import Term, mkstr


class Splitter:
    """Split text into words on any character of ``sep``.

    With ``coalesce`` runs of separators count as one and leading or
    trailing separators give no empty words. Without it, every separator
    ends a word, and an empty ``sep`` splits into single characters.
    NUL is always a separator.
    """

    def __init__(self, sep: str, coalesce: bool) -> None:
        self.coalesce = coalesce
        self._splitchars = not coalesce and sep == ""
        self._ifs = frozenset(sep) | {"\0"}
        self._buffer: Optional[List[str]] = None
        self._value: List[Term] = []

    def feed(self, data: str, endword: bool) -> None:
        """Split more text; ``endword`` ends any word in progress."""
        if self._splitchars:
            self._value.extend(mkstr(ch) for ch in data.split("\0", 1)[0])
            return
        buf = self._buffer
        if not self.coalesce and buf is None:
            buf = []
        for c in data:
            if buf is not None:
                if c in self._ifs:
                    self._value.append(mkstr("".join(buf)))
                    buf = None if self.coalesce else []
                else:
                    buf.append(c)
            elif c not in self._ifs:
                buf = [c]
        if endword and buf is not None:
            self._value.append(mkstr("".join(buf)))
            buf = None
        self._buffer = buf

    def finish(self) -> List[Term]:
        """Return the words split so far and start afresh."""
        if self._buffer is not None:
            self._value.append(mkstr("".join(self._buffer)))
            self._buffer = None
        result, self._value = self._value, []
        return result


def fsplit(sep: str, words: Iterable[Any], coalesce: bool) -> List[Term]:
    """Split each word on the separators and return all the pieces."""
    splitter = Splitter(sep, coalesce)
    for word in words:
        splitter.feed(str(word), True)
    return splitter.finish()