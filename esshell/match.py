"""Wildcard pattern matching with per-character quoting."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

from esshell.term import Term, mkstr


class _Quoting:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name


QUOTED = _Quoting("QUOTED")
UNQUOTED = _Quoting("UNQUOTED")

Quote = Union[str, _Quoting]

_RANGE_FAIL = -1
_RANGE_ERROR = -2


def _ch(s: str, i: int) -> str:
    return s[i] if i < len(s) else ""


def _isquoted(q: Quote, n: int) -> bool:
    if q is QUOTED:
        return True
    if q is UNQUOTED:
        return False
    return _ch(q, n) == "q"


def _tail(q: Quote, n: int) -> Quote:
    return q if isinstance(q, _Quoting) else q[n:]


def _rangematch(p: str, q: Quote, c: str) -> int:
    """Match a character against a class; return its length or a failure."""
    i = 0
    neg = matched = False
    if _ch(p, 0) == "~" and not _isquoted(q, 0):
        i = 1
        neg = True
    if _ch(p, i) == "]" and not _isquoted(q, i):
        i += 1
        matched = c == "]"
    while _ch(p, i) != "]" or _isquoted(q, i):
        if i >= len(p):
            return _RANGE_ERROR
        if (
            _ch(p, i + 1) == "-"
            and not _isquoted(q, i + 1)
            and (_ch(p, i + 2) not in ("]", "") or _isquoted(q, i + 2))
        ):
            if p[i] <= c <= p[i + 2]:
                matched = True
            i += 2
        elif p[i] == c:
            matched = True
        i += 1
    return i + 1 if matched != neg else _RANGE_FAIL


def _haswild(pattern: str, quoting: Quote) -> bool:
    return any(
        ch in "*?[" and not _isquoted(quoting, k) for k, ch in enumerate(pattern)
    )


def _word(item: Any) -> str:
    return str(item) if isinstance(item, Term) else item


def match(subject: str, pattern: str, quote: Quote = UNQUOTED) -> bool:
    """Match one string against one pattern."""
    if quote is QUOTED:
        return subject == pattern
    si = i = 0
    while True:
        if i >= len(pattern):
            return si >= len(subject)
        c = pattern[i]
        i += 1
        if quote is UNQUOTED or _ch(quote, i - 1) == "r":
            if c == "?":
                if si >= len(subject):
                    return False
                si += 1
                continue
            if c == "*":
                while _ch(pattern, i) == "*" and (
                    quote is UNQUOTED or _ch(quote, i) == "r"
                ):
                    i += 1
                if i >= len(pattern):
                    return True
                rest, tq = pattern[i:], _tail(quote, i)
                return any(
                    match(subject[k:], rest, tq) for k in range(si, len(subject))
                )
            if c == "[":
                if si >= len(subject):
                    return False
                j = _rangematch(pattern[i:], _tail(quote, i), subject[si])
                if j == _RANGE_FAIL:
                    return False
                if j == _RANGE_ERROR:
                    if subject[si] != "[":
                        return False
                else:
                    i += j
                si += 1
                continue
        if si >= len(subject) or c != subject[si]:
            return False
        si += 1


def _quotes(quotes: Optional[Sequence[Quote]], count: int) -> Sequence[Quote]:
    return [UNQUOTED] * count if quotes is None else quotes


def listmatch(
    subjects: Sequence[Any],
    patterns: Sequence[Any],
    quotes: Optional[Sequence[Quote]] = None,
) -> bool:
    """True if any pattern matches any subject.

    An empty subject list matches an empty pattern list, or a pattern made
    only of unquoted stars.
    """
    pairs = list(zip(map(_word, patterns), _quotes(quotes, len(patterns)), strict=True))
    if not subjects:
        if not pairs:
            return True
        return any(
            pw != ""
            and qw is not QUOTED
            and all(
                ch == "*" and (qw is UNQUOTED or _ch(qw, k) == "r")
                for k, ch in enumerate(pw)
            )
            for pw, qw in pairs
        )
    words = [_word(s) for s in subjects]
    return any(match(w, pw, qw) for pw, qw in pairs for w in words)


def _extractsingle(subject: str, pattern: str, quoting: Quote) -> List[str]:
    """The parts of ``subject`` matched by wildcards in ``pattern``."""
    if not _haswild(pattern, quoting) or not match(subject, pattern, quoting):
        return []
    result: List[str] = []
    si = i = 0
    while i < len(pattern):
        if _isquoted(quoting, i):
            i += 1
            si += 1
            continue
        c = pattern[i]
        i += 1
        if c == "*":
            if i >= len(pattern):
                result.append(subject[si:])
                return result
            rest, tq = pattern[i:], _tail(quoting, i)
            for k in range(si, len(subject) + 1):
                if match(subject[k:], rest, tq):
                    result.append(subject[si:k])
                    if _haswild(rest, tq):
                        result.extend(_extractsingle(subject[k:], rest, tq))
                    return result
            return result
        if c == "[":
            j = _rangematch(pattern[i:], _tail(quoting, i), subject[si])
            if j != _RANGE_ERROR:
                i += j
                result.append(subject[si])
        elif c == "?":
            result.append(subject[si])
        si += 1
    return result


def extractmatches(
    subjects: Sequence[Any],
    patterns: Sequence[Any],
    quotes: Optional[Sequence[Quote]] = None,
) -> List[Term]:
    """For each subject matching a pattern, the parts its wildcards matched."""
    pairs = list(zip(map(_word, patterns), _quotes(quotes, len(patterns)), strict=True))
    result: List[Term] = []
    for subject in map(_word, subjects):
        for pattern, quote in pairs:
            parts = _extractsingle(subject, pattern, quote)
            if parts:
                result.extend(mkstr(part) for part in parts)
                break
    return result