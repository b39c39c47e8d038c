"""Formatted printing with a table of installable conversions."""

from __future__ import annotations

import os
from enum import IntFlag
from typing import Any, Callable, Dict, Iterable, List, Optional


class FormatFlag(IntFlag):
    """Flags collected while reading one conversion."""

    LONG = 1
    SHORT = 2
    UNSIGNED = 4
    ZEROPAD = 8
    LEFTSIDE = 16
    ALTFORM = 32
    F1SET = 64
    F2SET = 128


class Format:
    """The state of one formatting run, handed to each conversion.

    A conversion reads its argument with ``next_arg``, writes with ``put``
    and returns True if it only changed flags and more characters of the
    conversion follow.
    """

    def __init__(self, args: Iterable[Any]) -> None:
        self._args = iter(args)
        self._out: List[str] = []
        self.flags = FormatFlag(0)
        self.f1 = 0
        self.f2 = 0
        self.invoker = ""

    def next_arg(self) -> Any:
        """Take the next argument of the format."""
        try:
            return next(self._args)
        except StopIteration:
            raise ValueError("too few arguments for format") from None

    def put(self, s: str) -> None:
        """Append text to the output."""
        self._out.append(s)

    def pad(self, count: int, c: str) -> None:
        if count > 0:
            self._out.append(c * count)

    def reset(self) -> None:
        self.flags = FormatFlag(0)
        self.f1 = 0
        self.f2 = 0

    def getvalue(self) -> str:
        return "".join(self._out)


Conv = Callable[[Format], bool]


def _flag(flag: FormatFlag) -> Conv:
    def conv(format: Format) -> bool:
        format.flags |= flag
        return True

    return conv


def _digitconv(format: Format) -> bool:
    digit = ord(format.invoker) - ord("0")
    if format.flags & FormatFlag.F2SET:
        format.f2 = 10 * format.f2 + digit
    else:
        format.flags |= FormatFlag.F1SET
        format.f1 = 10 * format.f1 + digit
    return True


def _zeroconv(format: Format) -> bool:
    if format.flags & (FormatFlag.F1SET | FormatFlag.F2SET):
        return _digitconv(format)
    format.flags |= FormatFlag.ZEROPAD
    return True


def _sconv(format: Format) -> bool:
    s = str(format.next_arg())
    if not format.flags & FormatFlag.F1SET:
        format.put(s)
        return False
    width = format.f1 - len(s)
    if format.flags & FormatFlag.LEFTSIDE:
        format.put(s)
        format.pad(width, " ")
    else:
        format.pad(width, " ")
        format.put(s)
    return False


_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _utoa(u: int, radix: int) -> str:
    digits = []
    while True:
        u, d = divmod(u, radix)
        digits.append(_DIGITS[d])
        if u == 0:
            return "".join(reversed(digits))


def _intconv(format: Format, radix: int, altform: str) -> None:
    flags = format.flags
    n = int(format.next_arg())
    prefix = ""
    if flags & FormatFlag.UNSIGNED or n >= 0:
        u = n % (1 << 64)
    else:
        prefix = "-"
        u = -n
    if flags & FormatFlag.ALTFORM:
        prefix += altform

    number = _utoa(u, radix)
    zeroes = 0
    if flags & FormatFlag.F2SET and format.f2 > len(number):
        zeroes = format.f2 - len(number)

    width = len(prefix) + zeroes + len(number)
    padding = 0
    if flags & FormatFlag.F1SET and format.f1 > width:
        padding = format.f1 - width

    padchar = " "
    if padding > 0 and flags & FormatFlag.ZEROPAD:
        padchar = "0"
        if not flags & FormatFlag.LEFTSIDE:
            zeroes += padding
            padding = 0

    if not flags & FormatFlag.LEFTSIDE:
        format.pad(padding, padchar)
    format.put(prefix)
    format.pad(zeroes, "0")
    format.put(number)
    if flags & FormatFlag.LEFTSIDE:
        format.pad(padding, padchar)


def _cconv(format: Format) -> bool:
    arg = format.next_arg()
    format.put(chr(arg) if isinstance(arg, int) else str(arg))
    return False


def _dconv(format: Format) -> bool:
    _intconv(format, 10, "")
    return False


def _oconv(format: Format) -> bool:
    _intconv(format, 8, "0")
    return False


def _xconv(format: Format) -> bool:
    _intconv(format, 16, "0x")
    return False


def _pctconv(format: Format) -> bool:
    format.put("%")
    return False


def _badconv(format: Format) -> bool:
    raise ValueError(f"bad conversion character in printfmt: %{format.invoker}")


_DEFAULT_TABLE: Dict[str, Conv] = {
    "s": _sconv,
    "c": _cconv,
    "d": _dconv,
    "o": _oconv,
    "x": _xconv,
    "%": _pctconv,
    "u": _flag(FormatFlag.UNSIGNED),
    "h": _flag(FormatFlag.SHORT),
    "l": _flag(FormatFlag.LONG),
    "#": _flag(FormatFlag.ALTFORM),
    "-": _flag(FormatFlag.LEFTSIDE),
    ".": _flag(FormatFlag.F2SET),
    "0": _zeroconv,
    **{str(d): _digitconv for d in range(1, 10)},
}


class Formatter:
    """A printf-like formatter whose conversions can be replaced."""

    def __init__(self) -> None:
        self._table: Dict[str, Conv] = dict(_DEFAULT_TABLE)

    def install(self, c: str, conv: Optional[Conv]) -> Conv:
        """Install a conversion for ``c``; return the one it replaces.

        With ``conv`` None the table is left as it is.
        """
        old = self._table.get(c, _badconv)
        if conv is not None:
            self._table[c] = conv
        return old

    def format(self, fmt: str, *args: Any) -> str:
        """Format the arguments according to ``fmt``."""
        state = Format(args)
        chars = iter(fmt)
        for ch in chars:
            if ch != "%":
                state.put(ch)
                continue
            state.reset()
            while True:
                state.invoker = next(chars, "")
                if not self._table.get(state.invoker, _badconv)(state):
                    break
        return state.getvalue()


_default = Formatter()


def strfmt(fmt: str, *args: Any) -> str:
    """Format to a string."""
    return _default.format(fmt, *args)


def fprint(fd: int, fmt: str, *args: Any) -> int:
    """Format to a file descriptor; return the number of bytes written."""
    data = strfmt(fmt, *args).encode("utf-8", "surrogateescape")
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]
    return len(data)


def eprint(fmt: str, *args: Any) -> int:
    """Format to standard error."""
    return fprint(2, fmt, *args)