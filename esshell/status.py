"""Exit statuses: truth, conversion to and from wait statuses."""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from esshell.signals import signame, sigmessage
from esshell.term import Term

_NUMBER = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def _text(item: Any) -> Optional[str]:
    """The string of a status word, or None for a closure."""
    if isinstance(item, Term):
        return item.text
    return str(item)


def istrue(status: Sequence[Any]) -> bool:
    """True if every word of the status is empty or ``0``."""
    for item in status:
        text = _text(item)
        if text is None or text not in ("", "0"):
            return False
    return True


def exitstatus(status: Sequence[Any]) -> int:
    """Turn a status list into a value for exit(2)."""
    if not status:
        return 0
    if len(status) > 1:
        return 0 if istrue(status) else 1
    text = _text(status[0])
    if text is None:
        return 1
    if text == "":
        return 0
    found = _NUMBER.match(text)
    if found is None or found.end() != len(text):
        return 1
    sign, digits = found.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits, 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits)
    if sign == "-" and value != 0:
        return 1
    return value if value <= 255 else 1


def _signalled(status: int) -> bool:
    return (status & 0xFF) != 0


def mkstatus(status: int) -> str:
    """Turn a wait(2) status into a status string."""
    if _signalled(status):
        name = signame(status & 0x7F)
        if status & 0x80:
            name += "+core"
        return name
    return str((status >> 8) & 0xFF)


def status_message(pid: int, status: int) -> Optional[str]:
    """The line to report for a wait(2) status, or None if nothing is said."""
    if not _signalled(status):
        return None
    msg = sigmessage(status & 0x7F)
    tail = ""
    if status & 0x80:
        tail = "--core dumped" if msg else "core dumped"
    if not msg and not tail:
        return None
    if pid == 0:
        return f"{msg}{tail}"
    return f"{pid}: {msg}{tail}"