"""Errors, file opening and small string helpers."""

from __future__ import annotations

import os
from enum import Enum

VERSION = "es version 0.9.2 2-Mar-2022"


class EsError(Exception):
    """An error raised by the shell, tagged with where it came from."""

    def __init__(self, where: str, message: str) -> None:
        super().__init__(message)
        self.where = where
        self.message = message

    @property
    def exception(self) -> list:
        """The error as the shell's exception list."""
        return ["error", self.where, self.message]


class OpenKind(Enum):
    """Ways of opening a file, each with its open(2) flags."""

    OPEN = os.O_RDONLY
    CREATE = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
    APPEND = os.O_WRONLY | os.O_CREAT | os.O_APPEND
    READ_WRITE = os.O_RDWR | os.O_CREAT
    READ_CREATE = os.O_RDWR | os.O_CREAT | os.O_TRUNC
    READ_APPEND = os.O_RDWR | os.O_CREAT | os.O_APPEND


def esstrerror(n: int) -> str:
    """Describe an errno value."""
    try:
        message = os.strerror(n)
    except (ValueError, OverflowError):
        return "unknown error"
    return message or "unknown error"


def isabsolute(path: str) -> bool:
    """True if the path begins with "/", "./" or "../"."""
    return path.startswith(("/", "./", "../"))


def streq2(s: str, t1: str, t2: str) -> bool:
    """True if ``s`` equals the concatenation of ``t1`` and ``t2``."""
    return len(s) == len(t1) + len(t2) and s.startswith(t1) and s.endswith(t2)


def eopen(name: str, kind: OpenKind) -> int:
    """Open a file descriptor in the given mode; raises OSError on failure."""
    return os.open(name, OpenKind(kind).value, 0o666)