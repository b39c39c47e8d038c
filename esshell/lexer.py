"""Lexical analysis of shell input into tokens."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterator, List, Optional, TextIO, Tuple

from esshell.syntax import mkclose, mkdup, mkredircmd
from esshell.tree import NodeKind, mk


class TokenKind(Enum):
    """Kinds of token produced by the lexer."""

    WORD = auto()
    QWORD = auto()
    CHAR = auto()
    NL = auto()
    ENDFILE = auto()
    ERROR = auto()
    FN = auto()
    FOR = auto()
    LOCAL = auto()
    LET = auto()
    EXTRACT = auto()
    CLOSURE = auto()
    MATCH = auto()
    BBFLAT = auto()
    BACKBACK = auto()
    BFLAT = auto()
    COUNT = auto()
    FLAT = auto()
    PRIM = auto()
    SUB = auto()
    ANDAND = auto()
    OROR = auto()
    PIPE = auto()
    DUP = auto()
    REDIR = auto()
    CALL = auto()


@dataclass(frozen=True)
class Token:
    """A token and its value: a string, a character, a tree or a message."""

    kind: TokenKind
    value: Any = None


class _State(Enum):
    NONWORD = auto()
    REALWORD = auto()
    KEYWORD = auto()


_NONWORD_CHARS = frozenset("\0\t\n !#$&'();<=>\\^`{|}")
_DOLLAR_EXTRA = frozenset("%*-_")

_KEYWORDS = {
    "fn": TokenKind.FN,
    "for": TokenKind.FOR,
    "local": TokenKind.LOCAL,
    "let": TokenKind.LET,
    "~~": TokenKind.EXTRACT,
    "%closure": TokenKind.CLOSURE,
    "match": TokenKind.MATCH,
}

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "e": "\033",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HEXDIGITS = frozenset("0123456789abcdefABCDEF")
_OCTDIGITS = frozenset("01234567")

_CLOSED = -1
_DEFAULT = -2


def _is_word(c: str) -> bool:
    return c not in _NONWORD_CHARS


def _is_dollar_word(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c in _DOLLAR_EXTRA)


def _isdigit(c: Optional[str]) -> bool:
    return c is not None and "0" <= c <= "9"


class _ScanFault(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Lexer:
    """Turn shell text into tokens.

    After an error token the rest of the line is skipped and the next
    token is a newline. Messages of errors are kept in ``errors``.
    """

    def __init__(
        self,
        text: str,
        interactive: bool = False,
        prompt2: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self._text = text
        self._pos = 0
        self._pushback: List[Optional[str]] = []
        self.interactive = interactive
        self.prompt2 = prompt2
        self._stream = stream
        self.lineno = 1
        self.errors: List[str] = []
        self._w = _State.NONWORD
        self._newline = False
        self._goterror = False
        self._dollar = False

    def _getc(self) -> Optional[str]:
        if self._pushback:
            return self._pushback.pop()
        if self._pos >= len(self._text):
            return None
        c = self._text[self._pos]
        self._pos += 1
        return c

    def _ungetc(self, c: Optional[str]) -> None:
        self._pushback.append(c)

    def _print_prompt2(self) -> None:
        self.lineno += 1
        if self.interactive and self.prompt2 is not None:
            (self._stream or sys.stderr).write(self.prompt2)

    def _scanerror(self, c: Optional[str], message: str) -> _ScanFault:
        while c != "\n" and c is not None:
            c = self._getc()
        self._goterror = True
        self.errors.append(message)
        return _ScanFault(message)

    def _free_caret(self, c: Optional[str]) -> Optional[Token]:
        if self._w is not _State.NONWORD:
            self._w = _State.NONWORD
            self._ungetc(c)
            return Token(TokenKind.CHAR, "^")
        return None

    def lex(self) -> Token:
        """Return the next token."""
        if self._goterror:
            self._goterror = False
            return Token(TokenKind.NL)
        word_char = _is_dollar_word if self._dollar else _is_word
        self._dollar = False
        if self._newline:
            self.lineno -= 1
            self._print_prompt2()
            self._newline = False
        while True:
            try:
                token = self._scan(word_char)
            except _ScanFault as fault:
                return Token(TokenKind.ERROR, fault.message)
            if token is not None:
                return token

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to, but not including, the end of input."""
        while True:
            token = self.lex()
            if token.kind is TokenKind.ENDFILE:
                return
            yield token

    def _scan(self, word_char: Callable[[str], bool]) -> Optional[Token]:
        c = self._getc()
        while c == " " or c == "\t":
            self._w = _State.NONWORD
            c = self._getc()
        if c is None:
            return Token(TokenKind.ENDFILE)
        if word_char(c):
            return self._word(c, word_char)
        if c in ("`", "!", "$", "'", "="):
            caret = self._free_caret(c)
            if caret is not None:
                return caret
            if c in ("!", "="):
                self._w = _State.KEYWORD
        if c in ("!", "="):
            return Token(TokenKind.CHAR, c)
        if c == "`":
            return self._backquote()
        if c == "$":
            self._dollar = True
            c = self._getc()
            kinds = {"#": TokenKind.COUNT, "^": TokenKind.FLAT, "&": TokenKind.PRIM}
            if c in kinds:
                return Token(kinds[c])
            self._ungetc(c)
            return Token(TokenKind.CHAR, "$")
        if c == "'":
            return self._quoted()
        if c == "\\":
            return self._backslash()
        if c == "#":
            while True:
                c = self._getc()
                if c == "\n":
                    break
                if c is None:
                    return Token(TokenKind.ENDFILE)
            c = "\n"
        if c == "\n":
            self.lineno += 1
            self._newline = True
            self._w = _State.NONWORD
            return Token(TokenKind.NL)
        if c == "(":
            kind = TokenKind.SUB if self._w is _State.REALWORD else TokenKind.CHAR
            self._w = _State.NONWORD
            return Token(kind, c)
        if c in (";", "^", ")", "{", "}"):
            self._w = _State.NONWORD
            return Token(TokenKind.CHAR, c)
        if c == "&":
            self._w = _State.NONWORD
            c = self._getc()
            if c == "&":
                return Token(TokenKind.ANDAND)
            self._ungetc(c)
            return Token(TokenKind.CHAR, "&")
        if c == "|":
            return self._pipe()
        if c in ("<", ">"):
            return self._redirection(c)
        self._w = _State.NONWORD
        return Token(TokenKind.CHAR, c)

    def _word(self, c: str, word_char: Callable[[str], bool]) -> Token:
        caret = self._free_caret(c)
        if caret is not None:
            return caret
        chars = [c]
        while True:
            c = self._getc()
            if c is None or not word_char(c):
                break
            chars.append(c)
        self._ungetc(c)
        word = "".join(chars)
        self._w = _State.KEYWORD
        if len(word) == 1:
            if word in ("@", "~"):
                return Token(TokenKind.CHAR, word)
        elif word in _KEYWORDS:
            return Token(_KEYWORDS[word])
        self._w = _State.REALWORD
        return Token(TokenKind.WORD, word)

    def _backquote(self) -> Token:
        c = self._getc()
        if c == "`":
            c = self._getc()
            if c == "^":
                return Token(TokenKind.BBFLAT)
            self._ungetc(c)
            return Token(TokenKind.BACKBACK)
        if c == "^":
            return Token(TokenKind.BFLAT)
        self._ungetc(c)
        return Token(TokenKind.CHAR, "`")

    def _quoted(self) -> Token:
        self._w = _State.REALWORD
        chars: List[str] = []
        while True:
            c = self._getc()
            if c == "'":
                c = self._getc()
                if c != "'":
                    break
            if c is None:
                self._w = _State.NONWORD
                raise self._scanerror(c, "eof in quoted string")
            chars.append(c)
            if c == "\n":
                self._print_prompt2()
        self._ungetc(c)
        return Token(TokenKind.QWORD, "".join(chars))

    def _backslash(self) -> Optional[Token]:
        c = self._getc()
        if c == "\n":
            self._print_prompt2()
            self._ungetc(" ")
            return None
        if c is None:
            self._ungetc(None)
            raise self._scanerror(None, "bad backslash escape")
        self._ungetc(c)
        caret = self._free_caret("\\")
        if caret is not None:
            return caret
        self._w = _State.REALWORD
        c = self._getc()
        if c in _ESCAPES:
            return Token(TokenKind.QWORD, _ESCAPES[c])
        if c in ("x", "X"):
            n = 0
            while True:
                c = self._getc()
                if c is None or c not in _HEXDIGITS:
                    break
                n = (n << 4) | int(c, 16)
            return self._numeric_escape(n, c)
        if c in _OCTDIGITS:
            n = 0
            while True:
                n = (n << 3) | int(c)
                c = self._getc()
                if c is None or c not in _OCTDIGITS:
                    break
            return self._numeric_escape(n, c)
        if c.isascii() and c.isalnum():
            raise self._scanerror(c, "bad backslash escape")
        return Token(TokenKind.QWORD, c)

    def _numeric_escape(self, n: int, c: Optional[str]) -> Token:
        if n == 0:
            raise self._scanerror(c, "bad backslash escape")
        self._ungetc(c)
        byte = n & 0xFF
        return Token(TokenKind.QWORD, chr(byte) if byte else "")

    def _getfds(self, c: Optional[str], default0: int, default1: int) -> Tuple[int, int]:
        if c != "[":
            self._ungetc(c)
            return default0, default1
        c = self._getc()
        if not _isdigit(c):
            raise self._scanerror(c, "expected digit after '['")
        digits = [c]
        while True:
            c = self._getc()
            if not _isdigit(c):
                break
            digits.append(c)
        fd0 = int("".join(digits))
        if c == "=":
            c = self._getc()
            if not _isdigit(c):
                if c != "]":
                    raise self._scanerror(c, "expected digit or ']' after '='")
                return fd0, _CLOSED
            digits = [c]
            while True:
                c = self._getc()
                if not _isdigit(c):
                    break
                digits.append(c)
            if c != "]":
                raise self._scanerror(c, "expected ']' after digit")
            return fd0, int("".join(digits))
        if c == "]":
            return fd0, default1
        raise self._scanerror(c, "expected '=' or ']' after digit")

    def _pipe(self) -> Token:
        self._w = _State.NONWORD
        c = self._getc()
        if c == "|":
            return Token(TokenKind.OROR)
        outfd, infd = self._getfds(c, 1, 0)
        if infd == _CLOSED:
            raise self._scanerror(c, "expected digit after '='")
        return Token(TokenKind.PIPE, mk(NodeKind.PIPE, outfd, infd))

    def _redirection(self, first: str) -> Token:
        if first == "<":
            fd = 0
            c = self._getc()
            if c == ">":
                c = self._getc()
                if c == ">":
                    c = self._getc()
                    cmd = "%open-append"
                else:
                    cmd = "%open-write"
            elif c == "<":
                c = self._getc()
                if c == "<":
                    c = self._getc()
                    cmd = "%here"
                else:
                    cmd = "%heredoc"
            elif c == "=":
                return Token(TokenKind.CALL)
            else:
                cmd = "%open"
        else:
            fd = 1
            c = self._getc()
            if c == ">":
                c = self._getc()
                if c == "<":
                    c = self._getc()
                    cmd = "%open-append"
                else:
                    cmd = "%append"
            elif c == "<":
                c = self._getc()
                cmd = "%open-create"
            else:
                cmd = "%create"
        self._w = _State.NONWORD
        fd0, fd1 = self._getfds(c, fd, _DEFAULT)
        if fd1 != _DEFAULT:
            tree = mkclose(fd0) if fd1 == _CLOSED else mkdup(fd0, fd1)
            return Token(TokenKind.DUP, tree)
        return Token(TokenKind.REDIR, mkredircmd(cmd, fd0))