"""Option parsing for primitives."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from esshell.term import Term, mkstr
from esshell.util import EsError


class OptionParser:
    """Parse leading single-letter options from an argument list.

    Arguments may be strings or terms. ``next`` returns the next option
    letter, or None when options are exhausted. With ``throws`` false,
    an unknown option yields ``'?'`` and a missing argument ``':'``.
    """

    def __init__(
        self, args: Sequence[Any], caller: str, usage: str, throws: bool = True
    ) -> None:
        self._args: List[Any] = list(args)
        self._caller = caller
        self._usage: Optional[str] = usage
        self._throws = throws
        self._nextchar = 0
        self._optarg: Any = None

    def next(self, options: str) -> Optional[str]:
        if self._optarg is not None:
            raise RuntimeError("option argument not consumed")
        if self._nextchar == 0:
            if not self._args:
                return None
            arg = str(self._args[0])
            if not arg.startswith("-") or arg == "-":
                return None
            if arg == "--":
                self._args.pop(0)
                return None
            self._nextchar = 1
        else:
            arg = str(self._args[0])

        c = arg[self._nextchar]
        self._nextchar += 1
        index = options.find(c)
        if index < 0 or c == ":":
            msg = self._usage
            self._usage = None
            self._args = []
            self._nextchar = 0
            if self._throws:
                raise EsError(self._caller, f"illegal option: -{c} -- usage: {msg}")
            return "?"

        current = self._args[0]
        if self._nextchar >= len(arg):
            self._nextchar = 0
            self._args.pop(0)

        if options[index + 1 : index + 2] == ":":
            if not self._args:
                if self._throws:
                    raise EsError(
                        self._caller,
                        f"option -{c} expects an argument -- usage: {self._usage}",
                    )
                return ":"
            if self._nextchar == 0:
                self._optarg = self._args[0]
            else:
                rest = arg[self._nextchar :]
                self._optarg = mkstr(rest) if isinstance(current, Term) else rest
            self._nextchar = 0
            self._args.pop(0)
        return c

    def arg(self) -> Any:
        """Return the argument of the option just returned by ``next``."""
        if self._optarg is None:
            raise RuntimeError("no option argument pending")
        value, self._optarg = self._optarg, None
        return value

    def end(self) -> List[Any]:
        """Return the arguments left after the options."""
        rest, self._args = self._args, []
        self._usage = None
        return rest