"""Parse tree nodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class NodeKind(Enum):
    """Kinds of parse tree node."""

    ASSIGN = auto()
    CALL = auto()
    CLOSURE = auto()
    CONCAT = auto()
    FOR = auto()
    LAMBDA = auto()
    LET = auto()
    LIST = auto()
    LOCAL = auto()
    MATCH = auto()
    EXTRACT = auto()
    PRIM = auto()
    QWORD = auto()
    THUNK = auto()
    VAR = auto()
    VARSUB = auto()
    WORD = auto()
    # only appear while a tree is being built
    REDIR = auto()
    PIPE = auto()


_STRING_KINDS = frozenset({NodeKind.WORD, NodeKind.QWORD, NodeKind.PRIM})
_ONE_CHILD_KINDS = frozenset({NodeKind.CALL, NodeKind.THUNK, NodeKind.VAR})
_INT_PAIR_KINDS = frozenset({NodeKind.PIPE})


@dataclass
class Tree:
    """A parse tree node with up to two slots.

    Word-like nodes keep their string in ``car``; list cells keep their
    head in ``car`` and their tail in ``cdr``; pipes keep two descriptors.
    """

    kind: NodeKind
    car: Any = None
    cdr: Any = None

    @property
    def arity(self) -> int:
        return 1 if self.kind in _STRING_KINDS or self.kind in _ONE_CHILD_KINDS else 2


def mk(kind: NodeKind, *args: Any) -> Tree:
    """Make a new node of the given kind from its slot values."""
    if not isinstance(kind, NodeKind):
        raise ValueError(f"mk: bad node kind {kind!r}")
    expected = 1 if kind in _STRING_KINDS or kind in _ONE_CHILD_KINDS else 2
    if len(args) != expected:
        raise ValueError(
            f"mk: node kind {kind.name} takes {expected} value(s), got {len(args)}"
        )
    if kind in _INT_PAIR_KINDS:
        first, second = (int(a) for a in args)
        return Tree(kind, first, second)
    if expected == 1:
        return Tree(kind, args[0])
    return Tree(kind, args[0], args[1])