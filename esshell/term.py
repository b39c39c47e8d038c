"""Terms, closures and bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from esshell.tree import Tree


@dataclass
class Binding:
    """One link in a chain of lexical variable bindings."""

    name: str
    defn: Optional[List["Term"]]
    next: Optional["Binding"] = None

    def __iter__(self) -> Iterator["Binding"]:
        binding: Optional[Binding] = self
        while binding is not None:
            yield binding
            binding = binding.next

    def lookup(self, name: str) -> Optional["Binding"]:
        """Return the first binding in the chain with the given name."""
        return next((b for b in self if b.name == name), None)


@dataclass
class Closure:
    """A parse tree together with the bindings it closes over."""

    tree: Tree
    binding: Optional[Binding] = None


@dataclass
class Term:
    """A single value: either a string or a closure, never both."""

    text: Optional[str] = None
    closure: Optional[Closure] = field(default=None)

    def __post_init__(self) -> None:
        if (self.text is None) == (self.closure is None):
            raise ValueError("a term holds exactly one of a string or a closure")

    def __str__(self) -> str:
        if self.text is None:
            raise TypeError("closure term has no string form")
        return self.text

    def equals(self, s: str) -> bool:
        """True if the term is a string equal to ``s``."""
        return self.text is not None and self.text == s

    def is_closure(self) -> bool:
        return self.closure is not None


def mkstr(s: str) -> Term:
    """Make a string term."""
    return Term(text=s)


def termcat(t1: Optional[Term], t2: Optional[Term]) -> Optional[Term]:
    """Concatenate two terms; a missing term leaves the other unchanged."""
    if t1 is None:
        return t2
    if t2 is None:
        return t1
    return mkstr(str(t1) + str(t2))