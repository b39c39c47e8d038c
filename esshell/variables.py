"""Shell variables: definition, dynamic binding and the exported environment."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Union,
)

from esshell.term import Binding, Term, mkstr
from esshell.util import EsError

ENV_SEPARATOR = "\x0f"
ENV_ESCAPE = "\x0e"

_ASCII_DIGITS = frozenset("0123456789")

SettorEval = Callable[[List[Term]], Sequence[Term]]


def _specialvar(name: str) -> bool:
    return name in ("*", "0")


def _iscounting(name: str) -> bool:
    """True if the name is a positive decimal integer."""
    stripped = name.lstrip("0")
    return stripped != "" and all(c in _ASCII_DIGITS for c in stripped)


def _hasbindings(defn: Iterable[Term]) -> bool:
    return any(
        term.closure is not None and term.closure.binding is not None for term in defn
    )


def validatevar(name: str) -> None:
    """Raise EsError unless ``name`` may be used as a variable name."""
    if name == "":
        raise EsError("es:var", "zero-length variable name")
    if _iscounting(name):
        raise EsError("es:var", f"illegal variable name: {name}")
    if "=" in name:
        raise EsError("es:var", f"'=' in variable name: {name}")


def _escape(word: str) -> str:
    return word.replace(ENV_ESCAPE, ENV_ESCAPE * 2).replace(
        ENV_SEPARATOR, ENV_ESCAPE + ENV_SEPARATOR
    )


def _decode(value: str) -> List[str]:
    """Split an environment value into the words it encodes."""
    words: List[str] = []
    current: List[str] = []
    chars = iter(value)
    for c in chars:
        if c == ENV_ESCAPE:
            following = next(chars, None)
            if following is None:
                current.append(c)
            elif following in (ENV_ESCAPE, ENV_SEPARATOR):
                current.append(following)
            else:
                current.append(c)
                current.append(following)
        elif c in (ENV_SEPARATOR, "\0"):
            words.append("".join(current))
            current = []
        else:
            current.append(c)
    words.append("".join(current))
    return words


@dataclass
class Var:
    """A global variable's value, its cached environment string and flags."""

    defn: List[Term]
    internal: bool = False
    env: Optional[str] = None

    @property
    def hasbindings(self) -> bool:
        return _hasbindings(self.defn)


@dataclass
class _Pushed:
    name: str
    defn: List[Term]
    internal: bool


class VarStore:
    """The table of global variables.

    ``settor_eval`` runs a settor function: it is given the settor's
    definition followed by the new value and returns the value to store.
    ``unparse`` turns a closure term into text for the environment.
    """

    def __init__(
        self,
        settor_eval: Optional[SettorEval] = None,
        unparse: Callable[[Term], str] = str,
    ) -> None:
        self._vars: Dict[str, Var] = {}
        self._noexport: Optional[Set[str]] = None
        self._stack: List[_Pushed] = []
        self._extra_env: List[str] = []
        self._env: List[str] = []
        self._dirty = True
        self._rebound = True
        self._settor_eval = settor_eval
        self._unparse = unparse

    def __contains__(self, name: str) -> bool:
        return name in self._vars

    def _isexported(self, name: str) -> bool:
        if _specialvar(name):
            return False
        if self._noexport is None:
            return True
        return name not in self._noexport

    def _callsettor(self, name: str, defn: List[Term]) -> List[Term]:
        if _specialvar(name) or self._settor_eval is None:
            return defn
        settor = self.lookup2("set-", name, None)
        if not settor:
            return defn
        self.push("0", [mkstr(name)])
        try:
            return list(self._settor_eval(list(settor) + list(defn)))
        finally:
            self.pop()

    def lookup(self, name: str, binding: Optional[Binding] = None) -> List[Term]:
        """The value of a variable, looking first in the lexical bindings."""
        if _iscounting(name):
            args = self.lookup("*", binding)
            n = int(name, 10)
            return [args[n - 1]] if n <= len(args) else []
        validatevar(name)
        if binding is not None:
            found = binding.lookup(name)
            if found is not None:
                return found.defn or []
        var = self._vars.get(name)
        return var.defn if var is not None else []

    def lookup2(
        self, name1: str, name2: str, binding: Optional[Binding] = None
    ) -> List[Term]:
        """The value of the variable named by joining two strings."""
        found = self.lookup2_binding(name1 + name2, binding)
        if found is not None:
            return found
        var = self._vars.get(name1 + name2)
        return var.defn if var is not None else []

    @staticmethod
    def lookup2_binding(
        name: str, binding: Optional[Binding]
    ) -> Optional[List[Term]]:
        if binding is None:
            return None
        found = binding.lookup(name)
        return None if found is None else (found.defn or [])

    def define(
        self, name: str, binding: Optional[Binding], defn: Sequence[Term]
    ) -> None:
        """Assign a variable; an empty value removes a global variable."""
        validatevar(name)
        if binding is not None:
            found = binding.lookup(name)
            if found is not None:
                found.defn = list(defn)
                self._rebound = True
                return
        value = self._callsettor(name, list(defn))
        if self._isexported(name):
            self._dirty = True
        var = self._vars.get(name)
        if var is not None:
            if value:
                var.defn = value
                var.env = None
                var.internal = False
            else:
                del self._vars[name]
        elif value:
            self._vars[name] = Var(value)

    def push(self, name: str, defn: Sequence[Term]) -> None:
        """Give a variable a new value until the matching ``pop``."""
        validatevar(name)
        if self._isexported(name):
            self._dirty = True
        value = self._callsettor(name, list(defn))
        var = self._vars.get(name)
        if var is None:
            self._stack.append(_Pushed(name, [], False))
            self._vars[name] = Var(value)
        else:
            self._stack.append(_Pushed(name, var.defn, var.internal))
            var.defn = value
            var.env = None
            var.internal = False

    def pop(self) -> None:
        """Restore the variable saved by the most recent ``push``.

        An exception from the settor is raised after the value is restored.
        """
        if not self._stack:
            raise RuntimeError("no pushed variable to pop")
        saved = self._stack[-1]
        if self._isexported(saved.name):
            self._dirty = True
        error: Optional[Exception] = None
        defn = saved.defn
        try:
            defn = self._callsettor(saved.name, saved.defn)
        except Exception as exc:
            error = exc
        var = self._vars.get(saved.name)
        if var is not None:
            if defn:
                var.defn = defn
                var.internal = saved.internal
                var.env = None
            else:
                del self._vars[saved.name]
        elif defn:
            self._vars[saved.name] = Var(defn, internal=saved.internal)
        self._stack.pop()
        if error is not None:
            raise error

    @contextmanager
    def pushed(self, name: str, defn: Sequence[Term]) -> Iterator[None]:
        """Bind a variable dynamically for the duration of a block."""
        self.push(name, defn)
        try:
            yield
        finally:
            self.pop()

    def setnoexport(self, names: Iterable[object]) -> None:
        """Mark the named variables as not exported; no names exports all."""
        self._dirty = True
        chosen = {str(name) for name in names}
        self._noexport = chosen or None

    def _word(self, term: Term) -> str:
        return term.text if term.text is not None else self._unparse(term)

    def _encode(self, defn: Sequence[Term]) -> str:
        return ENV_SEPARATOR.join(_escape(self._word(term)) for term in defn)

    def mkenv(self) -> List[str]:
        """The environment for a new program, as sorted ``name=value`` strings."""
        if self._dirty or self._rebound:
            entries = list(self._extra_env)
            for name, var in self._vars.items():
                if not var.defn or var.internal or not self._isexported(name):
                    continue
                if var.env is None or (self._rebound and var.hasbindings):
                    var.env = f"{name}={self._encode(var.defn)}"
                entries.append(var.env)
            self._env = sorted(entries)
            self._dirty = False
            self._rebound = False
        return list(self._env)

    def listvars(self, internal: bool = False) -> List[Term]:
        """Sorted names of internal, or of ordinary non-special, variables."""
        if internal:
            names = [n for n, v in self._vars.items() if v.internal]
        else:
            names = [
                n for n, v in self._vars.items() if not v.internal and not _specialvar(n)
            ]
        return [mkstr(name) for name in sorted(names)]

    def vars_with_prefix(self, prefix: str) -> List[Term]:
        """Names of the variables that start with ``prefix``."""
        return [mkstr(name) for name in sorted(self._vars) if name.startswith(prefix)]

    def hide(self) -> None:
        """Mark every variable defined so far as internal."""
        for var in self._vars.values():
            var.internal = True

    def import_environ(
        self,
        environ: Union[Mapping[str, str], Iterable[str]],
        protected: bool = False,
    ) -> None:
        """Define variables from an environment.

        Strings without ``=`` are kept and passed on unchanged. When
        ``protected``, functions and settors are not imported.
        """
        if isinstance(environ, Mapping):
            pairs = list(environ.items())
        else:
            pairs = []
            for entry in environ:
                if "=" not in entry:
                    self._extra_env.append(entry)
                    continue
                name, _, value = entry.partition("=")
                pairs.append((name, value))
        for name, value in pairs:
            if protected and name.startswith(("fn-", "set-")):
                continue
            self.define(name, None, [mkstr(word) for word in _decode(value)])
        self._dirty = True