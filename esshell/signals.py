"""Signal names, signal effects and deferred delivery of signals."""

from __future__ import annotations

import signal
import sys
from enum import Enum, auto
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from esshell.term import Term, mkstr
from esshell.util import EsError

NSIG = signal.NSIG

_NAMES: Dict[int, str] = {int(s): s.name.lower() for s in signal.Signals}
_NUMBERS: Dict[str, int] = {name: sig for sig, name in _NAMES.items()}


class SigEffect(Enum):
    """What the shell does when a signal arrives."""

    NOCHANGE = auto()
    CATCH = auto()
    DEFAULT = auto()
    IGNORE = auto()
    NOOP = auto()
    SPECIAL = auto()


_PREFIXES = {
    SigEffect.CATCH: "",
    SigEffect.IGNORE: "-",
    SigEffect.NOOP: "/",
    SigEffect.SPECIAL: ".",
}


class SignalThrow(EsError):
    """A caught signal, delivered as the shell exception ``signal <name>``."""

    def __init__(self, name: str) -> None:
        super().__init__("signal", name)
        self.name = name

    @property
    def exception(self) -> list:
        return ["signal", self.name]


def signumber(name: str) -> Optional[int]:
    """Map a name such as ``sigint`` or ``sig5`` to a signal number."""
    if not name.startswith("sig"):
        return None
    if name in _NUMBERS:
        return _NUMBERS[name]
    digits = name[3:]
    if digits.isdigit() and digits.isascii():
        number = int(digits)
        if 0 < number < NSIG:
            return number
    return None


def signame(sig: int) -> str:
    """The shell's name for a signal number."""
    return _NAMES.get(sig, f"sig{sig}")


def sigmessage(sig: int) -> str:
    """A human-readable description of a signal."""
    message = None
    if sig in _NAMES:
        try:
            message = signal.strsignal(sig)
        except ValueError:
            message = None
    return message if message is not None else f"unknown signal {sig}"


def _word(item: Any) -> Optional[str]:
    if isinstance(item, Term):
        return item.text
    return str(item)


def issilentsignal(exception: Sequence[Any]) -> bool:
    """True if the exception is ``signal sigint``."""
    return (
        len(exception) >= 2
        and _word(exception[0]) == "signal"
        and _word(exception[1]) == "sigint"
    )


class SignalState:
    """The shell's signal effects and the set of signals awaiting delivery.

    With ``install`` false the effects are only recorded; no operating
    system handler is changed.
    """

    def __init__(self, install: bool = True) -> None:
        self.install = install
        self.hasforked = False
        self.interrupted = False
        self.sigint_newline = True
        self._blocked = 0
        self._caught: Set[int] = set()
        self._effects: Dict[int, SigEffect] = {}
        for sig in range(1, NSIG):
            effect = SigEffect.DEFAULT
            if install:
                try:
                    if signal.getsignal(sig) == signal.SIG_IGN:
                        effect = SigEffect.IGNORE
                except (ValueError, OSError):
                    pass
            self._effects[sig] = effect

    @property
    def effects(self) -> Dict[int, SigEffect]:
        return dict(self._effects)

    def _handler(self, signum: int, frame: Any) -> None:
        self.deliver(signum)

    def _setsignal(self, sig: int, handler: Any) -> bool:
        if not self.install:
            return True
        try:
            signal.signal(sig, handler)
        except (OSError, ValueError, RuntimeError):
            return False
        return True

    def esignal(self, sig: int, effect: SigEffect) -> SigEffect:
        """Set the effect of a signal, returning the previous effect."""
        if not 0 < sig < NSIG:
            raise ValueError(f"bad signal number {sig}")
        old = self._effects[sig]
        if effect is SigEffect.NOCHANGE or effect is old:
            return old
        if effect is SigEffect.IGNORE:
            if not self._setsignal(sig, signal.SIG_IGN):
                sys.stderr.write(f"$&setsignals: cannot ignore {signame(sig)}\n")
                return old
        elif effect in (SigEffect.SPECIAL, SigEffect.CATCH, SigEffect.NOOP):
            if effect is SigEffect.SPECIAL and sig != signal.SIGINT:
                sys.stderr.write(
                    f"$&setsignals: special handler not defined for {signame(sig)}\n"
                )
                return old
            if not self._setsignal(sig, self._handler):
                sys.stderr.write(f"$&setsignals: cannot catch {signame(sig)}\n")
                return old
        elif effect is SigEffect.DEFAULT:
            self._setsignal(sig, signal.SIG_DFL)
        self._effects[sig] = effect
        return old

    def set_effects(self, effects: Mapping[int, SigEffect]) -> None:
        """Apply effects to all signals; those not named go back to default."""
        for sig in range(1, NSIG):
            self.esignal(sig, effects.get(sig, SigEffect.DEFAULT))

    def mksiglist(self) -> List[Term]:
        """The non-default signal effects, as prefixed signal names."""
        return [
            mkstr(_PREFIXES[effect] + signame(sig))
            for sig, effect in sorted(self._effects.items())
            if effect is not SigEffect.DEFAULT
        ]

    def block(self) -> None:
        """Stop delivering signals as exceptions."""
        self._blocked += 1

    def unblock(self) -> None:
        """Resume delivering signals as exceptions."""
        if self._blocked <= 0:
            raise RuntimeError("signals are not blocked")
        self._blocked -= 1

    def deliver(self, sig: int) -> None:
        """Note that a signal arrived; it is acted on by ``sigchk``."""
        if self.hasforked:
            raise SystemExit(1)
        self._caught.add(sig)
        self.interrupted = True

    def sigchk(self) -> None:
        """Raise a pending caught signal as a shell exception."""
        if not self._caught or self._blocked:
            return
        if self.hasforked:
            raise SystemExit(1)
        sig = min(self._caught)
        self._caught.discard(sig)
        effect = self._effects.get(sig, SigEffect.DEFAULT)
        if effect is SigEffect.CATCH:
            raise SignalThrow(signame(sig))
        if effect is SigEffect.SPECIAL:
            if self.sigint_newline:
                sys.stderr.write("\n")
            self.sigint_newline = True
            raise SignalThrow(signame(sig))