import signal

import pytest

from esshell.signals import (
    NSIG,
    SigEffect,
    SignalState,
    SignalThrow,
    issilentsignal,
    signame,
    sigmessage,
    signumber,
)
from esshell.term import mkstr


def words(terms):
    return [str(t) for t in terms]


def test_signumber_by_name():
    assert signumber("sigint") == signal.SIGINT
    assert signumber("sigterm") == signal.SIGTERM


def test_signumber_numeric_and_invalid():
    assert signumber("sig5") == 5
    assert signumber("sig0") is None
    assert signumber(f"sig{NSIG}") is None
    assert signumber("int") is None
    assert signumber("sigbogus") is None


def test_signame_round_trip():
    for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGKILL):
        assert signumber(signame(sig)) == sig


def test_signame_unknown():
    assert signame(NSIG + 1) == f"sig{NSIG + 1}"
    assert sigmessage(NSIG + 1) == f"unknown signal {NSIG + 1}"


def test_issilentsignal():
    assert issilentsignal([mkstr("signal"), mkstr("sigint")])
    assert issilentsignal(["signal", "sigint"])
    assert not issilentsignal(["signal", "sigterm"])
    assert not issilentsignal(["signal"])


def test_esignal_returns_old_and_mksiglist():
    state = SignalState(install=False)
    assert state.esignal(signal.SIGINT, SigEffect.CATCH) is SigEffect.DEFAULT
    assert state.esignal(signal.SIGTERM, SigEffect.IGNORE) is SigEffect.DEFAULT
    assert state.esignal(signal.SIGINT, SigEffect.NOOP) is SigEffect.CATCH
    assert words(state.mksiglist()) == ["/sigint", "-sigterm"]


def test_special_only_for_sigint(capsys):
    state = SignalState(install=False)
    assert state.esignal(signal.SIGTERM, SigEffect.SPECIAL) is SigEffect.DEFAULT
    assert state.effects[signal.SIGTERM] is SigEffect.DEFAULT
    assert "special handler not defined for sigterm" in capsys.readouterr().err
    state.esignal(signal.SIGINT, SigEffect.SPECIAL)
    assert words(state.mksiglist()) == [".sigint"]


def test_esignal_bad_number():
    with pytest.raises(ValueError):
        SignalState(install=False).esignal(0, SigEffect.CATCH)


def test_set_effects_resets_others():
    state = SignalState(install=False)
    state.esignal(signal.SIGTERM, SigEffect.IGNORE)
    state.set_effects({signal.SIGINT: SigEffect.CATCH})
    assert words(state.mksiglist()) == ["sigint"]


def test_sigchk_raises_caught_signal():
    state = SignalState(install=False)
    state.esignal(signal.SIGTERM, SigEffect.CATCH)
    state.deliver(signal.SIGTERM)
    with pytest.raises(SignalThrow) as info:
        state.sigchk()
    assert info.value.exception == ["signal", "sigterm"]


def test_blocked_signals_wait():
    state = SignalState(install=False)
    state.esignal(signal.SIGTERM, SigEffect.CATCH)
    state.block()
    state.deliver(signal.SIGTERM)
    state.sigchk()
    state.unblock()
    with pytest.raises(SignalThrow):
        state.sigchk()


def test_unblock_without_block():
    with pytest.raises(RuntimeError):
        SignalState(install=False).unblock()


def test_noop_is_consumed_silently():
    state = SignalState(install=False)
    state.esignal(signal.SIGINT, SigEffect.NOOP)
    state.deliver(signal.SIGINT)
    state.sigchk()
    state.esignal(signal.SIGINT, SigEffect.CATCH)
    state.sigchk()
    assert state.interrupted is True


def test_special_prints_newline(capsys):
    state = SignalState(install=False)
    state.esignal(signal.SIGINT, SigEffect.SPECIAL)
    state.deliver(signal.SIGINT)
    with pytest.raises(SignalThrow) as info:
        state.sigchk()
    assert issilentsignal(info.value.exception)
    assert capsys.readouterr().err == "\n"


def test_forked_child_exits():
    state = SignalState(install=False)
    state.hasforked = True
    with pytest.raises(SystemExit):
        state.deliver(signal.SIGINT)