import pytest

from esshell.opt import OptionParser
from esshell.term import mkstr
from esshell.util import EsError

USAGE = ". [-einvx] file [arg ...]"


def _collect(parser, options):
    letters = []
    while (c := parser.next(options)) is not None:
        letters.append(c)
    return letters


def test_separate_flags():
    parser = OptionParser(["-e", "-x", "file", "arg"], "$&dot", USAGE)
    assert _collect(parser, "einvx") == ["e", "x"]
    assert parser.end() == ["file", "arg"]


def test_combined_flags():
    parser = OptionParser(["-ev", "file"], "$&dot", USAGE)
    assert _collect(parser, "einvx") == ["e", "v"]
    assert parser.end() == ["file"]


def test_double_dash_ends_options():
    parser = OptionParser(["-e", "--", "-x"], "$&dot", USAGE)
    assert _collect(parser, "einvx") == ["e"]
    assert parser.end() == ["-x"]


def test_non_option_stops():
    parser = OptionParser(["file", "-e"], "$&dot", USAGE)
    assert parser.next("einvx") is None
    assert parser.end() == ["file", "-e"]


def test_option_argument_separate():
    parser = OptionParser(["-o", "val", "rest"], "caller", "usage")
    assert parser.next("o:") == "o"
    assert parser.arg() == "val"
    assert parser.next("o:") is None
    assert parser.end() == ["rest"]


def test_option_argument_attached():
    parser = OptionParser(["-oval"], "caller", "usage")
    assert parser.next("o:") == "o"
    assert parser.arg() == "val"
    assert parser.end() == []


def test_term_arguments_are_kept():
    value = mkstr("val")
    parser = OptionParser([mkstr("-o"), value], "caller", "usage")
    assert parser.next("o:") == "o"
    assert parser.arg() is value


def test_attached_term_argument_becomes_term():
    parser = OptionParser([mkstr("-ofoo")], "caller", "usage")
    assert parser.next("o:") == "o"
    assert parser.arg() == mkstr("foo")


def test_illegal_option_raises():
    parser = OptionParser(["-z"], "$&dot", USAGE)
    with pytest.raises(EsError) as info:
        parser.next("einvx")
    assert info.value.where == "$&dot"
    assert str(info.value) == f"illegal option: -z -- usage: {USAGE}"


def test_illegal_option_without_throw():
    parser = OptionParser(["-z", "file"], "$&dot", USAGE, throws=False)
    assert parser.next("einvx") == "?"
    assert parser.end() == []


def test_missing_argument_raises():
    parser = OptionParser(["-o"], "caller", "usage")
    with pytest.raises(EsError, match="option -o expects an argument"):
        parser.next("o:")


def test_missing_argument_without_throw():
    parser = OptionParser(["-o"], "caller", "usage", throws=False)
    assert parser.next("o:") == ":"


def test_arg_without_pending_raises():
    parser = OptionParser(["-e"], "caller", "usage")
    assert parser.next("e") == "e"
    with pytest.raises(RuntimeError):
        parser.arg()