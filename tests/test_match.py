import pytest

from esshell.match import QUOTED, UNQUOTED, extractmatches, listmatch, match
from esshell.term import mkstr


def words(terms):
    return [str(t) for t in terms]


@pytest.mark.parametrize(
    "subject, pattern, expected",
    [
        ("foo", "f*", True),
        ("foo", "*o", True),
        ("foo", "b*", False),
        ("foo", "f?o", True),
        ("fo", "f?o", False),
        ("b", "[a-c]", True),
        ("d", "[a-c]", False),
        ("d", "[~a-c]", True),
        ("]", "[]]", True),
        ("-", "[a-]", True),
        ("[", "[", True),
        ("", "*", True),
        ("abc", "a**c", True),
    ],
)
def test_match_unquoted(subject, pattern, expected):
    assert match(subject, pattern, UNQUOTED) is expected


def test_match_fully_quoted():
    assert match("f*", "f*", QUOTED)
    assert not match("foo", "f*", QUOTED)


def test_match_partly_quoted():
    assert match("a*", "a*", "rq")
    assert not match("ab", "a*", "rq")
    assert match("ab", "a*", "rr")


def test_quoted_bracket_in_class():
    assert match("]", "[]]", "rrr")
    assert not match("x", "[x]", "qrr")


def test_listmatch_empty_subjects():
    assert listmatch([], [], [])
    assert listmatch([], ["*"], [UNQUOTED])
    assert listmatch([], ["**"], ["rr"])
    assert not listmatch([], ["*"], [QUOTED])
    assert not listmatch([], ["a"], [UNQUOTED])
    assert not listmatch([], [""], [UNQUOTED])


def test_listmatch_subjects():
    assert listmatch([mkstr("foo"), mkstr("bar")], [mkstr("b*")], [UNQUOTED])
    assert not listmatch(["foo", "bar"], ["z*", "q"], None)
    assert not listmatch(["foo"], [], [])


def test_listmatch_mismatched_quotes():
    with pytest.raises(ValueError):
        listmatch(["foo"], ["f*", "g*"], [UNQUOTED])


def test_extract_star():
    assert words(extractmatches(["foo.c"], ["*.c"], [UNQUOTED])) == ["foo"]


def test_extract_questions():
    assert words(extractmatches(["a1b2"], ["a?b?"], [UNQUOTED])) == ["1", "2"]


def test_extract_range_and_stars():
    assert words(extractmatches(["5x"], ["[0-9]x"], [UNQUOTED])) == ["5"]
    assert words(extractmatches(["a-b-c"], ["*-*"], [UNQUOTED])) == ["a", "b-c"]


def test_extract_no_wildcards_or_no_match():
    assert extractmatches(["abc"], ["abc"], [UNQUOTED]) == []
    assert extractmatches(["abc"], ["x*"], [UNQUOTED]) == []


def test_extract_first_pattern_wins_for_each_subject():
    result = extractmatches(["ab", "cd"], ["a*", "?d", "*"], None)
    assert words(result) == ["b", "c"]


def test_extracted_parts_rebuild_subject():
    subject = "head.mid.tail"
    parts = words(extractmatches([subject], ["*.*.*"], [UNQUOTED]))
    assert ".".join(parts) == subject