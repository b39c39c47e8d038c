import pytest

from esshell.term import Binding, mkstr
from esshell.util import EsError
from esshell.variables import (
    ENV_ESCAPE,
    ENV_SEPARATOR,
    VarStore,
    validatevar,
)


def terms(*words):
    return [mkstr(w) for w in words]


def words(lst):
    return [str(t) for t in lst]


@pytest.mark.parametrize("name", ["", "1", "007", "a=b"])
def test_validatevar_rejects(name):
    with pytest.raises(EsError):
        validatevar(name)


def test_validatevar_zero_length_message():
    with pytest.raises(EsError) as info:
        validatevar("")
    assert info.value.message == "zero-length variable name"


def test_define_and_lookup():
    store = VarStore()
    store.define("x", None, terms("a", "b"))
    assert words(store.lookup("x")) == ["a", "b"]


def test_define_empty_removes():
    store = VarStore()
    store.define("x", None, terms("a"))
    store.define("x", None, [])
    assert store.lookup("x") == []
    assert "x" not in store


def test_binding_shadows_and_is_updated():
    store = VarStore()
    store.define("x", None, terms("global"))
    binding = Binding("x", terms("local"))
    assert words(store.lookup("x", binding)) == ["local"]
    store.define("x", binding, terms("changed"))
    assert words(binding.defn) == ["changed"]
    assert words(store.lookup("x")) == ["global"]


def test_counting_names_index_star():
    store = VarStore()
    store.define("*", None, terms("a", "b", "c"))
    assert words(store.lookup("2")) == ["b"]
    assert words(store.lookup("01")) == ["a"]
    assert store.lookup("5") == []


def test_lookup2_joins_names():
    store = VarStore()
    store.define("fn-echo", None, terms("body"))
    assert words(store.lookup2("fn-", "echo")) == ["body"]
    binding = Binding("fn-echo", terms("inner"))
    assert words(store.lookup2("fn-", "echo", binding)) == ["inner"]


def test_push_and_pop_restore():
    store = VarStore()
    store.define("x", None, terms("old"))
    store.push("x", terms("new"))
    assert words(store.lookup("x")) == ["new"]
    store.pop()
    assert words(store.lookup("x")) == ["old"]


def test_pushed_context_removes_new_variable():
    store = VarStore()
    with store.pushed("y", terms("temp")):
        assert words(store.lookup("y")) == ["temp"]
    assert store.lookup("y") == []


def test_pop_without_push():
    with pytest.raises(RuntimeError):
        VarStore().pop()


def test_settor_runs_with_zero_bound():
    seen = []

    def settor(lst):
        seen.append(words(store.lookup("0")))
        return [mkstr(str(t).upper()) for t in lst[1:]]

    store = VarStore(settor_eval=settor)
    store.define("set-x", None, terms("fn"))
    store.define("x", None, terms("a", "b"))
    assert words(store.lookup("x")) == ["A", "B"]
    assert seen == [["x"]]
    assert store.lookup("0") == []


def test_pop_raises_settor_error_after_restoring():
    calls = []

    def settor(lst):
        calls.append(1)
        if len(calls) > 1:
            raise EsError("settor", "boom")
        return lst[1:]

    store = VarStore(settor_eval=settor)
    store.define("set-x", None, terms("fn"))
    calls.clear()
    store.push("x", terms("v"))
    with pytest.raises(EsError):
        store.pop()
    assert store.lookup("x") == []


def test_mkenv_format():
    store = VarStore()
    store.define("a", None, terms("x", "y"))
    assert store.mkenv() == ["a=x" + ENV_SEPARATOR + "y"]


def test_mkenv_skips_special_and_noexport():
    store = VarStore()
    store.define("*", None, terms("arg"))
    store.define("keep", None, terms("1"))
    store.define("drop", None, terms("2"))
    store.setnoexport(terms("drop"))
    assert store.mkenv() == ["keep=1"]
    store.setnoexport([])
    assert store.mkenv() == ["drop=2", "keep=1"]


def test_mkenv_sorted():
    store = VarStore()
    for name in ["b", "c", "a"]:
        store.define(name, None, terms(name))
    env = store.mkenv()
    assert env == sorted(env)


def test_environment_round_trip_with_escapes():
    original = VarStore()
    value = terms("plain", "has" + ENV_SEPARATOR + "sep", "has" + ENV_ESCAPE + "esc", "")
    original.define("v", None, value)
    copy = VarStore()
    copy.import_environ(original.mkenv())
    assert copy.lookup("v") == value


def test_import_mapping_and_protected():
    store = VarStore()
    store.import_environ({"HOME": "/home/x", "fn-f": "{}", "set-y": "z"}, protected=True)
    assert words(store.lookup("HOME")) == ["/home/x"]
    assert store.lookup("fn-f") == []
    assert store.lookup("set-y") == []


def test_import_empty_value_is_one_empty_word():
    store = VarStore()
    store.import_environ(["E="])
    assert words(store.lookup("E")) == [""]


def test_import_keeps_entries_without_equals():
    store = VarStore()
    store.import_environ(["oddentry", "k=v"])
    assert store.mkenv() == ["k=v", "oddentry"]


def test_hide_and_listvars():
    store = VarStore()
    store.define("early", None, terms("1"))
    store.hide()
    store.define("late", None, terms("2"))
    store.define("*", None, terms("3"))
    assert words(store.listvars(True)) == ["early"]
    assert words(store.listvars(False)) == ["late"]
    assert "early=1" not in store.mkenv()
    store.define("early", None, terms("again"))
    assert words(store.listvars(False)) == ["early", "late"]


def test_vars_with_prefix():
    store = VarStore()
    store.define("fn-a", None, terms("1"))
    store.define("fn-b", None, terms("2"))
    store.define("other", None, terms("3"))
    assert words(store.vars_with_prefix("fn-")) == ["fn-a", "fn-b"]