import pytest

from mshell.env import Environment, ShellState, name_length


def test_name_length_stops_at_equals():
    assert name_length("PATH=/bin") == 4


def test_name_length_without_equals_is_whole_string():
    assert name_length("FOO") == 3


def test_find_exact_name_not_prefix():
    env = Environment(["AB=2", "A=1"])
    assert env.find("A") == 1
    assert env.find("AB") == 0


def test_find_missing_returns_none():
    env = Environment(["A=1"])
    assert env.find("Z") is None


def test_lookup_returns_value():
    env = Environment(["HOME=/home/someone", "USER=me"])
    assert env.lookup("HOME", 0) == "/home/someone"
    assert env.lookup("USER", 0) == "me"


def test_lookup_question_mark_gives_status():
    env = Environment([])
    assert env.lookup("?", 42) == "42"


def test_lookup_missing_is_none():
    env = Environment(["A=1"])
    assert env.lookup("B", 0) is None


def test_lookup_empty_value():
    env = Environment(["EMPTY="])
    assert env.lookup("EMPTY", 0) == ""


def test_export_appends_new_entry():
    env = Environment(["A=1"])
    env.export("B=2")
    assert env.as_list() == ["A=1", "B=2"]


def test_export_replaces_in_place():
    env = Environment(["A=1", "B=2", "C=3"])
    env.export("B=changed")
    assert env.as_list() == ["A=1", "B=changed", "C=3"]


def test_unset_removes_entry():
    env = Environment(["A=1", "B=2", "C=3"])
    env.unset("B")
    assert env.as_list() == ["A=1", "C=3"]


def test_unset_missing_leaves_environment_alone():
    env = Environment(["A=1"])
    env.unset("Z")
    assert env.as_list() == ["A=1"]


def test_environment_copies_its_input():
    source = ["A=1"]
    env = Environment(source)
    source.append("B=2")
    assert env.as_list() == ["A=1"]
    assert len(env) == 1


def test_as_list_is_a_copy():
    env = Environment(["A=1"])
    listing = env.as_list()
    listing.append("X=9")
    assert env.as_list() == ["A=1"]


def test_as_dict_round_trip():
    env = Environment(["A=1", "B=x=y"])
    assert env.as_dict() == {"A": "1", "B": "x=y"}


@pytest.mark.parametrize("entry", ["K=v", "LONG_NAME=some value"])
def test_export_then_lookup(entry):
    env = Environment([])
    env.export(entry)
    name, _, value = entry.partition("=")
    assert env.lookup(name, 0) == value


def test_shell_state_defaults():
    state = ShellState()
    assert state.status == 0
    assert state.env.as_list() == []