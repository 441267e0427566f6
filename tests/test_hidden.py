"""Tests for the HiddenString guarded buffer."""

from __future__ import annotations

import copy
import pickle

import pytest

from keyseal import HiddenString, InvalidType


def test_get_bytes_and_string():
    hidden = HiddenString("pässword")
    assert hidden.get_bytes() == "pässword".encode("utf-8")
    assert hidden.get_string() == "pässword"
    assert len(hidden) == len("pässword".encode("utf-8"))


def test_repr_and_str_are_redacted():
    hidden = HiddenString(b"hunter2")
    assert "hunter2" not in repr(hidden)
    assert "hunter2" not in str(hidden)
    assert "hunter2" not in f"{hidden}"


def test_context_manager_wipes_on_exit():
    with HiddenString(b"hunter2") as hidden:
        assert hidden.get_bytes() == b"hunter2"
    assert hidden.wiped
    assert bytes(hidden._buffer) == b"\x00" * 7
    with pytest.raises(ValueError):
        hidden.get_bytes()


def test_context_manager_wipes_on_error():
    with pytest.raises(RuntimeError):
        with HiddenString(b"hunter2") as hidden:
            raise RuntimeError("boom")
    assert hidden.wiped


def test_implicit_copies_are_refused():
    hidden = HiddenString(b"hunter2")
    with pytest.raises(TypeError):
        copy.copy(hidden)
    with pytest.raises(TypeError):
        copy.deepcopy(hidden)
    with pytest.raises(TypeError):
        pickle.dumps(hidden)


def test_explicit_copy_is_independent():
    original = HiddenString(b"hunter2")
    clone = original.copy()
    original.wipe()
    assert clone.get_bytes() == b"hunter2"


def test_equals_is_explicit():
    assert HiddenString(b"a").equals(HiddenString(b"a"))
    assert not HiddenString(b"a").equals(HiddenString(b"b"))
    with pytest.raises(TypeError):
        HiddenString(b"a") == HiddenString(b"a")


def test_rejects_other_types():
    with pytest.raises(InvalidType):
        HiddenString(1234)
