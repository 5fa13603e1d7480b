import pytest
from hypothesis import given, strategies as st

from actorloop.deferrer import Deferrer


def test_new_deferrer_is_empty():
    d = Deferrer()
    assert len(d) == 0
    assert list(d.take_queue()) == []


def test_defer_preserves_order():
    d = Deferrer()
    seen = []
    for i in range(5):
        d.defer(lambda s, i=i: seen.append(i))
    assert len(d) == 5
    for f in d.take_queue():
        f(None)
    assert seen == [0, 1, 2, 3, 4]


def test_take_queue_leaves_empty_queue():
    d = Deferrer()
    d.defer(lambda s: None)
    taken = d.take_queue()
    assert len(taken) == 1
    assert len(d) == 0


def test_calls_deferred_while_running_go_to_new_queue():
    d = Deferrer()
    seen = []

    def first(s):
        seen.append("first")
        d.defer(lambda s: seen.append("second"))

    d.defer(first)
    taken = d.take_queue()
    for f in taken:
        f(None)
    assert seen == ["first"]
    assert len(taken) == 1
    assert len(d) == 1
    for f in d.take_queue():
        f(None)
    assert seen == ["first", "second"]


def test_clear_discards_pending_calls():
    d = Deferrer()
    d.defer(lambda s: None)
    d.defer(lambda s: None)
    d.clear()
    assert len(d) == 0
    assert list(d.take_queue()) == []


def test_shared_handle_sees_same_queue():
    d = Deferrer()
    alias = d
    alias.defer(lambda s: None)
    assert len(d) == 1


def test_deferred_call_receives_runtime_argument():
    d = Deferrer()
    received = []
    d.defer(received.append)
    runtime = object()
    for f in d.take_queue():
        f(runtime)
    assert received == [runtime]


def test_non_callable_rejected():
    d = Deferrer()
    with pytest.raises(TypeError):
        d.defer(42)
    assert len(d) == 0


@given(st.lists(st.integers()))
def test_order_matches_insertion(values):
    d = Deferrer()
    out = []
    for v in values:
        d.defer(lambda s, v=v: out.append(v))
    assert len(d) == len(values)
    for f in d.take_queue():
        f(None)
    assert out == values