import pytest
from hypothesis import given, strategies as st

from actorloop.timers import FixedTimerKey, MaxTimerKey, MinTimerKey, Timers


def _recorder(log, tag):
    return lambda s: log.append(tag)


def _fire(callbacks):
    for cb in callbacks:
        cb(None)


def test_empty_has_no_expiry():
    t = Timers(0.0)
    assert t.next_expiry() is None
    assert t.advance(100.0) == []


def test_fixed_timer_fires_at_expiry_not_before():
    log = []
    t = Timers(0.0)
    t.add(5.0, _recorder(log, "a"))
    assert t.next_expiry() == 5.0
    _fire(t.advance(4.0))
    assert log == []
    _fire(t.advance(5.0))
    assert log == ["a"]
    assert t.next_expiry() is None


def test_equal_expiries_fire_in_insertion_order():
    log = []
    t = Timers(0.0)
    for tag in ["x", "y", "z"]:
        t.add(3.0, _recorder(log, tag))
    _fire(t.advance(3.0))
    assert log == ["x", "y", "z"]


def test_fixed_delete():
    log = []
    t = Timers(0.0)
    key = t.add(2.0, _recorder(log, "a"))
    assert isinstance(key, FixedTimerKey)
    assert t.delete(key) is True
    assert t.delete(key) is False
    _fire(t.advance(10.0))
    assert log == []
    assert t.next_expiry() is None


def test_delete_after_firing_returns_false():
    t = Timers(0.0)
    key = t.add(1.0, lambda s: None)
    assert len(t.advance(1.0)) == 1
    assert t.delete(key) is False


def test_max_timer_only_moves_later():
    log = []
    t = Timers(0.0)
    key = t.add_max(5.0, _recorder(log, "m"))
    assert t.mod_max(key, 3.0) is True
    assert t.next_expiry() == 5.0
    assert t.mod_max(key, 8.0) is True
    assert t.next_expiry() == 8.0
    _fire(t.advance(5.0))
    assert log == []
    assert t.max_is_active(key)
    _fire(t.advance(8.0))
    assert log == ["m"]
    assert not t.max_is_active(key)
    assert t.mod_max(key, 20.0) is False


def test_max_delete():
    t = Timers(0.0)
    key = t.add_max(5.0, lambda s: None)
    assert t.del_max(key) is True
    assert t.del_max(key) is False
    assert not t.max_is_active(key)
    assert t.advance(10.0) == []


def test_min_timer_only_moves_earlier():
    log = []
    t = Timers(0.0)
    key = t.add_min(10.0, _recorder(log, "n"))
    assert t.mod_min(key, 12.0) is True
    assert t.next_expiry() == 10.0
    assert t.mod_min(key, 4.0) is True
    assert t.next_expiry() == 4.0
    _fire(t.advance(4.0))
    assert log == ["n"]
    assert not t.min_is_active(key)
    _fire(t.advance(20.0))
    assert log == ["n"]
    assert t.mod_min(key, 1.0) is False


def test_min_delete():
    t = Timers(0.0)
    key = t.add_min(5.0, lambda s: None)
    t.mod_min(key, 2.0)
    assert t.min_is_active(key)
    assert t.del_min(key) is True
    assert t.del_min(key) is False
    assert t.next_expiry() is None


def test_keys_of_other_kinds_are_not_accepted():
    t = Timers(0.0)
    fixed = t.add(5.0, lambda s: None)
    mx = t.add_max(5.0, lambda s: None)
    mn = t.add_min(5.0, lambda s: None)
    assert t.del_max(MaxTimerKey(fixed.id)) is False
    assert t.del_min(MinTimerKey(mx.id)) is False
    assert t.delete(FixedTimerKey(mn.id)) is False
    assert t.max_is_active(mx) and t.min_is_active(mn)
    assert len(t.advance(5.0)) == 3


def test_non_callable_rejected():
    t = Timers(0.0)
    with pytest.raises(TypeError):
        t.add(1.0, 42)
    with pytest.raises(TypeError):
        t.add_max(1.0, None)
    with pytest.raises(TypeError):
        t.add_min(1.0, "x")


def test_time_does_not_move_backwards():
    log = []
    t = Timers(0.0)
    t.advance(10.0)
    t.add(5.0, _recorder(log, "late"))
    _fire(t.advance(2.0))
    assert log == ["late"]


@given(st.lists(st.floats(min_value=0.0, max_value=1e6, allow_nan=False), max_size=60))
def test_all_timers_fire_in_expiry_order(expiries):
    t = Timers(0.0)
    fired = []
    for i, e in enumerate(expiries):
        t.add(e, lambda s, i=i, e=e: fired.append((e, i)))
    while (nxt := t.next_expiry()) is not None:
        _fire(t.advance(nxt))
    assert fired == sorted((e, i) for i, e in enumerate(expiries))


@given(
    st.lists(st.floats(min_value=0.0, max_value=1000.0, allow_nan=False), min_size=1, max_size=20)
)
def test_min_and_max_settle_on_extremes(updates):
    t = Timers(-1.0)
    mx = t.add_max(updates[0], lambda s: None)
    mn = t.add_min(updates[0], lambda s: None)
    for u in updates[1:]:
        assert t.mod_max(mx, u)
        assert t.mod_min(mn, u)
    assert t.next_expiry() == min(updates)
    t.advance(min(updates))
    assert not t.min_is_active(mn)
    assert t.max_is_active(mx) == (max(updates) > min(updates))
    assert t.next_expiry() == (max(updates) if max(updates) > min(updates) else None)