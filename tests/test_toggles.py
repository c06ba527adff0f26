import threading

from mediamachine.toggles import ToggleState, ToggleTracker


def _flag(initial=False):
    state = {"on": initial}

    def assign(value):
        state["on"] = value

    return state, assign


def test_unknown_key_is_idle():
    assert ToggleTracker().state("anything") == ToggleState.IDLE


def test_begin_applies_and_commit_keeps():
    tracker = ToggleTracker()
    state, assign = _flag()

    change = tracker.begin("k", True, state["on"], assign)
    assert state["on"] is True
    assert tracker.state("k") == ToggleState.PENDING

    tracker.commit(change)
    assert state["on"] is True
    assert change.state == ToggleState.COMMITTED


def test_rollback_restores_previous_value():
    tracker = ToggleTracker()
    state, assign = _flag()

    change = tracker.begin("k", True, state["on"], assign)
    tracker.rollback(change)

    assert state["on"] is False
    assert change.state == ToggleState.ROLLED_BACK


def test_stale_rollback_is_ignored():
    tracker = ToggleTracker()
    state, assign = _flag()

    first = tracker.begin("k", True, state["on"], assign)
    second = tracker.begin("k", True, state["on"], assign)
    assert not tracker.is_current(first)
    assert tracker.is_current(second)

    tracker.rollback(first)

    assert state["on"] is True
    assert first.state == ToggleState.ROLLED_BACK
    assert tracker.state("k") == ToggleState.PENDING


def test_stale_commit_does_not_change_resource_state():
    tracker = ToggleTracker()
    first = tracker.begin("k", True, False, lambda v: None)
    tracker.begin("k", False, True, lambda v: None)

    tracker.commit(first)

    assert tracker.state("k") == ToggleState.PENDING


def test_failed_change_restores_server_value_not_earlier_unsent_value():
    tracker = ToggleTracker()
    state, assign = _flag(initial=True)

    # A never reaches the server; B fails
    tracker.begin("k", False, state["on"], assign)
    b = tracker.begin("k", True, state["on"], assign)
    tracker.rollback(b)

    assert state["on"] is True


def test_older_commit_becomes_the_restored_value():
    tracker = ToggleTracker()
    state, assign = _flag()

    first = tracker.begin("k", True, state["on"], assign)
    second = tracker.begin("k", False, state["on"], assign)
    tracker.commit(first)
    tracker.rollback(second)

    assert state["on"] is True


def test_resolved_keys_are_forgotten():
    tracker = ToggleTracker()
    committed = tracker.begin("a", True, False, lambda v: None)
    rolled_back = tracker.begin("b", True, False, lambda v: None)
    assert len(tracker) == 2

    tracker.commit(committed)
    tracker.rollback(rolled_back)

    assert len(tracker) == 0
    assert tracker.state("a") == ToggleState.IDLE
    assert tracker.state("b") == ToggleState.IDLE


def test_key_kept_while_a_change_is_pending():
    tracker = ToggleTracker()
    first = tracker.begin("k", True, False, lambda v: None)
    tracker.begin("k", False, True, lambda v: None)

    tracker.commit(first)

    assert len(tracker) == 1


def test_sequenced_releases_key_on_exit():
    tracker = ToggleTracker()
    with tracker.sequenced(("series", 1)):
        assert len(tracker) == 1
    assert len(tracker) == 0


def test_sequenced_serialises_one_key_only():
    tracker = ToggleTracker()
    entered = threading.Event()

    def other_key():
        with tracker.sequenced(("episode", 2)):
            entered.set()

    with tracker.sequenced(("episode", 1)):
        worker = threading.Thread(target=other_key)
        worker.start()
        assert entered.wait(timeout=2)
        worker.join(timeout=2)

    blocked = threading.Event()
    done = threading.Event()

    def same_key():
        blocked.set()
        with tracker.sequenced(("episode", 1)):
            done.set()

    with tracker.sequenced(("episode", 1)):
        worker = threading.Thread(target=same_key)
        worker.start()
        assert blocked.wait(timeout=2)
        assert not done.wait(timeout=0.2)
    worker.join(timeout=2)
    assert done.is_set()
    assert len(tracker) == 0
