from __future__ import annotations

import asyncio

import pytest

from builder_history.history import (
    CLEARED_ACTION,
    INITIAL_ACTION,
    HistoryOptions,
    HistoryStore,
)


def make_store(seed: object = "seed", **kwargs: object) -> HistoryStore[object]:
    kwargs.setdefault("max_size", 100)
    kwargs.setdefault("debounce_ms", 1000)
    return HistoryStore(seed, **kwargs)  # type: ignore[arg-type]


def commit_all(store: HistoryStore[object], *snapshots: object) -> None:
    for snapshot in snapshots:
        store.commit(snapshot, f"set {snapshot}", immediate=True)


def test_fresh_store_holds_only_the_seed() -> None:
    store = make_store()

    info = store.history_info()

    assert len(store) == 1
    assert store.current_index == 0
    assert store.current_state == "seed"
    assert info.can_undo is False
    assert info.can_redo is False
    assert info.current_action == INITIAL_ACTION
    assert store.full_history()[0].id == "initial"


def test_undo_then_redo_walks_the_whole_history() -> None:
    store = make_store()
    commit_all(store, "s1", "s2", "s3")

    undone = [store.undo() for _ in range(3)]
    assert undone == ["s2", "s1", "seed"]
    assert store.current_index == 0

    redone = [store.redo() for _ in range(3)]
    assert redone == ["s1", "s2", "s3"]
    assert store.current_state == "s3"


def test_commit_after_undo_discards_redo_branch() -> None:
    store = make_store()
    commit_all(store, "s1", "s2", "s3")

    assert store.undo() == "s2"
    store.commit("s4", "x", immediate=True)

    assert store.history_info().can_redo is False
    assert store.redo() == "s4"
    assert [view.data for view in store.full_history()] == ["seed", "s1", "s2", "s4"]


def test_oldest_entries_are_evicted_past_max_size() -> None:
    store = make_store(max_size=3)
    commit_all(store, "s1", "s2", "s3", "s4", "s5")

    assert len(store) == 3
    assert store.current_state == "s5"
    assert store.current_index == 2
    assert [view.data for view in store.full_history()] == ["s3", "s4", "s5"]


def test_branch_discard_happens_before_eviction() -> None:
    store = make_store(max_size=3)
    commit_all(store, "s1", "s2")
    store.undo()
    store.undo()

    store.commit("s3", "x", immediate=True)

    assert [view.data for view in store.full_history()] == ["seed", "s3"]
    assert store.current_state == "s3"


def test_rapid_debounced_commits_coalesce_into_one_entry(clock) -> None:
    store = make_store(clock=clock)

    store.commit("a", "edit")
    clock.advance(400)
    store.commit("b", "edit")

    assert len(store) == 1
    assert store.has_pending is True
    assert store.latest_state == "b"
    assert store.current_state == "seed"

    clock.advance(500)
    assert store.process_timers() is False

    clock.advance(600)
    assert store.process_timers() is True
    assert len(store) == 2
    assert store.current_state == "b"
    assert store.has_pending is False
    assert store.process_timers() is False


def test_zero_debounce_commits_synchronously() -> None:
    store = make_store(debounce_ms=0)

    store.commit("a", "edit")

    assert store.has_pending is False
    assert store.current_state == "a"


def test_immediate_commit_lands_parked_edit_first(clock) -> None:
    store = make_store(clock=clock)

    store.commit("typed", "Updated title")
    store.commit("typed+block", "Added block", immediate=True)

    actions = [view.action for view in store.full_history()]
    assert actions == [INITIAL_ACTION, "Updated title", "Added block"]
    assert store.has_pending is False
    assert store.undo() == "typed"


def test_debounced_commit_applies_against_state_at_fire_time(clock) -> None:
    store = make_store(clock=clock)
    commit_all(store, "s1", "s2")
    store.commit("edit", "edit")
    store.undo()

    clock.advance(1000)
    store.process_timers()

    assert [view.data for view in store.full_history()] == ["seed", "s1", "edit"]
    assert store.current_index == 2


def test_flush_and_cancel_pending(clock) -> None:
    store = make_store(clock=clock)

    assert store.flush_pending() is False
    store.commit("a", "edit")
    assert store.flush_pending() is True
    assert store.current_state == "a"

    store.commit("b", "edit")
    store.cancel_pending()
    clock.advance(5000)
    assert store.process_timers() is False
    assert store.current_state == "a"


def test_clear_history_resets_and_drops_pending(clock) -> None:
    store = make_store(clock=clock)
    commit_all(store, "s1", "s2")
    store.commit("pending", "edit")

    store.clear_history("fresh")
    clock.advance(5000)
    store.process_timers()

    info = store.history_info()
    assert len(store) == 1
    assert info.current_index == 0
    assert info.current_action == CLEARED_ACTION
    assert store.current_state == "fresh"
    assert store.full_history()[0].id.startswith("cleared_")


def test_clear_history_defaults_to_construction_seed() -> None:
    store = make_store(seed=["original"])
    commit_all(store, ["s1"])

    store.clear_history()

    assert store.current_state == ["original"]


def test_clear_history_keeps_an_empty_seed() -> None:
    store = make_store(seed=["original"])

    store.clear_history([])

    assert store.current_state == []


def test_boundary_navigation_is_a_no_op() -> None:
    store = make_store()
    commit_all(store, "s1")

    assert store.redo() == "s1"
    assert store.redo() == "s1"
    assert store.current_index == 1

    store.undo()
    assert store.undo() == "seed"
    assert store.undo() == "seed"
    assert store.current_index == 0


def test_go_to_state_ignores_out_of_range_index() -> None:
    store = make_store()
    commit_all(store, "s1", "s2")

    assert store.go_to_state(0) == "seed"
    assert store.go_to_state(7) == "seed"
    assert store.go_to_state(-1) == "seed"
    assert store.go_to_state(2) == "s2"
    assert store.current_index == 2


def test_history_info_reports_neighbour_actions() -> None:
    store = make_store()
    commit_all(store, "s1", "s2")
    store.undo()

    info = store.history_info()

    assert info.can_undo is True
    assert info.can_redo is True
    assert info.current_index == 1
    assert info.history_length == 3
    assert info.current_action == "set s1"
    assert info.undo_action == INITIAL_ACTION
    assert info.redo_action == "set s2"


def test_full_history_marks_current_entry() -> None:
    store = make_store()
    commit_all(store, "s1", "s2")
    store.undo()

    views = store.full_history()

    assert [view.is_current for view in views] == [False, True, False]
    assert len({view.id for view in views}) == 3
    assert views[0].timestamp <= views[1].timestamp <= views[2].timestamp


def test_options_preset_and_overrides() -> None:
    options = HistoryOptions(max_size=10, debounce_ms=250)

    store = HistoryStore("seed", options=options, max_size=4)

    assert store.options.max_size == 4
    assert store.options.debounce_ms == 250


@pytest.mark.parametrize(
    "kwargs",
    [{"max_size": 0}, {"max_size": -3}, {"debounce_ms": -1}],
)
def test_invalid_options_are_rejected(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        HistoryStore("seed", **kwargs)  # type: ignore[arg-type]


def test_event_loop_timer_applies_latest_pending_commit() -> None:
    async def scenario() -> HistoryStore[str]:
        store: HistoryStore[str] = HistoryStore(
            "seed", debounce_ms=10, loop=asyncio.get_running_loop()
        )
        store.commit("a", "edit")
        store.commit("b", "edit")
        await asyncio.sleep(0.1)
        return store

    store = asyncio.run(scenario())

    assert len(store) == 2
    assert store.current_state == "b"
    assert store.has_pending is False


def test_event_loop_timer_is_cancelled_by_clear() -> None:
    async def scenario() -> HistoryStore[str]:
        store: HistoryStore[str] = HistoryStore(
            "seed", debounce_ms=10, loop=asyncio.get_running_loop()
        )
        store.commit("a", "edit")
        store.clear_history()
        await asyncio.sleep(0.1)
        return store

    store = asyncio.run(scenario())

    assert len(store) == 1
    assert store.current_state == "seed"
