"""Tests for the session state manager and its persisted keys."""

import json

from hypothesis import given, settings, strategies as st

from shared.profiles import ACTIVE_PROFILES, DemoProfile
from shared.state_manager import (
    KEY_MODE,
    KEY_VISITED_STEPS,
    KEY_WIZARD_SEEN,
    SessionState,
    SessionStateManager,
    tour_key,
)
from shared.storage import MemoryStore

from conftest import FixedDateCatalog, RecordingNavigator


def fresh_manager(store, navigator=None):
    manager = SessionStateManager(store, navigator or RecordingNavigator(), catalog=FixedDateCatalog())
    manager.restore()
    return manager


class TestEnter:

    def test_enter_investor(self, manager, store):
        manager.enter("investor")
        assert manager.profile is DemoProfile.INVESTOR
        assert manager.is_demo
        assert store.get(KEY_MODE) == "investor"
        assert len(manager.dataset.properties) == 3
        assert manager.dataset.total_units == 7

    def test_enter_homeowner_with_score_level(self, manager):
        manager.enter("homeowner", "struggling")
        assert manager.profile is DemoProfile.STRUGGLING
        assert manager.dataset.health_score == 62

    def test_unknown_family_is_ignored(self, manager, store):
        manager.enter("landlord")
        assert manager.profile is DemoProfile.NONE
        assert KEY_MODE not in store

    def test_new_profile_resets_visited_steps(self, manager):
        manager.enter_profile(DemoProfile.STRUGGLING)
        manager.mark_step_visited(0)
        manager.mark_step_visited(3)
        manager.enter_profile(DemoProfile.IMPROVING)
        assert manager.visited_steps == []

    def test_same_profile_keeps_visited_steps(self, manager):
        manager.enter_profile(DemoProfile.STRUGGLING)
        manager.mark_step_visited(0)
        manager.mark_step_visited(3)
        manager.enter_profile(DemoProfile.STRUGGLING)
        assert manager.visited_steps == [0, 3]

    def test_wizard_shows_on_first_entry_only(self, manager):
        manager.enter_profile(DemoProfile.IMPROVING)
        assert manager.wizard_visible
        manager.dismiss_wizard()
        assert not manager.wizard_visible

        manager.enter_profile(DemoProfile.EXCELLENT)
        assert not manager.wizard_visible
        assert manager.state.wizard_seen

    def test_show_wizard_reopens_without_clearing_flag(self, manager, store):
        manager.enter_profile(DemoProfile.INVESTOR)
        manager.dismiss_wizard()
        manager.show_wizard()
        assert manager.wizard_visible
        assert store.get(KEY_WIZARD_SEEN) == "true"

    def test_show_wizard_outside_demo_is_noop(self, manager):
        manager.show_wizard()
        assert not manager.wizard_visible


class TestRestore:
    """A fresh manager on the same store reproduces the session."""

    def test_round_trip(self, manager, store):
        manager.enter_profile(DemoProfile.INVESTOR)
        manager.mark_step_visited(0)
        manager.mark_step_visited(2)
        manager.set_tour_seen(True)
        manager.dismiss_wizard()
        expected = manager.snapshot()

        restored = fresh_manager(store)
        assert restored.snapshot() == expected
        assert restored.dataset.total_units == 7
        assert not restored.wizard_visible

    def test_restore_is_idempotent(self, store):
        manager = fresh_manager(store)
        manager.enter_profile(DemoProfile.EXCELLENT)
        manager.mark_step_visited(4)
        before = manager.snapshot()

        # A second restore must not reset what happened since the first
        store.set(KEY_MODE, "investor")
        manager.restore()
        assert manager.snapshot() == before

    def test_empty_store_restores_to_none(self, store):
        manager = fresh_manager(store)
        assert manager.snapshot() == SessionState()
        assert manager.dataset is None

    def test_corrupted_mode_degrades_to_none(self):
        manager = fresh_manager(MemoryStore({KEY_MODE: "vip-gold"}))
        assert manager.profile is DemoProfile.NONE

    def test_corrupted_visited_steps_degrade_to_empty(self):
        store = MemoryStore({KEY_MODE: "improving", KEY_VISITED_STEPS: "[1, oops"})
        manager = fresh_manager(store)
        assert manager.profile is DemoProfile.IMPROVING
        assert manager.visited_steps == []

    def test_non_integer_visited_steps_degrade_to_empty(self):
        store = MemoryStore({KEY_MODE: "improving", KEY_VISITED_STEPS: '[1, "two"]'})
        assert fresh_manager(store).visited_steps == []

    @settings(max_examples=50)
    @given(raw=st.text(max_size=30))
    def test_any_visited_steps_value_is_safe(self, raw):
        store = MemoryStore({KEY_MODE: "struggling", KEY_VISITED_STEPS: raw})
        visited = fresh_manager(store).visited_steps
        assert all(isinstance(i, int) for i in visited)
        assert len(visited) == len(set(visited))


class TestVisitedSteps:

    def test_mark_is_idempotent(self, manager, store):
        manager.enter_profile(DemoProfile.STRUGGLING)
        manager.mark_step_visited(2)
        manager.mark_step_visited(2)
        assert manager.visited_steps == [2]
        assert json.loads(store.get(KEY_VISITED_STEPS)) == [2]

    @settings(max_examples=50)
    @given(steps=st.lists(st.integers(min_value=0, max_value=12), max_size=30))
    def test_visited_is_a_set_in_first_visit_order(self, steps):
        manager = fresh_manager(MemoryStore())
        manager.enter_profile(DemoProfile.IMPROVING)
        for index in steps:
            manager.mark_step_visited(index)
        assert manager.visited_steps == list(dict.fromkeys(steps))

    def test_reset(self, manager):
        manager.enter_profile(DemoProfile.STRUGGLING)
        manager.mark_step_visited(5)
        manager.reset_visited_steps([0])
        assert manager.visited_steps == [0]


class TestFlags:

    def test_tour_seen_is_per_profile(self, manager, store):
        manager.enter_profile(DemoProfile.IMPROVING)
        manager.set_tour_seen(True)
        assert manager.is_tour_seen()
        assert not manager.is_tour_seen(DemoProfile.STRUGGLING)
        assert store.get(tour_key(DemoProfile.IMPROVING)) == "true"

    def test_clearing_tour_seen_removes_key(self, manager, store):
        manager.enter_profile(DemoProfile.IMPROVING)
        manager.set_tour_seen(True)
        manager.set_tour_seen(False)
        assert tour_key(DemoProfile.IMPROVING) not in store

    def test_intro_flag(self, manager):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        assert not manager.is_intro_seen()
        manager.mark_intro_seen()
        assert manager.is_intro_seen()
        assert not manager.is_intro_seen(DemoProfile.INVESTOR)

    def test_flags_ignored_without_profile(self, manager, store):
        manager.set_tour_seen(True)
        manager.mark_intro_seen()
        assert len(store) == 0

    def test_exit_intent_flag(self, manager):
        assert not manager.is_exit_intent_shown()
        manager.mark_exit_intent_shown()
        assert manager.is_exit_intent_shown()


class TestEngagementRecord:

    def test_defaults(self, manager):
        record = manager.engagement
        assert record.shown == 0
        assert record.last_shown is None
        assert not record.dismissed

    def test_update_persists(self, manager, store):
        manager.update_engagement(shown=1, last_shown=1234.5, triggers_fired=("priorities_viewed",))
        restored = fresh_manager(store)
        record = restored.engagement
        assert record.shown == 1
        assert record.last_shown == 1234.5
        assert record.triggers_fired == ("priorities_viewed",)

    def test_corrupted_counter(self):
        manager = fresh_manager(MemoryStore({"demo_popups_shown": "many"}))
        assert manager.engagement.shown == 0


class TestTeardown:

    def _populate(self, manager):
        manager.enter_profile(DemoProfile.INVESTOR)
        manager.mark_step_visited(1)
        manager.dismiss_wizard()
        for profile in ACTIVE_PROFILES:
            manager.set_tour_seen(True, profile)
            manager.mark_intro_seen(profile)
        manager.mark_exit_intent_shown()
        manager.update_engagement(shown=2, last_shown=10.0, dismissed=True,
                                  triggers_fired=("a",), features_viewed=("b",))

    def test_clear_removes_every_key(self, manager, store):
        self._populate(manager)
        store.set("demoTour_retired", "true")
        store.set("unrelated", "kept")
        manager.clear()

        assert store.snapshot() == {"unrelated": "kept"}
        assert manager.profile is DemoProfile.NONE
        assert manager.dataset is None
        assert fresh_manager(store).snapshot() == SessionState()

    def test_clear_does_not_navigate(self, manager, navigator):
        self._populate(manager)
        manager.clear()
        assert navigator.pushes == []
        assert navigator.hard_redirects == []

    def test_exit_redirects_to_welcome(self, manager, store, navigator):
        self._populate(manager)
        manager.exit()
        assert navigator.hard_redirects == ["Welcome"]
        assert KEY_MODE not in store

    def test_switch_persona_redirects_to_entry(self, manager, navigator):
        self._populate(manager)
        manager.switch_persona()
        assert navigator.hard_redirects == ["DemoEntry"]
        assert not manager.is_demo

    def test_exit_without_navigator_still_clears(self, store):
        manager = SessionStateManager(store, catalog=FixedDateCatalog())
        manager.enter_profile(DemoProfile.STRUGGLING)
        manager.exit()
        assert len(store) == 0
