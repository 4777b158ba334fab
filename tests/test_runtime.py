"""Tests for the per-session runtime wiring, without a running Streamlit server."""

import pytest

from modules.overlays import Overlay
from modules.exit_funnel import ExitReason
from modules.runtime import RenderedTargets, build_runtime
from modules.tour_engine import Rect, TourState
from shared.profiles import DemoProfile
from shared.state_manager import is_owned_key
from shared.storage import MemoryStore, StreamlitSessionStore

from conftest import FakeClock, FixedDateCatalog, RecordingNavigator


@pytest.fixture
def wall_clock():
    return FakeClock(start=50_000.0)


@pytest.fixture
def runtime(clock, wall_clock):
    runtime = build_runtime(
        MemoryStore(),
        RecordingNavigator(current="Welcome"),
        clock=clock,
        wall_clock=wall_clock,
        catalog=FixedDateCatalog(),
    )
    runtime.dev.enabled = False
    runtime.manager.restore()
    return runtime


class TestOnRun:

    def test_no_overlays_outside_demo(self, runtime):
        runtime.on_run("Welcome")
        assert runtime.arbiter.visible() == []
        assert runtime.wizard is None

    def test_first_entry_shows_wizard_over_tour(self, runtime):
        runtime.manager.enter_profile(DemoProfile.IMPROVING)
        runtime.on_run("DemoImproving")
        assert runtime.engine.state is TourState.RUNNING
        assert runtime.wizard.variant == "homeowner"
        assert runtime.arbiter.visible() == [Overlay.ONBOARDING_WIZARD]

        runtime.wizard.skip()
        runtime.on_run("DemoImproving")
        assert runtime.wizard is None
        assert runtime.arbiter.visible() == [Overlay.DEMO_INTRO]

        runtime.intro.close()
        runtime.on_run("DemoImproving")
        assert runtime.arbiter.visible() == [Overlay.TOUR_CARD, Overlay.FLOATING_CTA]

    def test_exit_dialog_hides_tour_card(self, runtime):
        runtime.manager.enter_profile(DemoProfile.STRUGGLING)
        runtime.manager.dismiss_wizard()
        runtime.intro.close()
        runtime.on_run("DemoStruggling")
        runtime.engine.close()
        runtime.refresh_overlays()
        assert runtime.arbiter.visible() == [Overlay.EXIT_DIALOG]

    def test_dispatcher_is_shared_with_engine(self, runtime):
        assert runtime.engine.dispatcher is runtime.dispatcher


class TestWizardShortcut:

    def test_investor_shortcut_goes_to_mapped_scale(self, runtime):
        runtime.manager.enter_profile(DemoProfile.INVESTOR)
        runtime.on_run("DemoPortfolio")
        wizard = runtime.wizard
        while not wizard.is_last:
            wizard.next()
        wizard.take_shortcut()
        assert runtime.navigator.pushes[-1] == "DemoPortfolioScale"
        assert not runtime.manager.wizard_visible


class TestTimers:

    def test_view_signature_changes_on_auto_advance(self, runtime, clock):
        runtime.manager.enter_profile(DemoProfile.HOMEOWNER)
        runtime.manager.dismiss_wizard()
        runtime.on_run("Dashboard")
        runtime.engine.jump_to(5)
        before = runtime.view_signature()
        clock.advance(3)
        runtime.timers.tick()
        assert runtime.view_signature() != before

    def test_time_engaged_check_is_scheduled(self, runtime, clock, wall_clock):
        runtime.manager.enter_profile(DemoProfile.EXCELLENT)
        wall_clock.advance(180)
        clock.advance(30)
        runtime.timers.tick()
        assert runtime.engagement.current.trigger == "time_engaged"


class TestRenderedTargets:

    def test_query_rect_follows_render_order(self):
        targets = RenderedTargets()
        targets.register("menu-button", "Menu")
        targets.register("health-score", "Score")
        assert targets.query_rect('[data-tour="health-score"]') == Rect(0, 1, 1, 1)
        assert targets.query_rect('[data-tour="task-queue"]') is None

    def test_begin_run_forgets_previous_targets(self):
        targets = RenderedTargets()
        targets.register("menu-button")
        targets.begin_run()
        assert targets.query_rect('[data-tour="menu-button"]') is None


class TestDemoIntro:

    def test_intro_shown_once_per_profile(self, runtime):
        runtime.manager.enter_profile(DemoProfile.EXCELLENT)
        runtime.manager.dismiss_wizard()
        runtime.on_run("DemoExcellent")
        assert runtime.arbiter.top_modal() is Overlay.DEMO_INTRO
        assert runtime.intro.intro.score == 92

        runtime.intro.close()
        runtime.on_run("DemoExcellent")
        assert Overlay.DEMO_INTRO not in runtime.arbiter.visible()
        assert runtime.manager.is_intro_seen(DemoProfile.EXCELLENT)
        assert not runtime.manager.is_intro_seen(DemoProfile.INVESTOR)

    def test_generic_homeowner_has_no_intro(self, runtime):
        runtime.manager.enter_profile(DemoProfile.HOMEOWNER)
        runtime.manager.dismiss_wizard()
        runtime.on_run("Dashboard")
        assert runtime.intro.intro is None
        assert Overlay.DEMO_INTRO not in runtime.arbiter.requested

    def test_intro_suppresses_engagement_popup(self, runtime, wall_clock):
        runtime.manager.enter_profile(DemoProfile.IMPROVING)
        runtime.manager.dismiss_wizard()
        runtime.on_run("DemoImproving")
        wall_clock.advance(600)
        assert runtime.engagement.trigger("priorities_viewed") is False
        assert runtime.manager.engagement.shown == 0


class TestHighlight:

    def test_current_step_target_is_highlighted(self, runtime):
        runtime.manager.enter_profile(DemoProfile.HOMEOWNER)
        runtime.manager.dismiss_wizard()
        runtime.on_run("Dashboard")
        runtime.engine.jump_to(1)
        target = runtime.targets.register("health-score", "Health Score")
        other = runtime.targets.register("not-in-this-tour", "Other")
        assert runtime.is_highlighted(target)
        assert not runtime.is_highlighted(other)

        runtime.engine.tracker.refresh()
        assert runtime.engine.tracker.target_found

    def test_minimized_card_highlights_nothing(self, runtime):
        runtime.manager.enter_profile(DemoProfile.HOMEOWNER)
        runtime.manager.dismiss_wizard()
        runtime.on_run("Dashboard")
        runtime.engine.jump_to(1)
        target = runtime.targets.register("health-score", "Health Score")
        runtime.engine.minimize()
        assert not runtime.is_highlighted(target)


class TestBrowserEvents:

    def test_pointer_leave_through_top_opens_exit_intent(self, runtime):
        runtime.manager.enter_profile(DemoProfile.IMPROVING)
        event = {"type": "pointer_leave", "seq": 1, "clientY": -2, "desktop": True}
        assert runtime.on_browser_event(event) is True
        assert runtime.funnel.reason is ExitReason.EXIT_INTENT
        assert Overlay.EXIT_DIALOG in runtime.arbiter.requested

    def test_same_event_is_not_handled_twice(self, runtime):
        runtime.manager.enter_profile(DemoProfile.IMPROVING)
        event = {"type": "pointer_leave", "seq": 4, "clientY": 0, "desktop": True}
        assert runtime.on_browser_event(event) is True
        runtime.funnel.continue_exploring()
        assert runtime.on_browser_event(dict(event)) is False
        assert runtime.funnel.reason is None

    def test_mobile_and_side_exits_ignored(self, runtime):
        runtime.manager.enter_profile(DemoProfile.IMPROVING)
        assert runtime.on_browser_event({"type": "pointer_leave", "seq": 1, "clientY": -5, "desktop": False}) is False
        assert runtime.on_browser_event({"type": "pointer_leave", "seq": 2, "clientY": 300, "desktop": True}) is False
        assert runtime.funnel.reason is None

    def test_viewport_change_refreshes_tracked_position(self, runtime):
        runtime.manager.enter_profile(DemoProfile.HOMEOWNER)
        runtime.manager.dismiss_wizard()
        runtime.on_run("Dashboard")
        runtime.engine.jump_to(1)
        tracker = runtime.engine.tracker
        assert tracker.rect is None

        runtime.targets.register("menu-button", "Menu")
        runtime.targets.register("health-score", "Health Score")
        assert runtime.on_browser_event({"type": "viewport", "seq": 1}) is False
        assert tracker.rect == Rect(0, 1, 1, 1)

    def test_no_event_yet(self, runtime):
        assert runtime.on_browser_event(None) is False


class TestReload:
    """A reload gives the tab a new, empty session; the URL is all that survives."""

    @staticmethod
    def fresh_runtime(params):
        store = StreamlitSessionStore(state={}, params=params)
        store.hydrate(is_owned_key)
        runtime = build_runtime(
            store,
            RecordingNavigator(current="DemoStruggling"),
            catalog=FixedDateCatalog(),
        )
        runtime.dev.enabled = False
        runtime.manager.restore()
        return runtime

    def test_demo_survives_reload(self):
        params = {"utm_source": "newsletter"}
        first = self.fresh_runtime(params)
        first.manager.enter_profile(DemoProfile.STRUGGLING)
        first.manager.dismiss_wizard()
        first.intro.close()
        first.manager.mark_step_visited(0)
        first.persist()
        assert params["demoMode"] == "struggling"
        assert params["utm_source"] == "newsletter"

        reloaded = self.fresh_runtime(params)
        assert reloaded.manager.profile is DemoProfile.STRUGGLING
        assert reloaded.manager.visited_steps == [0]
        assert not reloaded.manager.wizard_visible
        assert not reloaded.intro.visible
        assert reloaded.manager.dataset is not None

    def test_exit_leaves_nothing_to_restore(self):
        params = {}
        first = self.fresh_runtime(params)
        first.manager.enter_profile(DemoProfile.INVESTOR)
        first.persist()
        assert params

        first.manager.exit()
        first.persist()
        assert params == {}
        assert self.fresh_runtime(params).manager.profile is DemoProfile.NONE

    def test_foreign_params_are_not_hydrated(self):
        store = StreamlitSessionStore(state={}, params={"demoMode": "excellent", "tab": "2"})
        assert store.hydrate(is_owned_key) == 1
        assert list(store.keys()) == ["demoMode"]
        # Once per session
        assert store.hydrate(is_owned_key) == 0
