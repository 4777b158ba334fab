"""Tests for the guided tour state machine."""

from hypothesis import given, settings, strategies as st

from modules.dom_events import Element
from modules.exit_funnel import ExitFunnel, ExitReason
from modules.timers import TimerQueue
from modules.tour_engine import GuidedTourEngine, Rect, TourState
from modules.tour_scripts import script_for
from shared.profiles import DemoProfile
from shared.state_manager import KEY_MODE, SessionStateManager, tour_key
from shared.storage import MemoryStore

from conftest import FakeClock, FixedDateCatalog, RecordingNavigator


class StubLocator:
    def __init__(self, rects):
        self.rects = rects
        self.queries = []

    def query_rect(self, selector):
        self.queries.append(selector)
        return self.rects.get(selector)


def target(tour_id):
    return Element("button", {"data-tour": tour_id})


class TestCompletion:
    """Walking a script to the end hands off to the exit funnel."""

    def test_struggling_tour_completes(self, manager, navigator, funnel, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.start()
        assert engine.current_index == 0
        assert navigator.pushes == ["DemoStruggling"]

        for _ in range(8):
            engine.advance()
        assert engine.current_index == 8
        assert funnel.reason is None

        engine.advance()
        assert engine.current_index == 8
        assert engine.state is TourState.COMPLETED
        assert funnel.reason is ExitReason.COMPLETE
        assert manager.is_tour_seen()
        assert manager.visited_steps == list(range(9))

    def test_completion_shows_start_affordance(self, manager, make_engine):
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = make_engine()
        engine.start()
        engine.jump_to(len(engine.script) - 1)
        assert engine.state is TourState.COMPLETED
        assert not engine.active
        assert engine.shows_start_affordance

    def test_step_count_excludes_completion(self, manager, make_engine):
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = make_engine()
        engine.mount("DemoPortfolio")
        assert engine.step_count == 7

    def test_navigation_follows_mapped_pages(self, manager, navigator, make_engine):
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = make_engine()
        engine.start()
        engine.advance()
        engine.advance()
        # welcome and dashboard share a page; properties maps to its own demo page
        assert navigator.pushes == ["DemoPortfolio", "DemoPortfolioProperties"]


class TestSeenFlag:

    def test_seen_tour_does_not_auto_start(self, timers, clock):
        store = MemoryStore({KEY_MODE: "improving", tour_key(DemoProfile.IMPROVING): "true"})
        navigator = RecordingNavigator(current="DemoImproving")
        manager = SessionStateManager(store, navigator, catalog=FixedDateCatalog())
        manager.restore()
        engine = GuidedTourEngine(manager, navigator, timers, funnel=ExitFunnel(manager, navigator),
                                  navigate_delay=0)

        engine.mount("DemoImproving")
        assert engine.state is TourState.NOT_STARTED
        assert engine.shows_start_affordance
        assert navigator.pushes == []

        engine.start()
        assert engine.state is TourState.RUNNING
        assert engine.current_index == 0
        assert tour_key(DemoProfile.IMPROVING) not in store
        assert manager.visited_steps == [0]

    def test_first_mount_auto_starts_without_navigating(self, manager, navigator, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.mount("DemoStruggling")
        assert engine.state is TourState.RUNNING
        assert engine.current_index == 0
        assert manager.visited_steps == [0]
        assert navigator.pushes == []

    def test_mount_is_once_per_profile(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.mount("DemoStruggling")
        engine.advance()
        engine.mount("DemoStruggling")
        assert engine.current_index == 1

    def test_profile_change_resets(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.mount("DemoStruggling")
        engine.advance()
        engine.advance()

        manager.enter_profile(DemoProfile.INVESTOR)
        engine.mount("DemoPortfolio")
        assert engine.profile is DemoProfile.INVESTOR
        assert engine.current_index == 0
        assert engine.state is TourState.RUNNING

    def test_no_tour_outside_demo(self, manager, make_engine):
        engine = make_engine()
        engine.mount("Welcome")
        assert engine.state is TourState.NOT_STARTED
        assert engine.current_step is None
        assert not engine.shows_start_affordance


class TestClickInterception:
    """Click-to-advance steps consume exactly one matching click."""

    def _at_health_score(self, manager, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        engine.advance()
        assert engine.current_step.id == "health-score"
        return engine

    def test_matching_click_advances_once(self, manager, make_engine):
        engine = self._at_health_score(manager, make_engine)
        allowed = engine.dispatcher.click(target("health-score"))
        assert allowed is False
        assert engine.current_index == 2
        assert engine.dispatcher.listener_count() == 1

    def test_click_inside_target_matches(self, manager, make_engine):
        engine = self._at_health_score(manager, make_engine)
        label = target("health-score").child("span", text="78")
        engine.dispatcher.click(label)
        assert engine.current_index == 2

    def test_repeat_click_on_old_target_is_ignored(self, manager, make_engine):
        engine = self._at_health_score(manager, make_engine)
        element = target("health-score")
        engine.dispatcher.click(element)
        assert engine.dispatcher.click(element) is True
        assert engine.current_index == 2

    def test_other_clicks_pass_through(self, manager, make_engine):
        engine = self._at_health_score(manager, make_engine)
        assert engine.dispatcher.click(target("prevented-costs")) is True
        assert engine.current_index == 1

    def test_other_listeners_do_not_see_consumed_click(self, manager, make_engine):
        engine = self._at_health_score(manager, make_engine)
        seen = []
        engine.dispatcher.add_listener(lambda e: seen.append(e))
        engine.dispatcher.click(target("health-score"))
        assert seen == []

    def test_no_listener_on_plain_steps(self, manager, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        assert engine.dispatcher.listener_count() == 0


class TestAutoAdvance:

    def test_timer_advances(self, manager, clock, timers, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        engine.jump_to(5)
        assert engine.current_step.id == "property-card"

        clock.advance(2)
        timers.tick()
        assert engine.current_index == 5
        clock.advance(1)
        timers.tick()
        assert engine.current_index == 6

    def test_leaving_step_cancels_timer(self, manager, clock, timers, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        engine.jump_to(5)
        engine.retreat()
        clock.advance(5)
        timers.tick()
        assert engine.current_index == 4

    def test_minimized_tour_keeps_running(self, manager, clock, timers, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        engine.jump_to(5)
        engine.minimize()
        assert not engine.card_visible
        clock.advance(3)
        timers.tick()
        assert engine.current_index == 6
        assert engine.state is TourState.MINIMIZED
        engine.expand()
        assert engine.card_visible


class TestStepControl:

    def test_retreat_stops_at_first_step(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.start()
        engine.advance()
        engine.retreat()
        engine.retreat()
        assert engine.current_index == 0

    def test_jump_out_of_range_is_ignored(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.start()
        engine.jump_to(99)
        engine.jump_to(-1)
        assert engine.current_index == 0
        assert engine.state is TourState.RUNNING

    def test_close_minimizes_and_opens_exit_dialog(self, manager, funnel, make_engine):
        manager.enter_profile(DemoProfile.EXCELLENT)
        engine = make_engine()
        engine.start()
        engine.close()
        assert engine.state is TourState.MINIMIZED
        assert funnel.reason is ExitReason.EXIT
        assert not manager.is_tour_seen()

    def test_controls_ignored_when_not_running(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.advance()
        engine.jump_to(3)
        assert engine.state is TourState.NOT_STARTED
        assert engine.current_index == 0

    @settings(max_examples=40)
    @given(moves=st.lists(st.sampled_from(["advance", "retreat", "jump"]), max_size=25),
           jumps=st.lists(st.integers(min_value=-2, max_value=12), min_size=25, max_size=25))
    def test_index_stays_in_bounds(self, moves, jumps):
        navigator = RecordingNavigator(current="Welcome")
        manager = SessionStateManager(MemoryStore(), navigator, catalog=FixedDateCatalog())
        manager.restore()
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = GuidedTourEngine(manager, navigator, TimerQueue(FakeClock()), navigate_delay=0)
        engine.start()
        last = len(engine.script) - 1
        for move, jump in zip(moves, jumps):
            if move == "advance":
                engine.advance()
            elif move == "retreat":
                engine.retreat()
            else:
                engine.jump_to(jump)
            assert 0 <= engine.current_index < last
            assert set(manager.visited_steps) <= set(range(last))


class TestRouteResync:

    def test_manual_navigation_moves_pointer(self, manager, navigator, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.start()
        engine.on_route_change("DemoOverwhelmedPrioritize")
        assert engine.current_step.id == "prioritize"
        assert 3 in manager.visited_steps
        assert navigator.pushes == ["DemoStruggling"]

    def test_nearest_step_wins(self, manager, make_engine):
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = make_engine()
        engine.start()
        engine.jump_to(3)
        engine.on_route_change("DemoPortfolio")
        assert engine.current_step.id == "dashboard"

    def test_current_page_keeps_step(self, manager, make_engine):
        manager.enter_profile(DemoProfile.INVESTOR)
        engine = make_engine()
        engine.start()
        engine.advance()
        engine.on_route_change("DemoPortfolio")
        assert engine.current_index == 1

    def test_unrelated_route_keeps_step(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine()
        engine.start()
        engine.advance()
        engine.on_route_change("Waitlist")
        assert engine.current_index == 1


class TestDebouncedNavigation:

    def test_navigation_waits_for_delay(self, manager, navigator, clock, timers, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine(navigate_delay=0.3)
        engine.start()
        assert navigator.pushes == []
        assert engine.navigation_pending

        clock.advance(0.5)
        timers.tick()
        assert navigator.pushes == ["DemoStruggling"]
        assert not engine.navigation_pending

    def test_rapid_steps_navigate_once(self, manager, navigator, clock, timers, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine(navigate_delay=0.3)
        engine.start()
        engine.advance()
        engine.advance()
        clock.advance(0.5)
        timers.tick()
        assert navigator.pushes == ["DemoOverwhelmedInspect"]

    def test_resync_skipped_while_navigation_pending(self, manager, make_engine):
        manager.enter_profile(DemoProfile.STRUGGLING)
        engine = make_engine(navigate_delay=0.3)
        engine.start()
        engine.advance()
        # The old route is still rendered until the scheduled push lands
        engine.on_route_change("DemoStruggling")
        assert engine.current_index == 1


class TestTeardown:

    def test_teardown_releases_listeners_and_timers(self, manager, timers, make_engine):
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine()
        engine.start()
        engine.advance()
        assert engine.dispatcher.listener_count() == 1
        assert len(timers) > 0

        engine.teardown()
        assert engine.dispatcher.listener_count() == 0
        assert not engine.interceptor.attached
        assert not engine.tracker.tracking
        assert len(timers) == 0
        assert engine.state is TourState.EXITED


class TestPositionTracking:

    def test_highlighted_step_is_located(self, manager, clock, timers, make_engine):
        rect = Rect(10, 20, 100, 40)
        locator = StubLocator({'[data-tour="health-score"]': rect})
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine(locator=locator)
        engine.start()
        engine.advance()
        assert engine.tracker.rect == rect

        clock.advance(0.5)
        timers.tick()
        assert len(locator.queries) >= 2

    def test_missing_target_is_not_an_error(self, manager, make_engine):
        locator = StubLocator({})
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine(locator=locator)
        engine.start()
        engine.advance()
        assert engine.tracker.rect is None
        assert engine.tracker.tracking
        assert not engine.tracker.target_found

    def test_viewport_change_requeries_the_target(self, manager, make_engine):
        locator = StubLocator({})
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine(locator=locator)
        engine.start()
        engine.advance()
        queried = len(locator.queries)

        # Layout settled after a resize
        locator.rects['[data-tour="health-score"]'] = Rect(0, 300, 200, 80)
        engine.tracker.on_viewport_change()
        assert len(locator.queries) == queried + 1
        assert engine.tracker.rect == Rect(0, 300, 200, 80)
        assert engine.tracker.target_found

    def test_viewport_change_ignored_between_steps(self, manager, make_engine):
        locator = StubLocator({})
        manager.enter_profile(DemoProfile.HOMEOWNER)
        engine = make_engine(locator=locator)
        engine.start()
        assert not engine.tracker.tracking
        engine.tracker.on_viewport_change()
        assert locator.queries == []
        assert engine.tracker.highlights(Element("div", {"data-tour": "health-score"})) is False


def test_every_profile_has_a_script():
    for profile in DemoProfile:
        assert bool(script_for(profile)) is profile.is_active
