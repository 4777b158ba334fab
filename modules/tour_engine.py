# Guided Tour Engine
# Step state machine that drives navigation, intercepts clicks and hands off to the exit funnel

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from modules.dom_events import EventDispatcher
from modules.exit_funnel import ExitReason
from modules.tour_scripts import script_for
from shared.config import settings
from shared.logging import get_logger
from shared.profiles import DemoProfile

logger = get_logger(__name__)


class TourState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    MINIMIZED = "minimized"
    COMPLETED = "completed"
    EXITED = "exited"


@dataclass
class TourProgress:
    """Transient step pointer; never persisted"""

    current_index: int = 0
    started: bool = False
    minimized: bool = False


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


class ElementLocator(Protocol):
    def query_rect(self, selector: str) -> Optional[Rect]:
        """Screen rectangle of the first element matching selector, or None."""


class ClickInterceptor:
    """Capturing click listener bound to one step's selector between attach() and detach()"""

    def __init__(self, dispatcher, on_match):
        self._dispatcher = dispatcher
        self._on_match = on_match
        self._listener = None
        self.selector = None

    @property
    def attached(self):
        return self._listener is not None and self._listener.active

    def attach(self, selector):
        self.detach()
        self.selector = selector
        self._listener = self._dispatcher.add_listener(self._handle, capture=True)
        logger.debug("click_interceptor_attached", selector=selector)

    def detach(self):
        if self._listener is not None:
            self._listener.remove()
            logger.debug("click_interceptor_detached", selector=self.selector)
        self._listener = None
        self.selector = None

    def _handle(self, event):
        selector = self.selector
        if selector is None or event.target is None:
            return
        if event.target.closest(selector) is None:
            return
        event.prevent_default()
        event.stop_propagation()
        logger.info("click_intercepted", selector=selector)
        self._on_match()


class PositionTracker:
    """Polls the screen position of a highlighted element while one step is active"""

    def __init__(self, timers, locator=None, interval=None):
        self._timers = timers
        self._locator = locator
        self._interval = interval or settings.position_poll_seconds
        self._handle = None
        self.selector = None
        self.rect = None

    @property
    def tracking(self):
        return self._handle is not None and self._handle.active

    def start(self, selector):
        self.stop()
        self.selector = selector
        self.refresh()
        self._handle = self._timers.call_every(self._interval, self.refresh, name="position_poll")

    def stop(self):
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self.selector = None
        self.rect = None

    def refresh(self):
        if self.selector is None or self._locator is None:
            return
        # A missing target is normal while the page is still laying out
        self.rect = self._locator.query_rect(self.selector)

    def on_viewport_change(self):
        """Resize/scroll hook"""
        if self.tracking:
            self.refresh()

    def highlights(self, element):
        """Whether element is the one the active step points at"""
        return self.tracking and element.matches(self.selector)

    @property
    def target_found(self):
        return self.rect is not None


class GuidedTourEngine:
    """Drives one profile's tour script over the session state manager"""

    def __init__(self, manager, navigator, timers, dispatcher=None, locator=None,
                 funnel=None, navigate_delay=None, poll_interval=None):
        self._manager = manager
        self._navigator = navigator
        self._timers = timers
        self.dispatcher = dispatcher or EventDispatcher()
        self.funnel = funnel
        self._navigate_delay = settings.navigate_delay_seconds if navigate_delay is None else navigate_delay
        self.interceptor = ClickInterceptor(self.dispatcher, self._on_target_clicked)
        self.tracker = PositionTracker(timers, locator, poll_interval)

        self.progress = TourProgress()
        self.state = TourState.NOT_STARTED
        self._profile = DemoProfile.NONE
        self._mounted = False
        self._auto_handle = None
        self._nav_handle = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def profile(self):
        return self._profile

    @property
    def script(self):
        return script_for(self._profile)

    @property
    def current_index(self):
        return self.progress.current_index

    @property
    def current_step(self):
        script = self.script
        if not script:
            return None
        return script[self.progress.current_index]

    @property
    def step_count(self):
        """Number of renderable steps; the completion step is excluded"""
        return max(0, len(self.script) - 1)

    @property
    def active(self):
        return self.state in (TourState.RUNNING, TourState.MINIMIZED)

    @property
    def card_visible(self):
        return self.state is TourState.RUNNING

    @property
    def shows_start_affordance(self):
        return self._profile.is_active and self.state in (TourState.NOT_STARTED, TourState.COMPLETED)

    @property
    def navigation_pending(self):
        return self._nav_handle is not None and self._nav_handle.active

    def page_for(self, step):
        return self._manager.resolve(step.bound_page)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def sync_profile(self):
        """Reset when the session's profile changed since the last run"""
        profile = self._manager.profile
        if profile is self._profile:
            return False
        self._leave_step()
        self._profile = profile
        self.progress = TourProgress()
        self.state = TourState.NOT_STARTED
        self._mounted = False
        logger.debug("tour_profile_changed", profile=profile.value)
        return True

    def mount(self, route=None):
        """First mount for a profile; auto-begins only if this profile's tour was never seen"""
        self.sync_profile()
        if self._mounted:
            return
        self._mounted = True
        if not self._profile.is_active or not self.script:
            return
        if self._manager.is_tour_seen():
            self.state = TourState.NOT_STARTED
            logger.info("tour_mounted", profile=self._profile.value, auto_start=False)
            return

        self.progress = TourProgress(current_index=0, started=True)
        self.state = TourState.RUNNING
        if not self._manager.visited_steps:
            self._manager.mark_step_visited(0)
        self._enter_step()
        logger.info("tour_mounted", profile=self._profile.value, auto_start=True)
        if route is not None:
            self.on_route_change(route)

    def teardown(self):
        self._leave_step()
        if self.state is not TourState.NOT_STARTED:
            self.state = TourState.EXITED
        self._mounted = False
        logger.debug("tour_teardown", profile=self._profile.value)

    # ------------------------------------------------------------------
    # Step control
    # ------------------------------------------------------------------

    def start(self):
        """Begin (or restart) at step 0 and navigate to its page"""
        self.sync_profile()
        if not self.script:
            logger.warning("tour_start_ignored", profile=self._profile.value)
            return
        self._leave_step()
        self._mounted = True
        self.progress = TourProgress(current_index=0, started=True)
        self.state = TourState.RUNNING
        self._manager.set_tour_seen(False)
        self._manager.reset_visited_steps([0])
        self._enter_step()
        logger.info("tour_started", profile=self._profile.value)
        self._schedule_navigation()

    def advance(self):
        if not self.active:
            return
        last = len(self.script) - 1
        if self.progress.current_index >= last - 1:
            self._complete()
            return
        self._go_to(self.progress.current_index + 1)
        logger.info("tour_advanced", profile=self._profile.value, index=self.progress.current_index)

    def retreat(self):
        if not self.active or self.progress.current_index <= 0:
            return
        self._go_to(self.progress.current_index - 1)
        logger.info("tour_retreated", profile=self._profile.value, index=self.progress.current_index)

    def jump_to(self, index):
        if not self.active:
            return
        last = len(self.script) - 1
        if index < 0 or index > last:
            logger.warning("tour_jump_out_of_range", index=index, last=last)
            return
        if index == last:
            self._complete()
            return
        if index == self.progress.current_index:
            return
        self._go_to(index)
        logger.info("tour_jumped", profile=self._profile.value, index=index)

    def minimize(self):
        if self.state is TourState.RUNNING:
            self.state = TourState.MINIMIZED
            self.progress.minimized = True
            logger.debug("tour_minimized", index=self.progress.current_index)

    def expand(self):
        if self.state is TourState.MINIMIZED:
            self.state = TourState.RUNNING
            self.progress.minimized = False
            logger.debug("tour_expanded", index=self.progress.current_index)

    def close(self):
        """Explicit close: the tour minimises and the exit dialog takes over"""
        if not self.active:
            return
        self.minimize()
        logger.info("tour_closed", profile=self._profile.value, index=self.progress.current_index)
        self._open_funnel(ExitReason.EXIT)

    def on_route_change(self, route):
        """Resynchronise the step pointer when the visitor navigated on their own"""
        if not self.active or route is None:
            return
        # The route lags behind a debounced navigation we scheduled ourselves
        if self.navigation_pending:
            return
        step = self.current_step
        if step is not None and self.page_for(step) == route:
            return

        current = self.progress.current_index
        candidates = [
            i for i, s in enumerate(self.script)
            if not s.completion and self.page_for(s) == route
        ]
        if not candidates:
            return
        # Nearest step wins; on a tie the later step
        target = min(candidates, key=lambda i: (abs(i - current), -i))
        self._leave_step()
        self.progress.current_index = target
        self._manager.mark_step_visited(target)
        self._enter_step()
        logger.info("tour_resynced", route=route, previous=current, index=target)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _go_to(self, index):
        self._leave_step()
        self.progress.current_index = index
        self._manager.mark_step_visited(index)
        self._enter_step()
        self._schedule_navigation()

    def _complete(self):
        self._leave_step()
        self.state = TourState.COMPLETED
        self.progress.minimized = False
        self._manager.set_tour_seen(True)
        logger.info("tour_completed", profile=self._profile.value, index=self.progress.current_index)
        self._open_funnel(ExitReason.COMPLETE)

    def _open_funnel(self, reason):
        if self.funnel is not None:
            self.funnel.open(reason)

    def _enter_step(self):
        step = self.current_step
        if step is None or step.completion:
            return
        if step.click_to_advance and step.bound_selector:
            self.interceptor.attach(step.bound_selector)
        if step.auto_advance_delay:
            self._auto_handle = self._timers.call_later(
                step.auto_advance_delay, self.advance, name=f"auto_advance:{step.id}"
            )
        if step.bound_selector and step.highlight:
            self.tracker.start(step.bound_selector)

    def _leave_step(self):
        self.interceptor.detach()
        self.tracker.stop()
        if self._auto_handle is not None:
            self._auto_handle.cancel()
            self._auto_handle = None
        if self._nav_handle is not None:
            self._nav_handle.cancel()
            self._nav_handle = None

    def _schedule_navigation(self):
        step = self.current_step
        if step is None:
            return
        if self._navigate_delay <= 0:
            self._navigate_to(step)
            return
        self._nav_handle = self._timers.call_later(
            self._navigate_delay, lambda: self._navigate_to(step), name=f"navigate:{step.id}"
        )

    def _navigate_to(self, step):
        self._nav_handle = None
        target = self.page_for(step)
        if self._navigator.current() == target:
            return
        logger.debug("tour_navigate", step=step.id, page=target)
        self._navigator.push(target)

    def _on_target_clicked(self):
        self.advance()
