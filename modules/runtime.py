# Demo Runtime
# Per-session object graph and the Streamlit implementations of the navigation and locator ports

import time
from dataclasses import dataclass, field
from typing import Optional

import streamlit as st

from modules.browser_events import BrowserEventRouter
from modules.demo_intro import DemoIntroCard
from modules.dev_portal import DevPortalSwitcher
from modules.dom_events import Element, EventDispatcher
from modules.engagement import TIME_CHECK_INTERVAL_SECONDS, EngagementManager
from modules.exit_funnel import ExitFunnel, FloatingCTA
from modules.onboarding_wizard import wizard_for
from modules.overlays import Overlay, OverlayArbiter
from modules.timers import TimerQueue
from modules.tour_engine import GuidedTourEngine, Rect
from shared.logging import get_logger
from shared.state_manager import SessionStateManager, is_owned_key
from shared.storage import StreamlitSessionStore

logger = get_logger(__name__)

RUNTIME_KEY = "demo_runtime"


class StreamlitNavigator:
    """Navigator port over st.navigation; the entry script performs the actual page switch"""

    PENDING_KEY = "nav:pending"
    CURRENT_KEY = "nav:current"

    def current(self):
        return st.session_state.get(self.CURRENT_KEY)

    def set_current(self, page_id):
        st.session_state[self.CURRENT_KEY] = page_id

    def pop_pending(self):
        return st.session_state.pop(self.PENDING_KEY, None)

    def push(self, page_id):
        st.session_state[self.PENDING_KEY] = page_id
        st.session_state[self.CURRENT_KEY] = page_id
        st.rerun()

    def hard_redirect(self, page_id):
        # Drop every runtime object and the persisted copy in the URL, so the next run starts clean
        StreamlitSessionStore().clear_url(is_owned_key)
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.session_state[self.PENDING_KEY] = page_id
        st.rerun()


class RenderedTargets:
    """Element locator fed by the tour targets rendered during the current run"""

    def __init__(self):
        self.root = Element("main")
        self._elements = []

    def begin_run(self):
        self._elements = []

    def register(self, tour_id, label="", tag="button"):
        element = self.root.child(tag, {"data-tour": tour_id}, text=label)
        self._elements.append(element)
        return element

    def query_rect(self, selector) -> Optional[Rect]:
        # Streamlit exposes no geometry; report render order as a notional position
        for order, element in enumerate(self._elements):
            if element.matches(selector):
                return Rect(0, order, 1, 1)
        return None


@dataclass
class DemoRuntime:
    manager: SessionStateManager
    navigator: object
    timers: TimerQueue
    dispatcher: EventDispatcher
    targets: RenderedTargets
    funnel: ExitFunnel
    engine: GuidedTourEngine
    engagement: EngagementManager
    arbiter: OverlayArbiter
    cta: FloatingCTA
    dev: DevPortalSwitcher
    intro: DemoIntroCard
    events: BrowserEventRouter
    store: object = None
    wizard: object = None
    _wizard_profile: object = field(default=None, repr=False)

    def on_run(self, route):
        """Per-run synchronisation; restore() already happened when the runtime was built"""
        self.targets.begin_run()
        self.engine.mount(route)
        self.engine.on_route_change(route)
        self.sync_wizard()
        self.refresh_overlays()

    def sync_wizard(self):
        if not self.manager.wizard_visible:
            self.wizard = None
            self._wizard_profile = None
            return
        if self.wizard is None or self._wizard_profile is not self.manager.profile or self.wizard.dismissed:
            self.wizard = wizard_for(self.manager.profile, self.manager.dismiss_wizard, self._wizard_shortcut)
            self._wizard_profile = self.manager.profile

    def _wizard_shortcut(self, page):
        self.navigator.push(self.manager.resolve(page))

    def refresh_overlays(self):
        arbiter = self.arbiter
        arbiter.set(Overlay.DEV_SWITCHER, self.dev.enabled)
        arbiter.set(Overlay.ONBOARDING_WIZARD, self.wizard is not None and not self.wizard.dismissed)
        arbiter.set(Overlay.DEMO_INTRO, self.intro.visible)
        arbiter.set(Overlay.EXIT_DIALOG, self.funnel.is_open)
        arbiter.set(Overlay.ENGAGEMENT_POPUP, self.engagement.current is not None)
        # Minimised tours keep their collapsed indicator
        arbiter.set(Overlay.TOUR_CARD, self.engine.active)
        arbiter.set(Overlay.FLOATING_CTA, self.manager.is_demo)

    def is_highlighted(self, element):
        """Whether the tour card currently points at element"""
        return self.engine.card_visible and self.engine.tracker.highlights(element)

    def on_browser_event(self, event):
        """Route an event from the page; True when the overlays need a fresh render"""
        changed = self.events.dispatch(event)
        if changed:
            self.refresh_overlays()
        return changed

    def persist(self):
        """Mirror the session store into the URL so a reload can restore it"""
        if isinstance(self.store, StreamlitSessionStore):
            self.store.sync_to_url(is_owned_key)

    def view_signature(self):
        """What the overlays render from; a change after a timer tick needs a rerun"""
        engine = self.engine
        return (
            self.manager.profile,
            engine.state,
            engine.current_index,
            self.funnel.reason,
            self.engagement.current.trigger if self.engagement.current else None,
            self.intro.visible,
        )


def build_runtime(store, navigator, clock=time.monotonic, wall_clock=time.time, catalog=None):
    """Wire one session's objects; does not restore"""
    manager = SessionStateManager(store, navigator, catalog=catalog)
    timers = TimerQueue(clock)
    dispatcher = EventDispatcher()
    targets = RenderedTargets()
    funnel = ExitFunnel(manager, navigator)
    engine = GuidedTourEngine(manager, navigator, timers, dispatcher=dispatcher, locator=targets, funnel=funnel)
    arbiter = OverlayArbiter()
    engagement = EngagementManager(manager, clock=wall_clock, arbiter=arbiter)
    timers.call_every(TIME_CHECK_INTERVAL_SECONDS, engagement.check_time_engaged, name="engagement_time_check")
    return DemoRuntime(
        manager=manager,
        navigator=navigator,
        timers=timers,
        dispatcher=dispatcher,
        targets=targets,
        funnel=funnel,
        engine=engine,
        engagement=engagement,
        arbiter=arbiter,
        cta=FloatingCTA(),
        dev=DevPortalSwitcher(manager, navigator),
        intro=DemoIntroCard(manager),
        events=BrowserEventRouter(funnel, engine.tracker),
        store=store,
    )


def get_runtime() -> DemoRuntime:
    """Session provider: builds the runtime once per session and restores state before anything reads it"""
    runtime = st.session_state.get(RUNTIME_KEY)
    if runtime is None:
        store = StreamlitSessionStore()
        # A reloaded tab has an empty session; its demo state is still in the URL
        hydrated = store.hydrate(is_owned_key)
        runtime = build_runtime(store, StreamlitNavigator())
        runtime.manager.restore()
        st.session_state[RUNTIME_KEY] = runtime
        logger.info("runtime_created", profile=runtime.manager.profile.value, hydrated=hydrated)
    return runtime
