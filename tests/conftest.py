"""Shared fixtures: in-memory store, recording navigator and a controllable clock."""

from datetime import date

import pytest

from modules.demo_catalog import ProfileCatalog
from modules.exit_funnel import ExitFunnel
from modules.timers import TimerQueue
from modules.tour_engine import GuidedTourEngine
from shared.state_manager import SessionStateManager
from shared.storage import MemoryStore

TODAY = date(2025, 10, 15)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RecordingNavigator:
    """Navigator that records pushes and hard redirects instead of rendering pages."""

    def __init__(self, current=None):
        self.route = current
        self.pushes = []
        self.hard_redirects = []

    def push(self, page_id):
        self.pushes.append(page_id)
        self.route = page_id

    def hard_redirect(self, page_id):
        self.hard_redirects.append(page_id)
        self.route = page_id

    def current(self):
        return self.route


class FixedDateCatalog(ProfileCatalog):
    """Catalog pinned to one 'today' so date-relative fields are deterministic."""

    def __init__(self, today=TODAY):
        super().__init__()
        self.today = today

    def load(self, profile, today=None):
        return super().load(profile, today or self.today)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def navigator():
    return RecordingNavigator(current="Welcome")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return FixedDateCatalog()


@pytest.fixture
def manager(store, navigator, catalog):
    manager = SessionStateManager(store, navigator, catalog=catalog)
    manager.restore()
    return manager


@pytest.fixture
def timers(clock):
    return TimerQueue(clock)


@pytest.fixture
def funnel(manager, navigator):
    return ExitFunnel(manager, navigator)


@pytest.fixture
def make_engine(manager, navigator, timers, funnel):
    """Build a tour engine; navigation is immediate unless a delay is given."""

    def factory(navigate_delay=0, locator=None):
        return GuidedTourEngine(
            manager,
            navigator,
            timers,
            locator=locator,
            funnel=funnel,
            navigate_delay=navigate_delay,
            poll_interval=0.1,
        )

    return factory
