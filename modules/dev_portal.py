# Developer Portal Switcher
# Operator-only shortcut into any persona and page, through the session manager only

from dataclasses import dataclass

from shared.config import settings
from shared.logging import get_logger
from shared.navigation import CANONICAL_PAGES, ENTRY_PAGES
from shared.profiles import DemoProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class Portal:
    key: str
    name: str
    profile: DemoProfile
    pages: tuple


PORTALS = (
    Portal("homeowner", "🏠 Homeowner Demo", DemoProfile.HOMEOWNER, CANONICAL_PAGES),
    Portal("struggling", "🔴 Struggling Owner", DemoProfile.STRUGGLING, CANONICAL_PAGES),
    Portal("improving", "🟡 Improving Owner", DemoProfile.IMPROVING, CANONICAL_PAGES),
    Portal("excellent", "🟢 Excellent Owner", DemoProfile.EXCELLENT, CANONICAL_PAGES),
    Portal("investor", "🏢 Investor Portfolio", DemoProfile.INVESTOR, CANONICAL_PAGES),
    Portal("entry", "🎭 Entry Pages", DemoProfile.NONE, ENTRY_PAGES),
)


class DevPortalSwitcher:
    """Second caller of the session manager; uses the same entry points as the visitor flows"""

    def __init__(self, manager, navigator, enabled=None):
        self._manager = manager
        self._navigator = navigator
        self.enabled = settings.dev_tools_enabled if enabled is None else enabled
        self.expanded = False

    def toggle(self):
        if self.enabled:
            self.expanded = not self.expanded

    def portals(self):
        return PORTALS if self.enabled else ()

    def jump(self, profile, canonical_page):
        """Enter profile (or leave the demo for none) and push its variant of canonical_page"""
        if not self.enabled:
            logger.warning("dev_jump_disabled", profile=str(profile), page=canonical_page)
            return None
        profile = DemoProfile.parse(profile)
        if not profile.is_active:
            if self._manager.is_demo:
                self._manager.clear()
        elif self._manager.profile is not profile:
            self._manager.enter_profile(profile)

        target = self._manager.resolve(canonical_page)
        logger.info("dev_jump", profile=profile.value, page=canonical_page, target=target)
        self._navigator.push(target)
        return target
