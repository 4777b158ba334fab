# Overlay Arbiter
# Decides which floating surfaces render so two conversion dialogs never stack

from enum import Enum

from shared.logging import get_logger

logger = get_logger(__name__)


class Overlay(str, Enum):
    DEV_SWITCHER = "dev_switcher"
    ONBOARDING_WIZARD = "onboarding_wizard"
    DEMO_INTRO = "demo_intro"
    EXIT_DIALOG = "exit_dialog"
    ENGAGEMENT_POPUP = "engagement_popup"
    TOUR_CARD = "tour_card"
    FLOATING_CTA = "floating_cta"


# (priority, modal)
OVERLAY_RULES = {
    Overlay.DEV_SWITCHER: (100, False),
    Overlay.ONBOARDING_WIZARD: (90, True),
    Overlay.DEMO_INTRO: (85, True),
    Overlay.EXIT_DIALOG: (80, True),
    Overlay.ENGAGEMENT_POPUP: (70, True),
    Overlay.TOUR_CARD: (50, False),
    Overlay.FLOATING_CTA: (10, False),
}

# Stays on screen even under a modal
ALWAYS_VISIBLE = frozenset({Overlay.DEV_SWITCHER})


class OverlayArbiter:
    """Tracks requested overlays and resolves the visible set by priority"""

    def __init__(self):
        self._requested = set()

    def request(self, overlay):
        self._requested.add(Overlay(overlay))

    def release(self, overlay):
        self._requested.discard(Overlay(overlay))

    def set(self, overlay, wanted):
        if wanted:
            self.request(overlay)
        else:
            self.release(overlay)

    @property
    def requested(self):
        return frozenset(self._requested)

    def top_modal(self):
        modals = [o for o in self._requested if OVERLAY_RULES[o][1]]
        if not modals:
            return None
        return max(modals, key=lambda o: OVERLAY_RULES[o][0])

    def visible(self):
        """Visible overlays, highest priority first"""
        modal = self.top_modal()
        shown = []
        for overlay in self._requested:
            if overlay is modal:
                shown.append(overlay)
            elif modal is None and not OVERLAY_RULES[overlay][1]:
                shown.append(overlay)
            elif overlay in ALWAYS_VISIBLE:
                shown.append(overlay)
        return sorted(shown, key=lambda o: OVERLAY_RULES[o][0], reverse=True)

    def can_present(self, overlay):
        """Whether a modal requested now would be topmost"""
        overlay = Overlay(overlay)
        priority, modal = OVERLAY_RULES[overlay]
        current = self.top_modal()
        if current is None or current is overlay:
            return True
        return modal and priority > OVERLAY_RULES[current][0]
