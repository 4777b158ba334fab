# Exit Funnel
# Conversion dialogs shown when a visitor finishes, closes or tries to leave the demo

from enum import Enum

from shared.config import settings
from shared.logging import get_logger
from shared.profiles import DemoProfile

logger = get_logger(__name__)


class ExitReason(str, Enum):
    COMPLETE = "complete"
    EXIT = "exit"
    EXIT_INTENT = "exit-intent"


TRANSFORMATION_CONTENT = {
    DemoProfile.STRUGGLING: {
        "current_state": "Reactive & Anxious",
        "current_score": 62,
        "future_state": "Proactive & Confident",
        "future_score": "78+",
        "pain_points": [
            "Constant worry about what's breaking next",
            "Emergency repairs draining your savings",
            "No idea what shape your systems are in",
        ],
        "transformation": [
            "Know exactly what needs attention",
            "Catch $50 problems before they become $5,000 disasters",
            "Sleep better knowing your home is protected",
        ],
        "headline": "Stop Living in Fear of Your Next Repair Bill",
        "subheadline": "In 6 months, go from reactive chaos to proactive confidence",
    },
    DemoProfile.IMPROVING: {
        "current_state": "Good Start",
        "current_score": 78,
        "future_state": "Top 15% of Owners",
        "future_score": "85+",
        "pain_points": [
            "Doing some maintenance but not sure what to prioritize",
            "Missing opportunities to extend system life",
            "Could be saving more with strategic timing",
        ],
        "transformation": [
            "Clear priorities based on real data",
            "Strategic preservation that saves thousands",
            "Confidence that you're doing it right",
        ],
        "headline": "You're Close to Excellence",
        "subheadline": "A few strategic moves put you in the top 15% of homeowners",
    },
    DemoProfile.EXCELLENT: {
        "current_state": "Elite Owner",
        "current_score": 92,
        "future_state": "Wealth Builder",
        "future_score": "95+",
        "pain_points": [
            "Want to maintain your high standards effortlessly",
            "Looking to maximize property appreciation",
            "Ready to scale to more properties",
        ],
        "transformation": [
            "Automated tracking keeps you at the top",
            "Your home appreciates faster than neighbors",
            "Ready to grow your real estate portfolio",
        ],
        "headline": "Protect Your Excellence",
        "subheadline": "Keep building wealth while others scramble with repairs",
    },
    DemoProfile.INVESTOR: {
        "current_state": "Portfolio Operator",
        "current_score": 79,
        "future_state": "Optimized Portfolio",
        "future_score": "85+",
        "pain_points": [
            "Hard to track multiple properties at once",
            "Reactive repairs eating into cash flow",
            "No clear view of portfolio health",
        ],
        "transformation": [
            "One dashboard for your entire portfolio",
            "Cut reactive repairs by 60%",
            "Maximize ROI with strategic maintenance",
        ],
        "headline": "Scale Smarter, Not Harder",
        "subheadline": "Bring every property to 80+ and watch your returns grow",
    },
}

TOUR_COMPLETE_HEADLINE = "You've Seen What's Possible"


def transformation_content(profile, reason=ExitReason.EXIT):
    """Dialog copy for profile; the generic homeowner reads like the improving owner"""
    profile = DemoProfile.parse(profile)
    content = dict(TRANSFORMATION_CONTENT.get(profile, TRANSFORMATION_CONTENT[DemoProfile.IMPROVING]))
    if ExitReason(reason) is ExitReason.COMPLETE:
        content["headline"] = TOUR_COMPLETE_HEADLINE
    return content


class ExitFunnel:
    """One exit dialog at a time; every state change goes through the session manager"""

    def __init__(self, manager, navigator):
        self._manager = manager
        self._navigator = navigator
        self.reason = None

    @property
    def is_open(self):
        return self.reason is not None

    def open(self, reason):
        reason = ExitReason(reason)
        if not self._manager.is_demo:
            logger.debug("funnel_ignored", reason=reason.value)
            return False
        # A finished tour outranks whatever dialog is already up
        if self.is_open and reason is not ExitReason.COMPLETE:
            return False
        self.reason = reason
        logger.info("funnel_opened", reason=reason.value, profile=self._manager.profile.value)
        return True

    def content(self):
        return transformation_content(self._manager.profile, self.reason or ExitReason.EXIT)

    def on_pointer_leave(self, client_y, is_desktop):
        """Exit-intent heuristic: pointer leaving through the top edge, desktop only, once per session"""
        if not settings.exit_intent_enabled or not is_desktop or client_y > 0:
            return False
        if not self._manager.is_demo or self._manager.is_exit_intent_shown() or self.is_open:
            return False
        self._manager.mark_exit_intent_shown()
        return self.open(ExitReason.EXIT_INTENT)

    def _close(self, action):
        logger.info("funnel_closed", reason=self.reason.value if self.reason else None, action=action)
        self.reason = None

    def continue_exploring(self):
        """Dismiss only; the session is untouched"""
        self._close("continue")

    def switch_persona(self):
        self._close("switch_persona")
        self._manager.switch_persona()

    def leave_demo(self):
        self._close("leave")
        self._manager.exit()

    def start_own_property(self):
        self._close("start_own_property")
        self._manager.clear()
        self._navigator.push("Waitlist")


class FloatingCTA:
    """Persistent call-to-action; minimising it has no effect on the session"""

    label = "Try My Property Free"

    def __init__(self):
        self.minimized = False

    def minimize(self):
        self.minimized = True

    def restore(self):
        self.minimized = False
