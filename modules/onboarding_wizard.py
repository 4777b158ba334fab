# Onboarding Wizard
# First-run multi-screen walkthrough; homeowner-class and investor variants

from dataclasses import dataclass

from shared.logging import get_logger
from shared.profiles import DemoProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class WizardScreen:
    title: str
    subtitle: str = ""
    body: str = ""
    bullets: tuple = ()
    tip: str = ""


@dataclass(frozen=True)
class Shortcut:
    label: str
    page: str


HOMEOWNER_SCREENS = (
    WizardScreen(
        "Welcome to Your Demo Property! 🏡",
        "2847 Maple Grove Ln, Vancouver WA 98661",
        "This is a fully documented property using the 360° Method. "
        "Everything you see is real data showing how the system works.",
        bullets=(
            "16 major systems with ages, models and condition ratings",
            "Fall and spring seasonal inspections",
            "Maintenance history with costs and dates",
        ),
        tip="Demo mode is view-only. You can explore everything, but changes won't be saved.",
    ),
    WizardScreen(
        "Phase I: AWARE (Steps 1-3)",
        "Know Your Property",
        bullets=(
            "Baseline: document all major systems. This demo has 16 systems documented.",
            "Inspect: seasonal walkthroughs catch problems early.",
            "Track: all completed work auto-logs here.",
        ),
        tip="Try it: navigate to Baseline, Inspect, or Track to see each step in action.",
    ),
    WizardScreen(
        "Phase II: ACT (Steps 4-6)",
        "Fix Problems Smart",
        bullets=(
            "Prioritize: tasks with cost analysis and cascade risk scoring.",
            "Schedule: plan maintenance strategically across the seasons.",
            "Execute: how-to guides, completion tracking and photo documentation.",
        ),
        tip="Try it: go to Prioritize to see the ticket queue, or Execute to view detailed task guides.",
    ),
    WizardScreen(
        "Phase III: ADVANCE (Steps 7-9)",
        "Build Long-Term Value",
        bullets=(
            "Preserve: strategic interventions extend system lifespans.",
            "Upgrade: track improvements with budget and ROI.",
            "SCALE: 10-year wealth projections and equity tracking.",
        ),
        tip="Try it: explore Preserve for lifecycle forecasts, or SCALE for financial projections.",
    ),
    WizardScreen(
        "Ready to Explore! 🎉",
        "Navigate anywhere using the sidebar",
        "Impressed? Join our waitlist to be notified when you can track your own property.",
    ),
)

INVESTOR_SCREENS = (
    WizardScreen(
        "Welcome to Your Portfolio Command Center",
        body="You're viewing a demo investor portfolio with 3 properties (7 rental units total).",
        bullets=(
            "1247 Maple Street - Duplex (2 units)",
            "3842 Oak Ridge Drive - Single Family Rental",
            "891 Cedar Court - 4-Plex (4 units)",
        ),
    ),
    WizardScreen(
        "Portfolio Health at a Glance",
        body="The dashboard shows your entire portfolio's performance, health scores, and cash flow.",
        bullets=(
            "Total equity: $367K across 3 properties",
            "Monthly net cash flow: $3,170",
            "Average health score: 81/100",
            "Prevented disasters: $18,400 saved",
        ),
    ),
    WizardScreen(
        "Multi-Property Task Management",
        body="Track maintenance across all properties. Filter by building, unit, or see everything at once.",
        bullets=(
            "6 active tasks across your portfolio",
            "Unit-level task tagging (e.g., 'Unit 3B')",
            "Building-wide vs per-unit task types",
            "Prioritize by cascade risk and ROI",
        ),
    ),
    WizardScreen(
        "Strategic Portfolio Intelligence (SCALE)",
        body="Get recommendations for when to hold, sell, refinance, or acquire new properties.",
        bullets=(
            "10-year wealth projection",
            "Property-by-property strategic analysis",
            "Capital allocation optimizer",
            "Acquisition opportunity alerts",
        ),
    ),
)


class OnboardingWizard:
    """Linear screen sequence; dismissal is reported through on_dismiss, never persisted here"""

    def __init__(self, variant, screens, on_dismiss, shortcut=None, on_shortcut=None):
        if not screens:
            raise ValueError("A wizard needs at least one screen")
        self.variant = variant
        self.screens = tuple(screens)
        self.shortcut = shortcut
        self._on_dismiss = on_dismiss
        self._on_shortcut = on_shortcut
        self.index = 0
        self.dismissed = False

    @property
    def screen(self):
        return self.screens[self.index]

    @property
    def total(self):
        return len(self.screens)

    @property
    def is_first(self):
        return self.index == 0

    @property
    def is_last(self):
        return self.index == len(self.screens) - 1

    @property
    def progress(self):
        return (self.index + 1) / len(self.screens)

    @property
    def shortcut_available(self):
        return self.shortcut is not None and self.is_last and not self.dismissed

    def next(self):
        if self.dismissed:
            return
        if self.is_last:
            self._dismiss("finished")
            return
        self.index += 1

    def back(self):
        if not self.dismissed and self.index > 0:
            self.index -= 1

    def skip(self):
        self._dismiss("skipped")

    def take_shortcut(self):
        """Dismiss and hand the shortcut page to on_shortcut; only offered on the last screen"""
        if not self.shortcut_available:
            return None
        self._dismiss("shortcut")
        logger.info("wizard_shortcut", variant=self.variant, page=self.shortcut.page)
        if self._on_shortcut is not None:
            self._on_shortcut(self.shortcut.page)
        return self.shortcut.page

    def _dismiss(self, how):
        if self.dismissed:
            return
        self.dismissed = True
        logger.info("wizard_closed", variant=self.variant, how=how, screen=self.index)
        self._on_dismiss()


def wizard_for(profile, on_dismiss, on_shortcut=None):
    """Pick the wizard variant for profile; None outside a demo"""
    profile = DemoProfile.parse(profile)
    if profile is DemoProfile.INVESTOR:
        return OnboardingWizard(
            "investor", INVESTOR_SCREENS, on_dismiss,
            shortcut=Shortcut("Go to SCALE", "Scale"), on_shortcut=on_shortcut,
        )
    if profile.is_homeowner_class:
        return OnboardingWizard(
            "homeowner", HOMEOWNER_SCREENS, on_dismiss,
            shortcut=Shortcut("Join Waitlist", "Waitlist"), on_shortcut=on_shortcut,
        )
    return None
