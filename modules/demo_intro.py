# Demo Intro Card
# One-time per-profile snapshot: where the demo property stands now and where the method takes it

from dataclasses import dataclass

from shared.logging import get_logger
from shared.profiles import DemoProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class DemoIntro:
    emoji: str
    label: str
    score: int
    future_score: str
    future_label: str
    tagline: str


DEMO_INTROS = {
    DemoProfile.STRUGGLING: DemoIntro("😰", "Overwhelmed", 62, "78+", "Stable", "One hidden problem away from disaster"),
    DemoProfile.IMPROVING: DemoIntro("💪", "On Track", 78, "85+", "Excellent", "Good start, room to optimize"),
    DemoProfile.EXCELLENT: DemoIntro("🏆", "Elite", 92, "95+", "Wealth Builder", "Top 5% of homeowners"),
    DemoProfile.INVESTOR: DemoIntro("📊", "Portfolio", 79, "85+", "Optimized", "3 properties • $1.2M in assets"),
}


def intro_for(profile):
    """Intro card for profile; the generic homeowner demo has none"""
    return DEMO_INTROS.get(DemoProfile.parse(profile))


class DemoIntroCard:
    """Shown once per profile per tab; the seen flag lives in the session store"""

    def __init__(self, manager):
        self._manager = manager

    @property
    def intro(self):
        return intro_for(self._manager.profile)

    @property
    def visible(self):
        if self.intro is None:
            return False
        return not self._manager.is_intro_seen()

    def close(self):
        self._manager.mark_intro_seen()
        logger.info("demo_intro_closed", profile=self._manager.profile.value)
