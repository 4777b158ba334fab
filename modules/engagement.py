# Engagement Popups
# Rate-limited conversion prompts triggered by what the visitor explores

import time
from dataclasses import dataclass, field

from modules.overlays import Overlay
from shared.config import settings
from shared.logging import get_logger

logger = get_logger(__name__)

TIME_CHECK_INTERVAL_SECONDS = 30

POPUP_CONTENT = {
    "health_score_viewed": {
        "headline": "Imagine Knowing Your Property's True Condition",
        "body": "You just saw how the Health Score gives you instant clarity on a property's condition. "
                "This demo property scores {score}. But what about YOUR property?",
        "question": "Would you like to see your own property's health score?",
    },
    "inspection_completed": {
        "headline": "You Just Completed an Inspection Like a Pro",
        "body": "That checklist you went through is designed to catch the small problems before they "
                "become expensive disasters. Imagine doing this for your own property.",
        "question": "Ready to inspect your own property with this system?",
    },
    "priorities_viewed": {
        "headline": "Never Wonder What to Fix First Again",
        "body": "You just saw how the system prioritizes tasks: Safety first, then ROI, then Comfort. "
                "No more guessing.",
        "question": "Want this priority system working for your property?",
    },
    "lifecycle_viewed": {
        "headline": "See Your Future Expenses Before They Hit",
        "body": "That timeline showing when systems need replacement is how smart property owners plan "
                "ahead and avoid surprise $10,000 bills.",
        "question": "Want to see when YOUR systems will need attention?",
    },
    "seasonal_viewed": {
        "headline": "Seasonal Maintenance Made Simple",
        "body": "Those checklists are customized for your climate zone. Each season has specific tasks "
                "that prevent problems year-round.",
        "question": "Ready to get seasonal checklists for your property?",
    },
    "time_engaged": {
        "headline": "You're Serious About Protecting Your Property",
        "body": "You've spent {minutes} minutes exploring what's possible. Your property deserves this level of care.",
        "question": "Ready to start protecting your own investment?",
    },
    "features_explored": {
        "headline": "You've Seen the Full Picture",
        "body": "You've explored {count} features and how the pieces work together. This is a complete "
                "system for property confidence.",
        "question": "Can you see this working for your property?",
    },
    "default": {
        "headline": "This Could Be Your Property",
        "body": "Everything you're seeing in this demo works the same way for your own property. "
                "And it's free to start.",
        "question": "Ready to protect your own investment?",
    },
}


class _SafeFormat(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def popup_content(trigger, context=None):
    content = dict(POPUP_CONTENT.get(trigger, POPUP_CONTENT["default"]))
    values = _SafeFormat({"score": 78})
    values.update(context or {})
    content["body"] = content["body"].format_map(values)
    return content


@dataclass
class Popup:
    trigger: str
    context: dict = field(default_factory=dict)

    @property
    def content(self):
        return popup_content(self.trigger, self.context)


class EngagementManager:
    """Popup gating; counters live in the session store through the state manager"""

    def __init__(self, manager, clock=time.time, session_start=None, arbiter=None):
        self._manager = manager
        self._arbiter = arbiter
        self._clock = clock
        self.session_start = clock() if session_start is None else session_start
        self.current = None

    def can_show(self, now=None):
        now = self._clock() if now is None else now
        if not self._manager.is_demo or self.current is not None:
            return False
        record = self._manager.engagement
        if record.dismissed or record.shown >= settings.engagement_max_popups:
            return False
        if record.last_shown is not None and now - record.last_shown < settings.engagement_min_gap_seconds:
            return False
        if now - self.session_start < settings.engagement_warmup_seconds:
            return False
        # A popup that would sit under another modal is not shown and not counted
        if self._arbiter is not None and not self._arbiter.can_present(Overlay.ENGAGEMENT_POPUP):
            return False
        return True

    def trigger(self, trigger, context=None):
        """Show the popup for trigger unless gated; each trigger fires at most once"""
        now = self._clock()
        if not self.can_show(now):
            return False
        record = self._manager.engagement
        if trigger in record.triggers_fired:
            return False
        self.current = Popup(trigger, dict(context or {}))
        self._manager.update_engagement(
            shown=record.shown + 1,
            last_shown=now,
            triggers_fired=record.triggers_fired + (trigger,),
        )
        logger.info("engagement_popup_shown", trigger=trigger, shown=record.shown + 1)
        return True

    def track_feature_view(self, feature_id):
        if not self._manager.is_demo:
            return
        record = self._manager.engagement
        if feature_id not in record.features_viewed:
            record = self._manager.update_engagement(features_viewed=record.features_viewed + (feature_id,))
        if len(record.features_viewed) >= settings.engagement_features_trigger:
            self.trigger("features_explored", {"count": len(record.features_viewed)})

    def check_time_engaged(self):
        engaged = self._clock() - self.session_start
        if engaged >= settings.engagement_time_trigger_seconds:
            self.trigger("time_engaged", {"minutes": int(engaged // 60)})

    def close(self):
        self.current = None

    def dismiss_all(self):
        self.current = None
        self._manager.update_engagement(dismissed=True)
        logger.info("engagement_popups_dismissed")
