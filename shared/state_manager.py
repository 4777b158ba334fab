# Shared State Manager for the Demo Experience
# Single owner of "are we in a demo, which persona, what has the visitor seen"

import json
from dataclasses import dataclass, field, replace
from typing import List, Optional

from shared import navigation
from shared.logging import get_logger
from shared.profiles import ACTIVE_PROFILES, DemoProfile, resolve_profile

logger = get_logger(__name__)

# Persisted keys
KEY_MODE = "demoMode"
KEY_WIZARD_SEEN = "demoWizardSeen"
KEY_VISITED_STEPS = "demoVisitedSteps"
KEY_EXIT_INTENT_SHOWN = "demoExitIntentShown"
TOUR_KEY_PREFIX = "demoTour_"
INTRO_KEY_PREFIX = "demoIntro_"

KEY_POPUPS_DISMISSED = "demo_popups_dismissed"
KEY_POPUPS_SHOWN = "demo_popups_shown"
KEY_POPUP_LAST_SHOWN = "demo_popup_last_shown"
KEY_TRIGGERS_FIRED = "demo_triggers_fired"
KEY_FEATURES_VIEWED = "demo_features_viewed"

ENGAGEMENT_KEYS = (
    KEY_POPUPS_DISMISSED,
    KEY_POPUPS_SHOWN,
    KEY_POPUP_LAST_SHOWN,
    KEY_TRIGGERS_FIRED,
    KEY_FEATURES_VIEWED,
)


def tour_key(profile):
    return f"{TOUR_KEY_PREFIX}{DemoProfile.parse(profile).value}"


def intro_key(profile):
    return f"{INTRO_KEY_PREFIX}{DemoProfile.parse(profile).value}"


def owned_keys():
    """Every store key this subsystem may write"""
    keys = [KEY_MODE, KEY_WIZARD_SEEN, KEY_VISITED_STEPS, KEY_EXIT_INTENT_SHOWN]
    keys.extend(ENGAGEMENT_KEYS)
    for profile in ACTIVE_PROFILES:
        keys.append(tour_key(profile))
        keys.append(intro_key(profile))
    return keys


def is_owned_key(key):
    """Whether key belongs to the demo, including flags of profiles no longer known"""
    key = str(key)
    return key in owned_keys() or key.startswith(TOUR_KEY_PREFIX) or key.startswith(INTRO_KEY_PREFIX)


def _as_bool(raw):
    return str(raw).strip().lower() == "true" if raw is not None else False


def _as_bool_str(value):
    return "true" if value else "false"


def _as_int_list(raw, key):
    """Decode a JSON array of ints; anything else degrades to an empty list"""
    if raw is None:
        return []
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("corrupted_store_value", key=key, value=raw)
        return []
    if not isinstance(decoded, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in decoded):
        logger.warning("corrupted_store_value", key=key, value=raw)
        return []
    ordered = []
    for index in decoded:
        if index not in ordered:
            ordered.append(index)
    return ordered


def _as_str_list(raw, key):
    if raw is None:
        return []
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("corrupted_store_value", key=key, value=raw)
        return []
    if not isinstance(decoded, list):
        logger.warning("corrupted_store_value", key=key, value=raw)
        return []
    return [str(item) for item in decoded]


@dataclass
class SessionState:
    """The persisted/restorable record of one visitor's demo"""

    profile: DemoProfile = DemoProfile.NONE
    wizard_seen: bool = False
    visited_steps: List[int] = field(default_factory=list)
    tour_seen: dict = field(default_factory=dict)

    @property
    def is_demo(self):
        return self.profile.is_active


@dataclass(frozen=True)
class EngagementRecord:
    """Conversion popup bookkeeping, persisted for the tab's lifetime"""

    dismissed: bool = False
    shown: int = 0
    last_shown: Optional[float] = None
    triggers_fired: tuple = ()
    features_viewed: tuple = ()


class SessionStateManager:
    """Manages demo state across pages; the only writer of the persistence port"""

    def __init__(self, store, navigator=None, catalog=None):
        if catalog is None:
            from modules.demo_catalog import catalog as default_catalog
            catalog = default_catalog
        self._store = store
        self._navigator = navigator
        self._catalog = catalog
        self._restored = False
        self.state = SessionState()
        self.dataset = None
        self.wizard_visible = False

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def profile(self) -> DemoProfile:
        return self.state.profile

    @property
    def is_demo(self) -> bool:
        return self.state.is_demo

    @property
    def visited_steps(self):
        return list(self.state.visited_steps)

    def resolve(self, canonical_page):
        """Page identifier for canonical_page under the active profile"""
        return navigation.resolve(canonical_page, self.state.profile)

    def snapshot(self):
        """A copy of the current SessionState, safe to compare later"""
        return replace(
            self.state,
            visited_steps=list(self.state.visited_steps),
            tour_seen=dict(self.state.tour_seen),
        )

    # ------------------------------------------------------------------
    # Entry and restore
    # ------------------------------------------------------------------

    def enter(self, persona_family, score_level=None):
        """Enter a demo from a persona family plus optional homeowner score level"""
        profile = resolve_profile(persona_family, score_level)
        if not profile.is_active:
            logger.warning("demo_enter_ignored", persona_family=persona_family, score_level=score_level)
            return
        self.enter_profile(profile)

    def enter_profile(self, profile):
        """Enter a concrete profile; loads a fresh dataset and writes the mode key"""
        profile = DemoProfile.parse(profile)
        if not profile.is_active:
            logger.warning("demo_enter_ignored", profile=profile.value)
            return

        previous = self.state.profile
        if not previous.is_active:
            previous = DemoProfile.parse(self._store.get(KEY_MODE))

        # Dataset and profile change together
        self.dataset = self._catalog.load(profile)
        self.state.profile = profile
        self._store.set(KEY_MODE, profile.value)

        if previous is not profile:
            self.state.visited_steps = []
            self._store.remove(KEY_VISITED_STEPS)
        else:
            self.state.visited_steps = _as_int_list(self._store.get(KEY_VISITED_STEPS), KEY_VISITED_STEPS)

        self.state.tour_seen = self._read_tour_flags()

        wizard_flag = self._store.get(KEY_WIZARD_SEEN)
        self.state.wizard_seen = _as_bool(wizard_flag)
        self.wizard_visible = wizard_flag is None

        # Entering counts as initialised so a later restore() cannot clobber it
        self._restored = True
        logger.info(
            "demo_entered",
            profile=profile.value,
            previous=previous.value,
            show_wizard=self.wizard_visible,
        )

    def restore(self):
        """Reload persisted state once per session; later calls are no-ops"""
        if self._restored:
            logger.debug("session_restore_skipped")
            return
        self._restored = True

        raw_mode = self._store.get(KEY_MODE)
        profile = DemoProfile.parse(raw_mode)
        if not profile.is_active:
            self.state = SessionState()
            self.dataset = None
            logger.info("session_restored", profile=DemoProfile.NONE.value, raw_mode=raw_mode)
            return

        self.dataset = self._catalog.load(profile)
        self.state = SessionState(
            profile=profile,
            wizard_seen=_as_bool(self._store.get(KEY_WIZARD_SEEN)),
            visited_steps=_as_int_list(self._store.get(KEY_VISITED_STEPS), KEY_VISITED_STEPS),
            tour_seen=self._read_tour_flags(),
        )
        self.wizard_visible = False
        logger.info(
            "session_restored",
            profile=profile.value,
            visited_steps=self.state.visited_steps,
            wizard_seen=self.state.wizard_seen,
        )

    def _read_tour_flags(self):
        return {p: _as_bool(self._store.get(tour_key(p))) for p in ACTIVE_PROFILES}

    # ------------------------------------------------------------------
    # Visited steps
    # ------------------------------------------------------------------

    def mark_step_visited(self, index):
        """Add index to the visited set; a repeat is a no-op"""
        index = int(index)
        if index in self.state.visited_steps:
            return
        self.state.visited_steps.append(index)
        self._store.set(KEY_VISITED_STEPS, json.dumps(self.state.visited_steps))
        logger.debug("step_visited", index=index, visited=self.state.visited_steps)

    def reset_visited_steps(self, initial=None):
        self.state.visited_steps = list(initial or [])
        self._store.set(KEY_VISITED_STEPS, json.dumps(self.state.visited_steps))
        logger.debug("visited_steps_reset", visited=self.state.visited_steps)

    # ------------------------------------------------------------------
    # Wizard
    # ------------------------------------------------------------------

    def dismiss_wizard(self):
        self.state.wizard_seen = True
        self.wizard_visible = False
        self._store.set(KEY_WIZARD_SEEN, _as_bool_str(True))
        logger.info("wizard_dismissed", profile=self.state.profile.value)

    def show_wizard(self):
        """Reopen the wizard on request; the seen flag is left as is"""
        if not self.is_demo:
            return
        self.wizard_visible = True
        logger.info("wizard_reopened", profile=self.state.profile.value)

    # ------------------------------------------------------------------
    # Per-profile flags
    # ------------------------------------------------------------------

    def is_tour_seen(self, profile=None):
        profile = self.state.profile if profile is None else DemoProfile.parse(profile)
        if not profile.is_active:
            return False
        return self.state.tour_seen.get(profile, False)

    def set_tour_seen(self, seen, profile=None):
        profile = self.state.profile if profile is None else DemoProfile.parse(profile)
        if not profile.is_active:
            return
        self.state.tour_seen[profile] = bool(seen)
        if seen:
            self._store.set(tour_key(profile), _as_bool_str(True))
        else:
            self._store.remove(tour_key(profile))
        logger.info("tour_seen_updated", profile=profile.value, seen=bool(seen))

    def is_intro_seen(self, profile=None):
        profile = self.state.profile if profile is None else DemoProfile.parse(profile)
        if not profile.is_active:
            return False
        return _as_bool(self._store.get(intro_key(profile)))

    def mark_intro_seen(self, profile=None):
        profile = self.state.profile if profile is None else DemoProfile.parse(profile)
        if not profile.is_active:
            return
        self._store.set(intro_key(profile), _as_bool_str(True))
        logger.debug("intro_seen", profile=profile.value)

    # ------------------------------------------------------------------
    # Exit intent
    # ------------------------------------------------------------------

    def is_exit_intent_shown(self):
        return _as_bool(self._store.get(KEY_EXIT_INTENT_SHOWN))

    def mark_exit_intent_shown(self):
        self._store.set(KEY_EXIT_INTENT_SHOWN, _as_bool_str(True))
        logger.debug("exit_intent_marked")

    # ------------------------------------------------------------------
    # Engagement popups
    # ------------------------------------------------------------------

    @property
    def engagement(self) -> EngagementRecord:
        raw_last = self._store.get(KEY_POPUP_LAST_SHOWN)
        try:
            last_shown = float(raw_last) if raw_last is not None else None
        except ValueError:
            logger.warning("corrupted_store_value", key=KEY_POPUP_LAST_SHOWN, value=raw_last)
            last_shown = None
        raw_shown = self._store.get(KEY_POPUPS_SHOWN)
        try:
            shown = int(raw_shown) if raw_shown is not None else 0
        except ValueError:
            logger.warning("corrupted_store_value", key=KEY_POPUPS_SHOWN, value=raw_shown)
            shown = 0
        return EngagementRecord(
            dismissed=_as_bool(self._store.get(KEY_POPUPS_DISMISSED)),
            shown=shown,
            last_shown=last_shown,
            triggers_fired=tuple(_as_str_list(self._store.get(KEY_TRIGGERS_FIRED), KEY_TRIGGERS_FIRED)),
            features_viewed=tuple(_as_str_list(self._store.get(KEY_FEATURES_VIEWED), KEY_FEATURES_VIEWED)),
        )

    def update_engagement(self, **changes) -> EngagementRecord:
        """Apply field changes to the engagement record and persist the changed keys"""
        record = replace(self.engagement, **changes)
        if "dismissed" in changes:
            self._store.set(KEY_POPUPS_DISMISSED, _as_bool_str(record.dismissed))
        if "shown" in changes:
            self._store.set(KEY_POPUPS_SHOWN, str(record.shown))
        if "last_shown" in changes and record.last_shown is not None:
            self._store.set(KEY_POPUP_LAST_SHOWN, repr(float(record.last_shown)))
        if "triggers_fired" in changes:
            self._store.set(KEY_TRIGGERS_FIRED, json.dumps(list(record.triggers_fired)))
        if "features_viewed" in changes:
            self._store.set(KEY_FEATURES_VIEWED, json.dumps(list(record.features_viewed)))
        logger.debug("engagement_updated", fields=sorted(changes))
        return record

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def clear(self):
        """Remove every persisted key of the demo and reset to profile none; no navigation"""
        previous = self.state.profile
        self.state = SessionState()
        self.dataset = None
        self.wizard_visible = False

        for key in owned_keys():
            self._store.remove(key)
        # Flags written under profile names no longer known
        for key in list(self._store.keys()):
            if key.startswith(TOUR_KEY_PREFIX) or key.startswith(INTRO_KEY_PREFIX):
                self._store.remove(key)
        logger.info("demo_cleared", previous=previous.value)

    def exit(self):
        """Clear, then hard-navigate to the Welcome entry point"""
        self.clear()
        self._hard_redirect("Welcome")

    def switch_persona(self):
        """Clear, then hard-navigate to persona selection"""
        self.clear()
        self._hard_redirect("DemoEntry")

    def _hard_redirect(self, page_id):
        if self._navigator is None:
            logger.warning("hard_redirect_without_navigator", page=page_id)
            return
        logger.info("hard_redirect", page=page_id)
        self._navigator.hard_redirect(page_id)
