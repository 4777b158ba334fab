# Demo Profiles
# The personas a visitor can explore the product as

from enum import Enum

from shared.logging import get_logger

logger = get_logger(__name__)


class DemoProfile(str, Enum):
    """Which canned dataset, wizard and tour are active. NONE means no demo."""

    NONE = "none"
    HOMEOWNER = "homeowner"
    STRUGGLING = "struggling"
    IMPROVING = "improving"
    EXCELLENT = "excellent"
    INVESTOR = "investor"

    @classmethod
    def parse(cls, value):
        """Fail-safe conversion: anything unrecognised is NONE."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("unknown_demo_profile", value=value)
            return cls.NONE

    @property
    def is_active(self) -> bool:
        return self is not DemoProfile.NONE

    @property
    def is_homeowner_class(self) -> bool:
        return self in HOMEOWNER_CLASS


HOMEOWNER_CLASS = frozenset({
    DemoProfile.HOMEOWNER,
    DemoProfile.STRUGGLING,
    DemoProfile.IMPROVING,
    DemoProfile.EXCELLENT,
})

# Every profile that carries persisted per-profile flags
ACTIVE_PROFILES = tuple(p for p in DemoProfile if p.is_active)


class PersonaFamily(str, Enum):
    HOMEOWNER = "homeowner"
    INVESTOR = "investor"


SCORE_LEVELS = {
    "struggling": DemoProfile.STRUGGLING,
    "improving": DemoProfile.IMPROVING,
    "excellent": DemoProfile.EXCELLENT,
}


def resolve_profile(persona_family, score_level=None) -> DemoProfile:
    """Resolve a persona family plus optional score level to one concrete profile."""
    try:
        family = PersonaFamily(str(persona_family).strip().lower())
    except ValueError:
        logger.warning("unknown_persona_family", persona_family=persona_family)
        return DemoProfile.NONE

    if family is PersonaFamily.INVESTOR:
        return DemoProfile.INVESTOR

    if score_level is None:
        return DemoProfile.HOMEOWNER
    return SCORE_LEVELS.get(str(score_level).strip().lower(), DemoProfile.HOMEOWNER)
