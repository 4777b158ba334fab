# Navigation Mapping
# Maps canonical page identifiers to the page variant used while a demo is active

from typing import Optional, Protocol

from shared.profiles import DemoProfile

CANONICAL_PAGES = (
    "Dashboard",
    "Properties",
    "Score360",
    "Baseline",
    "Inspect",
    "Track",
    "Prioritize",
    "Schedule",
    "Execute",
    "Preserve",
    "Upgrade",
    "Scale",
)

ENTRY_PAGES = ("Welcome", "DemoEntry", "Waitlist")

# Canonical page -> demo page, per profile
_PAGE_FAMILY = (
    "Score360", "Baseline", "Inspect", "Track", "Prioritize",
    "Schedule", "Execute", "Preserve", "Upgrade", "Scale",
)


def _family_map(dashboard, prefix, properties=None):
    mapping = {"Dashboard": dashboard}
    mapping["Properties"] = properties or f"{prefix}Baseline"
    for page in _PAGE_FAMILY:
        suffix = "Score" if page == "Score360" else page
        mapping[page] = f"{prefix}{suffix}"
    return mapping


DEMO_PAGE_MAP = {
    DemoProfile.STRUGGLING: _family_map("DemoStruggling", "DemoOverwhelmed"),
    DemoProfile.IMPROVING: _family_map("DemoImproving", "DemoImproving"),
    DemoProfile.EXCELLENT: _family_map("DemoExcellent", "DemoExcellent"),
    DemoProfile.INVESTOR: _family_map("DemoPortfolio", "DemoPortfolio", properties="DemoPortfolioProperties"),
    # Generic homeowner demo reuses canonical pages except where a demo variant exists
    DemoProfile.HOMEOWNER: {
        "Schedule": "DemoSchedule",
        "Execute": "DemoExecute",
    },
}


def resolve(canonical_page, profile=DemoProfile.NONE) -> str:
    """Page identifier to use for canonical_page while profile is active.

    Total: unknown profiles behave like NONE and unknown pages pass through.
    """
    profile = DemoProfile.parse(profile)
    if not profile.is_active:
        return canonical_page
    return DEMO_PAGE_MAP.get(profile, {}).get(canonical_page, canonical_page)


def canonical_for(page_id, profile=DemoProfile.NONE) -> str:
    """Reverse lookup, else page_id itself.

    Several canonical pages can share one demo page (struggling Properties and
    Baseline); the later, more specific journey page wins.
    """
    profile = DemoProfile.parse(profile)
    profiles = [profile] if profile.is_active else list(DEMO_PAGE_MAP)
    for candidate in profiles:
        found = None
        for canonical, demo_page in DEMO_PAGE_MAP.get(candidate, {}).items():
            if demo_page == page_id:
                found = canonical
        if found is not None:
            return found
    return page_id


def profile_for_page(page_id) -> DemoProfile:
    """Which profile a demo page belongs to (NONE for canonical/entry pages)"""
    for profile, mapping in DEMO_PAGE_MAP.items():
        if page_id in mapping.values() and page_id not in CANONICAL_PAGES:
            return profile
    return DemoProfile.NONE


def demo_page_ids():
    """All distinct demo page identifiers, in a stable order"""
    seen = []
    for mapping in DEMO_PAGE_MAP.values():
        for page_id in mapping.values():
            if page_id not in seen and page_id not in CANONICAL_PAGES:
                seen.append(page_id)
    return seen


def all_page_ids():
    return list(ENTRY_PAGES) + list(CANONICAL_PAGES) + demo_page_ids()


class Navigator(Protocol):
    """Outbound navigation port used by the session manager, tour and funnel."""

    def push(self, page_id: str) -> None:
        """Soft navigation to a page."""

    def hard_redirect(self, page_id: str) -> None:
        """Full teardown of the session's runtime objects, then navigate."""

    def current(self) -> Optional[str]:
        """The page identifier currently rendered."""
