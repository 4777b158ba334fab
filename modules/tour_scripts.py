# Guided Tour Scripts
# Per-profile ordered tour steps; the last step of every script is the completion hand-off

from dataclasses import dataclass
from typing import Optional

from shared.navigation import CANONICAL_PAGES
from shared.profiles import DemoProfile


@dataclass(frozen=True)
class TourStep:
    id: str
    title: str
    description: str
    bound_page: str
    bound_selector: Optional[str] = None
    auto_advance_delay: Optional[float] = None
    click_to_advance: bool = False
    pointer: str = ""
    highlight: bool = True
    completion: bool = False


def _completion(title, description, page="Dashboard"):
    return TourStep("complete", title, description, page, completion=True)


STRUGGLING_TOUR = (
    TourStep("welcome", "Your Starting Point",
             "You're at 62 - let's transform from reactive to proactive. "
             "This score means you're at risk for expensive surprises.",
             "Dashboard", pointer="Tap any system card to see details"),
    TourStep("baseline", "Baseline",
             "Your 6 systems are documented. 2 urgent (red), 4 flagged (yellow). That's why your score is low.",
             "Baseline", pointer="Tap a red system to see what's wrong"),
    TourStep("inspect", "Inspect",
             "7 issues found: 2 critical, 2 urgent, 3 high priority. Critical ones need action TODAY.",
             "Inspect", pointer="Scroll down to see each issue"),
    TourStep("prioritize", "Prioritize",
             "Your issues ranked by urgency. CO detectors are #1 - life safety issue, do TODAY.",
             "Prioritize", pointer="Tap #1 to see why it's urgent"),
    TourStep("schedule", "Schedule",
             "Plan maintenance strategically. Spreading tasks out makes it manageable and affordable.",
             "Schedule", pointer="Tap a task to schedule it"),
    TourStep("execute", "Execute",
             "This is where you take action. $2,650 in fixes now prevents $22,350 in emergency repairs later.",
             "Execute", pointer="Tap 'Start' to begin this task"),
    TourStep("preserve", "Preserve",
             "$2,050 investment extends 3 failing systems. ROI: 8.1x. That's $16,700 saved.",
             "Preserve", pointer="Tap a system to extend its life"),
    TourStep("upgrade", "Upgrade",
             "First upgrade: CO detectors. $100 investment for life safety - no brainer.",
             "Upgrade", pointer="Tap to see the full ROI breakdown"),
    TourStep("scale", "Scale",
             "Fix $2.6K now, build $350K in equity over 10 years. That's the power of proactive care.",
             "Scale", pointer="Scroll to see your 10-year projection"),
    _completion("Your Transformation",
                "In 6 months: 62 → 78. Spend $1K strategically, prevent $17K+ in disasters. You've got this."),
)

IMPROVING_TOUR = (
    TourStep("welcome", "Your Starting Point",
             "You're at 78 (Bronze). Let's reach Silver (85+) and join the top 15% of homeowners.",
             "Dashboard", pointer="You're doing well - let's level up"),
    TourStep("baseline", "Baseline",
             "11 systems documented. 7 healthy, 3 aging, 1 needs attention. You're organized.",
             "Baseline", pointer="Tap the yellow system to check it"),
    TourStep("inspect", "Inspect",
             "Fall inspection found 5 issues: 2 flags, 3 to monitor. You're catching things early.",
             "Inspect", pointer="Scroll to see the 5 findings"),
    TourStep("prioritize", "Prioritize",
             "4 tasks total. Crawlspace vapor barrier is high priority - prevents moisture damage.",
             "Prioritize", pointer="Tap to see why vapor barrier matters"),
    TourStep("schedule", "Schedule",
             "Plan maintenance strategically throughout the year. No rush, just rhythm.",
             "Schedule", pointer="Tap to add to your calendar"),
    TourStep("execute", "Execute",
             "HVAC service scheduled. You're preventing, not firefighting. This is the way.",
             "Execute", pointer="Tap to see scheduled service"),
    TourStep("preserve", "Preserve",
             "$1,910 extends 3 systems by 3-6 years. Smart money management.",
             "Preserve", pointer="Tap a system to see maintenance tips"),
    TourStep("upgrade", "Upgrade",
             "Smart thermostat + leak detectors: $420 investment, 1.5 year payback. Easy win.",
             "Upgrade", pointer="Tap to see the payback period"),
    TourStep("scale", "Scale",
             "10-year outlook: $260K → $480K equity. Just 7 points to Silver tier.",
             "Scale", pointer="Scroll to see your equity growth"),
    _completion("Your Goal", "3 months: 78 → 85 (Silver). You'll be in the top 15% of homeowners."),
)

EXCELLENT_TOUR = (
    TourStep("welcome", "Elite Status",
             "You're at 92 (Gold) - top 5% of homeowners. Now it's about maintaining excellence.",
             "Dashboard", pointer="See how you maintain excellence"),
    TourStep("baseline", "Baseline",
             "16 systems documented with photos, warranties, and full service history. This is the gold standard.",
             "Baseline", pointer="Tap any system to see full history"),
    TourStep("inspect", "Inspect",
             "4 quarterly inspections completed. Issues cleared immediately. Zero surprises.",
             "Inspect", pointer="Tap to see inspection history"),
    TourStep("track", "Track",
             "16 maintenance events logged this year. Full visibility into your property's care.",
             "Track", pointer="Scroll to see full maintenance log"),
    TourStep("schedule", "Schedule",
             "All tasks scheduled strategically throughout the year. Predictable, manageable, stress-free.",
             "Schedule", pointer="Tap to see your annual plan"),
    TourStep("execute", "Execute",
             "Routine tasks only. No emergencies, just rhythm. This is what proactive looks like.",
             "Execute", pointer="Tap to see routine task list"),
    TourStep("preserve", "Preserve",
             "$2,825/year in preventive care has saved $28,600. That's 8.7x return.",
             "Preserve", pointer="Tap to see your ROI"),
    TourStep("upgrade", "Upgrade",
             "Surge protection complete. Now adding Flo water monitoring for leak detection.",
             "Upgrade", pointer="Tap to see next upgrade"),
    TourStep("scale", "Scale",
             "$550K property, $250K equity today → $520K in 10 years.",
             "Scale", pointer="Scroll to see your wealth growth"),
    _completion("Stay Elite", "Elite ownership. Protecting $550K in value with minimal stress. This is the goal."),
)

INVESTOR_TOUR = (
    TourStep("welcome", "Your Portfolio",
             "3 properties, 7 doors, $1.2M in assets. Let's maximize your returns.",
             "Dashboard", pointer="Tap a property card to dive in"),
    TourStep("dashboard", "Dashboard",
             "All properties at a glance: Duplex (84), Single-family (88), 4-Plex (72). $3,170/mo cash flow.",
             "Dashboard", pointer="Tap a score to see details"),
    TourStep("properties", "Properties",
             "Single-family is elite. Duplex is steady. The 4-Plex needs work - that's your focus.",
             "Properties", pointer="Tap the lowest score to investigate"),
    TourStep("prioritize", "Prioritize",
             "All tasks ranked across portfolio. The 4-Plex has urgent issues - address these first.",
             "Prioritize", pointer="Tap to see 4-Plex issues first"),
    TourStep("schedule", "Schedule",
             "Plan maintenance across your entire portfolio. Batch similar tasks for efficiency.",
             "Schedule", pointer="Tap to plan across properties"),
    TourStep("execute", "Execute",
             "Assign contractors, track progress across all properties from one screen.",
             "Execute", pointer="Tap to assign contractors"),
    TourStep("scale", "Scale",
             "$547K equity today, 17.8% ROI. 10-year projection: $1.8M. This is wealth building.",
             "Scale", pointer="Scroll to see 10-year projection"),
    _completion("Your Goal", "Get all properties to 80+. Cut repair costs 60%. Maximize your returns."),
)

# Click-driven walkthrough of the generic homeowner demo
HOMEOWNER_TOUR = (
    TourStep("welcome", "👋 Welcome to Your Demo!",
             "Let's take a quick tour. We'll show you exactly where to tap.",
             "Dashboard", pointer="Tap the button below to start", highlight=False),
    TourStep("health-score", "💚 Property Health Score",
             "This shows your home's overall condition. See how preventive care keeps it strong.",
             "Dashboard", bound_selector='[data-tour="health-score"]', click_to_advance=True,
             pointer="Tap the Health Score card above ☝️"),
    TourStep("prevented-costs", "💰 Money Saved",
             "See disasters prevented! This is real money you didn't have to spend on emergencies.",
             "Dashboard", bound_selector='[data-tour="prevented-costs"]', click_to_advance=True,
             pointer="Tap the Prevented Costs card above ☝️"),
    TourStep("open-menu", "📱 The 9-Step Journey",
             "The 360° Method has 9 steps. Let's explore them. Open the menu.",
             "Dashboard", bound_selector='[data-tour="menu-button"]', click_to_advance=True,
             pointer="Tap the ☰ menu icon 👆"),
    TourStep("sidebar-properties", "🏠 Step 1: Properties",
             "Start here - see your property details and what you own.",
             "Dashboard", bound_selector='[data-tour="sidebar-properties"]', click_to_advance=True,
             pointer='Tap "Properties" in the menu 👉'),
    TourStep("property-card", "🏡 Your Property Profile",
             "This is your home's profile - address, value, and all the details.",
             "Properties", bound_selector='[data-tour="property-card"]', auto_advance_delay=3.0,
             pointer="See your property details 👇"),
    TourStep("menu-baseline", "📋 Step 2: Baseline",
             "Next step - document all major systems. Open menu.",
             "Properties", bound_selector='[data-tour="menu-button"]', click_to_advance=True,
             pointer="Tap ☰ menu again 👆"),
    TourStep("sidebar-baseline", "📝 AWARE Phase: Baseline",
             "Document every major system in your home.",
             "Properties", bound_selector='[data-tour="sidebar-baseline"]', click_to_advance=True,
             pointer='Tap "Baseline" 👉'),
    TourStep("systems-list", "🔧 16 Systems Documented",
             "Every major system tracked - HVAC, roof, plumbing, appliances. Tap one to see details.",
             "Baseline", bound_selector='[data-tour="system-card-first"]', click_to_advance=True,
             pointer="Tap the first system card below 👇"),
    TourStep("menu-prioritize", "🎯 Step 4: Prioritize",
             "Now let's see your task queue. Open menu.",
             "Baseline", bound_selector='[data-tour="menu-button"]', click_to_advance=True,
             pointer="Open menu 👆"),
    TourStep("sidebar-prioritize", "🎯 ACT Phase: Prioritize",
             "See all tasks ranked by urgency and cascade risk.",
             "Baseline", bound_selector='[data-tour="sidebar-prioritize"]', click_to_advance=True,
             pointer='Tap "Prioritize" 👉'),
    TourStep("task-queue", "📋 Your Action Queue",
             "These are recommended seasonal tasks. Notice the options: DIY, Find Your Own Pro, or 360° Service.",
             "Prioritize", bound_selector='[data-tour="task-queue"]', auto_advance_delay=4.0,
             pointer="See task cards below 👇"),
    _completion("🎉 Tour Complete!",
                "You've seen the key steps: Properties → Baseline → Prioritize. The full 9-step method "
                "guides you through AWARE → ACT → ADVANCE phases. Explore freely!",
                page="Prioritize"),
)


def validate_script(profile, script):
    """Static checks on a script; raises ValueError on a malformed definition"""
    if len(script) < 2:
        raise ValueError(f"Tour for {profile.value} needs at least one step and a completion step")
    ids = [step.id for step in script]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate step ids in {profile.value} tour: {ids}")
    if not script[-1].completion or any(step.completion for step in script[:-1]):
        raise ValueError(f"Only the last step of the {profile.value} tour may be the completion step")
    for step in script:
        if step.bound_page not in CANONICAL_PAGES:
            raise ValueError(f"Step {step.id} of {profile.value} tour is bound to unknown page {step.bound_page}")
        if step.click_to_advance and not step.bound_selector:
            raise ValueError(f"Step {step.id} of {profile.value} tour advances on click without a selector")
        if step.auto_advance_delay is not None and step.auto_advance_delay <= 0:
            raise ValueError(f"Step {step.id} of {profile.value} tour has a non-positive auto-advance delay")


TOUR_SCRIPTS = {
    DemoProfile.HOMEOWNER: HOMEOWNER_TOUR,
    DemoProfile.STRUGGLING: STRUGGLING_TOUR,
    DemoProfile.IMPROVING: IMPROVING_TOUR,
    DemoProfile.EXCELLENT: EXCELLENT_TOUR,
    DemoProfile.INVESTOR: INVESTOR_TOUR,
}

for _profile in DemoProfile:
    if _profile.is_active:
        if _profile not in TOUR_SCRIPTS:
            raise ValueError(f"No tour script for profile {_profile.value}")
        validate_script(_profile, TOUR_SCRIPTS[_profile])


def script_for(profile):
    """The tour script for profile; empty for profile none"""
    profile = DemoProfile.parse(profile)
    return TOUR_SCRIPTS.get(profile, ())
