# UI Components Module
# Sidebar navigation, tour-aware buttons and the demo overlays

import streamlit as st

from modules.data_visualization import score_color
from modules.overlays import Overlay
from modules.runtime import get_runtime

JOURNEY_PHASES = [
    ("AWARE", ["Baseline", "Inspect", "Track"]),
    ("ACT", ["Prioritize", "Schedule", "Execute"]),
    ("ADVANCE", ["Preserve", "Upgrade", "Scale"]),
]


def tour_target(tour_id, label=""):
    """Register a non-clickable element the tour can highlight; marks it while it is the tour's target"""
    runtime = get_runtime()
    element = runtime.targets.register(tour_id, label, tag="div")
    if runtime.is_highlighted(element):
        st.markdown(f"**👉 {label or 'Look here'}**")
    return element


def tour_button_type(runtime, element, requested="secondary"):
    """Buttons the tour currently points at render as primary"""
    return "primary" if runtime.is_highlighted(element) else requested


def tour_button(label, tour_id, key=None, **kwargs):
    """A button the guided tour can intercept; True means run the button's own action"""
    runtime = get_runtime()
    element = runtime.targets.register(tour_id, label)
    kwargs["type"] = tour_button_type(runtime, element, kwargs.get("type", "secondary"))
    if not st.button(label, key=key or f"tour_{tour_id}", **kwargs):
        return False
    allowed = runtime.dispatcher.click(element)
    if not allowed:
        # The tour consumed the click and moved on
        st.rerun()
    return allowed


def go_to(canonical_page):
    """Soft navigation to the active profile's variant of a canonical page"""
    runtime = get_runtime()
    runtime.navigator.push(runtime.manager.resolve(canonical_page))


def render_navigation_sidebar():
    """Render sidebar navigation for the 9-step journey"""
    runtime = get_runtime()
    manager = runtime.manager

    with st.sidebar:
        st.markdown("### 🏡 360° Method")
        if manager.is_demo:
            st.caption(f"Demo: **{manager.profile.value.title()}**")

        if tour_button("☰ Menu", "menu-button", width="stretch"):
            st.session_state['menu_open'] = not st.session_state.get('menu_open', False)

        if tour_button("📊 Dashboard", "sidebar-dashboard", width="stretch"):
            go_to("Dashboard")
        if tour_button("🏠 Properties", "sidebar-properties", width="stretch"):
            go_to("Properties")

        for phase, pages in JOURNEY_PHASES:
            st.markdown(f"**{phase}**")
            for page in pages:
                if tour_button(page, f"sidebar-{page.lower()}", width="stretch"):
                    go_to(page)
            if st.session_state.get('menu_open'):
                st.caption(" → ".join(pages))

        st.markdown("---")
        if manager.is_demo:
            if runtime.engine.shows_start_affordance:
                if st.button("▶️ Start Tour", width="stretch", key="sidebar_start_tour"):
                    runtime.engine.start()
                    st.rerun()
            if st.button("❓ Show Intro Again", width="stretch", key="sidebar_show_wizard"):
                manager.show_wizard()
                st.rerun()
            if st.button("🚪 Exit Demo", width="stretch", key="sidebar_exit_demo"):
                runtime.funnel.open("exit")
                st.rerun()
        else:
            if st.button("🎭 Try the Demo", width="stretch", type="primary", key="sidebar_try_demo"):
                runtime.navigator.push("DemoEntry")


METRIC_LABELS = {
    "doors": "🚪 Doors",
    "health": "💚 Health Score",
    "net_cash_flow": "Net Cash Flow",
    "baseline_complete": "Baseline Complete",
    "flagged": "⚠️ Flagged",
    "urgent": "🔴 Urgent",
    "good": "✅ Good",
}

# Shown without thousands separators
PLAIN_NUMBER_KEYS = frozenset({"year_built"})

SCORE_BAND_LABELS = {"green": "Excellent", "gold": "Stable", "red": "At risk"}


def metric_display(key, value):
    """Card label and display value for one dashboard metric"""
    label = METRIC_LABELS.get(key, key.replace('_', ' ').title())
    if value is None:
        return label, "n/a"
    if key in PLAIN_NUMBER_KEYS:
        return label, str(value)
    if isinstance(value, float):
        return label, f"{value:,.1f}"
    if isinstance(value, int) and not isinstance(value, bool):
        return label, f"{value:,}"
    return label, str(value)


def render_metric_cards(metrics_data):
    """Render metrics as cards; health scores carry their band as help text"""
    if not metrics_data:
        return

    cols = st.columns(min(len(metrics_data), 4))
    for i, (key, value) in enumerate(metrics_data.items()):
        label, shown = metric_display(key, value)
        band = None
        if key.startswith("health") and isinstance(value, (int, float)):
            band = SCORE_BAND_LABELS[score_color(value)]
        with cols[i % len(cols)]:
            st.metric(label, shown, help=band)


def render_data_table(df, title=None):
    """Render a data table"""
    if df.empty:
        st.info(f"No {title.lower() if title else 'data'} available.")
        return

    if title:
        st.markdown(f"### {title}")

    st.dataframe(df, width="stretch", hide_index=True)


# alert type -> (streamlit call, icon)
ALERT_STYLES = {
    "info": (st.info, "ℹ️"),
    "success": (st.success, "🏅"),
    "warning": (st.warning, "⚠️"),
    "error": (st.error, "🚨"),
}


def score_alert(score):
    """Alert type and message summarising a 0-100 health score"""
    color = score_color(score)
    if color == "green":
        return "success", f"Score {score}: systems are well documented and maintained."
    if color == "gold":
        return "info", f"Score {score}: solid footing, a few systems need attention."
    return "error", f"Score {score}: urgent issues are putting the property at risk."


def render_alert_banner(message, alert_type="info"):
    """Render a status banner in the alert type's native style"""
    show, icon = ALERT_STYLES.get(alert_type, ALERT_STYLES["info"])
    show(message, icon=icon)


# ======================================================================================
# Overlays
# ======================================================================================

def render_wizard(runtime):
    """Render the onboarding wizard screen with its controls"""
    wizard = runtime.wizard
    screen = wizard.screen

    with st.container(border=True):
        st.markdown(f"## {screen.title}")
        if screen.subtitle:
            st.caption(screen.subtitle)
        if screen.body:
            st.markdown(screen.body)
        for bullet in screen.bullets:
            st.markdown(f"- {bullet}")
        if screen.tip:
            st.info(screen.tip)

        st.progress(wizard.progress, text=f"Step {wizard.index + 1} of {wizard.total}")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            if st.button("Skip", key="wizard_skip"):
                wizard.skip()
                st.rerun()
        with col2:
            if st.button("Back", key="wizard_back", disabled=wizard.is_first):
                wizard.back()
                st.rerun()
        with col3:
            label = "Explore Demo" if wizard.is_last else "Next"
            if st.button(label, key="wizard_next", type="primary"):
                wizard.next()
                st.rerun()
        with col4:
            if wizard.shortcut_available:
                if st.button(wizard.shortcut.label, key="wizard_shortcut"):
                    wizard.take_shortcut()


def render_demo_intro(runtime):
    """Render the one-time intro card: the demo property's score now and where it is headed"""
    intro = runtime.intro.intro

    with st.container(border=True):
        st.markdown(f"## {intro.emoji} {intro.label} Owner")
        st.caption(intro.tagline)

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Now", intro.score)
        with col2:
            st.metric(intro.future_label, intro.future_score)

        st.info("👋 We'll guide you through each step.")
        if st.button("▶️ Let's Go", key="intro_close", type="primary", width="stretch"):
            runtime.intro.close()
            st.rerun()


def render_exit_dialog(runtime):
    """Render the exit funnel dialog for the current reason"""
    funnel = runtime.funnel
    content = funnel.content()

    with st.container(border=True):
        st.markdown(f"## {content['headline']}")
        st.caption(content['subheadline'])

        col1, col2 = st.columns(2)
        with col1:
            st.metric(content['current_state'], content['current_score'])
            for point in content['pain_points']:
                st.markdown(f"- ⚠️ {point}")
        with col2:
            st.metric(content['future_state'], content['future_score'])
            for point in content['transformation']:
                st.markdown(f"- ✅ {point}")

        if st.button("🏡 Try My Property Free", key="funnel_start", type="primary", width="stretch"):
            funnel.start_own_property()

        col1, col2, col3 = st.columns(3)
        with col1:
            if st.button("Keep Exploring", key="funnel_continue", width="stretch"):
                funnel.continue_exploring()
                st.rerun()
        with col2:
            if st.button("Other Demos", key="funnel_switch", width="stretch"):
                funnel.switch_persona()
        with col3:
            if st.button("Exit Demo", key="funnel_leave", width="stretch"):
                funnel.leave_demo()


def render_engagement_popup(runtime):
    """Render the current engagement popup"""
    popup = runtime.engagement.current
    content = popup.content

    with st.container(border=True):
        st.markdown(f"### {content['headline']}")
        st.markdown(content['body'])
        st.markdown(f"**{content['question']}**")

        col1, col2, col3 = st.columns(3)
        with col1:
            if st.button("Yes, show me", key="popup_yes", type="primary"):
                runtime.engagement.close()
                runtime.funnel.start_own_property()
        with col2:
            if st.button("Maybe later", key="popup_later"):
                runtime.engagement.close()
                st.rerun()
        with col3:
            if st.button("Don't show again", key="popup_dismiss"):
                runtime.engagement.dismiss_all()
                st.rerun()


def render_tour_card(runtime):
    """Render the guided tour card, or its minimized indicator"""
    engine = runtime.engine
    step = engine.current_step
    if step is None:
        return

    if not engine.card_visible:
        if st.button(f"🧭 Tour: step {engine.current_index + 1} of {engine.step_count}", key="tour_expand"):
            engine.expand()
            st.rerun()
        return

    with st.container(border=True):
        col1, col2, col3 = st.columns([0.8, 0.1, 0.1])
        with col1:
            st.markdown(f"**{step.title}**  ·  Step {engine.current_index + 1} of {engine.step_count}")
        with col2:
            if st.button("➖", key="tour_minimize", help="Minimize"):
                engine.minimize()
                st.rerun()
        with col3:
            if st.button("✖", key="tour_close", help="Close tour"):
                engine.close()
                st.rerun()

        st.markdown(step.description)
        if step.pointer:
            st.caption(f"👉 {step.pointer}")
        tracker = engine.tracker
        # Targets for this run are registered by now
        tracker.refresh()
        if tracker.tracking and not tracker.target_found:
            st.caption("The highlighted item is not on this page yet.")

        dots = st.columns(engine.step_count)
        visited = set(runtime.manager.visited_steps)
        for i, col in enumerate(dots):
            with col:
                marker = "●" if i == engine.current_index else ("◉" if i in visited else "○")
                if st.button(marker, key=f"tour_dot_{i}"):
                    engine.jump_to(i)
                    st.rerun()

        col1, col2 = st.columns(2)
        with col1:
            if st.button("◀ Back", key="tour_back", disabled=engine.current_index == 0):
                engine.retreat()
                st.rerun()
        with col2:
            if not step.click_to_advance:
                label = "Finish" if engine.current_index >= engine.step_count - 1 else "Next ▶"
                if st.button(label, key="tour_next", type="primary"):
                    engine.advance()
                    st.rerun()


def render_floating_cta(runtime):
    """Render the persistent call-to-action"""
    cta = runtime.cta
    with st.sidebar:
        if cta.minimized:
            if st.button("💡", key="cta_restore", help="Show offer"):
                cta.restore()
                st.rerun()
            return
        with st.container(border=True):
            st.markdown("**Like what you see?**")
            if st.button(cta.label, key="cta_start", type="primary", width="stretch"):
                runtime.funnel.start_own_property()
            if st.button("Hide", key="cta_minimize"):
                cta.minimize()
                st.rerun()


def render_dev_switcher(runtime):
    """Render the developer portal switcher"""
    dev = runtime.dev
    with st.sidebar:
        arrow = "▾" if dev.expanded else "▸"
        if st.button(f"🛠️ Portal Switcher {arrow}", key="dev_toggle"):
            dev.toggle()
            st.rerun()
        if not dev.expanded:
            return
        for portal in dev.portals():
            st.markdown(f"**{portal.name}**")
            page = st.selectbox(
                "Page", portal.pages, key=f"dev_page_{portal.key}", label_visibility="collapsed"
            )
            if st.button("Go", key=f"dev_go_{portal.key}"):
                dev.jump(portal.profile, page)


OVERLAY_RENDERERS = {
    Overlay.DEV_SWITCHER: render_dev_switcher,
    Overlay.ONBOARDING_WIZARD: render_wizard,
    Overlay.DEMO_INTRO: render_demo_intro,
    Overlay.EXIT_DIALOG: render_exit_dialog,
    Overlay.ENGAGEMENT_POPUP: render_engagement_popup,
    Overlay.TOUR_CARD: render_tour_card,
    Overlay.FLOATING_CTA: render_floating_cta,
}


def render_overlays(runtime):
    """Render every overlay the arbiter allows, highest priority first"""
    runtime.refresh_overlays()
    for overlay in runtime.arbiter.visible():
        OVERLAY_RENDERERS[overlay](runtime)


def render_page_header(title, subtitle=None):
    st.markdown(f"# {title}")
    if subtitle:
        st.caption(subtitle)


