# 360° Method Property Dashboard - Demo Experience
# Main entry point: session provider, page registry, overlays and the timer pump

import streamlit as st

from modules.browser_events import browser_events
from modules.page_views import make_page, page_title
from modules.runtime import get_runtime
from modules.ui_components import render_overlays
from shared.config import settings
from shared.logging import configure_logging
from shared.navigation import all_page_ids

configure_logging()

# Page configuration
st.set_page_config(
    page_title=settings.app_title,
    page_icon="🏡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Restore runs here, before any page reads session state
runtime = get_runtime()

# Custom CSS for better UI
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 2rem;
    }
    .feature-card {
        background-color: #f8f9fa;
        padding: 1.5rem;
        border-radius: 10px;
        border-left: 4px solid #1f77b4;
        margin: 1rem 0;
        height: 150px;
    }
</style>
""", unsafe_allow_html=True)

# Page registry: entry pages are scripts, app pages are rendered from the active dataset
ENTRY_SCRIPTS = {
    "Welcome": ("pages/welcome.py", "Welcome"),
    "DemoEntry": ("pages/demo_entry.py", "Demo"),
    "Waitlist": ("pages/waitlist.py", "Waitlist"),
}
pages = {}
for page_id in all_page_ids():
    if page_id in ENTRY_SCRIPTS:
        script, title = ENTRY_SCRIPTS[page_id]
        pages[page_id] = st.Page(script, title=title, url_path=page_id, default=page_id == "Welcome")
    else:
        pages[page_id] = st.Page(make_page(page_id), title=page_title(page_id), url_path=page_id)

pg = st.navigation(list(pages.values()), position="hidden")

# Route the visitor asked for, or the one the tour/funnel pushed
current_page = pg.url_path or "Welcome"
pending = runtime.navigator.pop_pending()
if pending and pending in pages and pending != current_page:
    st.switch_page(pages[pending])

runtime.navigator.set_current(current_page)
runtime.on_run(current_page)

# Exit intent and scroll/resize come from the page itself
runtime.on_browser_event(browser_events())

# Overlays are filled in after the page body so they reflect what it changed
overlay_slot = st.container()


@st.fragment(run_every=settings.timer_tick_seconds)
def pump_timers():
    """Fire due tour timers; rerun the app when what the overlays show changed"""
    active_runtime = get_runtime()
    before = active_runtime.view_signature()
    active_runtime.timers.tick()
    active_runtime.persist()
    if active_runtime.view_signature() != before:
        st.rerun()


pg.run()

with overlay_slot:
    render_overlays(runtime)

# The URL carries the demo across a reload; page switches clear it, so write it back every run
runtime.persist()

pump_timers()
