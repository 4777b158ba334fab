# Demo Entry Page
# Persona selection: pick a homeowner score level or the investor portfolio

import streamlit as st

from modules.runtime import get_runtime
from modules.ui_components import render_navigation_sidebar

runtime = get_runtime()
manager = runtime.manager

render_navigation_sidebar()

st.title("🎭 See Property Maintenance Done Right")
st.markdown("**No Login Required • Fully Interactive**")
st.caption("Explore a fully documented property with the 360° Method. No signup required.")

HOMEOWNER_LEVELS = [
    ("struggling", "🔴 Struggling (62)", "Reactive owner with urgent issues and no plan yet"),
    ("improving", "🟡 Improving (78)", "Bronze certified, a few strategic moves from Silver"),
    ("excellent", "🟢 Excellent (92)", "Gold certified, top 5% of homeowners"),
]


def enter_and_go(persona_family, score_level=None):
    """Enter the chosen persona and land on its dashboard"""
    manager.enter(persona_family, score_level)
    runtime.navigator.push(manager.resolve("Dashboard"))


st.markdown("---")
st.markdown("## 🏠 Homeowner")

if st.button("Jump Into Demo Property", type="primary", width="stretch", key="enter_homeowner"):
    enter_and_go("homeowner")

cols = st.columns(len(HOMEOWNER_LEVELS))
for col, (level, label, blurb) in zip(cols, HOMEOWNER_LEVELS):
    with col:
        with st.container(border=True):
            st.markdown(f"### {label}")
            st.caption(blurb)
            if st.button("Explore", key=f"enter_{level}", width="stretch"):
                enter_and_go("homeowner", level)

st.markdown("## 🏢 Investor")
with st.container(border=True):
    st.markdown("### Portfolio Command Center")
    st.caption("3 properties, 7 doors, one dashboard")
    if st.button("Explore Portfolio", key="enter_investor", width="stretch"):
        enter_and_go("investor")
