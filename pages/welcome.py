# Welcome Page
# Public landing page and the target of a full demo exit

import streamlit as st

from modules.runtime import get_runtime
from modules.ui_components import render_navigation_sidebar

runtime = get_runtime()

render_navigation_sidebar()

st.markdown('<h1 class="main-header">🏡 360° Method Property Dashboard</h1>', unsafe_allow_html=True)
st.markdown("**Prevent disasters, plan ahead, and build long-term property value**")

st.markdown("---")

col1, col2, col3 = st.columns(3)

with col1:
    st.markdown("""
    <div class="feature-card">
        <h3>AWARE</h3>
        <p>Baseline, Inspect, Track: know exactly what you own and what shape it is in.</p>
    </div>
    """, unsafe_allow_html=True)

with col2:
    st.markdown("""
    <div class="feature-card">
        <h3>ACT</h3>
        <p>Prioritize, Schedule, Execute: fix the right things at the right time.</p>
    </div>
    """, unsafe_allow_html=True)

with col3:
    st.markdown("""
    <div class="feature-card">
        <h3>ADVANCE</h3>
        <p>Preserve, Upgrade, Scale: extend system life and grow equity.</p>
    </div>
    """, unsafe_allow_html=True)

col1, col2 = st.columns(2)

with col1:
    if st.button("🎭 Explore a Demo", width="stretch", type="primary"):
        runtime.navigator.push("DemoEntry")

with col2:
    if st.button("📝 Join the Waitlist", width="stretch"):
        runtime.navigator.push("Waitlist")
