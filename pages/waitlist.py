# Waitlist Page
# Sign-up interest capture; conversion target of the exit funnel

import streamlit as st

from modules.runtime import get_runtime
from modules.ui_components import render_navigation_sidebar
from shared.logging import get_logger

logger = get_logger(__name__)

runtime = get_runtime()

render_navigation_sidebar()

st.title("📝 Join the Waitlist")
st.markdown("Be the first to track your own property with the 360° Method.")

with st.form("waitlist_form"):
    name = st.text_input("Name")
    email = st.text_input("Email")
    property_type = st.selectbox("I own", ["A home", "Rental properties", "Both"])
    submitted = st.form_submit_button("Join Waitlist", type="primary")

if submitted:
    if "@" not in email:
        st.error("❌ Please enter a valid email address.")
    else:
        st.session_state["waitlist_joined"] = name.strip() or "there"
        logger.info("waitlist_joined", property_type=property_type)

if st.session_state.get("waitlist_joined"):
    st.success(f"✅ You're on the list, {st.session_state['waitlist_joined']}! We'll send you exclusive content about the 360° Method while you wait.")
    if st.button("🎭 Keep Exploring Demos"):
        runtime.navigator.push("DemoEntry")
