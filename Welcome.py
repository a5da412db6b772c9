from __future__ import annotations
import streamlit as st

from hacknotify.auth import AuthService, check_authentication, remember_user
from hacknotify.data import get_gateway
from hacknotify.logging import setup_logging
from hacknotify.service_worker import register_service_worker
from hacknotify.ui import header

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="HackNotify - Sign in",
    page_icon="🏁",
    layout="centered",
    initial_sidebar_state="collapsed",  # Hide sidebar until login
)


@st.cache_resource
def bootstrap():
    """Once per server process: logging and the offline request interceptor."""
    setup_logging()
    return register_service_worker()


worker = bootstrap()
auth = AuthService(get_gateway(), post_message=worker.post_message if worker else None)

# ============================================================================
# ALREADY SIGNED IN
# ============================================================================
if check_authentication():
    st.switch_page("pages/01_Dashboard.py")

# This browser session's client may already hold a signed-in session (kept in
# memory for the life of the Streamlit session); reuse it without a network call
existing_user = auth.current_user()
if existing_user is not None:
    remember_user(existing_user)
    st.switch_page("pages/01_Dashboard.py")

# ============================================================================
# LOGIN FORM
# ============================================================================
header("HackNotify", "Hackathon deadlines and team tasks, online or off.")

with st.form("login_form"):
    email = st.text_input("Email", placeholder="you@example.com")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)

if submitted:
    if not email or not password:
        st.error("Enter your email and password.")
    else:
        with st.spinner("Signing in..."):
            result = auth.sign_in(email, password)
        if result:
            remember_user(result.data)
            st.switch_page("pages/01_Dashboard.py")
        else:
            st.error(result.error)
