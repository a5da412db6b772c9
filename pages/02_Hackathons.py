# =============================================================================
# 02_Hackathons.py - Hackathon list
# =============================================================================
from __future__ import annotations
import streamlit as st
from datetime import datetime, timezone

from hacknotify.analytics import past_hackathons, upcoming_hackathons
from hacknotify.auth import AuthService, initialize_navigation, require_authentication
from hacknotify.data import get_gateway
from hacknotify.offline import FetchPhase, HackathonListFetcher, get_connectivity_signal
from hacknotify.ui import deadline_card, header, no_team_notice, offline_banner

st.set_page_config(
    page_title="Hackathons - HackNotify",
    page_icon="🏆",
    layout="wide",
)

gateway = get_gateway()
auth = AuthService(gateway)
require_authentication(auth)
signal = get_connectivity_signal()
initialize_navigation(auth, signal)

result = HackathonListFetcher(gateway).fetch()
if result.phase == FetchPhase.SIGNED_OUT:
    st.switch_page("Welcome.py")

header("Hackathons", "Registration and submission deadlines for your teams", icon="🏆")

if result.phase == FetchPhase.NO_TEAM:
    no_team_notice()
    st.stop()

offline_banner(result)

now = datetime.now(timezone.utc)
upcoming_tab, past_tab = st.tabs(["Upcoming", "Past"])

with upcoming_tab:
    upcoming = upcoming_hackathons(result.hackathons, now)
    if not upcoming:
        st.caption("No upcoming hackathons.")
    for hackathon in upcoming:
        deadline_card(hackathon, "registration", now)
        deadline_card(hackathon, "submission", now)

with past_tab:
    past = past_hackathons(result.hackathons, now)
    if not past:
        st.caption("No past hackathons.")
    for hackathon in past:
        deadline_card(hackathon, "submission", now)
