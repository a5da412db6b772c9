# =============================================================================
# 04_Hackathon.py - One hackathon (/Hackathon?id=<id>)
# =============================================================================
"""
Hackathon details - deadlines, link and the team's open tasks.

Read from the same fetch as the dashboard, so a page warmed at sign-in
still renders from the offline cache.
"""
from __future__ import annotations
import streamlit as st
from datetime import datetime, timezone

from hacknotify.analytics import overdue_tasks
from hacknotify.analytics.derived_views import DONE
from hacknotify.auth import AuthService, initialize_navigation, require_authentication
from hacknotify.data import get_gateway
from hacknotify.offline import DashboardFetcher, FetchPhase, get_connectivity_signal
from hacknotify.ui import deadline_card, header, no_team_notice, offline_banner, task_item

st.set_page_config(
    page_title="Hackathon - HackNotify",
    page_icon="🏆",
    layout="wide",
)

gateway = get_gateway()
auth = AuthService(gateway)
require_authentication(auth)
initialize_navigation(auth, get_connectivity_signal())

result = DashboardFetcher(gateway).fetch()
if result.phase == FetchPhase.SIGNED_OUT:
    st.switch_page("Welcome.py")
if result.phase == FetchPhase.NO_TEAM:
    no_team_notice()
    st.stop()

hackathon_id = st.query_params.get("id")
hackathon = next((h for h in result.hackathons if h.get("id") == hackathon_id), None)

if hackathon is None:
    header("Hackathon", "Not found", icon="🏆")
    offline_banner(result)
    st.info("This hackathon is not in your teams' list" + (" or not saved offline." if result.is_stale else "."))
    st.page_link("pages/02_Hackathons.py", label="All hackathons", icon="🏆")
    st.stop()

header(hackathon.get("title", "Untitled hackathon"), "Hackathon details", icon="🏆")
offline_banner(result)

now = datetime.now(timezone.utc)
left, right = st.columns(2)

with left:
    st.subheader("Deadlines")
    deadline_card(hackathon, "registration", now)
    deadline_card(hackathon, "submission", now)
    if hackathon.get("description"):
        st.markdown(hackathon["description"])

with right:
    team_tasks = [
        t for t in result.tasks
        if t.get("team_id") == hackathon.get("team_id") and t.get("status") != DONE
    ]
    st.subheader(f"Open team tasks ({len(team_tasks)})")
    late = len(overdue_tasks(team_tasks, now))
    if late:
        st.caption(f":red[{late} overdue]")
    if not team_tasks:
        st.caption("Nothing open for this team.")
    for task in team_tasks:
        task_item(task, now)
