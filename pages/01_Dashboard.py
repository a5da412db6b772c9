# =============================================================================
# 01_Dashboard.py - Team overview
# =============================================================================
"""
Dashboard - urgent hackathon deadlines, my pending tasks and team counts.

Data: DashboardFetcher (hackathons + tasks). When the backend cannot be
read the last saved copy is shown with an offline notice.
"""
from __future__ import annotations
import streamlit as st
from datetime import datetime, timezone

from hacknotify.analytics import dashboard_stats, pending_tasks, urgent_deadlines
from hacknotify.auth import AuthService, initialize_navigation, require_authentication
from hacknotify.data import get_gateway
from hacknotify.offline import DashboardFetcher, FetchPhase, get_connectivity_signal
from hacknotify.ui import deadline_card, header, no_team_notice, offline_banner, task_item

st.set_page_config(
    page_title="Dashboard - HackNotify",
    page_icon="📊",
    layout="wide",
)

# ============================================================================
# AUTHENTICATION CHECK
# ============================================================================
gateway = get_gateway()
auth = AuthService(gateway)
user = require_authentication(auth)
signal = get_connectivity_signal()
initialize_navigation(auth, signal)

# =============================================================================
# DATA
# =============================================================================
result = DashboardFetcher(gateway).fetch()

if result.phase == FetchPhase.SIGNED_OUT:
    st.switch_page("Welcome.py")

greeting = (result.user or user or {}).get("name") or "there"
header("Dashboard", f"Welcome back, {greeting}", icon="📊")

if result.phase == FetchPhase.NO_TEAM:
    no_team_notice()
    st.stop()

offline_banner(result)

now = datetime.now(timezone.utc)
stats = dashboard_stats(result.hackathons, result.tasks, result.user_id, now)

top_col1, top_col2 = st.columns([3, 1])
with top_col2:
    if st.button("🔄 Refresh", use_container_width=True, key="refresh_dashboard"):
        st.rerun()

# =============================================================================
# STATS
# =============================================================================
stat_cols = st.columns(4)
with stat_cols[0]:
    st.metric("Upcoming deadlines", stats["upcoming"])
with stat_cols[1]:
    st.metric("My open tasks", stats["my_tasks"])
with stat_cols[2]:
    st.metric("Completed", stats["completed"])
with stat_cols[3]:
    st.metric("Overdue", stats["overdue"])

# =============================================================================
# URGENT DEADLINES / PENDING TASKS
# =============================================================================
left, right = st.columns(2)

with left:
    st.subheader("⏰ Due this week")
    urgent = urgent_deadlines(result.hackathons, now)
    if not urgent:
        st.caption("No deadlines in the next 7 days.")
    for hackathon in urgent:
        deadline_card(hackathon, "registration", now)
        deadline_card(hackathon, "submission", now)

with right:
    st.subheader("✅ My pending tasks")
    pending = pending_tasks(result.tasks, result.user_id)
    if not pending:
        st.caption("Nothing assigned to you.")
    for task in pending:
        task_item(task, now)
