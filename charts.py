# charts.py
# Chart data for the progress page and the admin analytics tab.
# Progress-page figures are fixed demo samples split by role, not the user's real history.
from __future__ import annotations
import datetime as dt
from typing import Any, Dict, List

import altair as alt
import pandas as pd
import streamlit as st

from admin import Analytics

SAMPLE_SCORES_ADMIN = [0, 20, 45, 70, 100, 135, 170, 210, 250, 290, 330, 380, 430, 500]
SAMPLE_SCORES_USER = [0, 10, 30, 50, 75, 100, 130, 160, 190, 220, 250, 280, 325]
SAMPLE_START = dt.date(2025, 9, 1)

SAMPLE_DISTRIBUTION = {True: (8, 7), False: (6, 4)}  # is_admin -> (technical, mcq)

SAMPLE_ACTIVITY_ADMIN = [
    {"type": "technical", "is_correct": True, "points": 20, "date": "Sep 9, 2025"},
    {"type": "mcq", "is_correct": True, "points": 10, "date": "Sep 8, 2025"},
    {"type": "technical", "is_correct": True, "points": 20, "date": "Sep 7, 2025"},
    {"type": "mcq", "is_correct": True, "points": 10, "date": "Sep 6, 2025"},
    {"type": "technical", "is_correct": True, "points": 20, "date": "Sep 5, 2025"},
]
SAMPLE_ACTIVITY_USER = [
    {"type": "technical", "is_correct": True, "points": 20, "date": "Sep 9, 2025"},
    {"type": "mcq", "is_correct": True, "points": 10, "date": "Sep 8, 2025"},
    {"type": "technical", "is_correct": False, "points": 5, "date": "Sep 7, 2025"},
    {"type": "mcq", "is_correct": True, "points": 10, "date": "Sep 6, 2025"},
    {"type": "technical", "is_correct": True, "points": 20, "date": "Sep 5, 2025"},
]

PRIMARY = "#6366f1"
MUTED = "#94a3b8"


def score_frame(is_admin: bool) -> pd.DataFrame:
    scores = SAMPLE_SCORES_ADMIN if is_admin else SAMPLE_SCORES_USER
    days = [(SAMPLE_START + dt.timedelta(days=i)).strftime("%b %d") for i in range(len(scores))]
    return pd.DataFrame({"Day": days, "Total Score": scores}).set_index("Day")


def distribution_frame(is_admin: bool) -> pd.DataFrame:
    tech, mcq = SAMPLE_DISTRIBUTION[is_admin]
    return pd.DataFrame({
        "Category": ["Technical Challenges", "MCQ Challenges"],
        "Count": [tech, mcq],
    })


def recent_activity(is_admin: bool) -> List[Dict[str, Any]]:
    return SAMPLE_ACTIVITY_ADMIN if is_admin else SAMPLE_ACTIVITY_USER


def analytics_frame(a: Analytics) -> pd.DataFrame:
    return pd.DataFrame({
        "Metric": ["Admin Users", "Regular Users", "Active Today", "Total Challenges"],
        "Count": [a.admin_users, a.regular_users, a.active_today, a.total_challenges],
    }).set_index("Metric")


# ----------------------------- RENDERING -----------------------------
def render_progress_charts(is_admin: bool) -> None:
    c1, c2 = st.columns([2, 1], gap="large")
    with c1:
        st.write("**Score Progression**")
        st.line_chart(score_frame(is_admin), color=PRIMARY)
    with c2:
        st.write("**Challenge Distribution**")
        donut = alt.Chart(distribution_frame(is_admin)).mark_arc(innerRadius=50).encode(
            theta=alt.Theta("Count:Q"),
            color=alt.Color("Category:N", scale=alt.Scale(range=[PRIMARY, MUTED]),
                            legend=alt.Legend(orient="bottom")),
        )
        st.altair_chart(donut, use_container_width=True)


def render_recent_activity(is_admin: bool) -> None:
    st.write("### Recent Activity")
    for a in recent_activity(is_admin):
        status = "✅" if a["is_correct"] else "❌"
        kind = "💻 Technical Challenge" if a["type"] == "technical" else "🧠 MCQ Challenge"
        st.markdown(
            f"<div class='card'><b>{status} {kind}</b>"
            f"<span class='small-muted' style='float:right'>{a['date']}</span>"
            f"<div>+{a['points']} points earned</div></div>",
            unsafe_allow_html=True,
        )


def render_admin_chart(a: Analytics) -> None:
    st.write("**System Statistics**")
    st.bar_chart(analytics_frame(a))
