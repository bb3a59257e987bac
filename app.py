# Run:
#   pip install -e .
#   streamlit run app.py

from __future__ import annotations
import datetime as dt
import html
import uuid

import streamlit as st

import charts
import config
import navigation as nav
from controller import DailyChallengeApp
from models import CATEGORY_NON_TECHNICAL, CATEGORY_TECHNICAL, CATEGORIES, ROLES
from store import JsonFileStore, Repository

PRIMARY = "#6366f1"
PRIMARY_DARK = "#4f46e5"
BG = "#f8fafc"
CARD = "#ffffff"
BORDER = "#e5e7eb"
MUTED = "#6b7280"
SUCCESS = "#22c55e"

st.set_page_config(page_title=config.APP_TITLE, page_icon="💻", layout="wide")
config.configure_logging()

st.markdown(f"""
<style>
:root{{
  --primary:{PRIMARY}; --primary-600:{PRIMARY_DARK}; --primary-100:#e0e7ff;
  --muted:{MUTED}; --bg:{BG}; --card:{CARD}; --border:{BORDER}; --success:{SUCCESS};
}}
html, body, [data-testid="stAppViewContainer"]{{ background: var(--bg); }}
.block-container{{ padding-top:1.0rem; padding-bottom:2rem; }}
.header-band{{
  background:linear-gradient(90deg, var(--primary) 0%, #c7d2fe 100%);
  border-radius:14px; padding:18px 20px; color:#fff;
}}
.header-band h1, .header-band h3, .header-band p{{ margin:0; color:#fff; }}
.card{{ background:var(--card); border:1px solid var(--border); border-radius:14px; padding:16px 18px; margin-bottom:12px; }}
.meta-pill{{
  display:inline-block; padding:4px 10px; border-radius:999px; background:var(--primary-100);
  color:#3730a3; font-size:12px; margin-right:8px; border:1px solid #c7d2fe;
}}
.status-done{{ color:#065f46; background:#dcfce7; border-color:#bbf7d0; }}
.role-admin{{ color:#92400e; background:#fef3c7; border-color:#fde68a; }}
.stButton>button{{ border-radius:12px; border:1px solid var(--border); background:#fff; color:#0b0f10; }}
.stButton>button:hover{{ border-color:var(--primary); background:#f5f7ff; }}
.small-muted{{ color:var(--muted); font-size:12px; }}
.stats-band{{ background:#fff; border:1px solid var(--border); border-radius:14px; padding:10px 14px; }}
</style>
""", unsafe_allow_html=True)


def client_token() -> str:
    # per-browser id kept in the URL, so a reload resumes only this client's login
    token = st.query_params.get("client")
    if not token:
        token = uuid.uuid4().hex
        st.query_params["client"] = token
    return token


def get_app() -> DailyChallengeApp:
    if "app" not in st.session_state:
        repo = Repository(JsonFileStore(config.store_path()))
        st.session_state.app = DailyChallengeApp(repo, client_id=client_token()).start()
    return st.session_state.app


def pill(text: str, cls: str = "") -> str:
    return f"<span class='meta-pill {cls}'>{html.escape(text)}</span>"


def act(fn, *args):
    """Run a controller action from a button and redraw."""
    fn(*args)
    st.rerun()


app = get_app()

for n in app.pop_notices():
    {"success": st.success, "error": st.error, "warning": st.warning}.get(n.level, st.info)(n.message)

# ----------------------------- NAVBAR -----------------------------
if app.nav.navbar_visible:
    items = [("🏠 Dashboard", app.show_dashboard), ("🎯 Challenges", app.show_challenges),
             ("📈 Progress", app.show_overall_score)]
    if app.nav.admin_link_visible:
        items.append(("🛠️ Admin", app.show_admin))
    cols = st.columns(len(items) + 2)
    cols[0].markdown(f"**💻 {config.APP_TITLE}**")
    for col, (label, fn) in zip(cols[1:], items):
        if col.button(label, key=f"nav_{label}", use_container_width=True):
            act(fn)
    if cols[-1].button("Logout", key="nav_logout", use_container_width=True):
        act(app.logout)
    st.write("---")

page = app.nav.current_page


# ----------------------------- AUTH PAGES -----------------------------
def render_login():
    st.markdown("<div class='header-band'><h1>Daily Coding Challenge</h1>"
                "<p>Sign in to take today's challenges.</p></div>", unsafe_allow_html=True)
    st.write("")
    _, mid, _ = st.columns([1, 2, 1])
    with mid:
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Sign In", key="login_btn", use_container_width=True):
            act(app.login, email, password)
        st.caption("Demo: " + " • ".join(f"{e} / {p}" for _, e, p in config.DEMO_CREDENTIALS))
        if st.button("Create an account", key="to_signup"):
            act(app.show_signup)


def render_signup():
    st.markdown("<div class='header-band'><h1>Create Account</h1></div>", unsafe_allow_html=True)
    st.write("")
    _, mid, _ = st.columns([1, 2, 1])
    with mid:
        name = st.text_input("Full name", key="signup_name")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password", key="signup_password",
                                 help=f"At least {config.MIN_PASSWORD_LENGTH} characters")
        role = st.selectbox("Role", ROLES, index=ROLES.index("user"), key="signup_role")
        if st.button("Sign Up", key="signup_btn", use_container_width=True):
            act(app.signup, name, email, password, role)
        if st.button("Back to sign in", key="to_login"):
            act(app.show_login)


# ----------------------------- USER PAGES -----------------------------
def render_dashboard():
    s = app.stats
    colL, colR = st.columns([2, 1], gap="large")
    with colL:
        st.markdown(f"<div class='header-band'><h3>Welcome back, {html.escape(str(s.get('name', '')))}!</h3>"
                    "<p>One MCQ and one coding exercise, every day.</p></div>", unsafe_allow_html=True)
    with colR:
        st.markdown("<div class='stats-band'>", unsafe_allow_html=True)
        st.caption("Today")
        st.write(f" **{app.engine.today().strftime('%B %d, %Y')}**")
        st.markdown("</div>", unsafe_allow_html=True)
    st.write("")
    c1, c2, c3 = st.columns(3)
    c1.metric("Current Streak", s.get("current_streak", 0))
    c2.metric("Total Score", s.get("total_score", 0))
    c3.metric("Completed", s.get("completed_challenges", 0))

    st.write("")
    b1, b2, b3 = st.columns(3)
    if b1.button("🎯 Today's Challenges", use_container_width=True):
        act(app.show_challenges)
    if b2.button("📈 My Progress", use_container_width=True):
        act(app.show_overall_score)
    if app.nav.admin_card_visible and b3.button("🛠️ Admin Console", use_container_width=True):
        act(app.show_admin)


def render_challenges():
    st.markdown("### Today's Challenges")
    tech = app.engine.resolve_todays_challenge(CATEGORY_TECHNICAL)
    mcq = app.engine.resolve_todays_challenge(CATEGORY_NON_TECHNICAL)
    colL, colR = st.columns(2, gap="large")

    with colL:
        done = app.status.get("technical")
        st.markdown(pill("💻 Technical") + pill("Completed" if done else "Pending", "status-done" if done else ""),
                    unsafe_allow_html=True)
        if tech is None:
            st.info("No technical challenge scheduled for today.")
        else:
            st.markdown(f"<div class='card'><h4>{html.escape(tech.question)}</h4></div>", unsafe_allow_html=True)
            if tech.expected_output:
                st.caption("Expected output")
                st.code(tech.expected_output, language=None)
            if st.button("Open Compiler", key="open_compiler", use_container_width=True):
                act(app.open_compiler)

    with colR:
        done = app.status.get("mcq")
        st.markdown(pill("🧠 MCQ") + pill("Completed" if done else "Pending", "status-done" if done else ""),
                    unsafe_allow_html=True)
        if mcq is None:
            st.info("No MCQ challenge scheduled for today.")
        else:
            st.markdown(f"<div class='card'><h4>{html.escape(mcq.question)}</h4></div>", unsafe_allow_html=True)
            labels = dict(zip("ABCD", mcq.options or []))
            keys = list(labels)
            choice = st.radio("Choose one:", keys, index=None, format_func=lambda k: labels.get(k, k),
                              key=f"mcq_{mcq.id}")
            if st.button("Submit Answer", key="submit_mcq", use_container_width=True):
                act(app.submit_mcq, choice)


def render_compiler():
    st.markdown("### 💻 Code Editor")
    st.caption("Code is not executed; a quick check looks for a loop and a print statement.")
    code = st.text_area("Your code", value=app.code, height=260, key="code_editor")
    c1, c2, c3 = st.columns(3)
    if c1.button("▶️ Run", use_container_width=True):
        act(app.run_code, code)
    if c2.button("✅ Submit", use_container_width=True):
        act(app.submit_code, code)
    if c3.button("Back to Challenges", use_container_width=True):
        act(app.show_challenges)
    st.write("**Output**")
    st.code(app.output or "Run your code to see the output.", language=None)


def render_score():
    st.markdown("### 📈 Overall Progress")
    p = app.repo.progress(app.user.id)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Score", p.total_score)
    c2.metric("Completed", p.completed_challenges)
    c3.metric("Streak", p.current_streak)
    c4.metric("Submissions", len(p.submissions))
    charts.render_progress_charts(app.is_admin())
    charts.render_recent_activity(app.is_admin())


def render_access_denied():
    st.error("🚫 Access Denied")
    st.write("You need administrator privileges to view this page.")
    if st.button("Back to Dashboard"):
        act(app.show_dashboard)


# ----------------------------- ADMIN -----------------------------
def render_admin_challenges():
    st.write("#### Add Challenge")
    category = st.selectbox("Challenge type", CATEGORIES, key="new_category")
    question = st.text_area("Question", key="new_question")
    answer_label = "Expected output / reference answer" if category == CATEGORY_TECHNICAL else "Correct option (A-D)"
    answer = st.text_input(answer_label, key="new_answer")
    day = st.date_input("Date", value=app.engine.today(), key="new_date")
    options = None
    if category == CATEGORY_NON_TECHNICAL:
        o1, o2 = st.columns(2)
        options = [
            o1.text_input("Option A", key="opt_a"), o2.text_input("Option B", key="opt_b"),
            o1.text_input("Option C", key="opt_c"), o2.text_input("Option D", key="opt_d"),
        ]
    if st.button("Add Challenge", key="add_challenge"):
        act(app.add_challenge, category, question, answer,
            day.isoformat() if isinstance(day, dt.date) else "", options)

    st.write("#### Scheduled")
    rows = [c.to_dict() for c in app.repo.challenges()]
    if rows:
        st.dataframe([{k: r.get(k) for k in ("id", "date", "category", "type", "question", "created_by")}
                      for r in rows], use_container_width=True, hide_index=True)
    else:
        st.caption("No challenges yet.")


def render_admin_users():
    pending = app.pending_role_change
    if pending:
        st.warning(f"Change {pending.name}'s role from {pending.old_role} to {pending.new_role}?")
        y, n, _ = st.columns([1, 1, 4])
        if y.button("Confirm", key="confirm_role"):
            act(app.confirm_role_change, True)
        if n.button("Cancel", key="cancel_role"):
            act(app.confirm_role_change, False)

    if st.button("📥 Export Users", key="export_users"):
        act(app.export_users)
    if app.export:
        filename, data = app.export
        st.download_button(f"Download {filename}", data=data.encode("utf-8"),
                           file_name=filename, mime="application/json")

    if not app.user_rows:
        st.info("👥 No users found")
    for row in app.user_rows:
        u = row.user
        c1, c2, c3, c4 = st.columns([3, 1, 1, 1])
        joined = (u.created_at or "")[:10]
        c1.markdown(f"**{html.escape(u.name)}**  \n📧 {html.escape(u.email)}  \n📅 Joined: {joined}")
        c2.markdown(pill(u.role.upper(), "role-admin" if u.role == "admin" else ""), unsafe_allow_html=True)
        c3.metric("Score", row.total_score)
        label = "Make User" if row.toggle_role == "user" else "Make Admin"
        if c4.button(label, key=f"role_{u.id}"):
            act(app.request_role_change, u.id, row.toggle_role)


def render_admin_reports():
    if st.button("📊 Generate Reports", key="gen_reports"):
        act(app.generate_reports)
    if not app.reports:
        st.info("👨‍🎓 No student users found")
    for r in app.reports:
        st.markdown(f"<div class='card'><h4>👨‍💻 {html.escape(r.user.name)}</h4>"
                    f"<p class='small-muted'>📧 {html.escape(r.user.email)}</p></div>", unsafe_allow_html=True)
        c1, c2, c3, c4, c5 = st.columns(5)
        c1.metric("Total Score", r.total_score)
        c2.metric("Completed", r.completed_challenges)
        c3.metric("Streak", r.current_streak)
        c4.metric("Submissions", r.submission_count)
        c5.metric("Avg / Submission", r.average_score)


def render_admin_analytics():
    a = app.analytics
    if a is None:
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Users", a.total_users)
    c2.metric("Active Today", a.active_today)
    c3.metric("Total Challenges", a.total_challenges)
    c4.metric("Completion Rate", f"{a.completion_rate}%")
    charts.render_admin_chart(a)


def render_admin():
    st.markdown("### 🛠️ Admin Console")
    tabs = st.columns(len(nav.ADMIN_TABS))
    for col, tab in zip(tabs, nav.ADMIN_TABS):
        label = ("● " if tab == app.nav.admin_tab else "") + tab.title()
        if col.button(label, key=f"tab_{tab}", use_container_width=True):
            act(app.show_admin_tab, tab)
    st.write("")
    {
        "challenges": render_admin_challenges,
        "users": render_admin_users,
        "reports": render_admin_reports,
        "analytics": render_admin_analytics,
    }[app.nav.admin_tab]()


PAGES = {
    nav.LOGIN: render_login,
    nav.SIGNUP: render_signup,
    nav.DASHBOARD: render_dashboard,
    nav.CHALLENGES: render_challenges,
    nav.COMPILER: render_compiler,
    nav.SCORE: render_score,
    nav.ADMIN: render_admin,
    nav.ACCESS_DENIED: render_access_denied,
}

PAGES[page]()
