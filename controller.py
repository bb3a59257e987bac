"""
Top-level application state.

`DailyChallengeApp` owns the store, the session, the navigator and both
engines, and is the only thing the Streamlit script talks to. Each UI action is
a method here: domain errors are caught and turned into `Notice`s, and an
access-denied error also moves the user to the access-denied page.
"""
from __future__ import annotations
import datetime as dt
import logging
import random
import uuid
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import navigation as nav
import runner
from admin import AdminConsole, Analytics, StudentReport, UserRow
from auth import Session, utc_now
from challenges import ChallengeEngine, SubmissionResult
from errors import AccessDeniedError, DailyChallengeError
from models import ROLE_USER, User
from seed import initialize_demo_data
from store import Repository

logger = logging.getLogger(__name__)


@dataclass
class Notice:
    level: str  # success | error | info | warning
    message: str


@dataclass
class PendingRoleChange:
    user_id: int
    name: str
    old_role: str
    new_role: str


def handled(fn):
    """Turn domain errors raised by a UI action into notices; the action then returns None."""
    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except AccessDeniedError as e:
            self.notify("error", str(e))
            self.show_access_denied()
        except DailyChallengeError as e:
            self.notify("error", str(e))
        return None
    return wrapper


class DailyChallengeApp:
    def __init__(self, repo: Repository, clock: Callable[[], dt.datetime] = utc_now,
                 tz: Optional[str] = None, rng: Optional[random.Random] = None,
                 client_id: Optional[str] = None):
        self.repo = repo
        self.clock = clock
        self.rng = rng
        # a new id means a new client: nothing saved by other clients is resumed
        self.client_id = client_id or uuid.uuid4().hex
        self.session = Session(repo, clock, self.client_id)
        self.nav = nav.Navigator()
        self.engine = ChallengeEngine(repo, self.session, clock, tz)
        self.admin = AdminConsole(repo, self.session, clock, tz)
        self.notices: List[Notice] = []

        # page data, refreshed by the page entry points
        self.stats: Dict[str, object] = {}
        self.status: Dict[str, bool] = {}
        self.code: str = runner.DEFAULT_TEMPLATE
        self.output: str = ""
        self.analytics: Optional[Analytics] = None
        self.user_rows: List[UserRow] = []
        self.reports: List[StudentReport] = []
        self.pending_role_change: Optional[PendingRoleChange] = None
        self.export: Optional[Tuple[str, str]] = None

    def start(self) -> "DailyChallengeApp":
        initialize_demo_data(self.repo, self.rng, self.clock())
        if self.session.restore():
            self.show_dashboard()
        else:
            self.show_login()
        return self

    # ----------------------------- NOTICES -----------------------------
    def notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level, message))

    def pop_notices(self) -> List[Notice]:
        out, self.notices = self.notices, []
        return out

    # ----------------------------- AUTH -----------------------------
    @property
    def user(self) -> Optional[User]:
        return self.session.user

    def is_admin(self) -> bool:
        return self.session.is_admin()

    @handled
    def login(self, email: str, password: str) -> Optional[User]:
        user = self.session.login(email, password)
        self.show_dashboard()
        return user

    @handled
    def signup(self, name: str, email: str, password: str, role: str = ROLE_USER) -> Optional[User]:
        user = self.session.signup(name, email, password, role)
        self.notify("success", "🎉 Account created successfully! Please sign in with your credentials.")
        self.show_login()
        return user

    def logout(self) -> None:
        self.session.logout()
        self.nav.reset()
        self.code, self.output = runner.DEFAULT_TEMPLATE, ""
        self.pending_role_change = None
        self.export = None
        self.show_login()

    # ----------------------------- NAVIGATION -----------------------------
    def show_page(self, name: str) -> bool:
        return self.nav.show_page(name, self.session.authenticated, self.is_admin())

    def show_login(self) -> bool:
        return self.show_page(nav.LOGIN)

    def show_signup(self) -> bool:
        return self.show_page(nav.SIGNUP)

    def show_access_denied(self) -> bool:
        return self.show_page(nav.ACCESS_DENIED)

    def _signed_in(self) -> bool:
        if not self.session.authenticated:
            logger.info("No authenticated user, redirecting to login")
            self.show_login()
            return False
        return True

    def show_dashboard(self) -> bool:
        if not self._signed_in() or not self.show_page(nav.DASHBOARD):
            return False
        self.stats = self.engine.dashboard_stats()
        return True

    def show_challenges(self) -> bool:
        if not self._signed_in() or not self.show_page(nav.CHALLENGES):
            return False
        self.status = self.engine.todays_status()
        return True

    def open_compiler(self) -> bool:
        if not self._signed_in() or not self.show_page(nav.COMPILER):
            return False
        if not self.code.strip():
            self.code = runner.DEFAULT_TEMPLATE
        return True

    def show_overall_score(self) -> bool:
        return self._signed_in() and self.show_page(nav.SCORE)

    def show_admin(self) -> bool:
        if not self._signed_in():
            return False
        if not self.is_admin():
            self.notify("error", str(AccessDeniedError()))
            self.show_access_denied()
            return False
        if not self.show_page(nav.ADMIN):
            return False
        self.show_admin_tab("challenges")
        self.load_analytics()
        return True

    @handled
    def show_admin_tab(self, tab: str) -> bool:
        self.session.require_admin()
        if tab not in nav.ADMIN_TABS:
            logger.error("Admin tab not found: %s", tab)
            return False
        self.nav.admin_tab = tab
        if tab == "users":
            self.user_rows = self.admin.list_users()
        elif tab == "reports":
            self.reports = self.admin.list_student_reports()
        elif tab == "analytics":
            self.analytics = self.admin.load_analytics()
        return True

    # ----------------------------- CHALLENGES -----------------------------
    @handled
    def submit_mcq(self, selected: Optional[str]) -> Optional[SubmissionResult]:
        result = self.engine.submit_mcq(selected)
        if result.submission.is_correct:
            self.notify("success", f"🎉 Excellent! That's the correct answer. You earned {result.submission.points} points!")
        else:
            self.notify("error", f"❌ Not quite right. The correct answer is {result.correct_answer}. Keep learning!")
        self.status = self.engine.todays_status()
        self.stats = self.engine.dashboard_stats()
        return result

    @handled
    def run_code(self, code: str) -> Optional[str]:
        self.code = code
        self.output = self.engine.run_code(code)
        self.notify("success", "✅ Code executed! Check the output below.")
        return self.output

    @handled
    def submit_code(self, code: str) -> Optional[SubmissionResult]:
        self.code = code
        result = self.engine.submit_code(code)
        self.output = result.submission.output or ""
        points = result.submission.points
        if result.submission.is_correct:
            self.notify("success", f"🎉 Outstanding work! Your code produces the perfect pattern. You earned {points} points!")
        else:
            self.notify("info", "💡 Good effort! Your code runs but doesn't match the expected pattern exactly. "
                                f"You earned {points} points for trying. Keep practicing!")
        self.show_challenges()
        return result

    # ----------------------------- ADMIN -----------------------------
    @handled
    def add_challenge(self, category: str, question: str, answer: str, date: str,
                      options: Optional[Sequence[str]] = None):
        challenge = self.admin.add_challenge(category, question, answer, date, options)
        self.notify("success", "✨ Challenge added successfully!")
        self.load_analytics()
        return challenge

    @handled
    def load_analytics(self) -> Optional[Analytics]:
        self.analytics = self.admin.load_analytics()
        return self.analytics

    @handled
    def load_users(self) -> List[UserRow]:
        self.user_rows = self.admin.list_users()
        return self.user_rows

    @handled
    def request_role_change(self, user_id: int, new_role: str) -> Optional[PendingRoleChange]:
        self.session.require_admin()
        user = self.repo.find_user(int(user_id))
        if user is None:
            self.notify("error", "User not found")
            return None
        self.pending_role_change = PendingRoleChange(user.id, user.name, user.role, new_role)
        return self.pending_role_change

    @handled
    def confirm_role_change(self, accept: bool) -> Optional[User]:
        pending, self.pending_role_change = self.pending_role_change, None
        if pending is None or not accept:
            return None
        user = self.admin.change_user_role(pending.user_id, pending.new_role, confirmed=True)
        self.nav.update_for_role(self.is_admin())
        self.notify("success", f"✅ {user.name}'s role changed from {pending.old_role} to {pending.new_role}")
        if self.is_admin():
            self.user_rows = self.admin.list_users()
            self.analytics = self.admin.load_analytics()
        else:
            # demoted themselves; the admin console is no longer theirs
            self.show_dashboard()
        return user

    @handled
    def export_users(self) -> Optional[Tuple[str, str]]:
        self.export = self.admin.export_users()
        self.notify("success", "📥 User data exported successfully!")
        return self.export

    @handled
    def generate_reports(self) -> List[StudentReport]:
        self.reports = self.admin.generate_reports()
        self.notify("success", "📊 Reports generated successfully!")
        return self.reports
