# admin.py
# Admin console: challenge creation, user management, reports and analytics.
# Every public method checks the admin role first.
from __future__ import annotations
import datetime as dt
import json
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import config
from auth import Session, utc_now
from challenges import local_day, parse_day
from errors import NotFoundError, ValidationError
from models import (
    Challenge, User,
    CATEGORIES, CATEGORY_NON_TECHNICAL, CATEGORY_TECHNICAL, ROLE_ADMIN, ROLE_USER, ROLES,
    TYPE_CODING, TYPE_MCQ,
)
from store import Repository

logger = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@dataclass
class UserRow:
    user: User
    total_score: int
    completed_challenges: int
    current_streak: int
    toggle_role: str


@dataclass
class StudentReport:
    user: User
    total_score: int
    completed_challenges: int
    current_streak: int
    submission_count: int
    average_score: int


@dataclass
class Analytics:
    total_users: int
    admin_users: int
    regular_users: int
    active_today: int
    total_challenges: int
    completion_rate: int


class AdminConsole:
    def __init__(self, repo: Repository, session: Session,
                 clock: Callable[[], dt.datetime] = utc_now, tz: Optional[str] = None):
        self.repo = repo
        self.session = session
        self.clock = clock
        self.tz = tz or config.TIMEZONE

    def add_challenge(self, category: str, question: str, answer: str, date: str,
                      options: Optional[Sequence[str]] = None, difficulty: Optional[str] = None) -> Challenge:
        admin = self.session.require_admin()
        question, answer, date = (question or "").strip(), (answer or "").strip(), (date or "").strip()
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown challenge type: {category}")
        if not question or not answer or not date:
            raise ValidationError("Please fill in all required fields")
        day = parse_day(date)
        if day is None:
            raise ValidationError("Date must look like YYYY-MM-DD")

        now = self.clock()
        challenges = self.repo.challenges()
        challenge = Challenge(
            id=max([int(now.timestamp() * 1000)] + [c.id + 1 for c in challenges]),
            question=question,
            answer=answer,
            date=day.isoformat(),
            category=category,
            type=TYPE_CODING if category == CATEGORY_TECHNICAL else TYPE_MCQ,
            created_by=admin.email,
            created_at=now.isoformat(),
            difficulty=difficulty or None,
        )
        if category == CATEGORY_NON_TECHNICAL:
            opts = [(o or "").strip() for o in (options or [])]
            if len(opts) != 4 or not all(opts):
                raise ValidationError("Please fill in all MCQ options")
            challenge.options = opts
        else:
            challenge.expected_output = answer

        challenges.append(challenge)
        self.repo.save_challenges(challenges)
        logger.info("Challenge %s added for %s by %s", challenge.id, challenge.date, admin.email)
        return challenge

    def list_users(self) -> List[UserRow]:
        self.session.require_admin()
        rows = []
        for u in self.repo.users():
            p = self.repo.progress(u.id)
            rows.append(UserRow(
                user=u,
                total_score=p.total_score,
                completed_challenges=p.completed_challenges,
                current_streak=p.current_streak,
                toggle_role=ROLE_USER if u.role == ROLE_ADMIN else ROLE_ADMIN,
            ))
        return rows

    def change_user_role(self, user_id: int, new_role: str, confirmed: bool = False) -> Optional[User]:
        """Returns the updated user, or None when the change was not confirmed."""
        self.session.require_admin()
        if new_role not in ROLES:
            raise ValidationError(f"Unknown role: {new_role}")

        users = self.repo.users()
        user = next((u for u in users if u.id == int(user_id)), None)
        if user is None:
            raise NotFoundError("User not found")
        if not confirmed:
            return None

        old_role = user.role
        user.role = new_role
        self.repo.save_users(users)
        if self.session.user and self.session.user.id == user.id:
            self.session.set_role(new_role)
        logger.info("%s's role changed from %s to %s", user.name, old_role, new_role)
        return user

    def export_users(self) -> Tuple[str, str]:
        self.session.require_admin()
        users = [u.to_dict() for u in self.repo.users()]
        filename = f"users_export_{local_day(self.clock(), self.tz).isoformat()}.json"
        logger.info("Exporting %d users to %s", len(users), filename)
        return filename, json.dumps(users, indent=2)

    def list_student_reports(self) -> List[StudentReport]:
        self.session.require_admin()
        reports = []
        for u in self.repo.users():
            if u.role != ROLE_USER:
                continue
            p = self.repo.progress(u.id)
            count = len(p.submissions)
            reports.append(StudentReport(
                user=u,
                total_score=p.total_score,
                completed_challenges=p.completed_challenges,
                current_streak=p.current_streak,
                submission_count=count,
                average_score=round_half_up(p.total_score / count) if count else 0,
            ))
        return reports

    def generate_reports(self) -> List[StudentReport]:
        reports = self.list_student_reports()
        logger.info("Reports generated for %d students", len(reports))
        return reports

    def load_analytics(self) -> Analytics:
        self.session.require_admin()
        users = self.repo.users()
        total = len(users)
        admins = sum(1 for u in users if u.role == ROLE_ADMIN)
        regular = sum(1 for u in users if u.role == ROLE_USER)
        active = math.floor(regular * config.ACTIVE_RATIO)  # simulated
        return Analytics(
            total_users=total,
            admin_users=admins,
            regular_users=regular,
            active_today=active,
            total_challenges=len(self.repo.challenges()),
            completion_rate=round_half_up(active / total * 100) if total else 0,
        )
