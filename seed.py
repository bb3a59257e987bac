# seed.py
# Demo data written on first run. Each key is only written if it is absent,
# so an existing store is never overwritten.
from __future__ import annotations
import datetime as dt
import logging
import random
from typing import List, Optional

import config
from models import (
    Challenge, Progress, User,
    CATEGORY_NON_TECHNICAL, CATEGORY_TECHNICAL, ROLE_ADMIN, ROLE_USER, TYPE_CODING, TYPE_MCQ,
)
from runner import EXPECTED_PATTERN
from store import CHALLENGES_KEY, USERS_KEY, Repository, progress_key

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@dailychallenge.com"


def _iso(d: dt.date) -> str:
    return dt.datetime(d.year, d.month, d.day, tzinfo=dt.timezone.utc).isoformat()


def demo_users() -> List[User]:
    return [
        User(id=1, name="Admin User", email=ADMIN_EMAIL, password="admin123",
             role=ROLE_ADMIN, created_at=_iso(dt.date(2025, 9, 1))),
        User(id=2, name="Regular User", email="user@example.com", password="user123",
             role=ROLE_USER, created_at=_iso(dt.date(2025, 9, 2))),
        User(id=3, name="John Doe", email="john@example.com", password="demo123",
             role=ROLE_USER, created_at=_iso(dt.date(2025, 9, 3))),
    ]


def demo_challenges() -> List[Challenge]:
    day = config.SEED_DATE.isoformat()
    return [
        Challenge(
            id=1,
            question="Write a program in Python to print the following pattern for n=5:",
            answer="for i in range(1, 6):\n    print('* ' * i)",
            expected_output=EXPECTED_PATTERN,
            date=day, category=CATEGORY_TECHNICAL, type=TYPE_CODING,
            difficulty="Easy", created_by=ADMIN_EMAIL,
        ),
        Challenge(
            id=2,
            question="Which of the following is a key benefit of writing clean code?",
            options=["A. Slower execution", "B. Easier maintenance", "C. More bugs", "D. Less readability"],
            answer="B",
            date=day, category=CATEGORY_NON_TECHNICAL, type=TYPE_MCQ,
            difficulty="Easy", created_by=ADMIN_EMAIL,
        ),
    ]


def demo_progress(user: User, rng: random.Random, now: str) -> Progress:
    if user.role == ROLE_ADMIN:
        return Progress(total_score=500, completed_challenges=15, current_streak=12, last_activity=now)
    return Progress(
        total_score=rng.randint(100, 499),
        completed_challenges=rng.randint(3, 14),
        current_streak=rng.randint(2, 9),
        last_activity=now,
    )


def initialize_demo_data(repo: Repository, rng: Optional[random.Random] = None,
                         now: Optional[dt.datetime] = None) -> None:
    rng = rng or random.Random()
    stamp = (now or dt.datetime.now(dt.timezone.utc)).isoformat()
    users = demo_users()

    if not repo.has(USERS_KEY):
        repo.save_users(users)
        logger.info("Demo users created")
    if not repo.has(CHALLENGES_KEY):
        repo.save_challenges(demo_challenges())
        logger.info("Demo challenges created")
    for user in users:
        if not repo.has(progress_key(user.id)):
            repo.save_progress(user.id, demo_progress(user, rng, stamp))
