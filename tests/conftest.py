import datetime as dt
import random

import pytest

from controller import DailyChallengeApp
from models import Challenge, CATEGORY_NON_TECHNICAL, CATEGORY_TECHNICAL, TYPE_CODING, TYPE_MCQ
from runner import EXPECTED_PATTERN
from store import MemoryStore, Repository

TODAY = dt.date(2026, 3, 14)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kw):
        self.now = self.now + dt.timedelta(**kw)


@pytest.fixture
def clock():
    return FakeClock(dt.datetime(2026, 3, 14, 12, 0, tzinfo=dt.timezone.utc))


@pytest.fixture
def repo():
    return Repository(MemoryStore())


def todays_challenges(day=TODAY):
    return [
        Challenge(id=101, question="Print a triangle", answer="for ...", expected_output=EXPECTED_PATTERN,
                  date=day.isoformat(), category=CATEGORY_TECHNICAL, type=TYPE_CODING),
        Challenge(id=102, question="Clean code benefit?", answer="B",
                  options=["A. Slower", "B. Easier maintenance", "C. Bugs", "D. Less readable"],
                  date=day.isoformat(), category=CATEGORY_NON_TECHNICAL, type=TYPE_MCQ),
    ]


@pytest.fixture
def app(repo, clock):
    a = DailyChallengeApp(repo, clock=clock, tz="UTC", rng=random.Random(7)).start()
    for c in todays_challenges():
        repo.append_challenge(c)
    return a


@pytest.fixture
def user_app(app):
    app.login("user@example.com", "user123")
    assert app.session.authenticated
    app.pop_notices()
    return app


@pytest.fixture
def admin_app(app):
    app.login("admin@dailychallenge.com", "admin123")
    assert app.is_admin()
    app.pop_notices()
    return app
