# challenges.py
# Today's challenges and the two submission paths (MCQ and code).
from __future__ import annotations
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

import config
import runner
from auth import Session, utc_now
from errors import AuthenticationError, DuplicateSubmissionError, NotFoundError, ValidationError
from models import (
    Challenge, Progress, Submission,
    CATEGORY_NON_TECHNICAL, CATEGORY_TECHNICAL, SUBMISSION_MCQ, SUBMISSION_TECHNICAL,
)
from store import Repository

logger = logging.getLogger(__name__)


def local_day(ts: dt.datetime, tz: str) -> dt.date:
    """Calendar day of an aware timestamp in the configured zone."""
    return ts.astimezone(ZoneInfo(tz)).date()


def parse_day(s: str) -> Optional[dt.date]:
    try:
        return dt.date.fromisoformat((s or "")[:10])
    except ValueError:
        return None


@dataclass
class SubmissionResult:
    submission: Submission
    correct_answer: str
    total_score: int
    first_today: bool


class ChallengeEngine:
    def __init__(self, repo: Repository, session: Session,
                 clock: Callable[[], dt.datetime] = utc_now, tz: Optional[str] = None):
        self.repo = repo
        self.session = session
        self.clock = clock
        self.tz = tz or config.TIMEZONE

    def today(self) -> dt.date:
        return local_day(self.clock(), self.tz)

    def _submitted_on(self, s: Submission) -> Optional[dt.date]:
        try:
            ts = dt.datetime.fromisoformat(s.submitted_at)
        except ValueError:
            return None
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=dt.timezone.utc)
        return local_day(ts, self.tz)

    def _user_id(self) -> int:
        if not self.session.authenticated:
            raise AuthenticationError("Please sign in first.")
        return self.session.user.id

    def resolve_todays_challenge(self, category: str) -> Optional[Challenge]:
        # first match wins; later challenges on the same day are shadowed
        today = self.today()
        for c in self.repo.challenges():
            if c.category == category and parse_day(c.date) == today:
                return c
        return None

    def todays_submissions(self, progress: Progress) -> List[Submission]:
        today = self.today()
        return [s for s in progress.submissions if self._submitted_on(s) == today]

    def todays_status(self) -> Dict[str, bool]:
        subs = self.todays_submissions(self.repo.progress(self._user_id()))
        return {
            SUBMISSION_TECHNICAL: any(s.type == SUBMISSION_TECHNICAL for s in subs),
            SUBMISSION_MCQ: any(s.type == SUBMISSION_MCQ for s in subs),
        }

    def dashboard_stats(self) -> Dict[str, object]:
        user = self.session.user
        p = self.repo.progress(self._user_id())
        return {
            "name": user.name,
            "current_streak": p.current_streak,
            "total_score": p.total_score,
            "completed_challenges": p.completed_challenges,
        }

    def _record(self, user_id: int, progress: Progress, sub: Submission) -> bool:
        first_today = not self.todays_submissions(progress)
        progress.submissions.append(sub)
        progress.total_score += sub.points
        if first_today:
            progress.completed_challenges += 1
            progress.current_streak += 1
        progress.last_activity = sub.submitted_at
        self.repo.save_progress(user_id, progress)
        return first_today

    def submit_mcq(self, selected: Optional[str]) -> SubmissionResult:
        user_id = self._user_id()
        if not selected:
            raise ValidationError("Please select an answer before submitting.")

        challenge = self.resolve_todays_challenge(CATEGORY_NON_TECHNICAL)
        if challenge is None:
            raise NotFoundError("No MCQ challenge found for today.")

        progress = self.repo.progress(user_id)
        if any(s.challenge_id == challenge.id for s in self.todays_submissions(progress)):
            raise DuplicateSubmissionError("You have already submitted this challenge today.")

        correct = selected == challenge.answer
        sub = Submission(
            challenge_id=challenge.id,
            type=SUBMISSION_MCQ,
            answer=selected,
            is_correct=correct,
            points=config.POINTS_MCQ_CORRECT if correct else 0,
            submitted_at=self.clock().isoformat(),
        )
        first_today = self._record(user_id, progress, sub)
        logger.info("MCQ result: selected=%s correct=%s points=%s", selected, challenge.answer, sub.points)
        return SubmissionResult(sub, challenge.answer, progress.total_score, first_today)

    def run_code(self, code: str) -> str:
        if not (code or "").strip():
            raise ValidationError("Please write some code first.")
        return runner.run(code)

    def submit_code(self, code: str) -> SubmissionResult:
        user_id = self._user_id()
        output = self.run_code(code)

        challenge = self.resolve_todays_challenge(CATEGORY_TECHNICAL)
        if challenge is None:
            raise NotFoundError("No technical challenge found for today.")

        # graded against the runner's fixed pattern, not challenge.expected_output
        correct = runner.is_expected(output)
        sub = Submission(
            challenge_id=challenge.id,
            type=SUBMISSION_TECHNICAL,
            answer=code,
            output=output,
            is_correct=correct,
            points=config.POINTS_CODE_CORRECT if correct else config.POINTS_CODE_ATTEMPT,
            submitted_at=self.clock().isoformat(),
        )
        progress = self.repo.progress(user_id)
        first_today = self._record(user_id, progress, sub)
        logger.info("Code submission result: correct=%s points=%s", correct, sub.points)
        return SubmissionResult(sub, runner.EXPECTED_PATTERN, progress.total_score, first_today)
