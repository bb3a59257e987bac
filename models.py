# models.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

CATEGORY_TECHNICAL = "technical"
CATEGORY_NON_TECHNICAL = "non-technical"
CATEGORIES = (CATEGORY_TECHNICAL, CATEGORY_NON_TECHNICAL)

TYPE_CODING = "coding"
TYPE_MCQ = "mcq"

# Submission.type values
SUBMISSION_MCQ = "mcq"
SUBMISSION_TECHNICAL = "technical"


@dataclass
class User:
    id: int
    name: str
    email: str
    password: str
    role: str = ROLE_USER
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "User":
        return User(
            id=int(d["id"]),
            name=str(d.get("name", "")),
            email=str(d.get("email", "")),
            password=str(d.get("password", "")),
            role=d.get("role") if d.get("role") in ROLES else ROLE_USER,
            created_at=d.get("created_at"),
        )


@dataclass
class Challenge:
    id: int
    question: str
    answer: str
    date: str  # ISO day, YYYY-MM-DD
    category: str
    type: str
    created_by: str = ""
    created_at: Optional[str] = None
    options: Optional[List[str]] = None  # only for mcq
    expected_output: Optional[str] = None  # only for coding
    difficulty: Optional[str] = None

    @property
    def is_mcq(self) -> bool:
        return self.type == TYPE_MCQ

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return {k: v for k, v in d.items() if v is not None}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Challenge":
        category = d.get("category", CATEGORY_TECHNICAL)
        return Challenge(
            id=int(d["id"]),
            question=str(d.get("question", "")),
            answer=str(d.get("answer", "")),
            date=str(d.get("date", "")),
            category=category,
            type=d.get("type") or (TYPE_CODING if category == CATEGORY_TECHNICAL else TYPE_MCQ),
            created_by=str(d.get("created_by", "")),
            created_at=d.get("created_at"),
            options=list(d["options"]) if d.get("options") else None,
            expected_output=d.get("expected_output"),
            difficulty=d.get("difficulty"),
        )


@dataclass
class Submission:
    challenge_id: int
    type: str
    answer: str
    is_correct: bool
    points: int
    submitted_at: str
    output: Optional[str] = None  # only for technical

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        if d["output"] is None:
            del d["output"]
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Submission":
        return Submission(
            challenge_id=int(d.get("challenge_id", 0)),
            type=str(d.get("type", "")),
            answer=str(d.get("answer", "")),
            is_correct=bool(d.get("is_correct", False)),
            points=int(d.get("points", 0)),
            submitted_at=str(d.get("submitted_at", "")),
            output=d.get("output"),
        )


@dataclass
class Progress:
    total_score: int = 0
    completed_challenges: int = 0
    current_streak: int = 0
    last_activity: Optional[str] = None
    submissions: List[Submission] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "completed_challenges": self.completed_challenges,
            "current_streak": self.current_streak,
            "last_activity": self.last_activity,
            "submissions": [s.to_dict() for s in self.submissions],
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Progress":
        # absent fields read as zero, matching a freshly created record
        return Progress(
            total_score=int(d.get("total_score") or 0),
            completed_challenges=int(d.get("completed_challenges") or 0),
            current_streak=int(d.get("current_streak") or 0),
            last_activity=d.get("last_activity"),
            submissions=[Submission.from_dict(s) for s in d.get("submissions") or []],
        )
