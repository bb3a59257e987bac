# auth.py
from __future__ import annotations
import datetime as dt
import logging
import re
from typing import Callable, Optional

import config
from errors import AccessDeniedError, AuthenticationError, ValidationError
from models import Progress, User, ROLE_ADMIN, ROLES, ROLE_USER
from store import Repository

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def invalid_credentials_message() -> str:
    hints = "\n".join(f"{label}: {email} / {pw}" for label, email, pw in config.DEMO_CREDENTIALS)
    return "Invalid credentials. Try:\n" + hints


class Session:
    """The single signed-in identity of one client, mirrored to the store under `currentUser_<client>`."""

    def __init__(self, repo: Repository, clock: Callable[[], dt.datetime] = utc_now,
                 client_id: Optional[str] = None):
        self.repo = repo
        self.clock = clock
        self.client_id = client_id
        self.user: Optional[User] = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    def restore(self) -> Optional[User]:
        self.user = self.repo.current_user(self.client_id)
        if self.user:
            logger.info("Found saved user: %s (role %s)", self.user.name, self.user.role)
        return self.user

    def login(self, email: str, password: str) -> User:
        email, password = (email or "").strip(), (password or "").strip()
        logger.info("Login attempt for: %s", email)
        if not email or not password:
            raise ValidationError("Please fill in all fields")

        user = next((u for u in self.repo.users() if u.email == email and u.password == password), None)
        if user is None:
            logger.info("Login failed - invalid credentials")
            raise AuthenticationError(invalid_credentials_message())

        self.user = user
        self.repo.set_current_user(user, self.client_id)
        logger.info("Login successful: %s (role %s)", user.name, user.role)
        return user

    def signup(self, name: str, email: str, password: str, role: str = ROLE_USER) -> User:
        name, email, password = (name or "").strip(), (email or "").strip(), (password or "").strip()
        if not name or not email or not password:
            raise ValidationError("Please fill in all fields")
        if not EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email address")
        if len(password) < config.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters long")
        if role not in ROLES:
            raise ValidationError(f"Unknown role: {role}")

        users = self.repo.users()
        if any(u.email == email for u in users):
            raise ValidationError("An account with this email already exists")

        now = self.clock()
        # millisecond timestamp id, bumped past existing ids so fast signups stay unique
        new_id = max([int(now.timestamp() * 1000)] + [u.id + 1 for u in users])
        user = User(id=new_id, name=name, email=email, password=password,
                    role=role, created_at=now.isoformat())
        users.append(user)
        self.repo.save_users(users)
        self.repo.save_progress(user.id, Progress())
        logger.info("User created: %s (role %s)", user.name, user.role)
        return user

    def logout(self) -> None:
        logger.info("User logging out")
        self.user = None
        self.repo.clear_current_user(self.client_id)

    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == ROLE_ADMIN

    def require_admin(self) -> User:
        if not self.is_admin():
            logger.info("Access denied: admin privileges required")
            raise AccessDeniedError()
        return self.user

    def set_role(self, role: str) -> None:
        """Apply a role change made elsewhere to the live session."""
        if self.user is None:
            return
        self.user.role = role
        self.repo.set_current_user(self.user, self.client_id)
