"""
Persistent key/value storage for the challenge app.

A store is a flat map of string keys to JSON strings, durable across sessions
when file-backed. Nothing is indexed: every read parses a whole blob and every
write replaces it. The layout is:

    users                -> list of User records
    challenges           -> list of Challenge records
    progress_<userId>    -> one Progress record
    currentUser_<client> -> the User signed in on that client, or absent

`Repository` is the typed API over those keys. Blobs that fail to parse are
logged and replaced by the empty/default value instead of raising.
"""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, List, Optional

from models import Challenge, Progress, User

logger = logging.getLogger(__name__)

USERS_KEY = "users"
CHALLENGES_KEY = "challenges"
CURRENT_USER_KEY = "currentUser"


def progress_key(user_id: int) -> str:
    return f"progress_{user_id}"


def current_user_key(client_id: Optional[str] = None) -> str:
    # bare key only for single-client use (tests, scripts)
    return f"{CURRENT_USER_KEY}_{client_id}" if client_id else CURRENT_USER_KEY


class MemoryStore:
    """Process-local store; used by tests and as a scratch backend."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonFileStore:
    """All keys live in one JSON object file, rewritten on every change."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Store file %s unreadable (%s); starting empty", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s is not a JSON object; starting empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, items: Dict[str, str]) -> None:
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(items, f, indent=2)
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._dump(items)

    def keys(self) -> List[str]:
        return list(self._load())


class Repository:
    def __init__(self, store):
        self.store = store

    # raw helpers
    def has(self, key: str) -> bool:
        return self.store.get_item(key) is not None

    def _read(self, key: str, default: Any) -> Any:
        raw = self.store.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Corrupt JSON under %r; using default", key)
            return default

    def _write(self, key: str, value: Any) -> None:
        self.store.set_item(key, json.dumps(value))

    # users
    def users(self) -> List[User]:
        data = self._read(USERS_KEY, [])
        try:
            return [User.from_dict(u) for u in data]
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Malformed user records; using an empty list")
            return []

    def save_users(self, users: List[User]) -> None:
        self._write(USERS_KEY, [u.to_dict() for u in users])

    def append_user(self, user: User) -> None:
        users = self.users()
        users.append(user)
        self.save_users(users)

    def find_user(self, user_id: int) -> Optional[User]:
        return next((u for u in self.users() if u.id == user_id), None)

    # challenges
    def challenges(self) -> List[Challenge]:
        data = self._read(CHALLENGES_KEY, [])
        try:
            return [Challenge.from_dict(c) for c in data]
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Malformed challenge records; using an empty list")
            return []

    def save_challenges(self, challenges: List[Challenge]) -> None:
        self._write(CHALLENGES_KEY, [c.to_dict() for c in challenges])

    def append_challenge(self, challenge: Challenge) -> None:
        challenges = self.challenges()
        challenges.append(challenge)
        self.save_challenges(challenges)

    # progress
    def progress(self, user_id: int) -> Progress:
        data = self._read(progress_key(user_id), {})
        try:
            return Progress.from_dict(data)
        except (AttributeError, TypeError, ValueError):
            logger.warning("Malformed progress for user %s; using an empty record", user_id)
            return Progress()

    def save_progress(self, user_id: int, progress: Progress) -> None:
        self._write(progress_key(user_id), progress.to_dict())

    # session mirror, one entry per client
    def current_user(self, client_id: Optional[str] = None) -> Optional[User]:
        key = current_user_key(client_id)
        raw = self.store.get_item(key)
        if raw is None:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Invalid saved user data under %r, clearing", key)
            self.clear_current_user(client_id)
            return None

    def set_current_user(self, user: User, client_id: Optional[str] = None) -> None:
        self._write(current_user_key(client_id), user.to_dict())

    def clear_current_user(self, client_id: Optional[str] = None) -> None:
        self.store.remove_item(current_user_key(client_id))
