"""In-memory user store.

Learn: the store is shared mutable state; every concurrent request
reads or writes the same list. A single lock guards the backing list,
and every read returns copies, so a reader never sees a record halfway
through an update and two inserts can never lose each other.

There are no transactions spanning calls: update() does its lookup
and mutation under one lock acquisition instead.
"""

import threading
from typing import Optional

from fastapi import Request

from userdir.db.models import User

UPDATABLE_FIELDS = frozenset({"first_name", "last_name", "email", "phone_number"})


class UserStore:
    """Process-lifetime user collection, safe for concurrent access."""

    def __init__(self, users: Optional[list[User]] = None):
        self._lock = threading.Lock()
        self._users: list[User] = [u.copy() for u in users or []]

    def get_all(self) -> list[User]:
        """Snapshot of every user, in insertion order."""
        with self._lock:
            return [u.copy() for u in self._users]

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            for u in self._users:
                if u.id == user_id:
                    return u.copy()
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        wanted = email.casefold()
        with self._lock:
            for u in self._users:
                if u.email.casefold() == wanted:
                    return u.copy()
        return None

    def insert(self, user: User) -> User:
        with self._lock:
            if any(u.id == user.id for u in self._users):
                raise ValueError(f"Duplicate user id {user.id}")
            self._users.append(user.copy())
        return user.copy()

    def update(self, user_id: str, **fields) -> Optional[User]:
        """Update fields of one user in place. Returns None if absent."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        with self._lock:
            for u in self._users:
                if u.id == user_id:
                    for name, value in fields.items():
                        setattr(u, name, value)
                    return u.copy()
        return None

    def count(self) -> int:
        with self._lock:
            return len(self._users)


def get_store(request: Request) -> UserStore:
    """FastAPI dependency — the store owned by this app instance."""
    return request.app.state.store
