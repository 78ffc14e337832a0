"""User query engine — filter → sort → paginate over the user store.

Learn: the pipeline is deterministic and reads the store fresh on
every call (no caching), so two calls with the same spec against an
unchanged store return the same ordered page:

1. reject a missing spec or a negative offset (InvalidCriteria)
2. a limit ≤ 0 is treated as 1
3. normalize the query: None → "", otherwise trimmed and uppercased
4. keep users whose email, first or last name contains the query
5. stable sort by the order key (default: last name descending)
6. clamp the limit to [1, 100]
7. slice [offset, offset + limit); an offset past the end is an empty page
8. map to UserView

Note that QueryPage.total is the size of the returned page, not of
the filtered set before slicing. Clients cannot compute a page count
from it. The behaviour is kept as-is and pinned by tests.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import structlog

from userdir.db.models import User
from userdir.db.store import UserStore
from userdir.errors import InternalError, InvalidCriteria, UserDirectoryError
from userdir.schemas.user import UserView

logger = structlog.get_logger()

MIN_LIMIT = 1
MAX_LIMIT = 100


class OrderKey(str, Enum):
    BY_FIRSTNAME = "BY_FIRSTNAME"
    BY_FIRSTNAME_DESC = "BY_FIRSTNAME_DESC"
    BY_LASTNAME = "BY_LASTNAME"
    BY_LASTNAME_DESC = "BY_LASTNAME_DESC"


DEFAULT_ORDER = OrderKey.BY_LASTNAME_DESC

# order key → (attribute, descending)
_ORDERING = {
    OrderKey.BY_FIRSTNAME: ("first_name", False),
    OrderKey.BY_FIRSTNAME_DESC: ("first_name", True),
    OrderKey.BY_LASTNAME: ("last_name", False),
    OrderKey.BY_LASTNAME_DESC: ("last_name", True),
}


@dataclass(frozen=True)
class QuerySpec:
    query: Optional[str] = None
    order: Optional[OrderKey] = None
    offset: int = 0
    limit: int = 10


@dataclass
class QueryPage:
    items: list[UserView] = field(default_factory=list)
    total: int = 0


def normalize_query(query: Optional[str]) -> str:
    return "" if query is None else query.strip().upper()


def matches(user: User, needle: str) -> bool:
    """Case-insensitive substring match on email, first and last name."""
    return (
        needle in user.email.upper()
        or needle in user.first_name.upper()
        or needle in user.last_name.upper()
    )


def _fold_char(c: str) -> str:
    # Single-character mappings only: "ß" stays "ß", never "ss".
    up = c.upper()
    if len(up) != 1:
        up = c
    low = up.lower()
    return low if len(low) == 1 else up


def collation_key(value: str) -> str:
    """Case-insensitive ordinal key, folded one character at a time."""
    return "".join(_fold_char(c) for c in value)


def sort_users(users: list[User], order: Optional[OrderKey]) -> list[User]:
    """Stable sort; ties keep store insertion order."""
    attr, descending = _ORDERING[order or DEFAULT_ORDER]
    return sorted(
        users,
        key=lambda u: collation_key(getattr(u, attr)),
        reverse=descending,
    )


def safe_limit(limit: int) -> int:
    return min(max(MIN_LIMIT, limit), MAX_LIMIT)


class UserQueryEngine:
    """Filters, orders and paginates the users in a store."""

    def __init__(self, store: UserStore):
        self.store = store

    def query(self, spec: Optional[QuerySpec]) -> QueryPage:
        try:
            return self._query(spec)
        except UserDirectoryError:
            raise
        except Exception:
            logger.exception("users.query_failed")
            raise InternalError()

    def _query(self, spec: Optional[QuerySpec]) -> QueryPage:
        if spec is None:
            raise InvalidCriteria("Criteria is required")
        if spec.offset < 0:
            raise InvalidCriteria("Offset < 0")

        limit = spec.limit if spec.limit > 0 else 1
        needle = normalize_query(spec.query)

        filtered = [u for u in self.store.get_all() if matches(u, needle)]
        ordered = sort_users(filtered, spec.order)

        size = len(ordered)
        if spec.offset >= size:
            selected = []
        else:
            end = min(size, spec.offset + safe_limit(limit))
            selected = ordered[spec.offset:end]

        items = [UserView.from_user(u) for u in selected]
        return QueryPage(items=items, total=len(items))
