"""User service — business logic for the user directory.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the store. Every public
operation has the same error edge:

- UserDirectoryError (validation, not found, ...) propagates unchanged
- anything else is logged with its stack trace and replaced by a
  generic InternalError, so no internal detail reaches the client
"""

import re
from dataclasses import dataclass
from typing import Optional

import structlog

from userdir.db.models import User
from userdir.db.store import UserStore
from userdir.errors import (
    InternalError,
    NotFoundError,
    UserDirectoryError,
    ValidationError,
)
from userdir.schemas.user import is_valid_phone
from userdir.services.user_query import QueryPage, QuerySpec, UserQueryEngine

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


@dataclass(frozen=True)
class UserCriteria:
    """Field values for creating or updating a user."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


def is_valid_email(email: Optional[str]) -> bool:
    return email is not None and EMAIL_PATTERN.fullmatch(email) is not None


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class UserService:
    """Business logic for user management."""

    def __init__(self, store: UserStore):
        self.store = store
        self.engine = UserQueryEngine(store)

    def add_user(self, criteria: UserCriteria) -> User:
        try:
            self._validate_new_user(criteria)
            user = self.store.insert(
                User(
                    first_name=criteria.first_name,
                    last_name=criteria.last_name,
                    email=criteria.email,
                    phone_number=criteria.phone_number,
                )
            )
        except UserDirectoryError:
            raise
        except Exception:
            logger.exception("users.add_failed")
            raise InternalError()

        logger.info("users.created", user_id=user.id)
        return user

    def update_user(self, criteria: UserCriteria, guid: Optional[str]) -> User:
        try:
            if _blank(guid):
                raise ValidationError("Guid is required")
            user = self.store.update(
                guid,
                first_name=criteria.first_name,
                last_name=criteria.last_name,
                email=criteria.email,
                phone_number=criteria.phone_number,
            )
            if user is None:
                raise NotFoundError("User not found")
        except UserDirectoryError:
            raise
        except Exception:
            logger.exception("users.update_failed", user_id=guid)
            raise InternalError()

        logger.info("users.updated", user_id=user.id)
        return user

    def get_users(self, spec: Optional[QuerySpec]) -> QueryPage:
        return self.engine.query(spec)

    def email_registered(self, email: str) -> bool:
        return self.store.find_by_email(email) is not None

    @staticmethod
    def _validate_new_user(criteria: UserCriteria) -> None:
        if _blank(criteria.first_name):
            raise ValidationError("First name is required")
        if _blank(criteria.last_name):
            raise ValidationError("Last name is required")
        if _blank(criteria.email):
            raise ValidationError("Email is required")
        if _blank(criteria.phone_number):
            raise ValidationError("Phone is required")
        if not is_valid_email(criteria.email):
            raise ValidationError("Email is not valid")
        if not is_valid_phone(criteria.phone_number):
            raise ValidationError("Phone is not valid")
