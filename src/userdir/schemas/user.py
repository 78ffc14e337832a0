"""Pydantic schemas for users.

Learn: request bodies and responses use camelCase on the wire
(firstName, phoneNumber, ...) through an alias generator; Python code
uses snake_case attributes. populate_by_name lets tests and services
build models with either spelling.

AddUserRequest checks each field in order (required, length, format)
and reports its own message for the first failure, which the
validation error handler forwards as the envelope message.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

NAME_MAX = 20
EMAIL_MAX = 254
PHONE_MAX = 20
NAME_EXTRA_CHARS = frozenset(" .'-")
PHONE_PATTERN = re.compile(r"\+39[0-9]{8,11}")


def _fail(kind: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(kind, message)


def _required(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise _fail("required", f"{label} is required")
    return value


def _max_length(value: str, limit: int, label: str) -> str:
    if len(value) > limit:
        raise _fail("too_long", f"{label} is too long")
    return value


def is_valid_name(value: str) -> bool:
    """A letter followed by letters, spaces, dots, apostrophes or hyphens."""
    if not value or not value[0].isalpha():
        return False
    return all(c.isalpha() or c in NAME_EXTRA_CHARS for c in value[1:])


def is_valid_phone(value: str) -> bool:
    return PHONE_PATTERN.fullmatch(value) is not None


class AddUserRequest(BaseModel):
    """Body for both user creation and user update."""

    first_name: Optional[str] = Field(default=None, validate_default=True)
    last_name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    phone_number: Optional[str] = Field(default=None, validate_default=True)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("first_name")
    @classmethod
    def check_first_name(cls, v):
        return cls._check_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def check_last_name(cls, v):
        return cls._check_name(v, "Last name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        v = _required(v, "Email")
        return _max_length(v, EMAIL_MAX, "Email")

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, v):
        v = _required(v, "Phone")
        v = _max_length(v, PHONE_MAX, "Phone")
        if not is_valid_phone(v):
            raise _fail("pattern", "Phone is not valid")
        return v

    @staticmethod
    def _check_name(v: Optional[str], label: str) -> str:
        v = _required(v, label)
        v = _max_length(v, NAME_MAX, label)
        if not is_valid_name(v):
            raise _fail("pattern", f"{label} contains invalid characters")
        return v


class UserView(BaseModel):
    """Outward representation of a stored user."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone_number: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_user(cls, user) -> "UserView":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone_number=user.phone_number,
        )


class GetUsersResponse(BaseModel):
    total: int
    users: list[UserView]
