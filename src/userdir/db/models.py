"""User record — the only entity in the directory.

Learn: there is no database. Records live in UserStore for the
lifetime of the process; the dataclass is the stored shape, and the
store hands out copies so callers can never mutate shared state.
"""

import uuid
from dataclasses import dataclass, field, replace


def new_guid() -> str:
    return str(uuid.uuid4())


@dataclass
class User:
    first_name: str
    last_name: str
    email: str
    phone_number: str
    id: str = field(default_factory=new_guid)

    def copy(self) -> "User":
        return replace(self)
