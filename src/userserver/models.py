"""
User data model.

The store owns users; this module only describes the two shapes a user
takes on the wire:

    UserPayload   what a client sends     {"name": ..., "email": ...}
    User          what the server returns {"id": ..., "name": ..., "email": ...}

Users are rebuilt from a row on every request and dropped once the response
is written. Nothing here is cached.
"""

from typing import Any, Sequence

from pydantic import BaseModel, StrictStr, TypeAdapter


class UserPayload(BaseModel):
    """Body of a create or update request. Both fields are required strings."""

    name: StrictStr
    email: StrictStr


class User(BaseModel):
    """A stored user. Field order matches the row order (id, name, email)."""

    id: int
    name: str
    email: str

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "User":
        """Build a user from a positional (id, name, email) row."""
        return cls(id=row[0], name=row[1], email=row[2])

    def to_json(self) -> str:
        return self.model_dump_json()


_USER_LIST = TypeAdapter(list[User])


def users_to_json(users: list[User]) -> str:
    """Encode a list of users as a compact JSON array."""
    return _USER_LIST.dump_json(users).decode("utf-8")
