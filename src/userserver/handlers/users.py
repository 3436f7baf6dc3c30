"""
=============================================================================
USER HANDLERS
=============================================================================

The five operations on the user resource.

=============================================================================
HANDLER CONTRACT
=============================================================================

Every handler takes the raw request string and returns a Response. None
of them raise; every failure becomes one of three outcomes:

    ┌───────────┬───────────────────────┬────────────────────────────────────┐
    │ Handler   │ Preconditions         │ Outcome                            │
    ├───────────┼───────────────────────┼────────────────────────────────────┤
    │ create    │ body                  │ 200 "User created"                 │
    │ fetch_one │ id                    │ 200 User JSON / 404 no such row    │
    │ fetch_all │ -                     │ 200 JSON array (maybe empty)       │
    │ update    │ id, body              │ 200 "User updated"                 │
    │ delete    │ id                    │ 200 "User deleted" / 404 0 rows    │
    └───────────┴───────────────────────┴────────────────────────────────────┘

    Any precondition, connection or statement failure  → 500 "Error"

Preconditions are checked in order (id, then body, then the store
connection). The first one that fails short-circuits to 500 and the store
statement is never sent.

=============================================================================
"""

import functools
import logging
from typing import Callable

from ..errors import RouteNotFound, UserServerError
from ..http.extractors import parse_user_id, parse_user_payload
from ..http.response import Response, internal_error, not_found, ok
from ..models import User, users_to_json
from ..store import Store


logger = logging.getLogger(__name__)


USER_NOT_FOUND = "User not found"

INSERT_USER = "INSERT INTO users (name, email) VALUES (:name, :email)"
SELECT_USER = "SELECT id, name, email FROM users WHERE id = :id"
SELECT_USERS = "SELECT id, name, email FROM users ORDER BY id"
UPDATE_USER = "UPDATE users SET name = :name, email = :email WHERE id = :id"
DELETE_USER = "DELETE FROM users WHERE id = :id"


def _absorb_errors(handler: Callable[["UserHandlers", str], Response]):
    """
    Convert server errors raised inside a handler into responses.

        RouteNotFound (incl. RowNotFound)  → 404 "User not found"
        any other UserServerError          → 500 "Error", logged
    """
    @functools.wraps(handler)
    def wrapper(self: "UserHandlers", request: str) -> Response:
        try:
            return handler(self, request)
        except RouteNotFound:
            return not_found(USER_NOT_FOUND)
        except UserServerError as e:
            logger.error(f"{handler.__name__} failed: {type(e).__name__}: {e}")
            return internal_error()
    return wrapper


class UserHandlers:
    """
    User CRUD handlers bound to a store.

    Usage:
        users = UserHandlers(Store(config.database_url))
        dispatcher.add_route("POST /users", users.create)
    """

    def __init__(self, store: Store):
        self._store = store

    @_absorb_errors
    def create(self, request: str) -> Response:
        payload = parse_user_payload(request)

        with self._store.connect() as client:
            client.execute(INSERT_USER, {"name": payload.name, "email": payload.email})

        return ok("User created")

    @_absorb_errors
    def fetch_one(self, request: str) -> Response:
        user_id = parse_user_id(request)

        with self._store.connect() as client:
            row = client.query_one(SELECT_USER, {"id": user_id})

        return ok(User.from_row(row).to_json())

    @_absorb_errors
    def fetch_all(self, request: str) -> Response:
        with self._store.connect() as client:
            rows = client.query(SELECT_USERS)

        return ok(users_to_json([User.from_row(row) for row in rows]))

    @_absorb_errors
    def update(self, request: str) -> Response:
        """
        Overwrite name and email of a user.

        An update that matches no row is still answered with 200; only a
        warning is logged. Delete is the only operation that checks the
        affected-row count.
        """
        user_id = parse_user_id(request)
        payload = parse_user_payload(request)

        with self._store.connect() as client:
            affected = client.execute(
                UPDATE_USER,
                {"name": payload.name, "email": payload.email, "id": user_id},
            )

        if affected == 0:
            logger.warning(f"Update matched no user with id {user_id}")

        return ok("User updated")

    @_absorb_errors
    def delete(self, request: str) -> Response:
        user_id = parse_user_id(request)

        with self._store.connect() as client:
            affected = client.execute(DELETE_USER, {"id": user_id})

        if affected == 0:
            return not_found(USER_NOT_FOUND)

        return ok("User deleted")
