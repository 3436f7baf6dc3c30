"""
Relational store access for user rows.

    Store          builds the engine from the connection URL, hands out clients
    StoreClient    one open connection: execute / query / query_one
    users          table definition (id, name, email)
"""

from .client import Store, StoreClient
from .schema import metadata, users

__all__ = [
    "Store",
    "StoreClient",
    "metadata",
    "users",
]
