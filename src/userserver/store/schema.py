"""
Schema of the user store.

Declared with SQLAlchemy metadata so the same definition creates the table
on PostgreSQL (SERIAL id) and on SQLite (INTEGER PRIMARY KEY rowid alias).
Column order is the row order handlers rely on: (id, name, email).
"""

from sqlalchemy import Column, Integer, MetaData, String, Table


metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("email", String, nullable=False),
)
