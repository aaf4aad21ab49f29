"""Declarative base for the users_api ORM models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Holds the metadata that ``create_all`` builds the schema from."""
