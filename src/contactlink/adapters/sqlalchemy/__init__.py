"""SQLAlchemy adapter package for contactlink."""

from __future__ import annotations

from .mappings import contact_table, mapper_registry, start_mappers
from .repositories import SqlAlchemyContactRepository
from .unit_of_work import SqlAlchemyContactUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyContactRepository",
    "SqlAlchemyContactUnitOfWork",
    "contact_table",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
