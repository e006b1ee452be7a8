"""SQLAlchemy-backed unit of work for contact reconciliation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from contactlink.adapters.sqlalchemy.mappings import start_mappers
from contactlink.adapters.sqlalchemy.migrations import upgrade_head
from contactlink.adapters.sqlalchemy.repositories import SqlAlchemyContactRepository
from contactlink.config import get_database_config
from contactlink.domain.ports.unit_of_work import ContactRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the adapter or a unit of work is used in the wrong state."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def reset(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.session_factory = None

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised; call "
                "contactlink.adapters.sqlalchemy.startup() first"
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create (or adopt) the engine, migrate the schema and prepare sessions."""

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapter already initialised; pass force=True to rebind")

    resolved_engine = engine or create_engine(database_uri or get_database_config().uri)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.bind(resolved_engine)


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and forget it."""

    _STATE.reset()


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; leaving the block uncommitted rolls back."""

    def __init__(self) -> None:
        self.session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyContactUnitOfWork(BaseSqlAlchemyUnitOfWork[ContactRepositories]):
    """Unit of work exposing the contact repository."""

    def _build_repositories(self, session: Session) -> ContactRepositories:
        return ContactRepositories(contacts=SqlAlchemyContactRepository(session))


if TYPE_CHECKING:
    from contactlink.domain.ports.unit_of_work import ContactUnitOfWork

    _uow_check: ContactUnitOfWork = SqlAlchemyContactUnitOfWork()
