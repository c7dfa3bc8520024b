import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol, Type, TypeVar

import structlog
from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, Session, select

from .. import models  # noqa: F401  (registers every table on the metadata)
from ..core.errors import ConstraintViolation, Unexpected
from .session import open_session

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=SQLModel)


class RecordStore(Protocol):
    """What the controllers need from persistence, nothing more."""

    def list_all(self, model: Type[M]) -> List[M]: ...

    def get(self, model: Type[M], record_id: int) -> Optional[M]: ...

    def find(self, model: Type[M], **criteria: Any) -> List[M]: ...

    def count(self, model: Type[M], criteria: Dict[str, Any], match_any: bool = False) -> int: ...

    def insert(self, record: M) -> M: ...

    def update(self, model: Type[M], record_id: int, fields: Dict[str, Any]) -> Optional[M]: ...

    def delete(self, model: Type[M], record_id: int) -> bool: ...


class SQLRecordStore:
    """
    Record store over a SQLModel engine.

    - every call opens its own session
    - ids are assigned here as max(id) + 1 (1 for an empty table)
    - one lock serializes all writes, so concurrent requests cannot hand out
      the same id or interleave a read-modify-write update
    - checks made before a write (free email) run outside the lock, so a
      write that still trips a constraint raises ConstraintViolation
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._write_lock = threading.Lock()

    def create_tables(self) -> None:
        with self._guard("create_tables"):
            SQLModel.metadata.create_all(self._engine)
        logger.info("store_ready", url=str(self._engine.url))

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            logger.warning("store_integrity_error", operation=operation, error=str(exc.orig))
            raise ConstraintViolation(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.exception("store_failure", operation=operation)
            raise Unexpected(str(exc)) from exc

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        with self._guard(operation):
            session = open_session(self._engine)
            try:
                yield session
            except SQLAlchemyError:
                session.rollback()
                raise
            finally:
                session.close()

    # ---- reads ----

    def list_all(self, model: Type[M]) -> List[M]:
        with self._session("list_all") as session:
            return list(session.exec(select(model).order_by(model.id)).all())

    def get(self, model: Type[M], record_id: int) -> Optional[M]:
        with self._session("get") as session:
            return session.get(model, record_id)

    def find(self, model: Type[M], **criteria: Any) -> List[M]:
        statement = select(model)
        for name, value in criteria.items():
            statement = statement.where(getattr(model, name) == value)
        with self._session("find") as session:
            return list(session.exec(statement.order_by(model.id)).all())

    def count(self, model: Type[M], criteria: Dict[str, Any], match_any: bool = False) -> int:
        clauses = [getattr(model, name) == value for name, value in criteria.items()]
        statement = select(func.count(model.id))
        if clauses:
            statement = statement.where(or_(*clauses)) if match_any else statement.where(*clauses)
        with self._session("count") as session:
            return int(session.exec(statement).one())

    # ---- writes ----

    def insert(self, record: M) -> M:
        model = type(record)
        with self._write_lock, self._session("insert") as session:
            current_max = session.exec(select(func.max(model.id))).one()
            record.id = (current_max or 0) + 1
            session.add(record)
            session.commit()
            session.refresh(record)
            logger.debug("record_inserted", table=model.__tablename__, id=record.id)
            return record

    def update(self, model: Type[M], record_id: int, fields: Dict[str, Any]) -> Optional[M]:
        with self._write_lock, self._session("update") as session:
            record = session.get(model, record_id)
            if record is None:
                return None
            for name, value in fields.items():
                setattr(record, name, value)
            session.add(record)
            session.commit()
            session.refresh(record)
            logger.debug("record_updated", table=model.__tablename__, id=record_id, fields=sorted(fields))
            return record

    def delete(self, model: Type[M], record_id: int) -> bool:
        with self._write_lock, self._session("delete") as session:
            record = session.get(model, record_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
            logger.debug("record_deleted", table=model.__tablename__, id=record_id)
            return True
