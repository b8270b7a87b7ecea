"""
Live Intel - Snapshot Persistence.

============================================================
BEST-EFFORT SNAPSHOT STORE
============================================================

Every successful Snapshot is forwarded to a SnapshotSink.
Writes are best-effort: the Collector Runner logs a failure
and carries on, a failed write never fails a collection run.

- SqlSnapshotStore: SQLAlchemy ORM, one row per snapshot
- NullSnapshotSink: discards snapshots

============================================================
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional
import asyncio
import logging

from sqlalchemy import JSON, DateTime, Integer, String, create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from .exceptions import PersistenceError
from .models import Snapshot


logger = logging.getLogger(__name__)


# =============================================================
# SINK INTERFACE
# =============================================================


class SnapshotSink(ABC):
    """Outbound collaborator receiving every successful Snapshot."""

    @abstractmethod
    async def persist(self, snapshot: Snapshot) -> None:
        pass


class NullSnapshotSink(SnapshotSink):
    """Sink used when persistence is disabled."""

    async def persist(self, snapshot: Snapshot) -> None:
        return None


# =============================================================
# ORM MODELS
# =============================================================


class Base(DeclarativeBase):
    """Declarative base for live intel tables."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class IntelSnapshotRecord(Base):
    """
    One persisted collection result.

    Update Frequency: Per successful collection
    """
    __tablename__ = "intel_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    obtained_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
    metrics: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    advisories: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    persisted_at: Mapped[datetime] = mapped_column(nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "category": self.category,
            "obtained_at": self.obtained_at.isoformat(),
            "metrics": self.metrics,
            "advisories": self.advisories,
        }


# =============================================================
# SQL STORE
# =============================================================


class SqlSnapshotStore(SnapshotSink):
    """
    SQLAlchemy-backed snapshot store.

    Usage:
        store = SqlSnapshotStore.from_url("sqlite:///live_intel.db")
        store.create_tables()
        await store.persist(snapshot)
        rows = store.recent("fuel-prices", limit=10)
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlSnapshotStore":
        logger.info(f"Creating snapshot store for: {database_url.split('@')[-1]}")
        kwargs: Dict[str, Any] = {}
        if database_url.startswith("sqlite"):
            # Writes run on a worker thread
            kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        return cls(create_engine(database_url, echo=echo, future=True, **kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_tables(self) -> None:
        Base.metadata.create_all(self._engine)

    @contextmanager
    def transaction_scope(self) -> Generator[Session, None, None]:
        """
        Commits only if no exception occurs.

        Raises:
            PersistenceError on any database failure
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"Transaction failed: {e}", original_exception=e) from e
        finally:
            session.close()

    def persist_sync(self, snapshot: Snapshot) -> int:
        """Insert one snapshot row and return its id."""
        with self.transaction_scope() as session:
            record = IntelSnapshotRecord(
                source_id=snapshot.source_id,
                category=snapshot.category.value,
                obtained_at=snapshot.obtained_at,
                metrics=snapshot.metrics,
                advisories=[a.to_dict() for a in snapshot.advisories],
                persisted_at=datetime.now(timezone.utc),
            )
            session.add(record)
            session.flush()
            record_id = record.id

        logger.debug(f"Persist intel_snapshots: inserted=1 (source={snapshot.source_id})")
        return record_id

    async def persist(self, snapshot: Snapshot) -> None:
        """Insert on a worker thread so the event loop keeps running."""
        await asyncio.to_thread(self.persist_sync, snapshot)

    def recent(self, source_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent persisted snapshots of a source, newest first."""
        with self.transaction_scope() as session:
            rows = session.execute(
                select(IntelSnapshotRecord)
                .where(IntelSnapshotRecord.source_id == source_id)
                .order_by(IntelSnapshotRecord.id.desc())
                .limit(limit)
            ).scalars().all()
            return [row.to_dict() for row in rows]

    def count(self, source_id: Optional[str] = None) -> int:
        with self.transaction_scope() as session:
            query = select(func.count(IntelSnapshotRecord.id))
            if source_id is not None:
                query = query.where(IntelSnapshotRecord.source_id == source_id)
            return session.execute(query).scalar_one()
