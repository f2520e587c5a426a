"""
Local SQLite store backing the offline client.

Holds queued mutations (progress and game scores), cached GET responses and
content downloaded for offline use. Every entry carries a timestamp and
survives process restarts.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import JSON, Column, Float, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

ClientBase = declarative_base()

KIND_PROGRESS = "progress"
KIND_GAME_SCORE = "game_score"

STATUS_PENDING = "pending"
STATUS_IN_FLIGHT = "in_flight"


class QueueItem(ClientBase):
    """A mutating request waiting to be replayed. Deleted once acknowledged."""

    __tablename__ = "offline_queue"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String, nullable=False, index=True)  # progress, game_score
    endpoint = Column(String, nullable=False)
    payload = Column(JSON, nullable=False)
    token = Column(Text, nullable=True)
    enqueued_at = Column(Float, nullable=False)
    status = Column(String, nullable=False, default=STATUS_PENDING)
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)


class CachedResponse(ClientBase):
    __tablename__ = "request_cache"

    endpoint = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)
    cached_at = Column(Float, nullable=False)


class OfflineContent(ClientBase):
    __tablename__ = "offline_content"

    key = Column(String, primary_key=True)  # "{content_type}:{content_id}"
    content_type = Column(String, nullable=False, index=True)
    content_id = Column(String, nullable=False)
    content = Column(JSON, nullable=False)
    downloaded_at = Column(Float, nullable=False)
    expires_at = Column(Float, nullable=False)


@dataclass
class QueuedRequest:
    """Detached snapshot of a queue row."""

    id: int
    kind: str
    endpoint: str
    payload: Dict[str, Any]
    token: Optional[str]
    enqueued_at: float
    status: str
    attempts: int
    last_error: Optional[str]

    @classmethod
    def from_row(cls, row: QueueItem) -> "QueuedRequest":
        return cls(
            id=row.id,
            kind=row.kind,
            endpoint=row.endpoint,
            payload=row.payload,
            token=row.token,
            enqueued_at=row.enqueued_at,
            status=row.status,
            attempts=row.attempts,
            last_error=row.last_error,
        )


class OfflineStore:
    """
    Persistent client-side store.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite:///./offline_store.db``
        clock: Returns the current time in epoch seconds
    """

    def __init__(self, database_url: str, clock: Callable[[], float] = time.time):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, connect_args=connect_args)
        ClientBase.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.clock = clock

    @classmethod
    def from_path(cls, path: str, **kwargs) -> "OfflineStore":
        return cls(f"sqlite:///{path}", **kwargs)

    def close(self) -> None:
        self.engine.dispose()

    # ---- queue ----

    def enqueue(self, kind: str, endpoint: str, payload: Dict[str, Any], token: Optional[str]) -> QueuedRequest:
        """Persist a mutation for later replay."""
        with self.Session() as session:
            row = QueueItem(
                kind=kind,
                endpoint=endpoint,
                payload=payload,
                token=token,
                enqueued_at=self.clock(),
                status=STATUS_PENDING,
                attempts=0,
            )
            session.add(row)
            session.commit()
            logger.info(f"Queued offline {kind} for {endpoint} (id={row.id})")
            return QueuedRequest.from_row(row)

    def pending(self, kind: Optional[str] = None) -> List[QueuedRequest]:
        """Pending items in enqueue order."""
        with self.Session() as session:
            query = session.query(QueueItem).filter(QueueItem.status == STATUS_PENDING)
            if kind:
                query = query.filter(QueueItem.kind == kind)
            return [QueuedRequest.from_row(row) for row in query.order_by(QueueItem.id).all()]

    def pending_progress(self) -> List[QueuedRequest]:
        return self.pending(KIND_PROGRESS)

    def pending_scores(self) -> List[QueuedRequest]:
        return self.pending(KIND_GAME_SCORE)

    def queue_size(self) -> int:
        with self.Session() as session:
            return session.query(QueueItem).count()

    def get_item(self, item_id: int) -> Optional[QueuedRequest]:
        with self.Session() as session:
            row = session.get(QueueItem, item_id)
            return QueuedRequest.from_row(row) if row else None

    def mark_in_flight(self, item_id: int) -> None:
        self._update_item(item_id, status=STATUS_IN_FLIGHT)

    def acknowledge(self, item_id: int) -> None:
        """The server accepted the replay; drop the item."""
        with self.Session() as session:
            session.query(QueueItem).filter(QueueItem.id == item_id).delete()
            session.commit()

    def mark_failed(self, item_id: int, error: str) -> None:
        """Return the item to pending so a later sweep retries it."""
        with self.Session() as session:
            session.query(QueueItem).filter(QueueItem.id == item_id).update(
                {
                    QueueItem.status: STATUS_PENDING,
                    QueueItem.attempts: QueueItem.attempts + 1,
                    QueueItem.last_error: error,
                },
                synchronize_session=False,
            )
            session.commit()

    def release_in_flight(self) -> int:
        """Move items left in flight by an interrupted sweep back to pending."""
        with self.Session() as session:
            count = session.query(QueueItem).filter(QueueItem.status == STATUS_IN_FLIGHT).update(
                {QueueItem.status: STATUS_PENDING}, synchronize_session=False
            )
            session.commit()
            return count

    def _update_item(self, item_id: int, **values) -> None:
        with self.Session() as session:
            session.query(QueueItem).filter(QueueItem.id == item_id).update(values, synchronize_session=False)
            session.commit()

    # ---- request cache ----

    def cache_response(self, endpoint: str, data: Any) -> None:
        with self.Session() as session:
            session.merge(CachedResponse(endpoint=endpoint, data=data, cached_at=self.clock()))
            session.commit()

    def cached_response(self, endpoint: str, max_age: float) -> Optional[Any]:
        """Cached data for the endpoint if younger than `max_age` seconds."""
        with self.Session() as session:
            row = session.get(CachedResponse, endpoint)
            if row is None or self.clock() - row.cached_at >= max_age:
                return None
            return row.data

    # ---- offline content ----

    def store_content(self, content_type: str, content_id: str, content: Any, ttl: float) -> None:
        now = self.clock()
        with self.Session() as session:
            session.merge(OfflineContent(
                key=f"{content_type}:{content_id}",
                content_type=content_type,
                content_id=content_id,
                content=content,
                downloaded_at=now,
                expires_at=now + ttl,
            ))
            session.commit()

    def get_content(self, content_type: str, content_id: str) -> Optional[Any]:
        """Stored content, or None when missing. Expired entries are deleted on read."""
        with self.Session() as session:
            row = session.get(OfflineContent, f"{content_type}:{content_id}")
            if row is None:
                return None
            if row.expires_at <= self.clock():
                session.delete(row)
                session.commit()
                return None
            return row.content

    def available_content(self) -> List[Dict[str, Any]]:
        with self.Session() as session:
            rows = session.query(OfflineContent).filter(
                OfflineContent.expires_at > self.clock()
            ).order_by(OfflineContent.downloaded_at).all()
            return [
                {"type": row.content_type, "id": row.content_id, "downloaded_at": row.downloaded_at}
                for row in rows
            ]

    def cleanup_expired_content(self) -> int:
        with self.Session() as session:
            removed = session.query(OfflineContent).filter(
                OfflineContent.expires_at <= self.clock()
            ).delete(synchronize_session=False)
            session.commit()
        if removed:
            logger.info(f"Removed {removed} expired offline content entries")
        return removed
