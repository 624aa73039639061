"""
SQLAlchemy-backed analysis blob store.

Content-addressed stand-in for the decentralized store: the blob id is the
URL-safe base64 SHA-256 of the content, so writing identical content twice
yields the same id and one row. Uses ANALYSIS_DB_URL for PostgreSQL when set;
otherwise SQLite (ANALYSIS_DB_PATH or swap_insights.db). Useful for local
runs and tests; durability is whatever the database provides.
"""

from __future__ import annotations

import base64
import hashlib
import time
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import Boolean, Column, Integer, LargeBinary, String, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from swap_insights.config.settings import Settings, get_settings
from swap_insights.core.exceptions import StorageError
from swap_insights.insights_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class AnalysisBlob(Base):
    """One stored payload (analysis or analysis cache). Append-only."""

    __tablename__ = "analysis_blobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    blob_id = Column(String(64), unique=True, nullable=False, index=True)
    identifier = Column(String(256), nullable=False, index=True)
    content = Column(LargeBinary, nullable=False)
    created_at = Column(Integer, nullable=False, index=True)  # Unix seconds
    epochs = Column(Integer, nullable=False)
    deletable = Column(Boolean, nullable=False, default=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "blob_id": self.blob_id,
            "identifier": self.identifier,
            "created_at": self.created_at,
            "epochs": self.epochs,
            "deletable": self.deletable,
            "size": len(self.content or b""),
        }


def content_blob_id(content: bytes) -> str:
    digest = hashlib.sha256(content).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class SqlAnalysisStore:
    """AnalysisStore over a SQL database. Call init_db() once before use."""

    def __init__(self, url: str | None = None) -> None:
        self.url = url or get_settings().database_url
        connect_args: dict[str, Any] = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(self.url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info("analysis_store_engine", url=self.url.split("?")[0].split("//")[-1])

    @classmethod
    def from_settings(cls, settings: Settings) -> SqlAnalysisStore:
        return cls(settings.database_url)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create tables if missing. Safe to call on every startup."""
        Base.metadata.create_all(bind=self._engine)
        logger.info("analysis_store_init_db")

    def write(
        self,
        content: bytes,
        *,
        identifier: str,
        epochs: int,
        deletable: bool,
        signer: Any = None,
    ) -> str:
        blob_id = content_blob_id(content)
        try:
            with self._session_scope() as session:
                if session.query(AnalysisBlob.id).filter(AnalysisBlob.blob_id == blob_id).first():
                    logger.debug("analysis_blob_exists", blob_id=blob_id)
                    return blob_id
                session.add(
                    AnalysisBlob(
                        blob_id=blob_id,
                        identifier=identifier,
                        content=content,
                        created_at=int(time.time()),
                        epochs=epochs,
                        deletable=deletable,
                    )
                )
        except IntegrityError:
            # Concurrent writer stored the same content first
            return blob_id
        except Exception as e:
            logger.exception("analysis_blob_write_failed", identifier=identifier, error=str(e))
            raise StorageError(f"Failed to write blob {identifier}: {e}") from e
        logger.debug("analysis_blob_written", blob_id=blob_id, identifier=identifier, size=len(content))
        return blob_id

    def read(self, blob_id: str) -> bytes | None:
        try:
            with self._session_scope() as session:
                row = session.query(AnalysisBlob).filter(AnalysisBlob.blob_id == blob_id).first()
                return bytes(row.content) if row else None
        except Exception as e:
            raise StorageError(f"Failed to read blob {blob_id}: {e}") from e

    def list_blobs(self, identifier_prefix: str = "") -> list[dict[str, Any]]:
        """Blob metadata (no content), oldest first, optionally filtered by identifier prefix."""
        with self._session_scope() as session:
            query = session.query(AnalysisBlob)
            if identifier_prefix:
                query = query.filter(AnalysisBlob.identifier.startswith(identifier_prefix))
            return [row.to_dict() for row in query.order_by(AnalysisBlob.id).all()]
