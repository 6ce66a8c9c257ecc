"""SQL-backed key-value store"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, List

from loguru import logger
from sqlalchemy import create_engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .base import KeyValueStore
from .models import Base, KeyValueEntry


class SQLStore(KeyValueStore):
    """Key-value store persisted in a single SQL table"""

    def __init__(self, db_url: str = "sqlite:///data/db/validator.db", echo: bool = False):
        self.db_url = db_url
        engine_kwargs = {}
        if db_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            database = make_url(db_url).database
            if not database or database == ":memory:":
                # One shared connection, otherwise each thread sees an empty database
                engine_kwargs["poolclass"] = StaticPool
            else:
                Path(database).parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(db_url, echo=echo, **engine_kwargs)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)
        logger.info(f"Key-value store initialized: {db_url}")

    @contextmanager
    def session(self):
        """Context manager for database sessions"""
        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def get(self, key: str, default: Any = None) -> Any:
        with self.session() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                return default
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self.session() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            logger.debug(f"Stored key: {key}")

    def delete(self, key: str) -> bool:
        with self.session() as session:
            deleted = session.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
            return deleted > 0

    def clear(self) -> None:
        with self.session() as session:
            deleted = session.query(KeyValueEntry).delete()
            logger.info(f"Cleared {deleted} stored keys")

    def keys(self) -> List[str]:
        with self.session() as session:
            return [row.key for row in session.query(KeyValueEntry.key).all()]
