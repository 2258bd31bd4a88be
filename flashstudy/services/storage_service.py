# flashstudy/services/storage_service.py
from typing import Dict, Optional, Protocol
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlmodel import Session

from flashstudy.core.log_manager import logger
from flashstudy.models import StoredSnapshot


class PersistentStore(Protocol):
    """Key/bytes capability the core saves snapshots through."""

    def put(self, key: str, payload: bytes) -> None:
        ...

    def get(self, key: str) -> Optional[bytes]:
        ...


class MemoryStore:
    """Process-local store, mainly for tests and throwaway sessions."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}

    def put(self, key: str, payload: bytes) -> None:
        self._data[key] = bytes(payload)

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)


class SqlStore:
    """
    Stores payloads in the StoredSnapshot table, one row per key.
    Writing an existing key replaces its payload.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def put(self, key: str, payload: bytes) -> None:
        with Session(self.engine) as session:
            row = session.get(StoredSnapshot, key)
            if row:
                row.payload = payload
                row.updated_at = datetime.now(timezone.utc)
            else:
                row = StoredSnapshot(key=key, payload=payload)
            session.add(row)
            session.commit()
        logger.info(f"Stored {len(payload)} byte(s) under '{key}'.")

    def get(self, key: str) -> Optional[bytes]:
        with Session(self.engine) as session:
            row = session.get(StoredSnapshot, key)
            return row.payload if row else None
