from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session, sessionmaker

from physioai.models.storage import StorageEntry
from physioai.schemas.patient import Patient
from physioai.services.roster_service import assert_unique_ids
from physioai.services.seed_service import seed_roster

logger = logging.getLogger(__name__)

roster_adapter = TypeAdapter(list[Patient])


class RosterStore:
    """
    Holds the patient roster in memory and mirrors it to a single storage key.

    The roster is loaded once at startup and the whole document is written
    back after every mutation. Malformed stored data is discarded in favour of
    the seed roster.
    """

    def __init__(self, session_factory: sessionmaker[Session] | Callable[[], Session], storage_key: str):
        self._session_factory = session_factory
        self.storage_key = storage_key
        self._patients: list[Patient] = []
        self._lock = threading.RLock()

    @property
    def patients(self) -> list[Patient]:
        with self._lock:
            return list(self._patients)

    def load(self) -> list[Patient]:
        with self._lock:
            roster = self._read()
            if roster:
                logger.info("Loaded %d patients from storage key %r", len(roster), self.storage_key)
            else:
                logger.info("Storage key %r empty; seeding demo roster", self.storage_key)
                roster = seed_roster()
            self._patients = roster
            self._write(roster)
            return list(roster)

    def reset(self) -> list[Patient]:
        with self._lock:
            return self.commit(seed_roster())

    def commit(self, patients: list[Patient]) -> list[Patient]:
        with self._lock:
            assert_unique_ids(patients)
            self._patients = list(patients)
            self._write(self._patients)
            return list(self._patients)

    def apply(self, mutation: Callable[..., list[Patient]], *args: Any, **kwargs: Any) -> list[Patient]:
        """Run a pure roster mutation against the current roster and persist the result."""
        with self._lock:
            return self.commit(mutation(self.patients, *args, **kwargs))

    def _read(self) -> list[Patient] | None:
        with self._session_factory() as db:
            entry = db.get(StorageEntry, self.storage_key)
            raw = entry.value if entry else None
        if not raw:
            return None
        try:
            roster = roster_adapter.validate_json(raw)
            assert_unique_ids(roster)
        except (ValidationError, ValueError):
            logger.warning("Discarding malformed roster under storage key %r", self.storage_key)
            return None
        return roster

    def _write(self, patients: list[Patient]) -> None:
        payload = roster_adapter.dump_json(patients).decode("utf-8")
        with self._session_factory() as db:
            entry = db.get(StorageEntry, self.storage_key)
            if entry is None:
                entry = StorageEntry(key=self.storage_key, value=payload)
            else:
                entry.value = payload
            db.add(entry)
            db.commit()
        logger.debug("Persisted roster (%d patients) under %r", len(patients), self.storage_key)
