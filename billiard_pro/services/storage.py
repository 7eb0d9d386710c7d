"""
JSON-file persistence for tournaments and players.

Each store keeps one JSON array on disk. Reads re-load the file so several store
instances over the same path stay consistent; writes go through a temporary file and
``os.replace`` so a crash never leaves a half-written array behind.

``JsonTournamentStore.update`` is the read-modify-write primitive the bracket operations
rely on: the load, the caller's mutation and the save all happen under a lock shared by
every store opened on the same file, so two results recorded for the same round are
applied one after the other and the second sees the first.
"""
import json
import logging
import os
import tempfile
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from billiard_pro.core.exceptions import DuplicateMatchError, NotFoundError, PlayerNotFound, TournamentNotFound
from billiard_pro.models.player_model import PlayerModel
from billiard_pro.models.tournament_model import TournamentModel

logger = logging.getLogger(__name__)

_path_locks: Dict[str, threading.RLock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(file_path: str) -> threading.RLock:
    """One lock per resolved file, shared by every store instance opened on it."""
    key = os.path.abspath(file_path)
    with _path_locks_guard:
        if key not in _path_locks:
            _path_locks[key] = threading.RLock()
        return _path_locks[key]


class JsonRecordStore:
    model_class: Type[BaseModel] = BaseModel

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._lock = _lock_for(file_path)

        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.file_path):
            self._save_to_file([])

    def _load_from_file(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.file_path):
            return []
        try:
            with open(self.file_path, "r") as f:
                content = f.read()
        except OSError as e:
            logger.warning(f"Could not read {self.file_path}: {e}. Treating it as empty.")
            return []
        if not content.strip():
            return []
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"Could not decode JSON from {self.file_path}. Treating it as empty.")
            return []
        if not isinstance(data, list):
            logger.warning(f"Expected a JSON array in {self.file_path}, got {type(data).__name__}.")
            return []
        return data

    def _save_to_file(self, records: List[Dict[str, Any]]):
        directory = os.path.dirname(os.path.abspath(self.file_path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(records, f, indent=4, default=str)
            os.replace(tmp_path, self.file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _find(self, records: List[Dict[str, Any]], record_id: str) -> Tuple[int, Optional[Dict[str, Any]]]:
        for i, record in enumerate(records):
            if record.get("id") == record_id:
                return i, record
        return -1, None

    def _not_found(self, record_id: str) -> NotFoundError:
        return NotFoundError(f"Record with ID {record_id} not found.")

    def _prepare(self, record: BaseModel, previous: Optional[BaseModel]) -> BaseModel:
        """Hook for subclasses: validate and stamp a record right before it is written."""
        return record

    def get(self, record_id: str):
        records = self._load_from_file()
        _, record = self._find(records, record_id)
        if record is None:
            return None
        return self.model_class(**record)

    def list(self) -> List[BaseModel]:
        return [self.model_class(**record) for record in self._load_from_file()]

    def put(self, record: BaseModel):
        """Insert ``record`` or replace the stored record with the same id."""
        with self._lock:
            records = self._load_from_file()
            index, existing = self._find(records, record.id)
            previous = self.model_class(**existing) if existing is not None else None
            record = self._prepare(record, previous)
            record_dict = record.model_dump(mode="json")
            if index >= 0:
                records[index] = record_dict
            else:
                records.append(record_dict)
            self._save_to_file(records)
            return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            records = self._load_from_file()
            index, _ = self._find(records, record_id)
            if index < 0:
                return False
            del records[index]
            self._save_to_file(records)
            return True

    def update(self, record_id: str, mutate: Callable):
        """
        Atomically apply ``mutate`` to the stored record.

        ``mutate`` receives a fresh snapshot and returns the new value. If it raises,
        nothing is written and the exception propagates.
        """
        with self._lock:
            records = self._load_from_file()
            index, existing = self._find(records, record_id)
            if existing is None:
                raise self._not_found(record_id)
            snapshot = self.model_class(**existing)
            new_record = mutate(snapshot)
            new_record = self._prepare(new_record, snapshot)
            records[index] = new_record.model_dump(mode="json")
            self._save_to_file(records)
            return new_record


class JsonTournamentStore(JsonRecordStore):
    model_class = TournamentModel

    def _not_found(self, record_id: str) -> NotFoundError:
        return TournamentNotFound(record_id)

    def _prepare(self, record: TournamentModel, previous: Optional[TournamentModel]) -> TournamentModel:
        seen = set()
        duplicates = set()
        for match in record.matches:
            if match.id in seen:
                duplicates.add(match.id)
            seen.add(match.id)
        if duplicates:
            logger.warning(f"Rejected write for tournament {record.id}: duplicate matches {sorted(duplicates)}")
            raise DuplicateMatchError(duplicates)

        next_version = previous.version + 1 if previous is not None else record.version
        return record.model_copy(update={"version": next_version})


class JsonPlayerStore(JsonRecordStore):
    model_class = PlayerModel

    def _not_found(self, record_id: str) -> NotFoundError:
        return PlayerNotFound(record_id)
