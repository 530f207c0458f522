"""JSON-file vocabulary store with locked read-modify-write operations."""

import fcntl
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import pydantic
from pydantic import TypeAdapter

import config
from vocabtutor.logger import get_logger
from vocabtutor.models import PracticeSentence, VocabularyRecord

_records_adapter = TypeAdapter(list[VocabularyRecord])
_sentences_adapter = TypeAdapter(list[PracticeSentence])


class VocabularyStoreError(Exception):
    """Base class for vocabulary store failures."""

    pass


class ValidationError(VocabularyStoreError):
    """Raised when a record fails validation (empty headword, incomplete example)."""

    pass


class StorageError(VocabularyStoreError):
    """Raised when the backing file cannot be read, parsed or written."""

    pass


class VocabularyStore:
    """Durable collection of vocabulary records backed by a single JSON file.

    Every public operation holds a process-local lock and an exclusive file
    lock for its whole read-mutate-write sequence, so concurrent writers
    cannot drop each other's changes.
    """

    def __init__(self, storage_path: Path = config.STORAGE_FILE):
        """
        Initialize the store.

        Args:
            storage_path: Path to the JSON array file
        """
        self.storage_path = Path(storage_path)
        self._lock_path = self.storage_path.with_suffix(".lock")
        self._mutex = threading.RLock()
        self._depth = 0
        self.logger = get_logger()

    @contextmanager
    def _locked(self):
        """Hold the thread lock and, at the outermost level, the fcntl file lock."""
        with self._mutex:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            try:
                self._lock_path.parent.mkdir(parents=True, exist_ok=True)
                lock_file = open(self._lock_path, "w")
            except OSError as e:
                raise StorageError(f"Cannot open lock file {self._lock_path}: {e}") from e

            with lock_file:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
                self._depth = 1
                try:
                    yield
                finally:
                    self._depth = 0
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def read_all(self) -> list[VocabularyRecord]:
        """
        Load every record, creating an empty store file if none exists.

        Raises:
            StorageError: If the file is unreadable or not a valid record array
        """
        with self._locked():
            if not self.storage_path.exists():
                self._write(b"[]")
                return []
            try:
                raw = self.storage_path.read_bytes()
            except OSError as e:
                raise StorageError(f"Cannot read {self.storage_path}: {e}") from e
            try:
                return _records_adapter.validate_json(raw)
            except pydantic.ValidationError as e:
                raise StorageError(f"Corrupt vocabulary file {self.storage_path}: {e}") from e

    def write_all(self, records: list[VocabularyRecord]) -> None:
        """Replace the whole persisted collection."""
        with self._locked():
            self._write(_records_adapter.dump_json(records))

    def _write(self, payload: bytes) -> None:
        """Write to a temp file in the same directory, then swap it into place."""
        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.storage_path.parent, prefix=f".{self.storage_path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                os.replace(tmp_path, self.storage_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.storage_path}: {e}") from e

    def upsert(self, record: VocabularyRecord) -> None:
        """
        Insert a record, replacing any record sharing its original or translation.

        Args:
            record: The record to store

        Raises:
            ValidationError: If the record is invalid
            StorageError: On I/O failure
        """
        if not record.is_valid():
            raise ValidationError(
                f"Invalid vocabulary record: original={record.original!r}, "
                f"translation={record.translation!r}"
            )

        with self._locked():
            existing = self.read_all()
            original = record.original.lower()
            translation = record.translation.lower()
            records = [
                r
                for r in existing
                if r.original.lower() != original and r.translation.lower() != translation
            ]
            replaced = len(existing) - len(records)
            records.append(record)
            self.write_all(records)

        self.logger.info(
            f"Stored '{record.original}' -> '{record.translation}'"
            + (f" (replaced {replaced})" if replaced else "")
        )

    def find(self, key: str) -> Optional[VocabularyRecord]:
        """Return the first record whose original or translation matches key."""
        return find_record(key, self.read_all())

    def update_stats(self, key: str, was_correct: bool) -> bool:
        """
        Increment the answer counter of the record matching key.

        Args:
            key: Original or translation text (case-insensitive)
            was_correct: Whether the practice answer was correct

        Returns:
            True if a record was updated, False if none matched
        """
        with self._locked():
            records = self.read_all()
            record = find_record(key, records)
            if record is None:
                self.logger.debug(f"update_stats: no record for '{key}'")
                return False
            if was_correct:
                record.correct_answers += 1
            else:
                record.wrong_answers += 1
            self.write_all(records)
        return True

    def delete(self, key: str) -> bool:
        """
        Remove every record matching key on either field.

        Returns:
            True if anything was removed
        """
        with self._locked():
            records = self.read_all()
            kept = [r for r in records if not r.matches(key)]
            self.write_all(kept)
        removed = len(records) - len(kept)
        if removed:
            self.logger.info(f"Deleted {removed} record(s) for '{key}'")
        return removed > 0

    def clear(self) -> None:
        """Drop every record."""
        self.write_all([])
        self.logger.info("Vocabulary store cleared")

    def import_records(self, serialized: str | bytes) -> int:
        """
        Replace the whole collection with a serialized JSON array of records.

        Args:
            serialized: JSON array in the persisted file format

        Returns:
            Number of imported records

        Raises:
            ValidationError: If the payload is malformed or any record is invalid
        """
        try:
            records = _records_adapter.validate_json(serialized)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid import payload: {e}") from e

        invalid = [i for i, r in enumerate(records) if not r.is_valid()]
        if invalid:
            raise ValidationError(f"Invalid records in import payload at positions {invalid}")

        self.write_all(records)
        self.logger.info(f"Imported {len(records)} records")
        return len(records)

    def export(self) -> str:
        """Serialize the whole collection in the persisted file format."""
        records = self.read_all()
        return json.dumps(
            [r.model_dump() for r in records], ensure_ascii=False, indent=2
        )

    def word_stats(self, key: str) -> Optional[dict]:
        """
        Practice statistics for one stored record.

        Returns:
            Dict with total, correct, wrong and accuracy (percent), or None
        """
        record = self.find(key)
        if record is None:
            return None
        total = record.total_attempts
        return {
            "total": total,
            "correct": record.correct_answers,
            "wrong": record.wrong_answers,
            "accuracy": record.correct_answers / total * 100 if total else 0.0,
        }


def find_record(key: str, records: list[VocabularyRecord]) -> Optional[VocabularyRecord]:
    """First record matching key case-insensitively on either field."""
    for record in records:
        if record.matches(key):
            return record
    return None


def load_practice_sentences(path: Path = config.PRACTICE_SENTENCES_FILE) -> list[PracticeSentence]:
    """
    Load fill-in-the-blank practice sentences.

    Args:
        path: JSON array of {german_sentence, russian_translation, missing_word}

    Returns:
        The sentences, or an empty list if the file does not exist

    Raises:
        StorageError: If the file is unreadable or malformed
    """
    path = Path(path)
    if not path.exists():
        get_logger().info(f"No practice sentences at {path}")
        return []
    try:
        return _sentences_adapter.validate_json(path.read_bytes())
    except OSError as e:
        raise StorageError(f"Cannot read {path}: {e}") from e
    except pydantic.ValidationError as e:
        raise StorageError(f"Invalid practice sentences file {path}: {e}") from e
