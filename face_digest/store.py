"""Face digest record stores.

Public API
----------
FaceDigestStore
    .save_face_hash()      — insert or overwrite a user's digest
    .get_face_hash()       — retrieve a record by identifier
    .remove_user()         — delete a record
    .list_users()          — registered identifiers
    .list_records()        — registered records
    .validate_face_hash()  — compare a digest against one user
    .find_user_by_hash()   — linear scan for a matching digest
    .snapshot()            — full JSON state dump
    .stats()               — live statistics dict

JsonDocumentStore
    Same API, with every record persisted to a JSON document file.

Neither store indexes digests or guards against concurrent writers; both
are meant for demo-sized collections.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from . import config
from .similarity import compare_hashes
from .types import FaceRecord, MatchResult, ValidationResult

logger = logging.getLogger(__name__)

REASON_VALID = "hash valid"
REASON_MISMATCH = "hash does not match"
REASON_NOT_FOUND = "user not found"


class FaceDigestStore:
    """In-process map of identifier → FaceRecord.

    Re-registering an identifier silently replaces the whole record,
    including its creation time.
    """

    VERSION: str = "0.1.0"

    def __init__(self) -> None:
        self.records: Dict[str, FaceRecord] = {}

    # ------------------------------------------------------------------
    # Persistence hook
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        """Called after every mutation. No-op for the in-memory store."""

    def _commit_or_rollback(self, previous: Dict[str, FaceRecord]) -> None:
        """Commit, or put ``previous`` back as the record map if that fails."""
        try:
            self._commit()
        except Exception:
            self.records = previous
            raise

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def save_face_hash(
        self,
        identifier: str,
        digest: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> FaceRecord:
        """Insert or overwrite the record for ``identifier``."""
        record = FaceRecord(
            identifier=identifier,
            digest=digest,
            metadata=dict(metadata or {}),
        )
        previous = dict(self.records)
        self.records[identifier] = record
        self._commit_or_rollback(previous)
        logger.info("Saved hash for user %s", identifier)
        return record

    def get_face_hash(self, identifier: str) -> Optional[FaceRecord]:
        """Retrieve a record by identifier, or None if not found."""
        return self.records.get(identifier)

    def remove_user(self, identifier: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        if identifier not in self.records:
            return False
        previous = dict(self.records)
        del self.records[identifier]
        self._commit_or_rollback(previous)
        logger.info("Removed user %s", identifier)
        return True

    def list_users(self) -> List[str]:
        return list(self.records)

    def list_records(self) -> List[FaceRecord]:
        return list(self.records.values())

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def validate_face_hash(
        self,
        identifier: str,
        digest: str,
        threshold: Optional[float] = None,
    ) -> ValidationResult:
        """Check ``digest`` against the digest stored for ``identifier``.

        A successful validation refreshes the record's ``last_used``.
        """
        if threshold is None:
            threshold = config.DEFAULT_THRESHOLD
        record = self.records.get(identifier)
        if record is None:
            return ValidationResult(valid=False, reason=REASON_NOT_FOUND,
                                    threshold=threshold)

        score = compare_hashes(record.digest, digest)
        valid = score >= threshold
        if valid:
            last_used, updated_at = record.last_used, record.updated_at
            record.touch()
            try:
                self._commit()
            except Exception:
                record.last_used, record.updated_at = last_used, updated_at
                raise
        logger.debug("Validated %s: similarity=%.4f threshold=%.4f",
                     identifier, score, threshold)
        return ValidationResult(
            valid=valid,
            reason=REASON_VALID if valid else REASON_MISMATCH,
            threshold=threshold,
            similarity=score,
        )

    def find_user_by_hash(
        self,
        digest: str,
        threshold: Optional[float] = None,
        best: bool = False,
    ) -> Optional[MatchResult]:
        """Scan every record for a digest scoring at or above ``threshold``.

        Parameters
        ----------
        digest    : digest to look up.
        threshold : minimum score; defaults to ``config.DEFAULT_THRESHOLD``.
        best      : if False, return the first match in insertion order;
                    if True, scan all records and return the highest score
                    (earliest record wins ties).

        Returns
        -------
        MatchResult, or None when no record qualifies.
        """
        if threshold is None:
            threshold = config.DEFAULT_THRESHOLD
        found: Optional[MatchResult] = None
        for record in self.records.values():
            score = compare_hashes(record.digest, digest)
            if score < threshold:
                continue
            if found is None or score > found.similarity:
                found = MatchResult(
                    identifier=record.identifier,
                    similarity=score,
                    metadata=dict(record.metadata),
                )
            if not best:
                break
        return found

    # ------------------------------------------------------------------
    # Export / stats
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Return a complete serialisable state snapshot."""
        return {
            "version": self.VERSION,
            "records": {k: v.to_dict() for k, v in self.records.items()},
        }

    def stats(self) -> Dict[str, Any]:
        return {
            "version": self.VERSION,
            "record_count": len(self.records),
            "validation_algorithm": config.VALIDATION_ALGORITHM,
            "default_threshold": config.DEFAULT_THRESHOLD,
        }

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.records

    def __repr__(self) -> str:
        return f"{type(self).__name__}(v{self.VERSION} records={len(self.records)})"


class JsonDocumentStore(FaceDigestStore):
    """FaceDigestStore backed by a single JSON document file.

    The file holds ``{"version": ..., "records": {identifier: record}}``.
    It is read once at construction and rewritten after every mutation.
    I/O and decode errors propagate to the caller.

    Parameters
    ----------
    path : location of the JSON file; created (with parent directories)
           on the first write if missing.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        if os.path.exists(path) and os.path.getsize(path) > 0:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.records = {
                k: FaceRecord.from_dict(v)
                for k, v in data.get("records", {}).items()
            }
        logger.info("Opened %s with %d records", path, len(self.records))

    def _commit(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # the file is not opened until the whole document encodes
        payload = json.dumps(self.snapshot(), indent=4)
        tmp_path = self.path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def __repr__(self) -> str:
        return (
            f"JsonDocumentStore(v{self.VERSION} path={self.path!r} "
            f"records={len(self.records)})"
        )
