"""Core record types for face-digest.

FaceRecord       — one registered user: identifier, stored digest, metadata
                   and usage timestamps.
Detection        — what a face detector hands back: descriptor + score.
ValidationResult — outcome of checking a digest against one user.
MatchResult      — outcome of scanning the store for a matching digest.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _utcnow() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


# ---------------------------------------------------------------------------
# FaceRecord
# ---------------------------------------------------------------------------


@dataclass
class FaceRecord:
    """A registered user and the digest of their face descriptor.

    Schema
    ------
    identifier : unique user key (natural key of the store)
    digest     : digest string produced by the digest generator
    metadata   : arbitrary key/value store
    created_at : registration time (reset on re-registration)
    last_used  : last successful validation
    updated_at : last write of any kind
    """

    identifier: str
    digest: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: str = field(default_factory=_utcnow)
    last_used: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        if not self.identifier:
            raise ValueError("identifier must not be empty")
        if not self.last_used:
            self.last_used = self.created_at
        if not self.updated_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Mark the record as used now."""
        now = _utcnow()
        self.last_used = now
        self.updated_at = now

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FaceRecord":
        return cls(**data)


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


@dataclass
class Detection:
    """A detected face: its descriptor and the detector's confidence."""

    descriptor: List[float]
    score: float = 1.0


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class ValidationResult:
    valid: bool
    reason: str
    threshold: float
    similarity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MatchResult:
    identifier: str
    similarity: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
