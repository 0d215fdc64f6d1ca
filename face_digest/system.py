"""Face validation system: detector → digest → record store.

The face detector is supplied by the caller as a callable taking an
image (path, array, whatever the detector understands) and returning a
:class:`~face_digest.types.Detection`, or None when no face was found.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from .digest import as_descriptor, generate_validation_hash
from .store import FaceDigestStore
from .types import Detection, FaceRecord, MatchResult, ValidationResult

logger = logging.getLogger(__name__)

FaceDetector = Callable[[Any], Optional[Detection]]


class NoFaceDetectedError(RuntimeError):
    """The detector found no face in the image."""


def _log_failures(func):
    """Log an operation's failure, then let the error propagate."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except NoFaceDetectedError as error:
            logger.error("%s failed: %s", func.__name__, error)
            raise
        except Exception:
            logger.exception("%s failed", func.__name__)
            raise

    return wrapper


def load_descriptor_file(path: str) -> Optional[Detection]:
    """Detector that reads a precomputed descriptor from a JSON file.

    Accepts either a bare list of floats or an object with a
    ``descriptor`` list and an optional ``score``. An empty or null
    descriptor counts as no face detected.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    score = 1.0
    if isinstance(data, dict):
        score = float(data.get("score", 1.0))
        data = data.get("descriptor")
    if data is None:
        return None
    if not isinstance(data, list):
        raise ValueError(f"{path}: descriptor must be a JSON list of numbers")
    if not data:
        return None
    return Detection(descriptor=[float(x) for x in data], score=score)


class FaceValidationSystem:
    """Registers, validates and recognises users by face digest.

    Parameters
    ----------
    detector  : callable mapping an image to a Detection or None.
    store     : record store; a fresh in-memory store if omitted.
    threshold : minimum digest similarity; store default if omitted.
    """

    def __init__(
        self,
        detector: FaceDetector,
        store: Optional[FaceDigestStore] = None,
        threshold: Optional[float] = None,
    ) -> None:
        self.detector = detector
        self.store = store if store is not None else FaceDigestStore()
        self.threshold = threshold

    def _detect(self, image: Any) -> Detection:
        detection = self.detector(image)
        if detection is None:
            raise NoFaceDetectedError(f"No face detected in {image}")
        return detection

    @_log_failures
    def register_user(
        self,
        identifier: str,
        image: Any,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> FaceRecord:
        """Detect a face in ``image`` and store its digest for ``identifier``.

        The stored metadata is the caller's plus ``descriptor_length`` and
        ``confidence`` (the detection score).
        """
        detection = self._detect(image)
        descriptor = as_descriptor(detection.descriptor)
        digest = generate_validation_hash(descriptor)
        record = self.store.save_face_hash(identifier, digest, {
            **(metadata or {}),
            "descriptor_length": int(descriptor.size),
            "confidence": float(detection.score),
        })
        logger.info("Registered user %s (hash %s...)", identifier, digest[:32])
        return record

    @_log_failures
    def validate_user(self, identifier: str, image: Any) -> ValidationResult:
        """Check that the face in ``image`` matches ``identifier``'s digest."""
        detection = self._detect(image)
        digest = generate_validation_hash(detection.descriptor)
        result = self.store.validate_face_hash(identifier, digest, self.threshold)
        if result.valid:
            logger.info("User %s validated (similarity %.2f%%)",
                        identifier, result.similarity * 100)
        else:
            logger.warning("Validation failed for %s: %s", identifier, result.reason)
        return result

    @_log_failures
    def recognize_user(self, image: Any, best: bool = False) -> Optional[MatchResult]:
        """Find which registered user, if any, the face in ``image`` matches."""
        detection = self._detect(image)
        digest = generate_validation_hash(detection.descriptor)
        match = self.store.find_user_by_hash(digest, self.threshold, best=best)
        if match is None:
            logger.info("User not recognised")
        else:
            logger.info("Recognised user %s (similarity %.2f%%)",
                        match.identifier, match.similarity * 100)
        return match

    def list_registered_users(self) -> List[FaceRecord]:
        return self.store.list_records()

    @_log_failures
    def remove_user(self, identifier: str) -> bool:
        removed = self.store.remove_user(identifier)
        if not removed:
            logger.warning("User %s not found", identifier)
        return removed
