"""face-digest — digest-based face registration and validation.

Turns a face descriptor (the float vector produced by an external
face-recognition model) into a string digest and matches users by
positional character agreement between digests.

Public API::

    from face_digest import generate_face_hash, compare_hashes, FaceDigestStore
"""

from .digest import (
    ALGORITHMS,
    DigestAlgorithm,
    generate_all_hashes,
    generate_face_hash,
    generate_validation_hash,
)
from .similarity import compare_hashes
from .store import FaceDigestStore, JsonDocumentStore
from .system import FaceValidationSystem, NoFaceDetectedError, load_descriptor_file
from .types import Detection, FaceRecord, MatchResult, ValidationResult

__version__ = "0.1.0"
__all__ = [
    "ALGORITHMS",
    "DigestAlgorithm",
    "Detection",
    "FaceDigestStore",
    "FaceRecord",
    "FaceValidationSystem",
    "JsonDocumentStore",
    "MatchResult",
    "NoFaceDetectedError",
    "ValidationResult",
    "compare_hashes",
    "generate_all_hashes",
    "generate_face_hash",
    "generate_validation_hash",
    "load_descriptor_file",
]
