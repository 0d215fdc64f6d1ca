"""Digest generators for face descriptors.

Every generator first serialises the descriptor as its values joined by
``","`` (shortest round-trip float repr), then derives a string from it.

Algorithms
----------
simple  — 32-bit rolling hash (8 hex digits) + 2 hex digits for each of
          the first 16 descriptor values
sha256  — SHA-256 hex digest of the serialised descriptor
md5     — MD5 hex digest of the serialised descriptor
base64  — base64 encoding of the serialised descriptor (not a hash)
hex     — each value scaled by 1000 as 4 hex digits (not a hash)

Note that the cryptographic digests diffuse any change in the descriptor
over the whole output, so two descriptors of the same face taken from
different photos will not produce similar digests.
"""

from __future__ import annotations

import base64
import hashlib
from typing import Dict, Literal, Optional, Sequence, Union

import numpy as np

from . import config

DigestAlgorithm = Literal["simple", "sha256", "md5", "base64", "hex"]
ALGORITHMS = ("simple", "sha256", "md5", "base64", "hex")

Descriptor = Union[Sequence[float], np.ndarray]

_SUFFIX_VALUES = 16
_SCALE = 1000


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def as_descriptor(descriptor: Descriptor) -> np.ndarray:
    """Return the descriptor as a 1-D float64 array."""
    arr = np.asarray(descriptor, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Descriptor must be a 1-D array, got {arr.ndim}-D.")
    if arr.size == 0:
        raise ValueError("Descriptor must not be empty.")
    return arr


def descriptor_string(descriptor: Descriptor) -> str:
    """Comma-joined string form of a descriptor; the input of every digest."""
    return ",".join(repr(v) for v in as_descriptor(descriptor).tolist())


# ---------------------------------------------------------------------------
# Individual algorithms
# ---------------------------------------------------------------------------


def _rolling_hash(text: str) -> int:
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    # signed 32-bit
    return h - 0x100000000 if h & 0x80000000 else h


def generate_simple_hash(descriptor: Descriptor) -> str:
    """Rolling hash of the descriptor string plus a value-derived suffix."""
    arr = as_descriptor(descriptor)
    prefix = format(abs(_rolling_hash(descriptor_string(arr))), "08x")
    suffix = "".join(
        format(int(abs(v * _SCALE)) % 256, "02x")
        for v in arr[:_SUFFIX_VALUES].tolist()
    )
    return prefix + suffix


def generate_sha256_hash(descriptor: Descriptor) -> str:
    return hashlib.sha256(descriptor_string(descriptor).encode("utf-8")).hexdigest()


def generate_md5_hash(descriptor: Descriptor) -> str:
    return hashlib.md5(descriptor_string(descriptor).encode("utf-8")).hexdigest()


def generate_base64_hash(descriptor: Descriptor) -> str:
    raw = descriptor_string(descriptor).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def generate_hex_hash(descriptor: Descriptor) -> str:
    """Each value as ``int(|v| * 1000)`` in zero-padded 4-digit hex."""
    return "".join(
        format(int(abs(v * _SCALE)), "04x")
        for v in as_descriptor(descriptor).tolist()
    )


_GENERATORS = {
    "simple": generate_simple_hash,
    "sha256": generate_sha256_hash,
    "md5": generate_md5_hash,
    "base64": generate_base64_hash,
    "hex": generate_hex_hash,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def generate_face_hash(
    descriptor: Descriptor,
    algorithm: DigestAlgorithm = "simple",
    length: Optional[int] = None,
) -> str:
    """Compute a digest of a face descriptor.

    Parameters
    ----------
    descriptor : 1-D sequence of floats from a face-recognition model.
    algorithm  : one of 'simple', 'sha256', 'md5', 'base64', 'hex'.
    length     : optional cap; longer digests are cut to their first
                 ``length`` characters. 0 or None means no cap. The cap
                 is not checked against any minimum safe length.

    Returns
    -------
    str — the (possibly truncated) digest.
    """
    try:
        generator = _GENERATORS[algorithm]
    except KeyError:
        raise ValueError(
            f"Unknown algorithm {algorithm!r}. "
            f"Valid options: {', '.join(repr(a) for a in ALGORITHMS)}."
        ) from None
    if length is not None and length < 0:
        raise ValueError(f"length must be >= 0, got {length}")

    digest = generator(descriptor)
    if length and len(digest) > length:
        digest = digest[:length]
    return digest


def generate_all_hashes(descriptor: Descriptor) -> Dict[str, str]:
    """Untruncated digest of the descriptor under every algorithm."""
    arr = as_descriptor(descriptor)
    return {name: _GENERATORS[name](arr) for name in ALGORITHMS}


def generate_validation_hash(descriptor: Descriptor) -> str:
    """Digest used for registration and validation."""
    return generate_face_hash(descriptor, config.VALIDATION_ALGORITHM)
