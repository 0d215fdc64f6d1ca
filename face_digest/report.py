"""JSON report of every digest computed for one descriptor."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from . import config
from .digest import (
    ALGORITHMS,
    Descriptor,
    as_descriptor,
    generate_all_hashes,
    generate_face_hash,
)

logger = logging.getLogger(__name__)


def _utcnow() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_report(
    descriptor: Descriptor,
    source: str = "",
    lengths: Optional[Iterable[int]] = None,
) -> Dict[str, Any]:
    """Collect full and truncated digests of ``descriptor``.

    ``hashes_with_lengths`` maps algorithm → {length (as str): digest},
    string keys so the report survives a JSON round trip unchanged.
    """
    arr = as_descriptor(descriptor)
    lengths = tuple(config.REPORT_LENGTHS if lengths is None else lengths)
    return {
        "source": source,
        "timestamp": _utcnow(),
        "descriptor": arr.tolist(),
        "hashes": generate_all_hashes(arr),
        "hashes_with_lengths": {
            algorithm: {
                str(n): generate_face_hash(arr, algorithm, n) for n in lengths
            }
            for algorithm in ALGORITHMS
        },
    }


def write_report(report: Dict[str, Any], path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    logger.info("Report written to %s", path)
    return path
