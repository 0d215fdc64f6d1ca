"""Runtime defaults for face-digest, read from the environment."""

import os

# Minimum comparator score for a digest to count as a match.
DEFAULT_THRESHOLD = float(os.getenv("FACE_DIGEST_THRESHOLD", "0.8"))

# Algorithm used for registration / validation digests.
VALIDATION_ALGORITHM = os.getenv("FACE_DIGEST_ALGORITHM", "sha256")  # simple|sha256|md5|base64|hex

# JSON document store used by the command line.
STORE_PATH = os.getenv("FACE_DIGEST_STORE_PATH", "./data/face_digests.json")

# Truncation lengths written to digest reports.
REPORT_LENGTHS = tuple(
    int(n) for n in os.getenv("FACE_DIGEST_REPORT_LENGTHS", "16,32,64").split(",") if n.strip()
)

LOG_LEVEL = os.getenv("FACE_DIGEST_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
