"""Command line for face-digest.

Descriptors are read from JSON files (a list of floats, or an object with
a ``descriptor`` key such as a digest report), standing in for a live
face detector.

Usage:
  face-digest digest face.json --algorithm sha256 --length 32
  face-digest report face.json --output out/faceHashResults.json
  face-digest compare HASH1 HASH2
  face-digest register alice face.json --meta name="Alice Silva"
  face-digest validate alice face.json
  face-digest recognize face.json --best
  face-digest list
  face-digest remove alice
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from . import config
from .digest import ALGORITHMS, generate_face_hash
from .report import build_report, write_report
from .similarity import compare_hashes
from .store import JsonDocumentStore
from .system import FaceValidationSystem, NoFaceDetectedError, load_descriptor_file

logger = logging.getLogger("face_digest")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configure_logging(level: str) -> None:
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
        logger.addHandler(handler)


def _parse_meta(pairs: List[str]) -> Dict[str, str]:
    meta = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"metadata must be key=value, got {pair!r}")
        meta[key] = value
    return meta


def _load_detection(path: str):
    detection = load_descriptor_file(path)
    if detection is None:
        raise NoFaceDetectedError(f"No face detected in {path}")
    return detection


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="face-digest",
        description="Derive digests from face descriptors and match users by them",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL, type=str.upper,
                        choices=LOG_LEVELS, help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("digest", help="Print one digest of a descriptor")
    p.add_argument("descriptor", help="Path to descriptor JSON")
    p.add_argument("--algorithm", choices=ALGORITHMS, default="simple")
    p.add_argument("--length", type=int, default=None, help="Truncate to N characters")

    p = sub.add_parser("report", help="Write every digest of a descriptor to JSON")
    p.add_argument("descriptor", help="Path to descriptor JSON")
    p.add_argument("--output", default="out/faceHashResults.json")
    p.add_argument("--lengths", type=int, nargs="+", default=list(config.REPORT_LENGTHS))

    p = sub.add_parser("compare", help="Similarity score of two digests")
    p.add_argument("hash1")
    p.add_argument("hash2")

    for name, help_text in (
        ("register", "Register a user from a descriptor"),
        ("validate", "Validate a user against a descriptor"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("identifier")
        p.add_argument("descriptor", help="Path to descriptor JSON")
    sub.choices["register"].add_argument(
        "--meta", action="append", default=[], metavar="KEY=VALUE",
        help="Metadata entry; may be repeated",
    )

    p = sub.add_parser("recognize", help="Find the user matching a descriptor")
    p.add_argument("descriptor", help="Path to descriptor JSON")
    p.add_argument("--best", action="store_true", help="Return the best match, not the first")

    sub.add_parser("list", help="List registered users")

    p = sub.add_parser("remove", help="Remove a user")
    p.add_argument("identifier")

    for name in ("register", "validate", "recognize", "list", "remove"):
        sub.choices[name].add_argument("--store", default=config.STORE_PATH,
                                       help="JSON store path (default: %(default)s)")
    for name in ("validate", "recognize"):
        sub.choices[name].add_argument("--threshold", type=float, default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        if args.command == "digest":
            detection = _load_detection(args.descriptor)
            print(generate_face_hash(detection.descriptor, args.algorithm, args.length))
            return 0

        if args.command == "report":
            detection = _load_detection(args.descriptor)
            report = build_report(detection.descriptor, source=args.descriptor,
                                  lengths=args.lengths)
            write_report(report, args.output)
            _print_json(report["hashes"])
            return 0

        if args.command == "compare":
            print(compare_hashes(args.hash1, args.hash2))
            return 0

        system = FaceValidationSystem(
            detector=load_descriptor_file,
            store=JsonDocumentStore(args.store),
            threshold=getattr(args, "threshold", None),
        )

        if args.command == "register":
            record = system.register_user(args.identifier, args.descriptor,
                                          _parse_meta(args.meta))
            _print_json(record.to_dict())
            return 0

        if args.command == "validate":
            result = system.validate_user(args.identifier, args.descriptor)
            _print_json(result.to_dict())
            return 0 if result.valid else 1

        if args.command == "recognize":
            match = system.recognize_user(args.descriptor, best=args.best)
            _print_json(match.to_dict() if match else None)
            return 0 if match else 1

        if args.command == "list":
            records = system.list_registered_users()
            _print_json([
                {"identifier": r.identifier, "created_at": r.created_at,
                 "metadata": r.metadata}
                for r in records
            ])
            return 0

        if args.command == "remove":
            return 0 if system.remove_user(args.identifier) else 1

    except (NoFaceDetectedError, OSError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 2
    except argparse.ArgumentTypeError as error:
        parser.error(str(error))

    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
