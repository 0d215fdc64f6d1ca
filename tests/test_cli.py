"""Tests for the face-digest command line."""

import json
import logging

import pytest

from face_digest.cli import main


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("face_digest")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def face(tmp_path):
    path = tmp_path / "face.json"
    path.write_text(json.dumps({"descriptor": [0.1, -0.2, 0.3], "score": 0.95}))
    return str(path)


@pytest.fixture
def other_face(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps([0.4, 0.5, -0.6]))
    return str(path)


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "store.json")


# ---------------------------------------------------------------------------
# Stateless commands
# ---------------------------------------------------------------------------


def test_digest_hex(face, capsys):
    assert main(["digest", face, "--algorithm", "hex"]) == 0
    assert capsys.readouterr().out.strip() == "006400c8012c"


def test_digest_truncated(face, capsys):
    assert main(["digest", face, "--algorithm", "sha256", "--length", "16"]) == 0
    assert len(capsys.readouterr().out.strip()) == 16


def test_digest_no_face(tmp_path, capsys):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"descriptor": []}))
    assert main(["digest", str(path)]) == 2
    assert "No face detected" in capsys.readouterr().err


def test_compare(capsys):
    assert main(["compare", "abcd", "abzz"]) == 0
    assert capsys.readouterr().out.strip() == "0.5"


def test_report(face, tmp_path, capsys):
    out = str(tmp_path / "out" / "report.json")
    assert main(["report", face, "--output", out, "--lengths", "8"]) == 0
    with open(out) as f:
        data = json.load(f)
    assert data["source"] == face
    assert set(data["hashes_with_lengths"]["simple"]) == {"8"}
    assert json.loads(capsys.readouterr().out) == data["hashes"]


# ---------------------------------------------------------------------------
# Store commands
# ---------------------------------------------------------------------------


def test_register_validate_recognize_remove(face, other_face, store_path, capsys):
    assert main(["register", "alice", face, "--store", store_path,
                 "--meta", "name=Alice Silva", "--meta", "role=admin"]) == 0
    record = json.loads(capsys.readouterr().out)
    assert record["identifier"] == "alice"
    assert record["metadata"]["name"] == "Alice Silva"
    assert record["metadata"]["role"] == "admin"
    assert record["metadata"]["confidence"] == 0.95

    assert main(["validate", "alice", face, "--store", store_path]) == 0
    assert json.loads(capsys.readouterr().out)["valid"] is True

    assert main(["validate", "alice", other_face, "--store", store_path]) == 1
    assert json.loads(capsys.readouterr().out)["valid"] is False

    assert main(["recognize", face, "--store", store_path, "--best"]) == 0
    assert json.loads(capsys.readouterr().out)["identifier"] == "alice"

    assert main(["recognize", other_face, "--store", store_path]) == 1
    assert json.loads(capsys.readouterr().out) is None

    assert main(["list", "--store", store_path]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert [u["identifier"] for u in listing] == ["alice"]

    assert main(["remove", "alice", "--store", store_path]) == 0
    assert main(["remove", "alice", "--store", store_path]) == 1


def test_validate_threshold(face, other_face, store_path, capsys):
    main(["register", "alice", face, "--store", store_path])
    capsys.readouterr()
    assert main(["validate", "alice", other_face, "--store", store_path,
                 "--threshold", "0"]) == 0
    assert json.loads(capsys.readouterr().out)["threshold"] == 0.0


def test_register_bad_meta(face, store_path):
    with pytest.raises(SystemExit):
        main(["register", "alice", face, "--store", store_path, "--meta", "oops"])


def test_missing_command():
    with pytest.raises(SystemExit):
        main([])


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_missing_descriptor_file(tmp_path, capsys):
    assert main(["digest", str(tmp_path / "nope.json")]) == 2
    assert capsys.readouterr().err.startswith("Error:")


def test_negative_length(face, capsys):
    assert main(["digest", face, "--length", "-3"]) == 2
    assert "length must be >= 0" in capsys.readouterr().err


def test_non_list_descriptor(tmp_path, capsys):
    path = tmp_path / "scalar.json"
    path.write_text("5")
    assert main(["digest", str(path)]) == 2
    assert "JSON list" in capsys.readouterr().err


def test_corrupt_store(face, tmp_path, capsys):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    assert main(["register", "alice", face, "--store", str(path)]) == 2
    assert "Error:" in capsys.readouterr().err


def test_log_level_case_insensitive(capsys):
    assert main(["--log-level", "debug", "compare", "ab", "ab"]) == 0
    assert logging.getLogger("face_digest").level == logging.DEBUG


def test_bad_log_level():
    with pytest.raises(SystemExit):
        main(["--log-level", "bogus", "compare", "ab", "ab"])
