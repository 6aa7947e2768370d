"""
Stream extraction tests
"""

import os

import pytest

from adstool.core.errors import DirectoryCreateError, IOFailure, NameCollisionError, NotFoundError
from adstool.core.extract import extract_streams, output_name
from adstool.core.results import Outcome


def test_output_name_strips_colons():
    assert output_name("doc.txt", "secret.txt") == "doc.txt_secret.txt"
    assert output_name("doc.txt", ":$DATA") == "doc.txt_$DATA"
    assert output_name("doc.txt", "a:b") == "doc.txt_ab"


def test_extracts_each_named_stream(doc, backend, tmp_path):
    backend.attach(doc, "Zone.Identifier", b"[ZoneTransfer]\r\nZoneId=3\r\n")
    out = tmp_path / "out"
    report = extract_streams(doc, str(out), backend)

    assert report.ok
    assert report.count(Outcome.EXTRACTED) == 2
    assert sorted(os.listdir(out)) == ["doc.txt_Zone.Identifier", "doc.txt_secret.txt"]
    assert (out / "doc.txt_secret.txt").read_bytes() == b"s" * 120
    assert report.outcomes[0].message.startswith("Extracting doc.txt:")


def test_primary_is_never_extracted(tmp_path, backend):
    path = tmp_path / "plain.txt"
    path.write_bytes(b"visible")
    out = tmp_path / "out"
    report = extract_streams(str(path), str(out), backend)
    assert report.ok
    assert report.outcomes == []
    assert os.listdir(out) == []


def test_creates_missing_ancestors(doc, backend, tmp_path):
    out = tmp_path / "a" / "b" / "c"
    report = extract_streams(doc, str(out), backend)
    assert report.ok
    assert (out / "doc.txt_secret.txt").exists()


def test_rerun_skips_existing(doc, backend, tmp_path):
    out = tmp_path / "out"
    extract_streams(doc, str(out), backend)
    backend.attach(doc, "secret.txt", b"changed")

    report = extract_streams(doc, str(out), backend)
    assert report.ok
    assert [o.outcome for o in report.outcomes] == [Outcome.ALREADY_EXTRACTED]
    assert (out / "doc.txt_secret.txt").read_bytes() == b"s" * 120


def test_directory_create_failure_is_fatal(doc, backend, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where the directory should go")
    report = extract_streams(doc, str(blocker / "out"), backend)
    assert not report.ok
    assert isinstance(report.error, DirectoryCreateError)
    assert report.outcomes == []


def test_read_failure_continues_with_other_streams(doc, backend, tmp_path):
    backend.attach(doc, "locked.bin", b"nope")
    backend.attach(doc, "after.bin", b"yes")
    backend.fail_read.add("locked.bin")
    out = tmp_path / "out"

    report = extract_streams(doc, str(out), backend)
    assert report.ok
    by_name = {o.stream_name: o for o in report.outcomes}
    assert by_name["locked.bin"].outcome is Outcome.FAILED
    assert isinstance(by_name["locked.bin"].error, IOFailure)
    assert by_name["after.bin"].outcome is Outcome.EXTRACTED
    assert by_name["secret.txt"].outcome is Outcome.EXTRACTED
    assert not (out / "doc.txt_locked.bin").exists()
    assert len(report.failures) == 1


def test_sanitized_name_collision(doc, backend, tmp_path):
    backend.attach(doc, "se:cret.txt", b"other")
    report = extract_streams(doc, str(tmp_path / "out"), backend)
    collided = [o for o in report.outcomes if o.outcome is Outcome.FAILED]
    assert len(collided) == 1
    assert isinstance(collided[0].error, NameCollisionError)
    assert (tmp_path / "out" / "doc.txt_secret.txt").read_bytes() == b"s" * 120


def test_missing_host(tmp_path, backend):
    report = extract_streams(str(tmp_path / "gone.txt"), str(tmp_path / "out"), backend)
    assert isinstance(report.error, NotFoundError)
    assert not (tmp_path / "out").exists()


def test_rerun_with_collision_reports_already_extracted(doc, backend, tmp_path):
    backend.attach(doc, "se:cret.txt", b"other")
    out = tmp_path / "out"
    extract_streams(doc, str(out), backend)

    report = extract_streams(doc, str(out), backend)
    assert report.ok
    assert not report.failures
    assert [o.outcome for o in report.outcomes] == [Outcome.ALREADY_EXTRACTED] * 2
