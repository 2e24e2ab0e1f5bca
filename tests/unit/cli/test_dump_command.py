"""Unit tests for dump CLI command wiring."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.main import main
from tests.avro_fixtures import (
    TEST_SYNC_MARKER,
    build_container_bytes,
    encode_long,
    sample_users,
    write_container,
)

_EVENT_SCHEMA = json.dumps(
    {
        "type": "record",
        "name": "Event",
        "fields": [{"name": "ts", "type": {"type": "long", "logicalType": "timestamp-millis"}}],
    }
).encode("utf-8")


def test_dump_tsv_format_with_field_selection(tmp_path: Path, capsys) -> None:
    """TSV dump should print only the selected fields."""
    path = write_container(tmp_path / "users.avro", sample_users(2))

    exit_code = main(["dump", str(path), "--format", "tsv", "--fields", "name,favorite_number"])
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0 and lines == ["user-0\t0", "user-1\t\\N"]


def test_dump_json_format_respects_limit(tmp_path: Path, capsys) -> None:
    """JSON dump should stop after the requested record count."""
    records = sample_users(5)
    path = write_container(tmp_path / "users.avro", records)

    exit_code = main(["dump", str(path), "--format", "json", "--limit", "2"])
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0 and [json.loads(line) for line in lines] == records[:2]


def test_dump_uses_format_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    """AVROREAD_OUTPUT_FORMAT should pick the default format."""
    monkeypatch.setenv("AVROREAD_OUTPUT_FORMAT", "json")
    path = write_container(tmp_path / "users.avro", sample_users(1))

    exit_code = main(["dump", str(path)])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and json.loads(output)["name"] == "user-0"


def test_dump_returns_one_for_missing_file(tmp_path: Path, capsys) -> None:
    """Missing input should print an error and exit non-zero."""
    exit_code = main(["dump", str(tmp_path / "missing.avro")])
    captured = capsys.readouterr()

    assert exit_code == 1 and captured.err.startswith("error=") and captured.out == ""


def test_dump_keeps_records_printed_before_corruption(tmp_path: Path, capsys) -> None:
    """Records from valid blocks should stay on stdout when a later block fails."""
    path = write_container(tmp_path / "users.avro", sample_users(3), one_block_per_record=True)
    data = bytearray(path.read_bytes())
    data[-len(TEST_SYNC_MARKER)] ^= 0x01
    path.write_bytes(bytes(data))

    exit_code = main(["dump", str(path), "--format", "tsv", "--fields", "name"])
    captured = capsys.readouterr()

    assert (
        exit_code == 1
        and captured.out.splitlines() == ["user-0", "user-1"]
        and "Sync marker mismatch" in captured.err
    )


def test_dump_reports_unknown_field(tmp_path: Path, capsys) -> None:
    """Selecting a field missing from the records should fail cleanly."""
    path = write_container(tmp_path / "users.avro", sample_users(1))

    exit_code = main(["dump", str(path), "--fields", "age"])
    captured = capsys.readouterr()

    assert exit_code == 1 and "Unknown field" in captured.err


def test_dump_returns_one_for_out_of_range_timestamp(tmp_path: Path, capsys) -> None:
    """A timestamp beyond the datetime range should be a reported error."""
    path = tmp_path / "events.avro"
    path.write_bytes(
        build_container_bytes({"avro.schema": _EVENT_SCHEMA}, blocks=[(1, encode_long(2**62))])
    )

    exit_code = main(["dump", str(path)])
    captured = capsys.readouterr()

    assert exit_code == 1 and "timestamp-millis" in captured.err and captured.out == ""


def test_dump_prints_raw_timestamp_when_logical_types_disabled(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    """AVROREAD_LOGICAL_TYPES=false should print the underlying long."""
    monkeypatch.setenv("AVROREAD_LOGICAL_TYPES", "false")
    path = tmp_path / "events.avro"
    path.write_bytes(
        build_container_bytes({"avro.schema": _EVENT_SCHEMA}, blocks=[(1, encode_long(2**62))])
    )

    exit_code = main(["dump", str(path), "--format", "json"])
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and json.loads(output) == {"ts": 2**62}
