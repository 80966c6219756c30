"""Tests for NDJSON log record encoder."""

import json

import pytest

from flbwire.core.encoding.ndjson import encode_records
from flbwire.core.models import Timestamp
from flbwire.core.records import RecordResult, RecordShape, RecordStatus


def log_result(timestamp: Timestamp | int, record: dict) -> RecordResult:
    return RecordResult(
        status=RecordStatus.OK,
        timestamp=timestamp,
        record=record,
        shape=RecordShape.LOG,
    )


class TestNdjsonEncoder:
    """Tests for NDJSON encoding of log records."""

    @pytest.mark.encoding
    def test_encode_single_record(self) -> None:
        """Single record encodes to one JSON line."""
        result = encode_records([log_result(Timestamp(1702300000, 250000), {"a": 1})])

        parsed = json.loads(result.strip())
        assert parsed == {"timestamp": 1702300000.25, "record": {"a": 1}}

    @pytest.mark.encoding
    def test_legacy_integer_timestamp(self) -> None:
        """Integer timestamps encode as floats."""
        result = encode_records([log_result(1702300000, {})])

        assert json.loads(result)["timestamp"] == 1702300000.0

    @pytest.mark.encoding
    def test_encode_multiple_records(self) -> None:
        """Multiple records are newline-delimited."""
        results = [
            log_result(Timestamp(1), {"log": "First"}),
            log_result(Timestamp(2), {"log": "Second"}),
        ]

        lines = encode_records(results).strip().split("\n")

        assert len(lines) == 2
        assert json.loads(lines[0])["record"]["log"] == "First"
        assert json.loads(lines[1])["record"]["log"] == "Second"

    @pytest.mark.encoding
    def test_encode_empty_iterable(self) -> None:
        """Empty input returns empty string."""
        assert encode_records([]) == ""

    @pytest.mark.encoding
    def test_metrics_and_failures_are_skipped(self) -> None:
        """Only OK log records are encoded."""
        results = [
            RecordResult(status=RecordStatus.WRONG_SHAPE),
            RecordResult(
                status=RecordStatus.OK,
                record={"metrics": []},
                shape=RecordShape.METRICS,
            ),
        ]

        assert encode_records(results) == ""

    @pytest.mark.encoding
    def test_non_json_values_are_converted(self) -> None:
        """Bytes, non-string keys and nested timestamps become JSON values."""
        record = {b"raw": b"bytes", 7: [Timestamp(3, 500000)], "t": (1, 2)}

        parsed = json.loads(encode_records([log_result(1, record)]))

        assert parsed["record"] == {"raw": "bytes", "7": [3.5], "t": [1, 2]}

    @pytest.mark.encoding
    def test_non_finite_floats_are_strings(self) -> None:
        """NaN and infinities encode as strings so every line is strict JSON."""
        record = {"a": float("nan"), "b": [float("inf"), float("-inf")], "c": 1.5}

        line = encode_records([log_result(1, record)])

        parsed = json.loads(line, parse_constant=pytest.fail)
        assert parsed["record"] == {"a": "NaN", "b": ["+Inf", "-Inf"], "c": 1.5}

    @pytest.mark.encoding
    def test_output_ends_with_newline(self) -> None:
        """Each record ends with a newline character."""
        assert encode_records([log_result(1, {})]).endswith("\n")
