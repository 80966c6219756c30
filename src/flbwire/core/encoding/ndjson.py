"""NDJSON encoder for decoded log records."""

import json
import math
from collections.abc import Iterable
from typing import Any

from flbwire.core.models import Timestamp
from flbwire.core.records import RecordResult, RecordShape


def _timestamp_seconds(timestamp: Timestamp | int) -> float:
    if isinstance(timestamp, Timestamp):
        return timestamp.to_float()
    return float(timestamp)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Timestamp):
        return value.to_float()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {_json_key(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        # JSON has no NaN or Infinity literals
        if math.isnan(value):
            return "NaN"
        return "+Inf" if value > 0 else "-Inf"
    if value is None or isinstance(value, str | int | float | bool):
        return value
    return repr(value)


def _json_key(key: Any) -> str:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    if isinstance(key, str):
        return key
    return str(key)


def encode_records(results: Iterable[RecordResult]) -> str:
    """Encode log records to newline-delimited JSON.

    Metrics records and failed results are skipped.

    Args:
        results: Results from get_record or iter_records.

    Returns:
        NDJSON string with one ``{"timestamp", "record"}`` object per line.
        Empty string if no log records.
        Non-finite floats are written as the strings "NaN", "+Inf" and
        "-Inf".
    """
    lines = []
    for result in results:
        if not result.ok or result.shape is not RecordShape.LOG:
            continue
        obj = {
            "timestamp": _timestamp_seconds(result.timestamp),
            "record": _jsonable(result.record),
        }
        lines.append(json.dumps(obj, allow_nan=False))

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
