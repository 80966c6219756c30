"""Record extraction from decoded top-level values.

Fluent Bit hands an output plugin one of two record shapes:

- ``[timestamp, {fields...}]``: a log record.
- ``{fields...}``: a metrics record, with no timestamp wrapper.

The timestamp of a log record is either event time (extension 0), a legacy
unsigned integer, or a sequence whose first element is one of those (the
metadata-carrying format of Fluent Bit 2.x, ``[[time, {metadata}], {...}]``).
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from flbwire.core.decoder import ValueKind, kind_of
from flbwire.core.errors import DecodeError, EndOfBuffer
from flbwire.core.models import ZERO_TIMESTAMP, Timestamp
from flbwire.core.ports import DecoderPort

logger = logging.getLogger(__name__)


class RecordStatus(IntEnum):
    """Outcome of a single get_record call."""

    OK = 0
    DECODE_FAILED = -1
    WRONG_ARITY = -2
    PAYLOAD_NOT_MAPPING = -3
    MALFORMED_TIMESTAMP_SEQUENCE = -4
    UNRECOGNIZED_TIMESTAMP_TYPE = -5
    WRONG_SHAPE = -6


class RecordShape(Enum):
    LOG = "log"
    METRICS = "metrics"


@dataclass(frozen=True)
class RecordResult:
    """Result of extracting one record.

    Unpacks as ``status, timestamp, record``.

    Attributes:
        status: RecordStatus.OK or the failure kind.
        timestamp: Event time, a legacy integer, or ZERO_TIMESTAMP for
            metrics records and failures.
        record: The field mapping, or None on failure.
        shape: LOG or METRICS on success, None on failure.
    """

    status: RecordStatus
    timestamp: Timestamp | int = ZERO_TIMESTAMP
    record: dict[Any, Any] | None = None
    shape: RecordShape | None = None

    def __iter__(self) -> Iterator[Any]:
        yield self.status
        yield self.timestamp
        yield self.record

    @property
    def ok(self) -> bool:
        return self.status is RecordStatus.OK


def _failure(status: RecordStatus) -> RecordResult:
    logger.debug("Record extraction failed: %s", status.name)
    return RecordResult(status=status)


def resolve_timestamp(value: Any) -> Timestamp | int | RecordStatus:
    """Resolve the first element of a log record to a timestamp.

    Returns:
        The timestamp, or the failure status when ``value`` is not usable.
    """
    match kind_of(value):
        case ValueKind.TIMESTAMP | ValueKind.UNSIGNED_INTEGER:
            return value
        case ValueKind.SEQUENCE:
            if len(value) < 2:
                return RecordStatus.MALFORMED_TIMESTAMP_SEQUENCE
            inner = value[0]
            if kind_of(inner) in (ValueKind.TIMESTAMP, ValueKind.UNSIGNED_INTEGER):
                return inner
            return RecordStatus.UNRECOGNIZED_TIMESTAMP_TYPE
        case _:
            return RecordStatus.UNRECOGNIZED_TIMESTAMP_TYPE


def extract_record(value: Any) -> RecordResult:
    """Classify an already decoded top-level value."""
    match kind_of(value):
        case ValueKind.MAPPING:
            return RecordResult(
                status=RecordStatus.OK,
                timestamp=ZERO_TIMESTAMP,
                record=value,
                shape=RecordShape.METRICS,
            )
        case ValueKind.SEQUENCE:
            if len(value) != 2:
                return _failure(RecordStatus.WRONG_ARITY)
            timestamp = resolve_timestamp(value[0])
            if isinstance(timestamp, RecordStatus):
                return _failure(timestamp)
            payload = value[1]
            if kind_of(payload) is not ValueKind.MAPPING:
                return _failure(RecordStatus.PAYLOAD_NOT_MAPPING)
            return RecordResult(
                status=RecordStatus.OK,
                timestamp=timestamp,
                record=payload,
                shape=RecordShape.LOG,
            )
        case _:
            return _failure(RecordStatus.WRONG_SHAPE)


def get_record(decoder: DecoderPort) -> RecordResult:
    """Decode one top-level value and extract its record.

    Never raises for bad data. A decode error, including the end of the
    buffer, is reported as RecordStatus.DECODE_FAILED.

    Args:
        decoder: Source of top-level values.

    Returns:
        RecordResult that unpacks as ``(status, timestamp, record)``.
    """
    try:
        value = decoder.decode_next()
    except EndOfBuffer:
        return RecordResult(status=RecordStatus.DECODE_FAILED)
    except DecodeError:
        return _failure(RecordStatus.DECODE_FAILED)
    return extract_record(value)


def iter_records(decoder: DecoderPort) -> Iterator[RecordResult]:
    """Yield records until the buffer is exhausted or a record fails.

    This is the loop an output plugin runs over a flush buffer: the first
    non-OK status ends the iteration.
    """
    while True:
        try:
            value = decoder.decode_next()
        except EndOfBuffer:
            return
        except DecodeError as e:
            logger.debug("Stopping record iteration: %s", e)
            return
        result = extract_record(value)
        if not result.ok:
            return
        yield result
