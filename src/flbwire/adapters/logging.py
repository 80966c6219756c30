"""Python logging adapter for decoded log records.

Replays Fluent Bit log records through a standard library logger so they
reach whatever handlers the host application configured.
"""

import logging
from collections.abc import Iterable
from typing import Any

from flbwire.core.models import Timestamp
from flbwire.core.records import RecordResult, RecordShape

# Standard LogRecord attributes that record fields must not overwrite
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Record fields used as the log message, in order of preference
_DEFAULT_MESSAGE_KEYS = ("log", "message", "msg")

_FIELD_PREFIX = "flb_"


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _shadows_record_attr(key: str) -> bool:
    """Whether setting ``key`` on a LogRecord would hide one of its attributes."""
    return (
        key in _STANDARD_LOGRECORD_ATTRS
        or key.startswith("_")
        or hasattr(logging.LogRecord, key)
    )


def _created(timestamp: Timestamp | int) -> float:
    if isinstance(timestamp, Timestamp):
        return timestamp.to_float()
    return float(timestamp)


def _level_for(fields: dict[str, Any], default: int) -> int:
    """Map a ``level`` field such as "error" or "WARN" to a logging level."""
    raw = fields.get("level")
    if raw is None:
        return default
    level = logging.getLevelName(_text(raw).upper())
    return level if isinstance(level, int) else default


def to_log_record(
    logger: logging.Logger,
    result: RecordResult,
    level: int = logging.INFO,
    message_keys: tuple[str, ...] = _DEFAULT_MESSAGE_KEYS,
) -> logging.LogRecord:
    """Build a LogRecord from a decoded log record.

    Args:
        logger: Logger whose name the record carries.
        result: An OK log record result.
        level: Level used when the record has no usable ``level`` field.
        message_keys: Fields tried, in order, for the message text.

    Returns:
        LogRecord with ``created`` set to the event time and the remaining
        fields attached as attributes. Fields that would shadow a LogRecord
        attribute or method, and private names, are prefixed with ``flb_``.
    """
    fields = {_text(key): value for key, value in (result.record or {}).items()}
    message = ""
    for key in message_keys:
        if key in fields:
            message = _text(fields.pop(key))
            break

    record_level = _level_for(fields, level)
    extra = {
        (_FIELD_PREFIX + key if _shadows_record_attr(key) else key): value
        for key, value in fields.items()
    }
    record = logger.makeRecord(
        logger.name, record_level, "", 0, message, (), None, extra=extra
    )
    record.created = _created(result.timestamp)
    record.msecs = (record.created - int(record.created)) * 1000
    return record


def replay_records(
    results: Iterable[RecordResult],
    logger: logging.Logger,
    level: int = logging.INFO,
) -> int:
    """Send decoded log records to ``logger``.

    Metrics records, failed results and records below the logger's
    effective level are skipped.

    Example:
        ```python
        decoder = ByteDecoder(payload)
        replay_records(iter_records(decoder), logging.getLogger("fluentbit"))
        ```

    Returns:
        Number of records handed to the logger.
    """
    handled = 0
    for result in results:
        if not result.ok or result.shape is not RecordShape.LOG:
            continue
        record = to_log_record(logger, result, level)
        if not logger.isEnabledFor(record.levelno):
            continue
        logger.handle(record)
        handled += 1
    return handled
