"""Conversion of metrics records into MetricsDocument.

Conversion is fail-soft: a field that is missing or cannot be coerced takes
its default and the rest of the document is kept. Malformed input therefore
loses data silently; dropped fields are logged at DEBUG.

Field table (keys are matched exactly, then case-insensitively; str and
bytes keys are both accepted):

======================================  ==================  =========  =======
Field                                   Keys                Type       Default
======================================  ==================  =========  =======
meta.cmetrics                           cmetrics            str map    {}
meta.external                           external            str map    {}
meta.processing.static_labels           static_labels       list       ()
metrics[].meta.aggregation_type         aggregation_type    int64      0
metrics[].meta.labels                   labels              list[str]  ()
metrics[].meta.opts.description         desc, description   str        ""
metrics[].meta.opts.name                name                str        ""
metrics[].meta.opts.namespace           ns, namespace       str        ""
metrics[].meta.opts.subsystem           ss, subsystem       str        ""
metrics[].meta.type                     type                int64      0
metrics[].meta.ver                      ver                 int        0
metrics[].values[].hash                 hash                int64      0
metrics[].values[].labels               labels              list[str]  ()
metrics[].values[].timestamp            ts, timestamp       int64      0
metrics[].values[].value                value               float64    0.0
======================================  ==================  =========  =======

Weak coercions: bools become 1/0 ("1"/"0" as strings), floats truncate to
ints, numeric strings parse (an empty string is 0), numbers format as
strings, bytes decode as UTF-8, and integers outside int64 wrap. A scalar
where a list is expected becomes a one-element list. A list element that
cannot be coerced keeps its position with the zero value.
"""

import logging
import math
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any, TypeVar

from flbwire.core.models import (
    DocumentMeta,
    MetricOpts,
    MetricsDocument,
    MetricSeries,
    Processing,
    SamplePoint,
    SeriesMeta,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()
_INT64_MIN = -(1 << 63)
_UINT64_SPAN = 1 << 64


def _key_text(key: Any) -> str | None:
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    if isinstance(key, str):
        return key
    return None


def _lookup(source: Any, *names: str) -> Any:
    """Return the value stored under any of ``names``, or _MISSING."""
    if not isinstance(source, Mapping):
        return _MISSING
    for name in names:
        if name in source:
            return source[name]
        encoded = name.encode()
        if encoded in source:
            return source[encoded]
    wanted = {name.lower() for name in names}
    for key, value in source.items():
        text = _key_text(key)
        if text is not None and text.lower() in wanted:
            return value
    return _MISSING


def _wrap_int64(value: int) -> int:
    return (value - _INT64_MIN) % _UINT64_SPAN + _INT64_MIN


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _wrap_int64(value)
    if isinstance(value, float):
        return _wrap_int64(int(value)) if math.isfinite(value) else _MISSING
    if isinstance(value, str | bytes):
        text = _key_text(value).strip()
        if not text:
            return 0
        try:
            return _wrap_int64(int(text, 0))
        except ValueError:
            return _MISSING
    return _MISSING


def _to_float(value: Any) -> float:
    if isinstance(value, bool | int | float):
        return float(value)
    if isinstance(value, str | bytes):
        text = _key_text(value).strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return _MISSING
    return _MISSING


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _to_str(value: Any) -> str:
    if isinstance(value, str | bytes):
        return _key_text(value)
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return _MISSING


def _to_list(value: Any) -> list[Any]:
    if isinstance(value, list | tuple):
        return list(value)
    if isinstance(value, Mapping) and not value:
        return []
    return [value]


def _to_str_map(value: Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        return _MISSING
    result: dict[str, Any] = {}
    for key, item in value.items():
        text = _to_str(key)
        if text is not _MISSING:
            result[text] = item
    return result


def _field(
    source: Any,
    names: tuple[str, ...],
    coerce: Callable[[Any], T],
    default: T,
    path: str,
) -> T:
    raw = _lookup(source, *names)
    if raw is _MISSING or raw is None:
        return default
    value = coerce(raw)
    if value is _MISSING:
        logger.debug("Dropping %s: cannot coerce %r", path, raw)
        return default
    return value


def _str_tuple(source: Any, names: tuple[str, ...], path: str) -> tuple[str, ...]:
    items = _field(source, names, _to_list, [], path)
    result = []
    for index, item in enumerate(items):
        text = _MISSING if item is None else _to_str(item)
        if text is _MISSING:
            logger.debug("Zeroing %s[%d]: cannot coerce %r", path, index, item)
            text = ""
        result.append(text)
    return tuple(result)


def _sample(source: Any) -> SamplePoint:
    return SamplePoint(
        hash=_field(source, ("hash",), _to_int, 0, "values.hash"),
        labels=_str_tuple(source, ("labels",), "values.labels"),
        timestamp=_field(source, ("ts", "timestamp"), _to_int, 0, "values.ts"),
        value=_field(source, ("value",), _to_float, 0.0, "values.value"),
    )


def _opts(source: Any) -> MetricOpts:
    return MetricOpts(
        description=_field(source, ("desc", "description"), _to_str, "", "opts.desc"),
        name=_field(source, ("name",), _to_str, "", "opts.name"),
        namespace=_field(source, ("ns", "namespace"), _to_str, "", "opts.ns"),
        subsystem=_field(source, ("ss", "subsystem"), _to_str, "", "opts.ss"),
    )


def _series_meta(source: Any) -> SeriesMeta:
    return SeriesMeta(
        aggregation_type=_field(
            source, ("aggregation_type",), _to_int, 0, "meta.aggregation_type"
        ),
        labels=_str_tuple(source, ("labels",), "meta.labels"),
        opts=_opts(_lookup(source, "opts")),
        type=_field(source, ("type",), _to_int, 0, "meta.type"),
        ver=_field(source, ("ver",), _to_int, 0, "meta.ver"),
    )


def _series(source: Any) -> MetricSeries:
    samples = _field(source, ("values",), _to_list, [], "metrics.values")
    return MetricSeries(
        meta=_series_meta(_lookup(source, "meta")),
        values=tuple(_sample(item) for item in samples),
    )


def _document_meta(source: Any) -> DocumentMeta:
    processing = _lookup(source, "processing")
    static_labels = _field(
        processing, ("static_labels",), _to_list, [], "meta.processing.static_labels"
    )
    return DocumentMeta(
        cmetrics=_field(source, ("cmetrics",), _to_str_map, {}, "meta.cmetrics"),
        external=_field(source, ("external",), _to_str_map, {}, "meta.external"),
        processing=Processing(static_labels=tuple(static_labels)),
    )


def to_metrics_document(record: Mapping[Any, Any]) -> MetricsDocument:
    """Map a decoded metrics record onto a MetricsDocument.

    Never raises. Missing or malformed fields take the defaults listed in
    the module docstring.

    Args:
        record: The mapping returned by get_record for a metrics record.

    Returns:
        MetricsDocument with series and samples in record order.
    """
    series = _field(record, ("metrics",), _to_list, [], "metrics")
    return MetricsDocument(
        meta=_document_meta(_lookup(record, "meta")),
        metrics=tuple(_series(item) for item in series),
    )
