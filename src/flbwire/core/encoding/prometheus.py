"""Prometheus text format encoder for metrics documents."""

import math

from flbwire.core.models import MetricSeries, MetricsDocument, SamplePoint


def _format_value(value: float) -> str:
    """Format a sample value rounded to the nearest integer."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(value, ".0f")


def _escape_label_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _format_labels(
    names: tuple[str, ...], sample: SamplePoint, quote_label_values: bool
) -> str:
    pairs = []
    for i, name in enumerate(names):
        # Short label tuples come from malformed upstream data.
        value = sample.labels[i] if i < len(sample.labels) else ""
        if quote_label_values:
            value = _escape_label_value(value)
        pairs.append(f"{name}={value}")
    return ",".join(pairs)


def encode_series(series: MetricSeries, quote_label_values: bool = False) -> str:
    """Encode one series as HELP, TYPE and sample lines.

    Args:
        series: The series to encode.
        quote_label_values: Quote and escape label values.

    Returns:
        The series block, each line terminated by a newline.
    """
    full_name = series.meta.opts.full_name
    lines = [
        f"# HELP {full_name} {series.meta.opts.description}\n",
        f"# TYPE {full_name} {series.meta.type_name}\n",
    ]
    for sample in series.values:
        labels = _format_labels(series.meta.labels, sample, quote_label_values)
        lines.append(f"{full_name}{{{labels}}} {_format_value(sample.value)}\n")
    return "".join(lines)


def render(doc: MetricsDocument, *, quote_label_values: bool = False) -> str:
    """Encode a metrics document to Prometheus text format.

    Label values are written unquoted by default, matching what existing
    consumers of Fluent Bit Go plugins expect. Pass
    ``quote_label_values=True`` for output that follows the Prometheus
    grammar.

    Args:
        doc: The document to encode.
        quote_label_values: Quote and escape label values.

    Returns:
        Series blocks in document order. Empty string if there are no series.
    """
    return "".join(encode_series(series, quote_label_values) for series in doc.metrics)
