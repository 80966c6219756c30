"""Core domain models for decoded Fluent Bit records and metrics."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import IntEnum
from typing import Any


@dataclass(frozen=True)
class Timestamp:
    """Fluent Bit event time.

    Attributes:
        seconds: Seconds since the Unix epoch (unsigned 32-bit).
        microseconds: Sub-second part, carried as decoded (unsigned 32-bit).
    """

    seconds: int
    microseconds: int = 0

    @classmethod
    def from_float(cls, value: float) -> "Timestamp":
        """Build a timestamp from epoch seconds."""
        seconds = int(value)
        carry, microseconds = divmod(round((value - seconds) * 1_000_000), 1_000_000)
        return cls(seconds=seconds + carry, microseconds=microseconds)

    def to_float(self) -> float:
        """Return the timestamp as epoch seconds."""
        return self.seconds + self.microseconds / 1_000_000

    def to_datetime(self) -> datetime:
        """Return the timestamp as an aware UTC datetime."""
        return datetime.fromtimestamp(self.seconds, tz=UTC) + timedelta(
            microseconds=self.microseconds
        )


ZERO_TIMESTAMP = Timestamp(0, 0)


class AggregationType(IntEnum):
    """Whether a series reports deltas or cumulative totals."""

    UNSPECIFIED = 0
    DELTA = 1
    CUMULATIVE = 2

    @classmethod
    def name_of(cls, code: int) -> str:
        """Return the lowercase name for ``code``, or "" if it is undefined."""
        try:
            return cls(code).name.lower()
        except ValueError:
            return ""


class MetricType(IntEnum):
    """Kind of a metric series."""

    COUNTER = 0
    GAUGE = 1
    HISTOGRAM = 2
    SUMMARY = 3
    UNTYPED = 4

    @classmethod
    def name_of(cls, code: int) -> str:
        """Return the lowercase name for ``code``, or "" if it is undefined."""
        try:
            return cls(code).name.lower()
        except ValueError:
            return ""


@dataclass(frozen=True)
class MetricOpts:
    """Naming options of a series.

    The fully qualified name is ``namespace_subsystem_name``.
    """

    description: str = ""
    name: str = ""
    namespace: str = ""
    subsystem: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.namespace}_{self.subsystem}_{self.name}"


@dataclass(frozen=True)
class SeriesMeta:
    """Per-series metadata.

    Attributes:
        aggregation_type: Raw aggregation code (see AggregationType).
        labels: Label names, positionally matched against sample labels.
        opts: Naming options.
        type: Raw metric type code (see MetricType).
        ver: Schema version.
    """

    aggregation_type: int = AggregationType.UNSPECIFIED
    labels: tuple[str, ...] = ()
    opts: MetricOpts = field(default_factory=MetricOpts)
    type: int = MetricType.COUNTER
    ver: int = 0

    @property
    def type_name(self) -> str:
        return MetricType.name_of(self.type)

    @property
    def aggregation_name(self) -> str:
        return AggregationType.name_of(self.aggregation_type)


@dataclass(frozen=True)
class SamplePoint:
    """A single sample of a series.

    Attributes:
        hash: Identity of the label combination (int64).
        labels: Label values, aligned with ``SeriesMeta.labels``.
        timestamp: Sample time in nanoseconds as reported upstream.
        value: The sample value.
    """

    hash: int = 0
    labels: tuple[str, ...] = ()
    timestamp: int = 0
    value: float = 0.0


@dataclass(frozen=True)
class MetricSeries:
    """One metric and its samples, in upstream order."""

    meta: SeriesMeta = field(default_factory=SeriesMeta)
    values: tuple[SamplePoint, ...] = ()


@dataclass(frozen=True)
class Processing:
    static_labels: tuple[Any, ...] = ()


@dataclass(frozen=True)
class DocumentMeta:
    """Document-level metadata.

    ``cmetrics`` and ``external`` are passed through as decoded.
    """

    cmetrics: dict[str, Any] = field(default_factory=dict)
    external: dict[str, Any] = field(default_factory=dict)
    processing: Processing = field(default_factory=Processing)


@dataclass(frozen=True)
class MetricsDocument:
    """A decoded metrics record."""

    meta: DocumentMeta = field(default_factory=DocumentMeta)
    metrics: tuple[MetricSeries, ...] = ()
