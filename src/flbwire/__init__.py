"""flbwire - decode Fluent Bit records and render metrics as Prometheus text."""

from flbwire.adapters.logging import replay_records
from flbwire.core.config import DecoderConfig
from flbwire.core.conversion import to_metrics_document
from flbwire.core.decoder import ByteDecoder, ValueKind, kind_of
from flbwire.core.encoding.ndjson import encode_records
from flbwire.core.encoding.prometheus import render
from flbwire.core.errors import (
    DecodeError,
    EndOfBuffer,
    FlbWireError,
    UnsupportedOperationError,
)
from flbwire.core.models import (
    ZERO_TIMESTAMP,
    AggregationType,
    MetricsDocument,
    MetricSeries,
    MetricType,
    SamplePoint,
    Timestamp,
)
from flbwire.core.ports import DecoderPort
from flbwire.core.records import (
    RecordResult,
    RecordShape,
    RecordStatus,
    get_record,
    iter_records,
)

__all__ = [
    "ZERO_TIMESTAMP",
    "AggregationType",
    "ByteDecoder",
    "DecodeError",
    "DecoderConfig",
    "DecoderPort",
    "EndOfBuffer",
    "FlbWireError",
    "MetricSeries",
    "MetricType",
    "MetricsDocument",
    "RecordResult",
    "RecordShape",
    "RecordStatus",
    "SamplePoint",
    "Timestamp",
    "UnsupportedOperationError",
    "ValueKind",
    "encode_records",
    "get_record",
    "iter_records",
    "kind_of",
    "render",
    "replay_records",
    "to_metrics_document",
]
