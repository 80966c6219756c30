"""MessagePack decoder for buffers handed over by Fluent Bit.

The decoder is read-only. It copies the input buffer on construction and
decodes one top-level value per call. A ByteDecoder instance is owned by a
single caller and must not be shared between threads without external
locking.
"""

import logging
import struct
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

import msgpack

from flbwire.core.config import DecoderConfig
from flbwire.core.errors import DecodeError, EndOfBuffer, UnsupportedOperationError
from flbwire.core.models import Timestamp

logger = logging.getLogger(__name__)

_UINT64_LIMIT = 1 << 64
_EVENT_TIME = struct.Struct(">II")


class ValueKind(Enum):
    """Closed set of value kinds the record layer dispatches on."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    UNSIGNED_INTEGER = "unsigned_integer"
    TIMESTAMP = "timestamp"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a decoded value."""
    if isinstance(value, Timestamp):
        return ValueKind.TIMESTAMP
    # ExtType is a namedtuple and must not pass as a sequence
    if isinstance(value, msgpack.ExtType):
        return ValueKind.OTHER
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, list | tuple):
        return ValueKind.SEQUENCE
    # bool is an int subclass but never a timestamp
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < _UINT64_LIMIT:
            return ValueKind.UNSIGNED_INTEGER
    return ValueKind.OTHER


def decode_event_time(data: bytes) -> Timestamp:
    """Decode the 8-byte event time extension payload.

    Args:
        data: Big-endian uint32 seconds followed by big-endian uint32
            microseconds.

    Raises:
        DecodeError: The payload is not exactly 8 bytes.
    """
    if len(data) != _EVENT_TIME.size:
        raise DecodeError(
            f"event time extension needs {_EVENT_TIME.size} bytes, got {len(data)}"
        )
    seconds, microseconds = _EVENT_TIME.unpack(data)
    return Timestamp(seconds=seconds, microseconds=microseconds)


class ByteDecoder:
    """Sequential decoder over an owned copy of a byte buffer.

    Example:
        ```python
        decoder = ByteDecoder(payload)
        for value in decoder:
            ...
        ```
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        config: DecoderConfig | None = None,
    ) -> None:
        """Copy ``data`` and prepare the unpacker.

        Args:
            data: Buffer holding zero or more concatenated values.
            config: Decoder options. Defaults to DecoderConfig().

        Raises:
            DecodeError: The buffer exceeds ``config.max_buffer_size``.
        """
        self._config = config or DecoderConfig()
        self._buffer = bytes(data)
        self._unpacker = msgpack.Unpacker(
            None,
            raw=self._config.raw,
            strict_map_key=False,
            ext_hook=self._ext_hook,
            max_buffer_size=self._config.max_buffer_size or len(self._buffer),
        )
        try:
            self._unpacker.feed(self._buffer)
        except msgpack.BufferFull as e:
            raise DecodeError(
                f"buffer of {len(self._buffer)} bytes exceeds max_buffer_size"
            ) from e

    @property
    def config(self) -> DecoderConfig:
        return self._config

    @property
    def position(self) -> int:
        """Offset of the cursor in the buffer."""
        return self._unpacker.tell()

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                yield self.decode_next()
            except EndOfBuffer:
                return

    def decode_next(self) -> Any:
        """Decode the next value and advance the cursor.

        Returns:
            A dict, list, scalar, Timestamp or msgpack.ExtType.

        Raises:
            EndOfBuffer: The cursor is at the end of the buffer.
            DecodeError: The next value is malformed or truncated.
        """
        start = self.position
        try:
            return self._unpacker.unpack()
        except msgpack.OutOfData as e:
            if start >= len(self._buffer):
                raise EndOfBuffer("no more values in buffer") from e
            raise DecodeError(f"truncated value at offset {start}") from e
        except DecodeError:
            raise
        except (msgpack.UnpackException, ValueError, TypeError) as e:
            logger.debug("Decode failed at offset %d: %s", start, e)
            raise DecodeError(f"malformed value at offset {start}: {e}") from e

    def encode(self, value: Any) -> bytes:
        """Always raises: the decoder never writes.

        Raises:
            UnsupportedOperationError: Unconditionally.
        """
        raise UnsupportedOperationError(
            "ByteDecoder is read-only; encoding is unsupported"
        )

    def _ext_hook(self, code: int, data: bytes) -> Any:
        if code == self._config.timestamp_ext_code:
            return decode_event_time(data)
        return msgpack.ExtType(code, data)
