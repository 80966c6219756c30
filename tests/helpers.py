"""Wire-format builders shared by tests."""

import struct
from typing import Any

import msgpack


def event_time(seconds: int, microseconds: int = 0) -> msgpack.ExtType:
    """Build the Fluent Bit event time extension value."""
    return msgpack.ExtType(0, struct.pack(">II", seconds, microseconds))


def pack(*values: Any) -> bytes:
    """Concatenate the MessagePack encoding of each value."""
    return b"".join(msgpack.packb(value) for value in values)
