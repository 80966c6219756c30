"""Decoder configuration."""

from dataclasses import dataclass

# Extension code Fluent Bit uses for event time.
FLB_TIME_EXT_CODE = 0


@dataclass(frozen=True)
class DecoderConfig:
    """Options for ByteDecoder.

    Attributes:
        timestamp_ext_code: Extension code decoded as a Timestamp.
        raw: Keep MessagePack str values as bytes instead of decoding UTF-8.
        max_buffer_size: Upper bound passed to the unpacker. 0 means the
            buffer length.
    """

    timestamp_ext_code: int = FLB_TIME_EXT_CODE
    raw: bool = False
    max_buffer_size: int = 0
