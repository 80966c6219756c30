"""Port interfaces for the decoding layer.

Record extraction depends only on these protocols, not on the concrete
MessagePack decoder.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DecoderPort(Protocol):
    """Port for sequential value decoding.

    Implementations own their cursor and are used by a single caller.
    Examples: ByteDecoder.
    """

    def decode_next(self) -> Any:
        """Decode and return the next top-level value.

        Raises:
            EndOfBuffer: No value remains.
            DecodeError: The next value is malformed or truncated.
        """
        ...
