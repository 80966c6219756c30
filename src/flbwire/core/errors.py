"""Exceptions raised by the decoding layer."""


class FlbWireError(Exception):
    """Base class for flbwire errors."""


class DecodeError(FlbWireError, ValueError):
    """The buffer does not hold a well-formed value at the cursor."""


class EndOfBuffer(DecodeError):
    """The cursor reached the end of the buffer on a value boundary."""


class UnsupportedOperationError(FlbWireError, NotImplementedError):
    """A read-only component was asked to write."""
