"""Core decoding, conversion and encoding for flbwire."""
