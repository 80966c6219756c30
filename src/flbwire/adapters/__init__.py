"""Adapters bridging decoded records to the Python ecosystem."""
