"""Encoders for decoded records and metrics documents."""
