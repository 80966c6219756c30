"""Shared test fixtures for all test modules."""

from typing import Any

import pytest


@pytest.fixture
def metrics_record() -> dict[str, Any]:
    """A metrics record shaped like Fluent Bit's cmetrics output."""
    return {
        "meta": {
            "cmetrics": {},
            "external": {},
            "processing": {"static_labels": []},
        },
        "metrics": [
            {
                "meta": {
                    "ver": 2,
                    "type": 0,
                    "opts": {
                        "ns": "fluentbit",
                        "ss": "input",
                        "name": "records_total",
                        "desc": "Number of input records.",
                    },
                    "labels": ["name"],
                    "aggregation_type": 2,
                },
                "values": [
                    {
                        "ts": 1700000000123456789,
                        "value": 12.0,
                        "labels": ["cpu.0"],
                        "hash": 14352213523946532911,
                    },
                    {
                        "ts": 1700000000123456789,
                        "value": 3.6,
                        "labels": ["dummy.1"],
                        "hash": 1234,
                    },
                ],
            },
            {
                "meta": {
                    "ver": 2,
                    "type": 1,
                    "opts": {
                        "ns": "fluentbit",
                        "ss": "output",
                        "name": "upstream_busy_connections",
                        "desc": "Busy connections.",
                    },
                    "labels": ["name", "host"],
                    "aggregation_type": 0,
                },
                "values": [
                    {
                        "ts": 1700000000123456789,
                        "value": 0.5,
                        "labels": ["go.0", "localhost"],
                        "hash": 42,
                    }
                ],
            },
        ],
    }
