"""Decode a Fluent Bit flush buffer and print what it holds.

Run with:
    python examples/decode_buffer.py chunk.msgpack

Log records are printed as NDJSON, metrics records as Prometheus text.
Pass - to read the buffer from stdin.
"""

import logging
import sys

from flbwire import (
    ByteDecoder,
    RecordShape,
    encode_records,
    iter_records,
    render,
    to_metrics_document,
)

logger = logging.getLogger("decode_buffer")


def main(path: str) -> int:
    if path == "-":
        data = sys.stdin.buffer.read()
    else:
        with open(path, "rb") as f:
            data = f.read()

    results = list(iter_records(ByteDecoder(data)))
    logger.info("Decoded %d records from %d bytes", len(results), len(data))

    sys.stdout.write(encode_records(results))
    for result in results:
        if result.shape is RecordShape.METRICS:
            sys.stdout.write(render(to_metrics_document(result.record)))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    if len(sys.argv) != 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    sys.exit(main(sys.argv[1]))
