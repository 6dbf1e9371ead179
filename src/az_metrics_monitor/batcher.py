"""Chunking of metric records for the PutMetricData per-call limit."""

from typing import Iterator, List, Sequence, TypeVar

T = TypeVar('T')

# PutMetricData accepts at most this many data points per call
MAX_BATCH_SIZE = 20


def chunk_records(records: Sequence[T], batch_size: int = MAX_BATCH_SIZE) -> Iterator[List[T]]:
    """
    Split records into consecutive chunks of at most ``batch_size``.

    Order is preserved and the last chunk holds the remainder. An empty
    sequence yields no chunks.

    Args:
        records: Ordered records to split
        batch_size: Maximum chunk size

    Raises:
        ValueError: If batch_size is smaller than 1, at call time
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    return _iter_chunks(records, batch_size)


def _iter_chunks(records: Sequence[T], batch_size: int) -> Iterator[List[T]]:
    for start in range(0, len(records), batch_size):
        yield list(records[start:start + batch_size])


def batch_count(total: int, batch_size: int = MAX_BATCH_SIZE) -> int:
    """Number of chunks ``chunk_records`` produces for ``total`` records."""
    return -(-total // batch_size)
