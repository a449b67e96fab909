"""Parsers for the line-oriented kstat files exported by the ZFS kernel module"""
from enum import Enum
from typing import Dict, List, Optional, TextIO

from metrics.models import CollectionWarnings, PoolIOStats
from .errors import MissingHeaderError, PoolStateError, ValueParseError

# kstat data type tag for unsigned 64-bit integers
KSTAT_DATA_UINT64 = "4"

GLOBAL_STATS_HEADER = ["name", "type", "data"]

IO_HEADER_FIRST_COLUMN = "nread"
IO_HEADER_MIN_COLUMNS = 12

UINT64_MAX = 2 ** 64 - 1

# io column name -> PoolIOStats attribute
IO_COLUMNS = {
    "reads": "read_count",
    "writes": "write_count",
    "nread": "bytes_read",
    "nwritten": "bytes_written",
}


class IOTableState(Enum):
    """States of the pool I/O table reader"""
    SEEKING_HEADER = "seeking_header"
    READING_ROWS = "reading_rows"


def split_fields(line: str) -> List[str]:
    """Split a kstat line on runs of whitespace"""
    return line.split()


def parse_uint64(text: str) -> int:
    """Parse a base-10 unsigned 64-bit integer, raising ValueError otherwise"""
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if value > UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_global_stats(stream: TextIO, warnings: CollectionWarnings) -> Dict[str, int]:
    """
    Parse a ``name type data`` kstat table such as ``arcstats``.

    Lines before the header are ignored. Only uint64 rows are returned; a row
    whose value does not parse is reported to ``warnings`` and skipped.

    Raises:
        MissingHeaderError: the header line never appeared.
    """
    metrics: Dict[str, int] = {}
    header_found = False

    for line in stream:
        parts = split_fields(line)

        if not header_found:
            if parts == GLOBAL_STATS_HEADER:
                header_found = True
            continue

        if len(parts) < 3:
            continue

        key, data_type, raw_value = parts[0], parts[1], parts[2]
        if data_type != KSTAT_DATA_UINT64:
            continue

        try:
            metrics[key] = parse_uint64(raw_value)
        except ValueError:
            warnings.add("could not parse metric [%s] as uint64: %s", key, raw_value)

    if not header_found:
        raise MissingHeaderError("no global statistics have been parsed")

    return metrics


def parse_pool_state(stream: TextIO) -> str:
    """Read the first line of a pool ``state`` file, normalised to upper case"""
    try:
        line = stream.readline()
    except OSError as e:
        raise PoolStateError(f"could not read state: {e}") from e

    if not line:
        raise PoolStateError("could not read state: EOF")

    return line.strip().upper()


def parse_pool_io_stats(stream: TextIO) -> PoolIOStats:
    """
    Parse a pool ``io`` kstat table.

    The reader seeks a header of at least twelve columns starting with
    ``nread``; every following non-blank line is a data row which must
    consist of unsigned integers only. Values of later rows replace those of
    earlier ones. A table without header yields zeroed counters.

    Raises:
        ValueParseError: a data row holds a non-numeric or missing value.
    """
    stats = PoolIOStats()
    state = IOTableState.SEEKING_HEADER
    columns: Optional[List[str]] = None

    for line in stream:
        parts = split_fields(line)

        if state is IOTableState.SEEKING_HEADER:
            if len(parts) >= IO_HEADER_MIN_COLUMNS and parts[0] == IO_HEADER_FIRST_COLUMN:
                columns = list(parts)
                state = IOTableState.READING_ROWS
            continue

        if not parts:
            continue

        for index, column in enumerate(columns):
            if index >= len(parts):
                raise ValueParseError(f"missing value for {column}", key=column)
            try:
                value = parse_uint64(parts[index])
            except ValueError as e:
                raise ValueParseError(
                    f"could not parse unsigned integer for {column}: {e}",
                    key=column,
                    value=parts[index],
                ) from e

            attribute = IO_COLUMNS.get(column)
            if attribute:
                setattr(stats, attribute, value)

    return stats
