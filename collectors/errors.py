"""
Exceptions raised while reading ZFS kstat files.

Every error carries a machine-readable ``ErrorKind`` plus the file path and,
where relevant, the metric key or column it relates to. The message is
prefixed with the collection stage so ``str(error)`` can be shown to an
operator as-is.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Machine-readable kinds of collection errors."""
    OPEN_FAILED = "open_failed"
    READ_FAILED = "read_failed"
    MISSING_HEADER = "missing_header"
    VALUE_PARSE_FAILED = "value_parse_failed"
    STATE_UNREADABLE = "state_unreadable"
    DISCOVERY_FAILED = "discovery_failed"
    POOL_FAILED = "pool_failed"


class ZFSStatsError(Exception):
    """
    Base exception for ZFS statistics collection.

    Attributes:
        kind: What went wrong.
        path: File or directory involved, if known.
        key: Metric key or column name involved, if known.
    """

    kind = ErrorKind.POOL_FAILED

    def __init__(self, message: str, path: Optional[str] = None, key: Optional[str] = None):
        self.path = path
        self.key = key
        super().__init__(message)


class StatsFileOpenError(ZFSStatsError):
    kind = ErrorKind.OPEN_FAILED


class StatsFileReadError(ZFSStatsError):
    kind = ErrorKind.READ_FAILED


class MissingHeaderError(ZFSStatsError):
    kind = ErrorKind.MISSING_HEADER


class ValueParseError(ZFSStatsError):
    """Raised when a value cannot be parsed as an unsigned 64-bit integer."""

    kind = ErrorKind.VALUE_PARSE_FAILED

    def __init__(self, message: str, key: str, value: Optional[str] = None, path: Optional[str] = None):
        self.value = value
        super().__init__(message, path=path, key=key)


class PoolStateError(ZFSStatsError):
    kind = ErrorKind.STATE_UNREADABLE


class PoolDiscoveryError(ZFSStatsError):
    kind = ErrorKind.DISCOVERY_FAILED


class PoolCollectionError(ZFSStatsError):
    """Raised when the statistics of a single pool could not be gathered."""

    kind = ErrorKind.POOL_FAILED

    def __init__(self, message: str, pool: str, path: Optional[str] = None):
        self.pool = pool
        super().__init__(message, path=path)
