"""Metric models for ZFS kstat collection and export"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
from enum import Enum

class MetricType(Enum):
    """OpenTelemetry metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"

@dataclass
class MetricValue:
    """Single metric value for export"""
    name: str
    value: float
    labels: Dict[str, str]
    help_text: str
    metric_type: MetricType = MetricType.GAUGE
    unit: str = "1"
    timestamp: Optional[float] = None
    
    def __post_init__(self):
        # Ensure labels is never None
        if self.labels is None:
            self.labels = {}


@dataclass
class GlobalStats:
    """ARC statistics read from the arcstats kstat"""
    arc_size: int = 0
    arc_hits: int = 0
    arc_misses: int = 0


@dataclass
class PoolIOStats:
    """Cumulative pool I/O counters since the pool was imported"""
    read_count: int = 0
    write_count: int = 0
    bytes_read: int = 0
    bytes_written: int = 0


@dataclass
class PoolStats:
    """State and I/O counters of a single pool"""
    state: str = ""
    io: PoolIOStats = field(default_factory=PoolIOStats)


class CollectionWarnings:
    """Append-only, ordered collection of non-fatal collection issues"""

    def __init__(self):
        self._messages: List[str] = []

    def add(self, message: str, *args) -> None:
        """Record a warning, formatting ``message`` with ``args`` if given"""
        self._messages.append(message % args if args else message)

    @property
    def messages(self) -> List[str]:
        return list(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)
