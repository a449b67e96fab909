"""ZFS collector reading ARC and pool statistics from the kstat pseudo-filesystem"""
import dataclasses
import glob
import os
from typing import Dict, List, Optional, Tuple

from logging_config import get_logger
from metrics.models import CollectionWarnings, GlobalStats, MetricType, MetricValue, PoolStats
from .base import BaseCollector
from .errors import PoolCollectionError, PoolDiscoveryError, StatsFileOpenError, StatsFileReadError, ZFSStatsError
from .parsers import parse_global_stats, parse_pool_io_stats, parse_pool_state

logger = get_logger(__name__)

ZFS_PROC_BASE_PATH = "/proc/spl/kstat/zfs"
ZFS_ARC_STATS_FILE = "arcstats"
ZFS_POOL_STATE_FILE = "state"
ZFS_POOL_IO_FILE = "io"

# arcstats key -> GlobalStats attribute
ARC_STATS_FIELDS = {
    "size": "arc_size",
    "hits": "arc_hits",
    "misses": "arc_misses",
}


def discover_pools(base_path: str) -> List[Tuple[str, str]]:
    """Return (name, path) of every pool directory holding an io kstat, sorted by name"""
    pattern = os.path.join(glob.escape(base_path), "*", ZFS_POOL_IO_FILE)
    try:
        matches = glob.glob(pattern)
    except (OSError, ValueError) as e:
        raise PoolDiscoveryError(f"could not glob zfs pool paths: {e}", path=pattern) from e

    pools = []
    for match in matches:
        pool_path = os.path.dirname(match)
        pools.append((os.path.basename(pool_path), pool_path))
    return sorted(pools)


def _open_stats_file(path: str, description: str):
    try:
        return open(path, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise StatsFileOpenError(f"could not open {description} file: {e}", path=path) from e


def read_pool_stats(pool_path: str) -> PoolStats:
    """Read the state and I/O statistics of the pool stored at pool_path"""
    state_path = os.path.join(pool_path, ZFS_POOL_STATE_FILE)
    io_path = os.path.join(pool_path, ZFS_POOL_IO_FILE)

    with _open_stats_file(state_path, "state") as state_file, \
            _open_stats_file(io_path, "i/o stats") as io_file:
        try:
            state = parse_pool_state(state_file)
        except ZFSStatsError as e:
            e.path = e.path or state_path
            raise

        try:
            io_stats = parse_pool_io_stats(io_file)
        except ZFSStatsError as e:
            e.path = e.path or io_path
            raise
        except OSError as e:
            raise StatsFileReadError(f"could not read i/o stats file: {e}", path=io_path) from e

    return PoolStats(state=state, io=io_stats)


class ZFSCollector(BaseCollector):
    """
    Collects ARC statistics and per-pool state and I/O counters.

    ARC statistics are best effort: problems reading them become warnings.
    Pool statistics are all-or-nothing: any failure aborts the pass and
    leaves no pool statistics behind.
    """

    def __init__(self, config=None, base_path: Optional[str] = None):
        super().__init__(config, "zfs", "ZFS ARC and pool statistics from kstat files")
        if base_path is None:
            base_path = str(getattr(config, "zfs_base_path", ZFS_PROC_BASE_PATH))
        self.base_path = base_path
        self._global_stats = GlobalStats()
        self._pool_stats: Optional[Dict[str, PoolStats]] = None

    @property
    def global_stats(self) -> GlobalStats:
        return self._global_stats

    @property
    def pool_stats(self) -> Optional[Dict[str, PoolStats]]:
        """Statistics per pool name, or None if no pool was found"""
        return self._pool_stats

    def collect(self, warnings: CollectionWarnings) -> None:
        """
        Run one collection pass.

        Raises:
            PoolDiscoveryError: pool directories could not be enumerated.
            PoolCollectionError: the statistics of a pool could not be read.
        """
        logger.debug("Starting zfs collection", base_path=self.base_path, event_type="collection_start")
        self.collect_global(warnings)
        self.collect_pools()
        logger.debug(
            "Completed zfs collection",
            pools=len(self._pool_stats or {}),
            warnings=len(warnings),
            event_type="collection_complete",
        )

    def collect_global(self, warnings: CollectionWarnings) -> None:
        path = os.path.join(self.base_path, ZFS_ARC_STATS_FILE)
        try:
            stats_file = _open_stats_file(path, "arc statistics")
        except StatsFileOpenError as e:
            warnings.add("could not gather arc statistics: %s", e)
            return

        with stats_file:
            try:
                metrics = parse_global_stats(stats_file, warnings)
            except (ZFSStatsError, OSError) as e:
                warnings.add("could not parse arc statistics: %s", e)
                return

        found = {attr: metrics[key] for key, attr in ARC_STATS_FIELDS.items() if key in metrics}
        self._global_stats = dataclasses.replace(self._global_stats, **found)

    def collect_pools(self) -> None:
        self._pool_stats = None

        pools = discover_pools(self.base_path)
        if not pools:
            return

        pool_stats = {}
        for pool_name, pool_path in pools:
            try:
                pool_stats[pool_name] = read_pool_stats(pool_path)
            except ZFSStatsError as e:
                raise PoolCollectionError(
                    f"could not gather zfs pool statistics for {pool_name}: {e}",
                    pool=pool_name,
                    path=e.path,
                ) from e

        self._pool_stats = pool_stats

    def to_metrics(self) -> List[MetricValue]:
        """Convert the last collection pass to metric values"""
        labels = self.get_standard_labels()
        metrics = [
            MetricValue(
                name="node_zfs_arc_size_bytes",
                value=float(self._global_stats.arc_size),
                labels=labels.copy(),
                help_text="ZFS ARC size in bytes",
                metric_type=MetricType.GAUGE,
                unit="bytes"
            ),
            MetricValue(
                name="node_zfs_arc_hits_total",
                value=float(self._global_stats.arc_hits),
                labels=labels.copy(),
                help_text="ZFS ARC hits",
                metric_type=MetricType.COUNTER
            ),
            MetricValue(
                name="node_zfs_arc_misses_total",
                value=float(self._global_stats.arc_misses),
                labels=labels.copy(),
                help_text="ZFS ARC misses",
                metric_type=MetricType.COUNTER
            ),
        ]

        pool_io_metrics = [
            ("read_count", "node_zfs_pool_reads_total", "ZFS pool read operations", "1"),
            ("write_count", "node_zfs_pool_writes_total", "ZFS pool write operations", "1"),
            ("bytes_read", "node_zfs_pool_read_bytes_total", "ZFS pool bytes read", "bytes"),
            ("bytes_written", "node_zfs_pool_written_bytes_total", "ZFS pool bytes written", "bytes"),
        ]

        for pool_name, pool in sorted((self._pool_stats or {}).items()):
            pool_labels = labels.copy()
            pool_labels.update({"pool": pool_name, "state": pool.state})

            metrics.append(MetricValue(
                name="node_zfs_pool_online",
                value=float(1 if pool.state == "ONLINE" else 0),
                labels=pool_labels.copy(),
                help_text="ZFS pool online status (1 = ONLINE, 0 = any other state)",
                metric_type=MetricType.GAUGE
            ))

            for attribute, metric_name, help_text, unit in pool_io_metrics:
                metrics.append(MetricValue(
                    name=metric_name,
                    value=float(getattr(pool.io, attribute)),
                    labels=pool_labels.copy(),
                    help_text=help_text,
                    metric_type=MetricType.COUNTER,
                    unit=unit
                ))

        return metrics
