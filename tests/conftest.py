"""Shared fixtures building fake ZFS kstat trees"""
import logging

import pytest
import structlog

ARCSTATS = """13 1 0x01 123 33456 1234567 1234567
name                            type data
hits                            4    50
misses                          4    5
size                            4    1024
c_max                           4    8589934592
"""

IO_HEADER = "nread    nwritten reads    writes   wtime    wlentime wupdate  rtime    rlentime rupdate  wcnt     rcnt"

POOL_IO = f"""12 3 0x00 1 80 2354235 2342352
{IO_HEADER}
2048     4096     10       20       0        0        0        0        0        0        0        0
"""


def write_pool(base_path, name, state="ONLINE\n", io=POOL_IO):
    """Create a pool directory with state and io files, skipping files given as None"""
    pool_dir = base_path / name
    pool_dir.mkdir()
    if state is not None:
        (pool_dir / "state").write_text(state)
    if io is not None:
        (pool_dir / "io").write_text(io)
    return pool_dir


@pytest.fixture
def kstat_dir(tmp_path):
    """Empty kstat base directory"""
    base_path = tmp_path / "zfs"
    base_path.mkdir()
    return base_path


@pytest.fixture
def populated_kstat_dir(kstat_dir):
    """kstat base directory with arcstats and a single ONLINE pool named tank"""
    (kstat_dir / "arcstats").write_text(ARCSTATS)
    write_pool(kstat_dir, "tank")
    return kstat_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_structured_logging between tests"""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
