"""Helpers shared by the macOS and Linux probes."""

from __future__ import annotations

import logging

from ..formatting import kib_to_gb
from ..models import DiskUsage
from ..shell import Runner

logger = logging.getLogger(__name__)


def parse_df(output: str) -> DiskUsage:
    """Parse ``df -k`` output: filesystem, 1K-blocks, used, available, ...

    Wrapped device names (``df`` puts long names on their own line) are
    joined back before the columns are read.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if len(lines) < 2:
        return DiskUsage()
    parts = " ".join(lines[1:]).split()
    if len(parts) < 4:
        return DiskUsage()
    try:
        total_kib = int(parts[1])
        free_kib = int(parts[3])
    except ValueError:
        return DiskUsage()
    return DiskUsage(total_gb=kib_to_gb(total_kib), free_gb=kib_to_gb(free_kib))


def df_root(runner: Runner) -> DiskUsage:
    result = runner(["df", "-k", "/"])
    if not result.ok:
        logger.debug("df unavailable (rc=%s)", result.returncode)
        return DiskUsage()
    return parse_df(result.stdout)
