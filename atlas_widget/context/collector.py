"""Device context aggregation.

``collect()`` runs every probe once, in sequence, and folds the answers
into a frozen :class:`DeviceContext`.  Each probe call is guarded on its
own, so a probe that blows up costs exactly one field.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from .formatting import format_uptime
from .models import LOOPBACK_IP, UNKNOWN, DeviceContext, DiskUsage, HardwareIdentity, MemoryInfo
from .probes import PlatformProbe, get_probe

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _safe(name: str, fn: Callable[[], T], default: T) -> T:
    try:
        value = fn()
    except Exception:
        logger.warning("Probe %s failed", name, exc_info=True)
        return default
    return default if value is None else value


def _safe_optional(name: str, fn: Callable[[], T | None]) -> T | None:
    try:
        return fn()
    except Exception:
        logger.warning("Probe %s failed", name, exc_info=True)
        return None


def collect(probe: PlatformProbe | None = None) -> DeviceContext:
    """Collect all device context available on this machine. Never raises."""
    if probe is None:
        probe = get_probe()

    memory = _safe("memory", probe.memory, MemoryInfo())
    disk = _safe("disk_usage", probe.disk_usage, DiskUsage())
    if disk.total_gb is None or disk.free_gb is None:
        disk = DiskUsage()
    hardware = _safe("hardware_identity", probe.hardware_identity, HardwareIdentity())
    uptime = _safe("uptime_seconds", probe.uptime_seconds, 0)

    ip_address = _safe("ip_address", probe.ip_address, LOOPBACK_IP) or LOOPBACK_IP

    context = DeviceContext(
        computer_name=_safe("computer_name", probe.computer_name, UNKNOWN),
        logged_in_user=_safe("logged_in_user", probe.logged_in_user, UNKNOWN),
        domain=_safe_optional("domain", probe.domain),
        serial_number=hardware.serial_number,
        manufacturer=hardware.manufacturer,
        model=hardware.model,
        cpu=_safe("cpu", probe.cpu, UNKNOWN),
        arch=_safe("arch", probe.arch, UNKNOWN),
        total_memory_gb=memory.total_gb,
        free_memory_gb=memory.free_gb,
        disk_total_gb=disk.total_gb,
        disk_free_gb=disk.free_gb,
        uptime_seconds=uptime,
        uptime=format_uptime(uptime),
        os_version=_safe("os_version", probe.os_version, UNKNOWN),
        os_platform=probe.platform_tag,
        ip_address=ip_address,
        mac_address=_safe_optional("mac_address", probe.mac_address),
        ninja_device_id=_safe_optional("ninja_device_id", probe.ninja_device_id),
        teamviewer_id=_safe_optional("teamviewer_id", probe.teamviewer_id),
        teamviewer_version=_safe_optional("teamviewer_version", probe.teamviewer_version),
    )
    logger.debug("Collected device context for %s", context.computer_name)
    return context
