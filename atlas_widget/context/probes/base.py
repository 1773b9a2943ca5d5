"""Abstract platform probe for ATLAS Widget device context.

A probe answers one question per method about the current machine.  Every
method is read-only and best-effort: when the fact cannot be read the
method returns ``None`` (or the documented sentinel) instead of raising.

Facts that Python and psutil expose the same way everywhere live here;
platform variants override the ones that need OS tools.
"""

from __future__ import annotations

import abc
import getpass
import logging
import platform
import socket
import time

import psutil

from ..formatting import bytes_to_gb
from ..models import UNKNOWN, DiskUsage, HardwareIdentity, MemoryInfo
from ..network import primary_ipv4, primary_mac
from ..shell import Runner, run

logger = logging.getLogger(__name__)

# Vendor firmware placeholders that mean "not set"
PLACEHOLDER_VALUES = {
    "",
    "0",
    "none",
    "default string",
    "to be filled by o.e.m.",
    "system serial number",
    "system product name",
    "system manufacturer",
    "not specified",
    "not applicable",
}


def clean_value(value: str | None) -> str | None:
    """Strip *value*; return None for empty or firmware placeholder text."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in PLACEHOLDER_VALUES:
        return None
    return value


class PlatformProbe(abc.ABC):
    """Fact-returning contract shared by every platform family."""

    platform_tag: str = "generic"

    def __init__(self, runner: Runner | None = None) -> None:
        self.runner: Runner = runner or run

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def computer_name(self) -> str:
        return socket.gethostname() or platform.node() or UNKNOWN

    def logged_in_user(self) -> str:
        try:
            return getpass.getuser()
        except (KeyError, OSError, ImportError):
            return UNKNOWN

    def domain(self) -> str | None:
        return None

    # ------------------------------------------------------------------
    # Hardware
    # ------------------------------------------------------------------

    def cpu(self) -> str:
        return platform.processor() or UNKNOWN

    def arch(self) -> str:
        return platform.machine() or UNKNOWN

    def memory(self) -> MemoryInfo:
        try:
            mem = psutil.virtual_memory()
        except (OSError, RuntimeError) as exc:
            logger.debug("virtual_memory failed: %s", exc)
            return MemoryInfo()
        return MemoryInfo(
            total_gb=bytes_to_gb(mem.total, 1),
            free_gb=bytes_to_gb(mem.available, 1),
        )

    def disk_usage(self) -> DiskUsage:
        return DiskUsage()

    def hardware_identity(self) -> HardwareIdentity:
        return HardwareIdentity()

    def uptime_seconds(self) -> int:
        try:
            return max(int(time.time() - psutil.boot_time()), 0)
        except (OSError, RuntimeError) as exc:
            logger.debug("boot_time failed: %s", exc)
            return 0

    # ------------------------------------------------------------------
    # OS
    # ------------------------------------------------------------------

    def os_version(self) -> str:
        return self.raw_os_version()

    @staticmethod
    def raw_os_version() -> str:
        text = f"{platform.system()} {platform.release()}".strip()
        return text or UNKNOWN

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def ip_address(self) -> str:
        return primary_ipv4()

    def mac_address(self) -> str | None:
        return primary_mac()

    # ------------------------------------------------------------------
    # Remote-support agents
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def ninja_device_id(self) -> int | None:
        """NinjaOne agent device id, if the agent is installed."""
        raise NotImplementedError

    @abc.abstractmethod
    def teamviewer_id(self) -> str | None:
        """TeamViewer client id, digit-grouped for display."""
        raise NotImplementedError

    @abc.abstractmethod
    def teamviewer_version(self) -> str | None:
        raise NotImplementedError


class GenericProbe(PlatformProbe):
    """Fallback for platforms without OS-specific support."""

    def ninja_device_id(self) -> int | None:
        return None

    def teamviewer_id(self) -> str | None:
        return None

    def teamviewer_version(self) -> str | None:
        return None
