"""Linux probe: ``/etc/os-release``, ``/proc`` and DMI sysfs files."""

from __future__ import annotations

import logging
from pathlib import Path

from ..agents import (
    NINJA_CONF_LINUX,
    ninja_id_from_files,
    teamviewer_id_linux,
    teamviewer_version_linux,
)
from ..models import DiskUsage, HardwareIdentity
from .base import PlatformProbe, clean_value
from .posix import df_root

logger = logging.getLogger(__name__)


def parse_os_release(content: str) -> str | None:
    for line in content.splitlines():
        if line.startswith("PRETTY_NAME="):
            value = line.split("=", 1)[1].strip().strip('"').strip("'")
            return value or None
    return None


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(errors="replace")
    except OSError:
        return None


class LinuxProbe(PlatformProbe):
    platform_tag = "linux"

    os_release = Path("/etc/os-release")
    cpuinfo = Path("/proc/cpuinfo")
    dmi_dir = Path("/sys/class/dmi/id")

    def cpu(self) -> str:
        content = _read_text(self.cpuinfo)
        if content:
            for line in content.splitlines():
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
        return super().cpu()

    def disk_usage(self) -> DiskUsage:
        return df_root(self.runner)

    def hardware_identity(self) -> HardwareIdentity:
        # product_serial is root-only on most distros
        return HardwareIdentity(
            serial_number=clean_value(_read_text(self.dmi_dir / "product_serial")),
            manufacturer=clean_value(_read_text(self.dmi_dir / "sys_vendor")),
            model=clean_value(_read_text(self.dmi_dir / "product_name")),
        )

    def os_version(self) -> str:
        content = _read_text(self.os_release)
        pretty = parse_os_release(content) if content else None
        return pretty or self.raw_os_version()

    def ninja_device_id(self) -> int | None:
        return ninja_id_from_files(NINJA_CONF_LINUX)

    def teamviewer_id(self) -> str | None:
        return teamviewer_id_linux()

    def teamviewer_version(self) -> str | None:
        return teamviewer_version_linux()
