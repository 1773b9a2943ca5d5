"""macOS probe: ``system_profiler``, ``sw_vers``, ``sysctl`` and ``defaults``."""

from __future__ import annotations

import logging
import re

from ..agents import (
    NINJA_CONF_MAC,
    ninja_id_from_files,
    teamviewer_id_mac,
    teamviewer_version_mac,
)
from ..models import DiskUsage, HardwareIdentity
from .base import PlatformProbe, clean_value
from .posix import df_root

logger = logging.getLogger(__name__)

APPLE_MANUFACTURER = "Apple Inc."

_SERIAL = re.compile(r"Serial Number \(system\):\s*(.+)")
_MODEL_NAME = re.compile(r"Model Name:\s*(.+)")
_MODEL_ID = re.compile(r"Model Identifier:\s*(.+)")


def parse_system_profiler(output: str) -> HardwareIdentity:
    """Extract serial/model from ``system_profiler SPHardwareDataType``."""
    if not output.strip():
        return HardwareIdentity()

    def grab(pattern: re.Pattern[str]) -> str | None:
        match = pattern.search(output)
        return clean_value(match.group(1)) if match else None

    return HardwareIdentity(
        serial_number=grab(_SERIAL),
        manufacturer=APPLE_MANUFACTURER,
        model=grab(_MODEL_NAME) or grab(_MODEL_ID),
    )


class MacProbe(PlatformProbe):
    platform_tag = "darwin"

    def cpu(self) -> str:
        result = self.runner(["sysctl", "-n", "machdep.cpu.brand_string"])
        if result.ok and result.stdout.strip():
            return result.stdout.strip()
        return super().cpu()

    def disk_usage(self) -> DiskUsage:
        return df_root(self.runner)

    def hardware_identity(self) -> HardwareIdentity:
        result = self.runner(["system_profiler", "SPHardwareDataType"])
        if not result.ok:
            return HardwareIdentity()
        return parse_system_profiler(result.stdout)

    def os_version(self) -> str:
        result = self.runner(["sw_vers", "-productVersion"])
        version = result.stdout.strip() if result.ok else ""
        if version:
            return f"macOS {version}"
        return self.raw_os_version()

    def ninja_device_id(self) -> int | None:
        return ninja_id_from_files(NINJA_CONF_MAC)

    def teamviewer_id(self) -> str | None:
        return teamviewer_id_mac(self.runner)

    def teamviewer_version(self) -> str | None:
        return teamviewer_version_mac(self.runner)
