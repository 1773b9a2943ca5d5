"""Windows probe: registry via ``reg query``, hardware via WMIC CSV output."""

from __future__ import annotations

import csv
import io
import logging
import os
import platform
import re

from ..agents import ninja_id_from_registry, teamviewer_id_windows, teamviewer_version_windows
from ..formatting import bytes_to_gb
from ..models import DiskUsage, HardwareIdentity
from .base import PlatformProbe, clean_value

logger = logging.getLogger(__name__)

WINDOWS_11_FIRST_BUILD = 22000


def parse_wmic_csv(output: str) -> list[dict[str, str]]:
    """Parse ``wmic ... /format:csv`` output into row dicts.

    WMIC prefixes a blank line and uses CRLF (sometimes CRCRLF) endings.
    """
    text = output.replace("\r", "")
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        return []
    reader = csv.DictReader(io.StringIO("\n".join(lines)))
    return [{k.strip(): (v or "").strip() for k, v in row.items() if k} for row in reader]


def parse_wmic_disk(output: str) -> DiskUsage:
    """Rows are ``Node,FreeSpace,Size`` in bytes."""
    text = output.replace("\r", "")
    rows = [line.split(",") for line in text.split("\n") if line.strip()]
    if len(rows) < 2 or len(rows[1]) < 3:
        return DiskUsage()
    try:
        free = int(rows[1][1])
        total = int(rows[1][2])
    except ValueError:
        return DiskUsage()
    return DiskUsage(total_gb=bytes_to_gb(total), free_gb=bytes_to_gb(free))


def friendly_windows_version(release: str, version: str) -> str | None:
    """``10`` + ``10.0.22631`` -> ``Windows 11 (Build 22631)``."""
    match = re.match(r"(\d+)\.(\d+)\.(\d+)", version)
    if not match:
        return f"Windows {release}" if release else None
    major, build = int(match.group(1)), int(match.group(3))
    if major == 10:
        name = "11" if build >= WINDOWS_11_FIRST_BUILD else "10"
        return f"Windows {name} (Build {build})"
    return f"Windows {release or major} (Build {build})"


class WindowsProbe(PlatformProbe):
    platform_tag = "win32"

    def domain(self) -> str | None:
        result = self.runner(["cmd", "/c", "echo", "%USERDOMAIN%"])
        if not result.ok:
            return None
        value = result.stdout.strip()
        if not value or value == "%USERDOMAIN%":
            return None
        return value

    def cpu(self) -> str:
        rows = parse_wmic_csv(self.runner(["wmic", "cpu", "get", "Name", "/format:csv"]).stdout)
        if rows and rows[0].get("Name"):
            return rows[0]["Name"]
        return os.environ.get("PROCESSOR_IDENTIFIER") or super().cpu()

    def disk_usage(self) -> DiskUsage:
        drive = os.environ.get("SystemDrive") or "C:"
        result = self.runner([
            "wmic", "logicaldisk", "where", f"DeviceID='{drive}'",
            "get", "FreeSpace,Size", "/format:csv",
        ])
        if not result.ok:
            return DiskUsage()
        return parse_wmic_disk(result.stdout)

    def hardware_identity(self) -> HardwareIdentity:
        bios = parse_wmic_csv(
            self.runner(["wmic", "bios", "get", "SerialNumber", "/format:csv"]).stdout
        )
        system = parse_wmic_csv(
            self.runner(["wmic", "computersystem", "get", "Manufacturer,Model", "/format:csv"]).stdout
        )
        bios_row = bios[0] if bios else {}
        system_row = system[0] if system else {}
        return HardwareIdentity(
            serial_number=clean_value(bios_row.get("SerialNumber")),
            manufacturer=clean_value(system_row.get("Manufacturer")),
            model=clean_value(system_row.get("Model")),
        )

    def os_version(self) -> str:
        friendly = friendly_windows_version(platform.release(), platform.version())
        return friendly or self.raw_os_version()

    def ninja_device_id(self) -> int | None:
        return ninja_id_from_registry(self.runner)

    def teamviewer_id(self) -> str | None:
        return teamviewer_id_windows(self.runner)

    def teamviewer_version(self) -> str | None:
        return teamviewer_version_windows(self.runner)
