"""Data models for the device context snapshot."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

UNKNOWN = "unknown"
LOOPBACK_IP = "127.0.0.1"


@dataclass(frozen=True)
class DiskUsage:
    total_gb: int | None = None
    free_gb: int | None = None


@dataclass(frozen=True)
class MemoryInfo:
    total_gb: float = 0.0
    free_gb: float = 0.0


@dataclass(frozen=True)
class HardwareIdentity:
    serial_number: str | None = None
    manufacturer: str | None = None
    model: str | None = None


@dataclass(frozen=True)
class DeviceContext:
    """Immutable snapshot of this machine, produced fresh by ``collect()``."""

    # Identity
    computer_name: str = UNKNOWN
    logged_in_user: str = UNKNOWN
    domain: str | None = None

    # Hardware
    serial_number: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    cpu: str = UNKNOWN
    arch: str = UNKNOWN
    total_memory_gb: float = 0.0
    free_memory_gb: float = 0.0
    disk_total_gb: int | None = None
    disk_free_gb: int | None = None
    uptime_seconds: int = 0
    uptime: str = "0h 0m"

    # OS
    os_version: str = UNKNOWN
    os_platform: str = UNKNOWN

    # Network
    ip_address: str = LOOPBACK_IP
    mac_address: str | None = None

    # Remote support agents
    ninja_device_id: int | None = None
    teamviewer_id: str | None = None
    teamviewer_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys the ATLAS API and UI use."""
        return {_WIRE_NAMES.get(k) or _camel(k): v for k, v in dataclasses.asdict(self).items()}

    def display_rows(self) -> list[tuple[str, str]]:
        """Label/value pairs for showing the snapshot to a user."""
        if self.disk_total_gb is not None and self.disk_free_gb is not None:
            disk = f"{self.disk_total_gb} GB / {self.disk_free_gb} GB free"
        else:
            disk = "Unknown"
        return [
            ("Computer", self.computer_name),
            ("User", self.logged_in_user),
            ("Domain", self.domain or "N/A"),
            ("Serial", self.serial_number or "Unknown"),
            ("Manufacturer", self.manufacturer or "Unknown"),
            ("Model", self.model or "Unknown"),
            ("OS", self.os_version),
            ("Platform", self.os_platform),
            ("Architecture", self.arch),
            ("CPU", self.cpu),
            ("Memory", f"{self.total_memory_gb} GB / {self.free_memory_gb} GB free"),
            ("Disk", disk),
            ("Uptime", self.uptime),
            ("IP address", self.ip_address),
            ("MAC address", self.mac_address or "Unknown"),
            ("NinjaOne ID", str(self.ninja_device_id) if self.ninja_device_id is not None else "Not found"),
            ("TeamViewer ID", self.teamviewer_id or "Not installed"),
            ("TeamViewer version", self.teamviewer_version or "N/A"),
        ]


# Memory and disk are always GB; the wire names carry no unit suffix.
_WIRE_NAMES = {
    "total_memory_gb": "totalMemory",
    "free_memory_gb": "freeMemory",
    "disk_total_gb": "diskTotal",
    "disk_free_gb": "diskFree",
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)
