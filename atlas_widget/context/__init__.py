"""atlas_widget.context: device context collection.

Exports:
    DeviceContext: frozen snapshot of machine facts and agent ids
    collect: run every probe and return a fresh DeviceContext
    get_probe: platform probe for the running OS
"""

from __future__ import annotations

from atlas_widget.context.collector import collect
from atlas_widget.context.models import DeviceContext, DiskUsage, HardwareIdentity, MemoryInfo
from atlas_widget.context.probes import PlatformProbe, get_probe

__all__ = [
    "DeviceContext",
    "DiskUsage",
    "HardwareIdentity",
    "MemoryInfo",
    "PlatformProbe",
    "collect",
    "get_probe",
]
