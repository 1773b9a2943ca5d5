"""Platform probe factory.

Usage::

    from atlas_widget.context.probes import get_probe
    probe = get_probe()            # from sys.platform
    probe = get_probe("darwin")
"""

from __future__ import annotations

import sys

from ..shell import Runner
from .base import GenericProbe, PlatformProbe
from .linux import LinuxProbe
from .macos import MacProbe
from .windows import WindowsProbe

__all__ = [
    "GenericProbe",
    "LinuxProbe",
    "MacProbe",
    "PlatformProbe",
    "WindowsProbe",
    "get_probe",
]

_PROBES: dict[str, type[PlatformProbe]] = {
    "win32": WindowsProbe,
    "cygwin": WindowsProbe,
    "darwin": MacProbe,
    "linux": LinuxProbe,
}


def get_probe(platform_tag: str | None = None, runner: Runner | None = None) -> PlatformProbe:
    """Return the probe variant for *platform_tag* (default: ``sys.platform``).

    Unrecognised platforms get :class:`GenericProbe`, which reports every
    platform-gated fact as unknown.
    """
    tag = platform_tag or sys.platform
    if tag.startswith("linux"):
        tag = "linux"
    cls = _PROBES.get(tag, GenericProbe)
    probe = cls(runner=runner)
    probe.platform_tag = platform_tag or sys.platform
    return probe
