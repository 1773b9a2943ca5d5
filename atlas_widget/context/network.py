"""Primary IPv4 / MAC selection from the interface table.

Interfaces are visited in a fixed order so the answer only changes when
the machine's network state does: by OS interface index (lowest first),
then interfaces the OS gave no index for, ties broken by name.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Mapping, Sequence

import psutil

from .models import LOOPBACK_IP

logger = logging.getLogger(__name__)

ZERO_MAC = "00:00:00:00:00:00"

# psutil.AF_LINK is the MAC family on every platform psutil supports
_AF_LINK = getattr(psutil, "AF_LINK", -1)


def _interface_indexes() -> dict[str, int]:
    try:
        return {name: index for index, name in socket.if_nameindex()}
    except (OSError, AttributeError):
        return {}


def ordered_interfaces(
    addrs: Mapping[str, Sequence[Any]],
    indexes: Mapping[str, int] | None = None,
) -> list[str]:
    """Return interface names in deterministic scan order."""
    if indexes is None:
        indexes = _interface_indexes()
    return sorted(
        addrs,
        key=lambda name: (name not in indexes, indexes.get(name, 0), name),
    )


def _is_loopback(name: str, entries: Sequence[Any]) -> bool:
    if name == "lo" or name.startswith("lo0") or "loopback" in name.lower():
        return True
    for entry in entries:
        if entry.family == socket.AF_INET and entry.address.startswith("127."):
            return True
        if entry.family == socket.AF_INET6 and entry.address in ("::1", "::1%lo0"):
            return True
    return False


def normalize_mac(mac: str) -> str:
    return mac.replace("-", ":").lower()


def _read_addrs() -> dict[str, list[Any]]:
    try:
        return psutil.net_if_addrs()
    except (OSError, RuntimeError) as exc:
        logger.debug("net_if_addrs failed: %s", exc)
        return {}


def primary_ipv4(
    addrs: Mapping[str, Sequence[Any]] | None = None,
    indexes: Mapping[str, int] | None = None,
) -> str:
    """First non-loopback IPv4 address, or ``127.0.0.1``."""
    if addrs is None:
        addrs = _read_addrs()
    for name in ordered_interfaces(addrs, indexes):
        entries = addrs[name]
        if _is_loopback(name, entries):
            continue
        for entry in entries:
            if entry.family == socket.AF_INET and not entry.address.startswith("127."):
                return entry.address
    return LOOPBACK_IP


def primary_mac(
    addrs: Mapping[str, Sequence[Any]] | None = None,
    indexes: Mapping[str, int] | None = None,
) -> str | None:
    """First real hardware address of a non-loopback interface."""
    if addrs is None:
        addrs = _read_addrs()
    for name in ordered_interfaces(addrs, indexes):
        entries = addrs[name]
        if _is_loopback(name, entries):
            continue
        for entry in entries:
            if entry.family != _AF_LINK or not entry.address:
                continue
            mac = normalize_mac(entry.address)
            if mac != ZERO_MAC and set(mac.replace(":", "")) != {"0"}:
                return mac
    return None
