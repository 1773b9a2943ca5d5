"""Identity lookups for third-party remote-support agents.

NinjaOne (device management) and TeamViewer (remote desktop) keep their
identifiers in different places per OS.  Each lookup is an ordered list
of strategies; the first one that yields a value wins and the rest are
never consulted.  Values are only ever read here.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, TypeVar

from .formatting import group_digits
from .shell import Runner

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ── Locations ─────────────────────────────────────────────────────

NINJA_REG_KEYS = [
    r"HKLM\SOFTWARE\NinjaRMM LLC\NinjaRMMAgent",
    r"HKLM\SOFTWARE\WOW6432Node\NinjaRMM LLC\NinjaRMMAgent",
]

NINJA_CONF_MAC = [
    Path("/Applications/NinjaRMMAgent/programdata/ninjarmm-agent.conf"),
    Path("/Library/Application Support/NinjaRMMAgent/ninjarmm-agent.conf"),
]

NINJA_CONF_LINUX = [
    Path("/opt/NinjaRMMAgent/programdata/ninjarmm-agent.conf"),
]

TEAMVIEWER_REG_KEYS = [
    r"HKLM\SOFTWARE\TeamViewer",
    r"HKLM\SOFTWARE\WOW6432Node\TeamViewer",
]

TEAMVIEWER_PREFS_MAC = [
    "/Library/Preferences/com.teamviewer.teamviewer.preferences",
    "com.teamviewer.teamviewer.preferences",
]

TEAMVIEWER_LEGACY_PLIST = Path(
    "/Library/Preferences/com.teamviewer.teamviewer.preferences.Machine.plist"
)

TEAMVIEWER_APP_INFO_MAC = "/Applications/TeamViewer.app/Contents/Info"

TEAMVIEWER_CONF_LINUX = Path("/opt/teamviewer/config/global.conf")

# ── Patterns ──────────────────────────────────────────────────────

_DEVICE_ID_JSON = re.compile(r'"device_id"\s*:\s*(\d+)')
_PLIST_CLIENT_ID = re.compile(r"<key>ClientID</key>\s*<integer>(\d+)</integer>")
_CONF_CLIENT_ID = re.compile(r"\bClientID\s*=\s*(\d+)")
_CONF_VERSION = re.compile(r'\bVersion\s*=\s*"([^"]+)"')


def first_match(strategies: Iterable[Callable[[], T | None]]) -> T | None:
    """Return the first non-None strategy result.

    A strategy that raises counts as a miss.
    """
    for strategy in strategies:
        try:
            value = strategy()
        except Exception as exc:
            logger.debug("Lookup strategy %r failed: %s", strategy, exc)
            continue
        if value is not None:
            return value
    return None


# ── Parsers ───────────────────────────────────────────────────────


def parse_reg_dword(output: str, name: str) -> int | None:
    match = re.search(rf"{re.escape(name)}\s+REG_DWORD\s+0x([0-9a-fA-F]+)", output)
    return int(match.group(1), 16) if match else None


def parse_reg_sz(output: str, name: str) -> str | None:
    match = re.search(rf"{re.escape(name)}\s+REG_SZ\s+(.+)", output)
    if not match:
        return None
    return match.group(1).strip() or None


def parse_ninja_device_id(output: str) -> int | None:
    """DeviceId may be a DWORD (hex in ``reg query`` output) or a numeric string."""
    value = parse_reg_dword(output, "DeviceId")
    if value is not None:
        return value
    text = parse_reg_sz(output, "DeviceId")
    if text is not None and text.isdigit():
        return int(text)
    return None


def parse_int(text: str) -> int | None:
    text = text.strip()
    return int(text) if text.isdigit() else None


def read_pattern(path: Path, pattern: re.Pattern[str]) -> str | None:
    """First capture group of *pattern* in *path*, or None if absent."""
    try:
        content = path.read_text(errors="replace")
    except OSError:
        return None
    match = pattern.search(content)
    return match.group(1) if match else None


# ── Primitive reads ───────────────────────────────────────────────


def _reg_query(runner: Runner, key: str, value: str) -> str | None:
    result = runner(["reg", "query", key, "/v", value])
    return result.stdout if result.ok else None


def _defaults_read(runner: Runner, domain: str, key: str) -> str | None:
    result = runner(["defaults", "read", domain, key])
    if not result.ok:
        return None
    return result.stdout.strip() or None


def _ninja_from_reg(runner: Runner, key: str) -> int | None:
    output = _reg_query(runner, key, "DeviceId")
    return parse_ninja_device_id(output) if output else None


def _ninja_from_file(path: Path) -> int | None:
    raw = read_pattern(path, _DEVICE_ID_JSON)
    return int(raw) if raw else None


def _tv_id_from_reg(runner: Runner, key: str) -> int | None:
    output = _reg_query(runner, key, "ClientID")
    return parse_reg_dword(output, "ClientID") if output else None


def _tv_version_from_reg(runner: Runner, key: str) -> str | None:
    output = _reg_query(runner, key, "Version")
    return parse_reg_sz(output, "Version") if output else None


def _tv_id_from_defaults(runner: Runner, domain: str) -> int | None:
    raw = _defaults_read(runner, domain, "ClientID")
    return parse_int(raw) if raw else None


def _int_from_file(path: Path, pattern: re.Pattern[str]) -> int | None:
    raw = read_pattern(path, pattern)
    return int(raw) if raw else None


def _format_tv_id(raw: int | None) -> str | None:
    return group_digits(raw) if raw is not None else None


# ── NinjaOne ──────────────────────────────────────────────────────


def ninja_id_from_registry(runner: Runner, keys: list[str] = NINJA_REG_KEYS) -> int | None:
    return first_match(partial(_ninja_from_reg, runner, key) for key in keys)


def ninja_id_from_files(paths: list[Path]) -> int | None:
    return first_match(partial(_ninja_from_file, path) for path in paths)


# ── TeamViewer ────────────────────────────────────────────────────


def teamviewer_id_windows(runner: Runner, keys: list[str] = TEAMVIEWER_REG_KEYS) -> str | None:
    return _format_tv_id(first_match(partial(_tv_id_from_reg, runner, key) for key in keys))


def teamviewer_version_windows(runner: Runner, keys: list[str] = TEAMVIEWER_REG_KEYS) -> str | None:
    return first_match(partial(_tv_version_from_reg, runner, key) for key in keys)


def teamviewer_id_mac(
    runner: Runner,
    domains: list[str] = TEAMVIEWER_PREFS_MAC,
    legacy_plist: Path = TEAMVIEWER_LEGACY_PLIST,
) -> str | None:
    strategies: list[Callable[[], int | None]] = [
        partial(_tv_id_from_defaults, runner, domain) for domain in domains
    ]
    strategies.append(partial(_int_from_file, legacy_plist, _PLIST_CLIENT_ID))
    return _format_tv_id(first_match(strategies))


def teamviewer_version_mac(
    runner: Runner,
    app_info: str = TEAMVIEWER_APP_INFO_MAC,
    domains: list[str] = TEAMVIEWER_PREFS_MAC,
) -> str | None:
    strategies = [partial(_defaults_read, runner, app_info, "CFBundleShortVersionString")]
    strategies += [partial(_defaults_read, runner, domain, "Version") for domain in domains]
    return first_match(strategies)


def teamviewer_id_linux(conf: Path = TEAMVIEWER_CONF_LINUX) -> str | None:
    return _format_tv_id(_int_from_file(conf, _CONF_CLIENT_ID))


def teamviewer_version_linux(conf: Path = TEAMVIEWER_CONF_LINUX) -> str | None:
    return read_pattern(conf, _CONF_VERSION)
