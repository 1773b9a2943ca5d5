"""Child-process helper for device probes.

Every OS utility the probes shell out to goes through :func:`run`.  The
child is spawned, its output read (bounded), and the process reaped on
every exit path.  Nothing here raises: a missing binary, a timeout or a
non-zero exit all come back as a :class:`CommandResult`.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

MAX_OUTPUT = 64 * 1024

RC_NOT_FOUND = 127
RC_TIMEOUT = -1


@dataclass(frozen=True)
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[[list[str]], CommandResult]


def run(cmd: list[str], timeout: float = 5.0) -> CommandResult:
    """Run *cmd* and return its (truncated) output."""
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
        )
    except (FileNotFoundError, PermissionError) as exc:
        logger.debug("Cannot spawn %s: %s", cmd[0], exc)
        return CommandResult(stderr=str(exc), returncode=RC_NOT_FOUND)
    except OSError as exc:
        logger.debug("Spawn of %s failed: %s", cmd[0], exc)
        return CommandResult(stderr=str(exc), returncode=RC_NOT_FOUND)

    with proc:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
            logger.debug("%s timed out after %.1fs", cmd[0], timeout)
            return CommandResult(returncode=RC_TIMEOUT)

    return CommandResult(
        stdout=(stdout or "")[:MAX_OUTPUT],
        stderr=(stderr or "")[:MAX_OUTPUT],
        returncode=proc.returncode,
    )
