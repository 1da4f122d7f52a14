"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called by the engine.
Child processes inherit stdin/stdout/stderr so package managers and
compilers can talk to the user directly.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    *,
    cwd: str | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run a command to completion with inherited stdio.

    Args:
        cmd: Argument vector; never run through a shell.
        cwd: Working directory for the command.
        timeout: Seconds before the child is killed (None = wait forever).

    Returns:
        ``{"ok": True, "returncode": 0, "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    display = shlex.join(cmd)
    logger.debug("Executing: %s (cwd=%s)", display, cwd or ".")
    start = time.monotonic()
    try:
        result = subprocess.run(cmd, cwd=cwd, timeout=timeout, check=False)
    except subprocess.TimeoutExpired:
        return {"ok": False, "command": display, "error": f"Command timed out ({timeout}s)"}
    except OSError as e:
        return {"ok": False, "command": display, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if result.returncode == 0:
        return {"ok": True, "command": display, "returncode": 0, "elapsed_ms": elapsed_ms}

    return {
        "ok": False,
        "command": display,
        "returncode": result.returncode,
        "error": f"Command failed (exit {result.returncode})",
        "elapsed_ms": elapsed_ms,
    }
