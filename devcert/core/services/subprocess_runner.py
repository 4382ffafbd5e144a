"""
Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called.  Package-manager
probes, package installs and mkcert invocations all go through here, so
sudo handling, environment merging and logging live in one spot.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Mapping
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Signature of :func:`run_command`, used for injection in tests."""

    def __call__(
        self,
        cmd: list[str],
        *,
        needs_sudo: bool = False,
        is_root: bool = False,
        env: Mapping[str, str] | None = None,
        env_overrides: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ) -> dict[str, Any]: ...


def run_command(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    is_root: bool = False,
    env: Mapping[str, str] | None = None,
    env_overrides: Mapping[str, str] | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Run a command to completion and report the outcome.

    Blocks until the child exits.  No timeout unless one is given.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Prefix ``sudo`` unless already running as root.
            sudo prompts on the controlling terminal, not stdin.
        is_root: Whether the current process is root.
        env: Base environment (default: ``os.environ``).
        env_overrides: Extra env vars layered over ``env``
            (e.g. ``DEBIAN_FRONTEND``).
        timeout: Seconds before ``TimeoutExpired``; None waits forever.

    Returns:
        ``{"ok": True, "stdout": "...", "returncode": 0, "elapsed_ms": N}``
        on success, ``{"ok": False, "error": "...", ...}`` on failure.
    """
    if needs_sudo and not is_root:
        cmd = ["sudo"] + cmd

    child_env = dict(os.environ if env is None else env)
    if env_overrides:
        child_env.update(env_overrides)

    logger.debug("Running: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=child_env,
        )
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}", "returncode": None}
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)", "returncode": None}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e), "returncode": None}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-2000:] if result.stdout else ""
    stderr = result.stderr[-2000:] if result.stderr else ""

    if stdout:
        logger.debug("stdout: %s", stdout.strip())
    if stderr:
        logger.debug("stderr: %s", stderr.strip())

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": stdout,
            "returncode": 0,
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": stderr,
        "stdout": stdout,
        "returncode": result.returncode,
        "elapsed_ms": elapsed_ms,
    }
