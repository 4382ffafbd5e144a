"""
Test doubles — fake PATH lookups and subprocess runners.
"""

from pathlib import Path

from devcert.core.models.store import ARTIFACT_NAMES


def fill_store(directory: Path, names=ARTIFACT_NAMES) -> None:
    """Create placeholder artifacts in a store directory."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_text("placeholder\n")


class FakeWhich:
    """Stand-in for shutil.which over a fixed set of binaries."""

    def __init__(self, *present: str):
        self.present = set(present)
        self.queries: list[str] = []

    def __call__(self, name: str) -> str | None:
        self.queries.append(name)
        return f"/usr/bin/{name}" if name in self.present else None


class FakeRunner:
    """Stand-in for run_command that records calls and returns canned results."""

    def __init__(self, results: dict[str, dict] | None = None):
        # keyed by the first word of the command
        self.results = results or {}
        self.calls: list[dict] = []

    def __call__(self, cmd, *, needs_sudo=False, is_root=False, env=None,
                 env_overrides=None, timeout=None):
        self.calls.append({
            "cmd": list(cmd),
            "needs_sudo": needs_sudo,
            "is_root": is_root,
            "env": dict(env or {}),
            "env_overrides": dict(env_overrides or {}),
        })
        return self.results.get(cmd[0], {"ok": True, "stdout": "", "returncode": 0})

    @property
    def commands(self) -> list[list[str]]:
        return [c["cmd"] for c in self.calls]
