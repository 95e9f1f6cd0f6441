"""Reader configuration: where the smaps reports live.

On a normal Linux box every process exposes its mapping report at
``/proc/<pid>/smaps``.  Tests, containers with a relocated procfs, and
offline captures (a directory holding a saved ``maps`` file) need the
locations to be adjustable, so the few path fragments the reader uses
are gathered in one immutable object.

A configuration can be built in code or loaded from a small JSON file::

    {"proc_root": "/host/proc", "pid_report": "smaps"}

Any key left out keeps its default.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

DEFAULT_PROC_ROOT = "/proc"
DEFAULT_PID_REPORT = "smaps"
DEFAULT_DIR_REPORT = "maps"


class ConfigError(RuntimeError):
    """Raise when a configuration file cannot be loaded.

    Examples: missing file, invalid JSON, unknown or mistyped keys.
    """


@dataclass(frozen=True)
class ReaderConfig:
    """Locations the reader consults when it needs a report from disk."""

    proc_root: str = DEFAULT_PROC_ROOT
    """Mount point of the process information pseudo-filesystem."""

    pid_report: str = DEFAULT_PID_REPORT
    """File name of the per-process report under ``<proc_root>/<pid>/``."""

    dir_report: str = DEFAULT_DIR_REPORT
    """File name looked up beneath a caller-supplied directory."""

    def pid_report_path(self, pid: int) -> Path:
        """Return the report path for process *pid*."""
        return Path(self.proc_root) / str(pid) / self.pid_report

    def dir_report_path(self, directory: Path | str) -> Path:
        """Return the report path beneath *directory*."""
        return Path(directory) / self.dir_report

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)


def load_config(path: Path) -> ReaderConfig:
    """Load a reader configuration from a JSON file.

    ``py_smaps.web.app.main`` uses this for its optional config file;
    library callers pass the result to ``from_pid``/``from_path``.

    Args:
        path: The JSON file to read.

    Returns:
        A ReaderConfig with the file's keys applied over the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not a JSON object,
            or contains keys that are unknown or not strings.

    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load reader config: {e}"
        raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"Reader config must be a JSON object, got {type(data).__name__}"
        raise ConfigError(msg)

    known = {f.name for f in fields(ReaderConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown reader config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    for key, value in data.items():
        if not isinstance(value, str):
            msg = f"Reader config key '{key}' must be a string"
            raise ConfigError(msg)

    return ReaderConfig(**data)
