"""Application identity, pid file handling and build version information."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

VERSION_MAJOR = ""
VERSION_MINOR = ""
VERSION_PATCH = ""
BUILD_DATE = ""
REVISION = ""
LAST_AUTHOR = ""
LAST_DATE = ""


def _executable() -> Path:
    program = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return Path(program).resolve()


_bin = _executable()
_name = _bin.name
_home_dir = str(_bin.parent.parent)
_conf_file = str(Path(_home_dir, "conf", f"{_name}.ini"))
_pid_file = ""


def get_name() -> str:
    """Return the application name (the file name of the running program)."""
    return _name


def get_home_dir() -> str:
    """Return the application home directory: the parent of the program's directory."""
    return _home_dir


def get_default_config_file() -> str:
    """Return the default configuration file, ``<home>/conf/<name>.ini``."""
    return _conf_file


def get_pid_file() -> str:
    """Return the pid file last written by :func:`update_pid_file`, or ''."""
    return _pid_file


def update_pid_file(file_name: str | os.PathLike) -> None:
    """Write the current process id to ``file_name``, creating its directory."""
    global _pid_file
    path = Path(file_name)
    run_dir = path.parent
    pid = os.getpid()

    try:
        run_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create dir: dir={run_dir}, error={exc}") from exc

    try:
        path.write_text(str(pid))
    except OSError as exc:
        raise OSError(f"failed to write pid: file={path}, pid={pid}, error={exc}") from exc

    _pid_file = str(path)


def remove_pid_file() -> None:
    """Remove the pid file, if one was written; errors are ignored."""
    if _pid_file:
        try:
            os.remove(_pid_file)
        except OSError:
            pass


def _version() -> str:
    return f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"


def print_version() -> str:
    """Print the version information to standard output and return the text."""
    rows = [
        ("Version:    ", _version()),
        ("Revision:   ", REVISION),
        ("Last Author:", LAST_AUTHOR),
        ("Last Date:  ", LAST_DATE),
        ("Build Date: ", BUILD_DATE),
    ]
    text = "".join(f"{label} {value}\n" for label, value in rows)
    sys.stdout.write(text)
    return text


def log_version(logger: logging.Logger | logging.LoggerAdapter) -> None:
    """Log the version information at INFO level."""
    logger.info(
        "app info",
        extra={
            "version": _version(),
            "revision": REVISION,
            "last_author": LAST_AUTHOR,
            "last_date": LAST_DATE,
            "build_date": BUILD_DATE,
        },
    )