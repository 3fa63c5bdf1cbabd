import logging
import os
from pathlib import Path

import pytest

from kate import app


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_default_config_file_is_under_home_conf():
    conf = Path(app.get_default_config_file())
    assert conf.parent == Path(app.get_home_dir(), "conf")
    assert conf.name == app.get_name() + ".ini"


def test_update_pid_file_writes_pid_and_remembers_path(tmp_path):
    pid_path = tmp_path / "run" / "service.pid"
    app.update_pid_file(pid_path)
    try:
        assert pid_path.read_text() == str(os.getpid())
        assert app.get_pid_file() == str(pid_path)
    finally:
        app.remove_pid_file()
    assert not pid_path.exists()


def test_update_pid_file_fails_when_dir_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(OSError, match="failed to create dir"):
        app.update_pid_file(blocker / "service.pid")


def test_remove_pid_file_without_file_keeps_other_files(tmp_path, monkeypatch):
    monkeypatch.setattr(app, "_pid_file", "")
    other = tmp_path / "keep.txt"
    other.write_text("keep")
    app.remove_pid_file()
    assert app.get_pid_file() == ""
    assert other.read_text() == "keep"


def test_print_version(capsys, monkeypatch):
    monkeypatch.setattr(app, "VERSION_MAJOR", "1")
    monkeypatch.setattr(app, "VERSION_MINOR", "2")
    monkeypatch.setattr(app, "VERSION_PATCH", "3")
    monkeypatch.setattr(app, "REVISION", "rev")
    monkeypatch.setattr(app, "LAST_AUTHOR", "someone")
    monkeypatch.setattr(app, "LAST_DATE", "yesterday")
    monkeypatch.setattr(app, "BUILD_DATE", "today")
    app.print_version()
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Version:     1.2.3",
        "Revision:    rev",
        "Last Author: someone",
        "Last Date:   yesterday",
        "Build Date:  today",
    ]


def test_log_version(monkeypatch):
    monkeypatch.setattr(app, "VERSION_MAJOR", "4")
    monkeypatch.setattr(app, "VERSION_MINOR", "5")
    monkeypatch.setattr(app, "VERSION_PATCH", "6")
    monkeypatch.setattr(app, "REVISION", "r1")
    logger = logging.Logger("kate.test.app", logging.DEBUG)
    handler = _ListHandler()
    logger.addHandler(handler)
    app.log_version(logger)
    assert len(handler.records) == 1
    record = handler.records[0]
    assert record.getMessage() == "app info"
    assert record.version == "4.5.6"
    assert record.revision == "r1"