from __future__ import annotations

import argparse
import io
import json
import logging
from pathlib import Path

import pytest

from repo_snapshot_tool.cli import main as cli_main
from repo_snapshot_tool.cli.config import load_config
from repo_snapshot_tool.cli.console import ConsoleEventSink
from repo_snapshot_tool.domain.errors import HttpError
from repo_snapshot_tool.logging_utils import JsonLogFormatter, TextLogFormatter, configure_logging


def _args(**overrides) -> argparse.Namespace:
    values = {"specifier": "acme/widgets", "destination": None, "host": None, "max_redirects": None, "timeout": None}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_load_config_defaults():
    config = load_config(_args(), env={})

    assert config.specifier == "acme/widgets"
    assert config.destination is None
    assert config.archive_host == "github.com"
    assert config.max_redirects == 20
    assert config.timeout_seconds is None
    assert config.chunk_size == 64 * 1024


def test_load_config_arguments_take_precedence_over_env():
    env = {
        "SNAPCLONE_DEST": "from-env",
        "SNAPCLONE_HOST": "env.example.org",
        "SNAPCLONE_MAX_REDIRECTS": "3",
        "SNAPCLONE_TIMEOUT_SECONDS": "9",
        "SNAPCLONE_CHUNK_SIZE": "1024",
    }

    config = load_config(_args(destination="out", host="git.example.org", max_redirects=5), env=env)

    assert config.destination == Path("out")
    assert config.archive_host == "git.example.org"
    assert config.max_redirects == 5
    assert config.timeout_seconds == 9.0
    assert config.chunk_size == 1024


@pytest.mark.parametrize(
    ("overrides", "env"),
    [
        ({"specifier": "  "}, {}),
        ({"max_redirects": -1}, {}),
        ({}, {"SNAPCLONE_MAX_REDIRECTS": "many"}),
        ({"timeout": 0.0}, {}),
        ({}, {"SNAPCLONE_CHUNK_SIZE": "0"}),
    ],
)
def test_load_config_rejects_invalid_values(overrides, env):
    with pytest.raises(ValueError):
        load_config(_args(**overrides), env=env)


@pytest.fixture
def quiet_cli(monkeypatch):
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)
    for name in (
        "SNAPCLONE_DEST",
        "SNAPCLONE_HOST",
        "SNAPCLONE_MAX_REDIRECTS",
        "SNAPCLONE_TIMEOUT_SECONDS",
        "SNAPCLONE_CHUNK_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_main_success_returns_zero(quiet_cli, monkeypatch, tmp_path):
    calls = []

    async def fake_clone(spec, config, events):
        calls.append((spec, config.destination))

    monkeypatch.setattr(cli_main, "_clone", fake_clone)

    assert cli_main.main(["acme/widgets#v2.0.0", str(tmp_path)]) == 0
    assert calls[0][0].ref == "v2.0.0"
    assert calls[0][1] == tmp_path


@pytest.fixture
def stray_chunk_size(monkeypatch):
    monkeypatch.setenv("SNAPCLONE_CHUNK_SIZE", "0")


def test_main_ignores_stray_chunk_size(stray_chunk_size, quiet_cli, monkeypatch, tmp_path):
    async def fake_clone(spec, config, events):
        return None

    monkeypatch.setattr(cli_main, "_clone", fake_clone)

    assert "SNAPCLONE_CHUNK_SIZE" not in cli_main.os.environ
    assert cli_main.main(["acme/widgets", str(tmp_path)]) == 0


def test_main_invalid_specifier_returns_one(quiet_cli, capsys):
    assert cli_main.main(["not-a-repo"]) == 1
    assert 'Could not parse repository specifier "not-a-repo"' in capsys.readouterr().err


def test_main_clone_failure_returns_one(quiet_cli, monkeypatch, capsys):
    async def failing_clone(spec, config, events):
        raise HttpError(404, "Not Found", url="https://github.com/acme/widgets/archive/HEAD.tar.gz")

    monkeypatch.setattr(cli_main, "_clone", failing_clone)

    assert cli_main.main(["acme/widgets"]) == 1
    assert "404 Not Found" in capsys.readouterr().err


def test_main_requires_specifier(quiet_cli):
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main([])

    assert excinfo.value.code != 0


def test_console_sink_prints_levels():
    stream = io.StringIO()
    sink = ConsoleEventSink(stream)

    sink.info("downloading")
    sink.warn(FileNotFoundError("a.txt"))

    assert stream.getvalue().splitlines() == ["info: downloading", "warn: FileNotFoundError: a.txt"]


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("repo_snapshot_tool.test", logging.INFO, __file__, 1, "clone started", (), None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_event_fields():
    payload = json.loads(JsonLogFormatter().format(_record(event="clone.start", repository="acme/widgets")))

    assert payload["message"] == "clone started"
    assert payload["level"] == "INFO"
    assert payload["event"] == "clone.start"
    assert payload["repository"] == "acme/widgets"


def test_text_formatter_appends_event():
    line = TextLogFormatter().format(_record(event="clone.start"))

    assert line == "INFO repo_snapshot_tool.test: clone started [clone.start]"


def test_configure_logging_rejects_unknown_format():
    with pytest.raises(ValueError):
        configure_logging("INFO", "xml")
