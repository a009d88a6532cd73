from pathlib import Path

import pytest

from RedisLink.console import format_entries, main


@pytest.fixture
def run(server, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in ("REDIS_HOST", "REDIS_PORT", "REDIS_DB", "REDIS_PASSWORD", "REDIS_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    def invoke(*argv: str) -> int:
        return main(list(argv), client_factory=server.client_factory)

    return invoke


def test_set_and_get_scalar(run, capsys: pytest.CaptureFixture) -> None:
    assert run("set", "caller", "busy") == 0
    assert "Redis database entry created." in capsys.readouterr().out
    assert run("get", "caller") == 0
    assert capsys.readouterr().out.strip() == "busy"


def test_set_and_hshow_hash(run, capsys: pytest.CaptureFixture) -> None:
    assert run("set", "agents", "alice", "idle") == 0
    assert run("set", "agents", "bob", "busy") == 0
    capsys.readouterr()

    assert run("hshow", "agents") == 0
    out = capsys.readouterr().out
    assert "alice" in out
    assert "busy" in out
    assert out.strip().endswith("2 results found.")


def test_set_with_wrong_arity_shows_usage(run, server, capsys: pytest.CaptureFixture) -> None:
    assert run("set", "lonely") == 2
    assert "Usage" in capsys.readouterr().err
    assert "SET" not in server.command_names()


def test_show_lists_keys_by_pattern(run, server, capsys: pytest.CaptureFixture) -> None:
    server.data.update({"hello": "1", "hallo": "2", "hillo": "3"})
    assert run("show", "h[ae]llo") == 0
    out = capsys.readouterr().out
    assert "hillo" not in out
    assert out.strip().endswith("2 results found.")


def test_del_reports_removed_and_missing(run, server, capsys: pytest.CaptureFixture) -> None:
    server.data["k"] = "v"
    assert run("del", "k") == 0
    assert "Redis database entry removed." in capsys.readouterr().out
    assert run("del", "k") == 1
    assert "Redis database entry does not exist." in capsys.readouterr().out


def test_exists_and_publish(run, server, capsys: pytest.CaptureFixture) -> None:
    server.subscribers["events"] = 2
    assert run("exists", "missing") == 1
    assert capsys.readouterr().out.strip() == "0"
    assert run("publish", "events", "ring") == 0
    assert capsys.readouterr().out.strip() == "2"


def test_console_does_not_request_background_save(run, server) -> None:
    run("get", "anything")
    assert "BGSAVE" not in server.command_names()


def test_missing_explicit_config_fails(run, tmp_path: Path) -> None:
    assert run("--config", str(tmp_path / "absent.conf"), "show") == 1


def test_unreachable_server_fails(run, server) -> None:
    server.unreachable = True
    assert run("show") == 1


def test_format_entries_aligns_rows() -> None:
    text = format_entries([("key", "value"), ("gone", None)])
    lines = text.splitlines()
    assert lines[0].startswith("key" + " " * 47 + ": value")
    assert lines[1].startswith("gone" + " " * 46 + ": ")
    assert lines[-1] == "2 results found."


def test_rejected_password_fails(run, server, monkeypatch: pytest.MonkeyPatch) -> None:
    server.password = "right"
    monkeypatch.setenv("REDIS_PASSWORD", "wrong")
    assert run("show") == 1
