import json
import os
import subprocess

import pytest
import responses

from toolnotif.config import Config
from toolnotif.server import Server, ServerError

URL = "http://dashboard.example.com/updates"


@pytest.fixture
def config(tmp_path):
    return Config.create_or_load(tmp_path / "watch.toml")


@pytest.fixture
def server(config, tmp_path):
    return Server(config, tmp_path)


@pytest.fixture
def mocked_http():
    with responses.RequestsMock() as rsps:
        yield rsps


def _add_status(tmp_path, config, repo, document):
    folder = tmp_path / repo
    folder.mkdir()
    status = folder / "status_x.json"
    status.write_text(json.dumps(document))
    config.watch_file(status)
    return status


def test_pid_path_is_in_config_dir(server, tmp_path):
    assert server.pid_path == tmp_path / "rs-notifier.pid"


def test_not_running_without_pid_file(server):
    assert server.is_running() is False


def test_running_with_live_pid(server):
    server.pid_path.write_text(str(os.getpid()))
    assert server.is_running() is True
    assert server.pid_path.exists()


def test_stale_pid_file_is_removed(server):
    server.pid_path.write_text("999999999")
    assert server.is_running() is False
    assert not server.pid_path.exists()


def test_stop_when_not_running(server, capsys):
    server.stop()
    assert "Server is not running" in capsys.readouterr().out


def test_stop_kills_process_and_removes_pid_file(server, capsys):
    child = subprocess.Popen(["sleep", "30"])
    try:
        server.pid_path.write_text(str(child.pid))
        server.stop()
        assert child.wait(timeout=5) != 0
    finally:
        if child.poll() is None:
            child.kill()
            child.wait()
    assert not server.pid_path.exists()
    assert f"Server stopped (PID: {child.pid})" in capsys.readouterr().out


def test_start_when_running_does_nothing(server, capsys):
    server.pid_path.write_text(str(os.getpid()))
    server.start()
    assert "Server is already running" in capsys.readouterr().out


def test_start_requires_dashboard_env(server, tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("TOOL_DASHBOARD", raising=False)
    with pytest.raises(ServerError, match="TOOL_DASHBOARD"):
        server.start()
    assert (tmp_path / "jp_tools_daemon.out").exists()


def test_post_updates_without_files(server):
    with pytest.raises(ServerError, match="No Files to watch"):
        server.post_updates(URL)


def test_post_updates_sends_tagged_documents(
    server, config, tmp_path, capsys, mocked_http
):
    _add_status(tmp_path, config, "alpha", {"total_commits": 4})
    _add_status(tmp_path, config, "beta", {"total_commits": 9})
    mocked_http.add(responses.POST, URL, status=200)

    server.post_updates(URL)

    assert len(mocked_http.calls) == 1
    body = json.loads(mocked_http.calls[0].request.body)
    assert sorted(body, key=lambda d: d["project"]) == [
        {"total_commits": 4, "project": "alpha"},
        {"total_commits": 9, "project": "beta"},
    ]
    assert "Successfully sent updates" in capsys.readouterr().out


def test_post_updates_reports_http_error(server, config, tmp_path, mocked_http):
    _add_status(tmp_path, config, "alpha", {})
    mocked_http.add(responses.POST, URL, status=500)
    with pytest.raises(ServerError, match="HTTP error: 500"):
        server.post_updates(URL)


def test_post_updates_missing_status_file(server, config, tmp_path):
    status = _add_status(tmp_path, config, "alpha", {})
    status.unlink()
    with pytest.raises(ServerError, match="Failed to read status file"):
        server.post_updates(URL)


def test_post_updates_rejects_non_object(server, config, tmp_path):
    _add_status(tmp_path, config, "alpha", [1, 2])
    with pytest.raises(ServerError, match="not a JSON object"):
        server.post_updates(URL)