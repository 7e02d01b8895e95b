"""Background daemon that posts watched status files to the dashboard."""

from __future__ import annotations

import json
import os
import signal
import subprocess
import sys
import threading
from pathlib import Path
from typing import Any, TextIO

import requests
from termcolor import colored

from toolnotif.config import Config

PID_FILE_NAME = "rs-notifier.pid"
POST_INTERVAL_SECONDS = 5
REQUEST_TIMEOUT_SECONDS = 10
_TERM_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGQUIT)


class ServerError(Exception):
    """Raised when the daemon cannot start, stop or deliver updates."""


class Server:
    """Starts, stops and runs the dashboard notifier daemon."""

    def __init__(self, config: Config, config_dir: str | Path) -> None:
        self.config = config
        self.pid_path = Path(config_dir) / PID_FILE_NAME

    def start(self) -> None:
        """Detach into the background and post updates until told to stop."""
        if self.is_running():
            print(colored("Server is already running", "yellow"))
            return

        home = Path.home()
        stdout_path = home / "jp_tools_daemon.out"
        stderr_path = home / "jp_tools_daemon.err"
        stdout = open(stdout_path, "w", encoding="utf-8")
        stderr = open(stderr_path, "w", encoding="utf-8")

        url = os.environ.get("TOOL_DASHBOARD")
        if not url:
            stdout.close()
            stderr.close()
            raise ServerError("You should set the TOOL_DASHBOARD env variable")

        print("Starting server...")
        print(f"  Output Log: {stdout_path}")
        print(f"  Error Log: {stderr_path}")

        try:
            _daemonize(self.pid_path, stdout, stderr)
        except OSError as exc:
            print(f"{colored('✗', 'red')} Failed to start daemon: {exc}", file=sys.stderr)
            print("Server Stopped")
            self._cleanup()
            return

        self._run(url)

    def _run(self, url: str) -> None:
        try:
            pid = self.pid_path.read_text().strip()
            print(f"{colored('✓', 'green')} Server started successfully (PID: {pid})")
        except OSError:
            pass

        stop_requested = threading.Event()
        for signum in _TERM_SIGNALS:
            signal.signal(signum, lambda *_: stop_requested.set())

        while not stop_requested.is_set():
            try:
                self.post_updates(url)
            except Exception as exc:  # keep the daemon alive whatever a round fails on
                print(f"Error posting updates: {exc}", file=sys.stderr)
            stop_requested.wait(POST_INTERVAL_SECONDS)

        print("STOPPING SERVER")
        self._cleanup()
        sys.exit(0)

    def post_updates(self, url: str) -> None:
        """Send every watched status file, tagged with its project, in one POST."""
        self.config.reload()
        if not self.config.toml_data:
            raise ServerError("No Files to watch")

        payload: list[Any] = []
        for name, repo in self.config.toml_data.items():
            try:
                content = Path(repo.status_file).read_text(encoding="utf-8")
            except OSError as exc:
                raise ServerError(
                    f"Failed to read status file {repo.status_file}: {exc}"
                ) from exc
            try:
                document = json.loads(content)
            except json.JSONDecodeError as exc:
                raise ServerError(f"Invalid JSON in {repo.status_file}: {exc}") from exc
            if document is None:
                document = {}
            if not isinstance(document, dict):
                raise ServerError(f"Status file {repo.status_file} is not a JSON object")
            document["project"] = name
            payload.append(document)

        response = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT_SECONDS)
        if 200 <= response.status_code < 300:
            print("Successfully sent updates")
            return
        raise ServerError(f"HTTP error: {response.status_code} {response.reason or ''}".rstrip())

    def stop(self) -> None:
        """Terminate the running daemon named in the PID file."""
        if not self.is_running():
            print(colored("Server is not running", "yellow"))
            return

        raw = self.pid_path.read_text()
        try:
            pid = int(raw.strip())
        except ValueError as exc:
            raise ServerError(f"Invalid PID in {self.pid_path}: {raw!r}") from exc

        result = subprocess.run(["kill", str(pid)], capture_output=True)
        if result.returncode == 0:
            print(f"{colored('✓', 'green')} Server stopped (PID: {pid})")
            self._cleanup()
        else:
            print(f"{colored('✗', 'red')} Failed to stop server (PID: {pid})")

    def is_running(self) -> bool:
        """Whether the PID file names a live process; drop it if stale."""
        if not self.pid_path.exists():
            return False
        try:
            pid = self.pid_path.read_text()
        except OSError:
            return False
        if _process_exists(pid.strip()):
            return True
        self._cleanup()
        return False

    def _cleanup(self) -> None:
        self.pid_path.unlink(missing_ok=True)


def _process_exists(pid: str) -> bool:
    try:
        result = subprocess.run(["kill", "-0", pid], capture_output=True)
    except OSError:
        return False
    return result.returncode == 0


def _daemonize(pid_path: Path, stdout: TextIO, stderr: TextIO) -> None:
    """Detach from the terminal, record the PID and redirect output."""
    sys.stdout.flush()
    sys.stderr.flush()
    if os.fork() > 0:
        os._exit(0)
    os.setsid()
    if os.fork() > 0:
        os._exit(0)

    os.chdir("/")
    os.umask(0o027)
    pid_path.write_text(str(os.getpid()))

    with open(os.devnull, "rb") as devnull:
        os.dup2(devnull.fileno(), sys.stdin.fileno())
    os.dup2(stdout.fileno(), sys.stdout.fileno())
    os.dup2(stderr.fileno(), sys.stderr.fileno())
    stdout.close()
    stderr.close()
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(line_buffering=True)