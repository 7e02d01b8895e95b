"""The list of watched repositories and their status files, kept in TOML."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w
from termcolor import colored


class ConfigError(Exception):
    """Raised when the watch list cannot be read, written or extended."""


@dataclass
class RepoConfig:
    """Where a watched repository keeps its status file."""

    status_file: str


@dataclass
class Config:
    """Watch list backed by a TOML file."""

    file_path: str
    toml_data: dict[str, RepoConfig] = field(default_factory=dict)

    @classmethod
    def create_or_load(cls, toml_path: str | Path) -> Config:
        """Load the watch list from ``toml_path``, or start an empty one."""
        toml_path = Path(toml_path)
        data = _read_toml(toml_path) if toml_path.exists() else {}
        return cls(file_path=str(toml_path), toml_data=data)

    def watch_file(self, path: str | Path, repo_name: str | None = None) -> str:
        """Add a status file, or a folder holding one, to the watch list.

        Returns the name under which the repository was stored.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(
                f"Given file path does not exist. Please check again - {path}"
            )

        name = repo_name or _repo_name(path)
        if path.suffix:
            status_file = str(path)
        else:
            found = _discover_status_file(path)
            if found is None:
                raise ConfigError("No Status file found")
            status_file = str(path / found)

        self.toml_data[name] = RepoConfig(status_file=status_file)
        self._write_back()
        print(f"Successfully added - {colored(name, 'green')}")
        return name

    def list_all(self) -> None:
        """Print every watched repository with its status file."""
        for name, repo in self.toml_data.items():
            print(
                f"Repo - {colored(name, 'green')} "
                f"{colored('->', 'light_blue')} "
                f"{colored(repo.status_file, 'magenta')}"
            )

    def remove(self, repo_name: str) -> RepoConfig | None:
        """Stop watching ``repo_name``; return its entry, or None if unknown."""
        popped = self.toml_data.pop(repo_name, None)
        if popped is None:
            print(f"{repo_name} does not exist")
            return None
        self._write_back()
        print(
            f"{colored('Removed', 'red')} "
            f"{colored(repo_name, 'red', attrs=['bold'])} -> {popped.status_file}"
        )
        return popped

    def reload(self) -> None:
        """Re-read the TOML file if it exists."""
        toml_path = Path(self.file_path)
        if toml_path.exists():
            self.toml_data = _read_toml(toml_path)

    def _write_back(self) -> None:
        document = {
            name: {"status_file": repo.status_file}
            for name, repo in self.toml_data.items()
        }
        try:
            Path(self.file_path).write_text(tomli_w.dumps(document), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to write to file: {exc}") from exc


def _read_toml(toml_path: Path) -> dict[str, RepoConfig]:
    try:
        content = toml_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read toml file: {exc}") from exc
    try:
        raw = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid toml file {toml_path}: {exc}") from exc

    data: dict[str, RepoConfig] = {}
    for name, entry in raw.items():
        if not isinstance(entry, dict) or not isinstance(entry.get("status_file"), str):
            raise ConfigError(f"Entry {name!r} has no status_file")
        data[name] = RepoConfig(status_file=entry["status_file"])
    return data


def _repo_name(path: Path) -> str:
    if path.suffix == ".json":
        return path.parent.name
    return path.name


def _discover_status_file(folder: Path) -> str | None:
    try:
        entries = sorted(folder.iterdir())
    except OSError:
        return None
    return next(
        (
            entry.name
            for entry in entries
            if entry.suffix == ".json" and "status_" in entry.name
        ),
        None,
    )