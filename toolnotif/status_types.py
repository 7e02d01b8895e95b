"""Shapes of the status documents that tools write for the dashboard."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

_INT_FIELDS = ("total_commits", "groups_processed", "commits_indexed")


@dataclass
class PrIntent:
    """Progress report of a PR-intent indexing run."""

    total_commits: int
    groups_processed: int
    commits_indexed: int
    cost_burned: float
    status_log: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PrIntent:
        """Build a report from decoded JSON, checking every field."""
        missing = [
            name
            for name in (*_INT_FIELDS, "cost_burned", "status_log")
            if name not in data
        ]
        if missing:
            raise ValueError(f"missing field(s): {', '.join(missing)}")

        for name in _INT_FIELDS:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        cost = data["cost_burned"]
        if isinstance(cost, bool) or not isinstance(cost, (int, float)):
            raise ValueError(f"cost_burned must be a number, got {cost!r}")

        log = data["status_log"]
        if not isinstance(log, list) or not all(isinstance(line, str) for line in log):
            raise ValueError("status_log must be a list of strings")

        return cls(
            total_commits=data["total_commits"],
            groups_processed=data["groups_processed"],
            commits_indexed=data["commits_indexed"],
            cost_burned=float(cost),
            status_log=list(log),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the report as a JSON-ready dictionary."""
        return asdict(self)