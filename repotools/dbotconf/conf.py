"""Dependabot configuration model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

VERSION2 = 2
GH_PKG_ECO = "github-actions"
DOCKER_PKG_ECO = "docker"
GOMOD_PKG_ECO = "gomod"
PIP_PKG_ECO = "pip"

ACTION_LABELS = ("dependencies", "actions", "Skip Changelog")
DOCKER_LABELS = ("dependencies", "docker", "Skip Changelog")
GO_LABELS = ("dependencies", "go", "Skip Changelog")
PIP_LABELS = ("dependencies", "python", "Skip Changelog")


@dataclass
class Schedule:
    """How often Dependabot checks for updates."""

    interval: str = ""
    day: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"interval": self.interval}
        if self.day:
            out["day"] = self.day
        return out


WEEKLY_SCHEDULE = Schedule(interval="weekly", day="sunday")


@dataclass
class Update:
    """One update check of a package ecosystem in a directory."""

    package_ecosystem: str = ""
    directory: str = ""
    labels: list[str] = field(default_factory=list)
    schedule: Schedule = field(default_factory=Schedule)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "package-ecosystem": self.package_ecosystem,
            "directory": self.directory,
        }
        if self.labels:
            out["labels"] = list(self.labels)
        out["schedule"] = self.schedule.to_dict()
        return out


@dataclass
class DependabotConfig:
    """A complete Dependabot configuration document."""

    version: int = VERSION2
    updates: list[Update] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "updates": [u.to_dict() for u in self.updates],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> DependabotConfig:
        """Build a configuration from decoded YAML, raising ValueError on bad shapes."""
        mapping = _mapping(raw, "dependabot configuration")
        version = mapping.get("version", 0)
        if version is None:
            version = 0
        if isinstance(version, bool) or not isinstance(version, int):
            raise ValueError(f"cannot decode {version!r} as version")
        raw_updates = mapping.get("updates")
        if raw_updates is None:
            raw_updates = []
        if not isinstance(raw_updates, list):
            raise ValueError(f"cannot decode {raw_updates!r} as updates")
        return cls(version=version, updates=[_update_from_dict(u) for u in raw_updates])


def _mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"cannot decode {type(raw).__name__} into {what}")
    return raw


def _string(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list)):
        raise ValueError(f"cannot decode {value!r} as {name}")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _schedule_from_dict(raw: Any) -> Schedule:
    mapping = _mapping(raw, "schedule")
    return Schedule(
        interval=_string(mapping.get("interval"), "interval"),
        day=_string(mapping.get("day"), "day"),
    )


def _update_from_dict(raw: Any) -> Update:
    mapping = _mapping(raw, "update")
    raw_labels = mapping.get("labels")
    if raw_labels is None:
        raw_labels = []
    if not isinstance(raw_labels, list):
        raise ValueError(f"cannot decode {raw_labels!r} as labels")
    return Update(
        package_ecosystem=_string(mapping.get("package-ecosystem"), "package-ecosystem"),
        directory=_string(mapping.get("directory"), "directory"),
        labels=[_string(label, "label") for label in raw_labels],
        schedule=_schedule_from_dict(mapping.get("schedule")),
    )