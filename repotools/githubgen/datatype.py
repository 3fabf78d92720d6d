"""Data model shared by the GitHub file generators."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


class Generator(Protocol):
    """Something that writes files derived from collected repository data."""

    def generate(self, data: GithubData) -> None:
        """Produce output for data, raising on failure."""


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


def _strings(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"cannot decode {value!r} as {name}")
    return [_string(item, name) for item in value]


@dataclass
class Codeowners:
    """Active and emeritus code owners of a component."""

    active: list[str] = field(default_factory=list)
    emeritus: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> Codeowners:
        mapping = _mapping(raw, "codeowners")
        return cls(
            active=_strings(mapping.get("active"), "active"),
            emeritus=_strings(mapping.get("emeritus"), "emeritus"),
        )


@dataclass
class Status:
    """Status section of a component's metadata."""

    stability: dict[str, list[str]] = field(default_factory=dict)
    distributions: list[str] = field(default_factory=list)
    class_: str = ""
    warnings: list[str] = field(default_factory=list)
    codeowners: Codeowners | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Status:
        mapping = _mapping(raw, "status")
        stability = {
            _string(level, "stability"): _strings(signals, "stability")
            for level, signals in _mapping(mapping.get("stability"), "stability").items()
        }
        raw_owners = mapping.get("codeowners")
        return cls(
            stability=stability,
            distributions=_strings(mapping.get("distributions"), "distributions"),
            class_=_string(mapping.get("class"), "class"),
            warnings=_strings(mapping.get("warnings"), "warnings"),
            codeowners=None if raw_owners is None else Codeowners.from_dict(raw_owners),
        )


@dataclass
class Metadata:
    """Metadata of one component."""

    type: str = ""
    parent: str = ""
    status: Status | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> Metadata:
        mapping = _mapping(raw, "metadata")
        raw_status = mapping.get("status")
        return cls(
            type=_string(mapping.get("type"), "type"),
            parent=_string(mapping.get("parent"), "parent"),
            status=None if raw_status is None else Status.from_dict(raw_status),
        )


@dataclass
class DistributionData:
    """A distribution and its maintainers."""

    name: str = ""
    url: str = ""
    maintainers: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> DistributionData:
        mapping = _mapping(raw, "distribution")
        return cls(
            name=_string(mapping.get("name"), "name"),
            url=_string(mapping.get("url"), "url"),
            maintainers=_strings(mapping.get("maintainers"), "maintainers"),
        )


@dataclass
class GithubData:
    """Everything collected from a repository that the generators need."""

    root_folder: str = ""
    folders: list[str] = field(default_factory=list)
    codeowners: list[str] = field(default_factory=list)
    allowlist_file_path: str = ""
    max_length: int = 0
    components: dict[str, Metadata] = field(default_factory=dict)
    distributions: list[DistributionData] = field(default_factory=list)
    default_code_owner: str = ""
    github_org: str = ""