"""Check that a Dependabot configuration covers the whole repository."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

import yaml

from repotools.dbotconf.conf import (
    DOCKER_PKG_ECO,
    GOMOD_PKG_ECO,
    PIP_PKG_ECO,
    DependabotConfig,
)
from repotools.dbotconf.mods import RepoScan, local_mod_path, local_path, scan_repo


class NotEnoughArgumentsError(ValueError):
    """Raised when no configuration path is given."""

    def __init__(self) -> None:
        super().__init__("path argument required")


class MissingUpdatesError(Exception):
    """Raised when the configuration lacks update checks for some directories."""

    def __init__(self, mods: list[str], docker: list[str], pip: list[str]):
        self.mods = mods
        self.docker = docker
        self.pip = pip
        lines = ["missing update check(s):"]
        if mods:
            lines.append(f"- Go mod files: {', '.join(mods)}")
        if docker:
            lines.append(f"- Dockerfiles: {', '.join(docker)}")
        if pip:
            lines.append(f"- Pip files: {', '.join(pip)}")
        super().__init__("\n".join(lines) + "\n")


@dataclass
class ConfiguredUpdates:
    """Directories that have update checks, per ecosystem."""

    mods: set[str] = field(default_factory=set)
    docker: set[str] = field(default_factory=set)
    pip: set[str] = field(default_factory=set)


def configured_updates(path: str) -> ConfiguredUpdates:
    """Read the update checks configured in the Dependabot file at path."""
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except FileNotFoundError:
        raise FileNotFoundError(
            f"dependabot configuration file does not exist: {path}"
        ) from None
    except OSError as exc:
        raise OSError(f"failed to read dependabot configuration file: {path}") from exc

    try:
        raw = yaml.safe_load(text)
        if raw is None:
            raise ValueError("EOF")
        config = DependabotConfig.from_dict(raw)
    except (yaml.YAMLError, ValueError) as exc:
        raise ValueError(f"invalid dependabot configuration: {exc}") from exc

    result = ConfiguredUpdates()
    targets = {
        DOCKER_PKG_ECO: result.docker,
        GOMOD_PKG_ECO: result.mods,
        PIP_PKG_ECO: result.pip,
    }
    for update in config.updates:
        target = targets.get(update.package_ecosystem)
        if target is not None:
            target.add(update.directory)
    return result


def verify(
    args: Sequence[str] | None,
    ignore: Iterable[str] | None = None,
    scanner: Callable[[list[str]], RepoScan] = scan_repo,
    read_updates: Callable[[str], ConfiguredUpdates] = configured_updates,
) -> None:
    """Raise unless the configuration at args[0] checks every module and file."""
    args = list(args or ())
    if not args:
        raise NotEnoughArgumentsError()
    if len(args) > 1:
        raise ValueError(f"only single path argument allowed, received: [{' '.join(args)}]")

    scan = scanner(list(ignore or ()))
    updates = read_updates(args[0])

    missing_mods = [
        local for local in (local_mod_path(scan.root, m) for m in scan.mods)
        if local not in updates.mods
    ]
    missing_docker = [
        local for local in (local_path(scan.root, d) for d in scan.docker_files)
        if local not in updates.docker
    ]
    missing_pip = [
        local for local in (local_path(scan.root, p) for p in scan.pip_files)
        if local not in updates.pip
    ]
    if missing_mods or missing_docker or missing_pip:
        raise MissingUpdatesError(missing_mods, missing_docker, missing_pip)