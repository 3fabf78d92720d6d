"""Generate a Dependabot configuration for a repository."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, Sequence, TextIO

import yaml

from repotools.dbotconf.conf import (
    ACTION_LABELS,
    DOCKER_LABELS,
    DOCKER_PKG_ECO,
    GH_PKG_ECO,
    GO_LABELS,
    GOMOD_PKG_ECO,
    PIP_LABELS,
    PIP_PKG_ECO,
    VERSION2,
    WEEKLY_SCHEDULE,
    DependabotConfig,
    Schedule,
    Update,
)
from repotools.dbotconf.mods import RepoScan, local_mod_path, local_path, scan_repo
from repotools.repo import ModFile

HEADER = "# File generated by dbotconf; DO NOT EDIT."


class _IndentDumper(yaml.SafeDumper):
    """Dumper that indents sequences nested in mappings."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _update(ecosystem: str, directory: str, labels: Sequence[str]) -> Update:
    return Update(
        package_ecosystem=ecosystem,
        directory=directory,
        labels=list(labels),
        schedule=Schedule(WEEKLY_SCHEDULE.interval, WEEKLY_SCHEDULE.day),
    )


def build_config(
    root: str,
    mods: Iterable[ModFile],
    docker_files: Iterable[str],
    pip_files: Iterable[str],
) -> DependabotConfig:
    """Build a configuration covering every module, Dockerfile and pip file."""
    updates = [_update(GH_PKG_ECO, "/", ACTION_LABELS)]
    updates += [_update(DOCKER_PKG_ECO, local_path(root, d), DOCKER_LABELS) for d in docker_files]
    updates += [_update(GOMOD_PKG_ECO, local_mod_path(root, m), GO_LABELS) for m in mods]
    updates += [_update(PIP_PKG_ECO, local_path(root, p), PIP_LABELS) for p in pip_files]
    return DependabotConfig(version=VERSION2, updates=updates)


def dump_config(config: DependabotConfig, output: TextIO) -> None:
    """Write config as YAML with a two-space indent."""
    yaml.dump(
        config.to_dict(),
        output,
        Dumper=_IndentDumper,
        indent=2,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def generate(
    ignore: Iterable[str] | None = None,
    output: TextIO | None = None,
    scanner: Callable[[list[str]], RepoScan] = scan_repo,
    builder: Callable[..., DependabotConfig] = build_config,
) -> None:
    """Write a generated configuration for the repository to output."""
    out = output if output is not None else sys.stdout
    scan = scanner(list(ignore or ()))
    config = builder(scan.root, scan.mods, scan.docker_files, scan.pip_files)
    out.write(HEADER + "\n")
    dump_config(config, out)