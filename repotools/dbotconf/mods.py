"""Locate the modules, Dockerfiles and pip requirement files of a repository."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable

from repotools.repo import ModFile, find_file_pattern_dirs, find_modules, find_root


@dataclass
class RepoScan:
    """Everything found in a repository that needs an update check."""

    root: str
    mods: list[ModFile] = field(default_factory=list)
    docker_files: list[str] = field(default_factory=list)
    pip_files: list[str] = field(default_factory=list)


def _to_slash(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def all_mods(ignore: Iterable[str] | None = None) -> tuple[str, list[ModFile]]:
    """Return the repository root and every module file within it."""
    root = _to_slash(os.path.abspath(find_root()))
    return root, find_modules(root, ignore)


def all_docker(root: str, ignore: Iterable[str] | None = None) -> list[str]:
    """Return every Dockerfile under root."""
    return find_file_pattern_dirs(root, "*Dockerfile*", ignore)


def all_pip(root: str, ignore: Iterable[str] | None = None) -> list[str]:
    """Return every pip requirements file under root."""
    return find_file_pattern_dirs(root, "*requirements.txt", ignore)


def scan_repo(ignore: Iterable[str] | None = None) -> RepoScan:
    """Scan the repository enclosing the working directory."""
    ignore = list(ignore or ())
    root, mods = all_mods(ignore)
    return RepoScan(
        root=root,
        mods=mods,
        docker_files=all_docker(root, ignore),
        pip_files=all_pip(root, ignore),
    )


def local_path(root: str, path: str) -> str:
    """Return the Dependabot directory of the file at path inside root."""
    abs_path = _to_slash(os.path.abspath(os.path.dirname(path)))
    local = abs_path[len(root):] if abs_path.startswith(root) else abs_path
    return local or "/"


def local_mod_path(root: str, mod: ModFile) -> str:
    """Return the Dependabot directory of a module inside root."""
    return local_path(root, mod.name)