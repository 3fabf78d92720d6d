"""Fill the component lists of issue templates."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

from repotools.githubgen.constants import END_COMPONENT_LIST, START_COMPONENT_LIST
from repotools.githubgen.datatype import GithubData

_OLD_CONTENT = re.compile(
    re.escape(START_COMPONENT_LIST.encode()) + b".*" + re.escape(END_COMPONENT_LIST.encode()),
    re.DOTALL,
)


@dataclass
class IssueTemplatesGenerator:
    """Rewrites the component list between the markers in every issue template."""

    trim_suffixes: list[str] = field(default_factory=list)

    def folder_to_slug(self, folder: str) -> str:
        """Trim redundant suffixes from every level of folder but the first.

        receiver/myvendorreceiver becomes receiver/myvendor.
        """
        path = folder.split("/")
        if any(suffix in path[0] for suffix in self.trim_suffixes):
            if len(path) < 2:
                raise ValueError(f"cannot derive a slug from {folder!r}")
            for suffix in self.trim_suffixes:
                path[1] = path[1].removesuffix(suffix)
                path[-1] = path[-1].removesuffix(suffix)
        return "/".join(path)

    def generate(self, data: GithubData) -> None:
        slugs = sorted(
            self.folder_to_slug(folder.removeprefix(data.root_folder + "/"))
            for folder in data.folders
        )
        replacement = (
            START_COMPONENT_LIST
            + "\n      - "
            + "\n      - ".join(slugs)
            + "\n      "
            + END_COMPONENT_LIST
        ).encode()
        issues_folder = os.path.join(data.root_folder, ".github", "ISSUE_TEMPLATE")
        for name in sorted(os.listdir(issues_folder)):
            path = os.path.join(issues_folder, name)
            with open(path, "rb") as fh:
                contents = fh.read()
            match = _OLD_CONTENT.search(contents)
            if match is None:
                continue
            contents = contents.replace(match.group(0), replacement)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with open(fd, "wb") as fh:
                fh.write(contents)