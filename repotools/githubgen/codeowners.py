"""Generate the CODEOWNERS and ALLOWLIST files."""

from __future__ import annotations

import os
from collections.abc import Collection
from dataclasses import dataclass
from typing import Callable

import requests

from repotools.githubgen.constants import (
    ALLOWLIST_HEADER,
    CODEOWNERS_HEADER,
    DEPRECATED_LIST_HEADER,
    DISTRIBUTION_CODEOWNERS_HEADER,
    UNMAINTAINED_HEADER,
    UNMAINTAINED_LIST_HEADER,
    UNMAINTAINED_STATUS,
)
from repotools.githubgen.datatype import GithubData

_API_BASE = "https://api.github.com"
_PER_PAGE = 50


class CodeownersError(Exception):
    """Raised when code owners fail verification or cannot be looked up."""


def get_github_members(skip_github: bool, github_org: str) -> set[str]:
    """Return the logins of all members of github_org, or nothing when skipping."""
    if skip_github:
        return set()
    token = os.environ.get("GITHUB_TOKEN", "")
    if not token:
        raise CodeownersError(
            "Set the environment variable `GITHUB_TOKEN` to a PAT token to authenticate"
        )
    headers = {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
    }
    members: set[str] = set()
    page = 0
    with requests.Session() as session:
        while True:
            params = {"per_page": _PER_PAGE}
            if page:
                params["page"] = page
            response = session.get(
                f"{_API_BASE}/orgs/{github_org}/members",
                headers=headers,
                params=params,
                timeout=30,
            )
            response.raise_for_status()
            users = response.json()
            if not users:
                break
            members.update(user["login"] for user in users)
            page += 1
    return members


def _write_file(path: str, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with open(fd, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)


@dataclass
class CodeownersGenerator:
    """Writes .github/CODEOWNERS and .github/ALLOWLIST."""

    skip_github: bool = False
    get_github_members: Callable[[bool, str], Collection[str]] = get_github_members

    def generate(self, data: GithubData) -> None:
        with open(data.allowlist_file_path, "rb") as fh:
            allowlist_data = fh.read()
        self.verify_code_owner_org_membership(allowlist_data, data)

        default = data.default_code_owner
        codeowners = CODEOWNERS_HEADER % default
        deprecated_list = DEPRECATED_LIST_HEADER
        unmaintained_list = UNMAINTAINED_LIST_HEADER
        unmaintained_codeowners = UNMAINTAINED_HEADER
        current_first_segment = ""

        for folder in data.folders:
            metadata = data.components.get(folder)
            status = metadata.status if metadata is not None else None
            if status is None:
                continue
            padding = " " * (data.max_length - len(folder))
            unmaintained = False
            for stability in status.stability:
                if stability == UNMAINTAINED_STATUS:
                    unmaintained_list += folder + "/\n"
                    unmaintained_codeowners += f"{folder}/{padding} {default}\n"
                    unmaintained = True
                    break
                if stability == "deprecated" and (
                    status.codeowners is None or not status.codeowners.active
                ):
                    deprecated_list += folder + "/\n"
            if unmaintained or status.codeowners is None:
                continue

            first_segment = folder.split(os.sep)[0]
            if first_segment != current_first_segment:
                current_first_segment = first_segment
                codeowners += "\n"
            owners = "".join(
                " " if owner.startswith("@") else " @" + owner
                for owner in status.codeowners.active
            )
            local = folder.removeprefix(data.root_folder + "/")
            codeowners += f"{local}/{padding} {default}{owners}\n"

        codeowners += DISTRIBUTION_CODEOWNERS_HEADER
        longest_name = self.longest_name_spaces(data)
        for dist in data.distributions:
            padding = " " * (longest_name - len(dist.name))
            line = f"\nreports/distributions/{dist.name}.yaml{padding} {default}"
            if dist.maintainers:
                line += " " + " ".join(f"@{m}" for m in dist.maintainers)
            codeowners += line

        github_dir = os.path.join(data.root_folder, ".github")
        _write_file(os.path.join(github_dir, "CODEOWNERS"), codeowners + unmaintained_codeowners)
        _write_file(
            os.path.join(github_dir, "ALLOWLIST"),
            ALLOWLIST_HEADER + deprecated_list + unmaintained_list,
        )

    def longest_name_spaces(self, data: GithubData) -> int:
        """Return the length of the longest distribution name."""
        return max((len(dist.name) for dist in data.distributions), default=0)

    def verify_code_owner_org_membership(
        self, allowlist_data: bytes | str, data: GithubData
    ) -> None:
        """Check that every code owner is an org member or allowlisted.

        Raises CodeownersError for owners that are neither (unless GitHub is
        skipped), for members that are also allowlisted, and for allowlist
        entries that no code owner uses.
        """
        text = (
            allowlist_data.decode("utf-8")
            if isinstance(allowlist_data, bytes)
            else allowlist_data
        )
        allowlist = [line for line in text.split("\n") if line]
        unused = list(allowlist)
        missing: list[str] = []
        duplicates: list[str] = []

        members = self.get_github_members(self.skip_github, data.github_org)

        for codeowner in data.codeowners:
            if codeowner not in members:
                in_allowlist = codeowner in allowlist
                unused = [entry for entry in unused if entry != codeowner]
                in_allowlist = in_allowlist or codeowner.startswith(data.github_org + "/")
                if not in_allowlist:
                    missing.append(codeowner)
            elif codeowner in allowlist:
                duplicates.append(codeowner)

        if missing and not self.skip_github:
            raise CodeownersError(f"codeowners are not members: {', '.join(sorted(missing))}")
        if duplicates:
            raise CodeownersError(
                f"codeowners members duplicate in allowlist: {', '.join(sorted(duplicates))}"
            )
        if unused:
            raise CodeownersError(f"unused members in allowlist: {', '.join(sorted(unused))}")