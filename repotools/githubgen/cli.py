"""Command line that generates GitHub-specific files from component metadata.

It writes .github/CODEOWNERS, .github/ALLOWLIST, the component lists of
.github/ISSUE_TEMPLATE/*.yaml and reports/distributions/*.yaml.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Iterable, Sequence

import requests
import yaml

from repotools.githubgen.codeowners import CodeownersError, CodeownersGenerator
from repotools.githubgen.constants import UNMAINTAINED_STATUS
from repotools.githubgen.datatype import (
    Codeowners,
    DistributionData,
    Generator,
    GithubData,
    Metadata,
)
from repotools.githubgen.distributions import DistributionsGenerator
from repotools.githubgen.issuetemplates import IssueTemplatesGenerator

logger = logging.getLogger(__name__)

_METADATA_FILE = "metadata.yaml"
_DEFAULT_TRIM_SUFFIXES = "receiver, exporter, extension, processor, connector, internal"


class _UnknownGeneratorError(ValueError):
    """Raised for a generator name that is not known."""


def load_metadata(file_path: str) -> Metadata:
    """Read the component metadata in the YAML file at file_path."""
    with open(file_path, "rb") as fh:
        raw = yaml.safe_load(fh)
    return Metadata.from_dict(raw)


def run(
    folder: str,
    allowlist_file_path: str,
    generators: Iterable[Generator],
    distros: Sequence[DistributionData],
    default_code_owner: str,
    github_org: str,
) -> None:
    """Collect component metadata under folder and hand it to every generator."""
    components: dict[str, Metadata] = {}
    folders: list[str] = []
    all_codeowners: list[str] = []
    max_length = 0

    for dirpath, dirnames, filenames in os.walk(folder):
        dirnames.sort()
        if _METADATA_FILE not in filenames:
            continue
        path = os.path.normpath(os.path.join(dirpath, _METADATA_FILE))
        try:
            metadata = load_metadata(path)
        except (OSError, yaml.YAMLError, ValueError) as exc:
            raise ValueError(f"error reading {path}: {exc}") from exc
        status = metadata.status
        if status is None:
            continue
        current = os.path.dirname(path) or "."
        components[current] = metadata
        folders.append(current)

        if UNMAINTAINED_STATUS in status.stability:
            # Unmaintained components do not widen the component column.
            continue
        if status.codeowners is None:
            if not default_code_owner:
                raise ValueError(f'component "{current}" has no codeowners section')
            logger.info(
                'component "%s" has no codeowners section, using default codeowner: %s',
                current,
                default_code_owner,
            )
            status.codeowners = Codeowners()
        all_codeowners.extend(status.codeowners.active)
        max_length = max(max_length, len(current))

    if not default_code_owner.startswith("@"):
        default_code_owner = "@" + default_code_owner

    data = GithubData(
        root_folder=folder,
        folders=sorted(folders),
        codeowners=sorted(set(all_codeowners)),
        allowlist_file_path=allowlist_file_path,
        max_length=max_length,
        components=components,
        distributions=list(distros),
        default_code_owner=default_code_owner,
        github_org=github_org,
    )
    for generator in generators:
        generator.generate(data)


def get_distributions(folder: str) -> list[DistributionData]:
    """Read the distributions listed in folder/distributions.yaml."""
    with open(os.path.join(folder, "distributions.yaml"), "rb") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"cannot decode {type(raw).__name__} into distributions")
    return [DistributionData.from_dict(item) for item in raw]


def new_issue_templates_generator(trim_suffixes: str) -> IssueTemplatesGenerator:
    """Create an issue templates generator from a ", "-separated suffix list."""
    return IssueTemplatesGenerator(trim_suffixes=trim_suffixes.split(", "))


def new_codeowners_generator(skip_github_check: bool) -> CodeownersGenerator:
    """Create a code owners generator that looks members up on GitHub."""
    return CodeownersGenerator(skip_github=skip_github_check)


def new_distributions_generator() -> DistributionsGenerator:
    """Create a generator that writes distribution reports."""
    return DistributionsGenerator()


def _build_generators(
    names: Sequence[str], trim_suffixes: str, skip_github: bool
) -> list[Generator]:
    generators: list[Generator] = []
    for name in names:
        if name == "issue-templates":
            generators.append(new_issue_templates_generator(trim_suffixes))
        elif name == "codeowners":
            generators.append(new_codeowners_generator(skip_github))
        elif name == "distributions":
            generators.append(new_distributions_generator())
        else:
            raise _UnknownGeneratorError(f"Unknown generator: {name}")
    if not generators:
        generators = [
            new_issue_templates_generator(trim_suffixes),
            new_codeowners_generator(skip_github),
        ]
    return generators


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="githubgen",
        description="Generate GitHub files from component metadata.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-folder", "--folder", default=".", help="folder investigated for codeowners"
    )
    parser.add_argument(
        "-allowlist",
        "--allowlist",
        default="cmd/githubgen/allowlist.txt",
        help="path to a file containing an allowlist of members outside the "
        "defined Github organization",
    )
    parser.add_argument(
        "-skipgithub",
        "--skipgithub",
        action="store_true",
        help="skip checking if codeowners are part of the GitHub organization",
    )
    parser.add_argument(
        "-default-codeowner",
        "--default-codeowner",
        default="@open-telemetry/collector-contrib-approvers",
        help="GitHub user or team name that will be used as default codeowner",
    )
    parser.add_argument(
        "-trim-component-suffixes",
        "--trim-component-suffixes",
        default=_DEFAULT_TRIM_SUFFIXES,
        help="comma-separated list of suffixes trimmed from paths in issue templates",
    )
    parser.add_argument(
        "-github-org",
        "--github-org",
        default="open-telemetry",
        help="GitHub organization name to check if codeowners are org members",
    )
    parser.add_argument(
        "generators",
        nargs="*",
        help="generators to run: issue-templates, codeowners, distributions",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        generators = _build_generators(
            args.generators, args.trim_component_suffixes, args.skipgithub
        )
    except _UnknownGeneratorError as exc:
        print(exc, file=sys.stderr)
        return 2
    try:
        distributions = get_distributions(args.folder)
        run(
            args.folder,
            args.allowlist,
            generators,
            distributions,
            args.default_codeowner,
            args.github_org,
        )
    except (
        OSError,
        ValueError,
        yaml.YAMLError,
        CodeownersError,
        requests.RequestException,
    ) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())