"""Generate per-distribution component reports."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable

import yaml

from repotools.githubgen.datatype import GithubData


class _IndentDumper(yaml.SafeDumper):
    """Dumper that indents sequences nested in mappings."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


@dataclass
class DistOutput:
    """The report written for one distribution."""

    name: str = ""
    url: str = ""
    maintainers: list[str] = field(default_factory=list)
    components: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "maintainers": list(self.maintainers or []),
            "components": {k: list(self.components[k]) for k in sorted(self.components)},
        }


def write_distribution(root_folder: str, dist_name: str, dist_data: DistOutput) -> None:
    """Write dist_data as YAML to reports/distributions/<dist_name>.yaml."""
    text = yaml.dump(
        dist_data.to_dict(),
        Dumper=_IndentDumper,
        indent=4,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    path = os.path.join(root_folder, "reports", "distributions", f"{dist_name}.yaml")
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with open(fd, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)


@dataclass
class DistributionsGenerator:
    """Writes one report per distribution listing its components by class."""

    write_distribution: Callable[[str, str, DistOutput], None] = write_distribution

    def generate(self, data: GithubData) -> None:
        for dist in data.distributions:
            components: dict[str, list[str]] = {}
            for metadata in data.components.values():
                status = metadata.status
                if status is not None and dist.name in status.distributions:
                    components.setdefault(status.class_, []).append(metadata.type)
            for names in components.values():
                names.sort()
            output = DistOutput(
                name=dist.name,
                url=dist.url,
                maintainers=list(dist.maintainers),
                components=components,
            )
            self.write_distribution(data.root_folder, dist.name, output)