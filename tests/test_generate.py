import io
import os

import pytest
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
    Update,
)
from repotools.dbotconf.generate import HEADER, build_config, generate
from repotools.dbotconf.mods import RepoScan
from repotools.repo import ModFile


def _new_update(eco, directory, labels):
    return Update(eco, directory, list(labels), WEEKLY_SCHEDULE)


def _root(tmp_path):
    return str(tmp_path).replace(os.sep, "/")


def test_build_config(tmp_path):
    root = _root(tmp_path)
    mods = [
        ModFile(name=f"{root}/go.mod"),
        ModFile(name=f"{root}/a/go.mod"),
        ModFile(name=f"{root}/b/go.mod"),
    ]
    docker_files = [f"{root}/", f"{root}/a/", f"{root}/b/"]
    pip_files = [f"{root}/requirements.txt"]

    got = build_config(root, mods, docker_files, pip_files)
    assert got == DependabotConfig(
        version=VERSION2,
        updates=[
            _new_update(GH_PKG_ECO, "/", ACTION_LABELS),
            _new_update(DOCKER_PKG_ECO, "/", DOCKER_LABELS),
            _new_update(DOCKER_PKG_ECO, "/a", DOCKER_LABELS),
            _new_update(DOCKER_PKG_ECO, "/b", DOCKER_LABELS),
            _new_update(GOMOD_PKG_ECO, "/", GO_LABELS),
            _new_update(GOMOD_PKG_ECO, "/a", GO_LABELS),
            _new_update(GOMOD_PKG_ECO, "/b", GO_LABELS),
            _new_update(PIP_PKG_ECO, "/", PIP_LABELS),
        ],
    )


def _empty_scanner(root):
    return lambda ignore: RepoScan(root=root)


def test_generate_header(tmp_path):
    buf = io.StringIO()
    generate(None, output=buf, scanner=_empty_scanner(_root(tmp_path)))
    assert buf.getvalue().startswith(HEADER)


def test_generate_yaml_parses(tmp_path):
    root = _root(tmp_path)
    scan = RepoScan(root=root, mods=[ModFile(name=f"{root}/a/go.mod")])
    buf = io.StringIO()
    generate(None, output=buf, scanner=lambda ignore: scan)
    parsed = DependabotConfig.from_dict(yaml.safe_load(buf.getvalue()))
    assert parsed == build_config(root, scan.mods, [], [])


def test_generate_indents_sequences(tmp_path):
    buf = io.StringIO()
    generate(None, output=buf, scanner=_empty_scanner(_root(tmp_path)))
    assert "updates:\n  - package-ecosystem: github-actions\n" in buf.getvalue()


def test_generate_real_repo(tmp_path, monkeypatch):
    (tmp_path / ".git").mkdir()
    (tmp_path / "go.mod").write_text("module example.test/m\n")
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "Dockerfile").write_text("FROM scratch\n")
    monkeypatch.chdir(tmp_path)
    buf = io.StringIO()
    generate([], output=buf)
    parsed = DependabotConfig.from_dict(yaml.safe_load(buf.getvalue()))
    assert [(u.package_ecosystem, u.directory) for u in parsed.updates] == [
        (GH_PKG_ECO, "/"),
        (DOCKER_PKG_ECO, "/a"),
        (GOMOD_PKG_ECO, "/"),
    ]


def test_generate_scanner_error():
    def scanner(ignore):
        raise OSError("boom")

    with pytest.raises(OSError, match="boom"):
        generate(None, output=io.StringIO(), scanner=scanner)


def test_generate_build_config_error(tmp_path):
    def builder(*args):
        raise ValueError("bad config")

    buf = io.StringIO()
    with pytest.raises(ValueError, match="bad config"):
        generate(None, output=buf, scanner=_empty_scanner(_root(tmp_path)), builder=builder)
    assert buf.getvalue() == ""