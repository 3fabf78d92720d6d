import os

import pytest

from repotools.githubgen.codeowners import (
    CodeownersError,
    CodeownersGenerator,
    get_github_members,
)
from repotools.githubgen.constants import (
    ALLOWLIST_HEADER,
    CODEOWNERS_HEADER,
    DEPRECATED_LIST_HEADER,
    DISTRIBUTION_CODEOWNERS_HEADER,
    UNMAINTAINED_HEADER,
    UNMAINTAINED_LIST_HEADER,
)
from repotools.githubgen.datatype import (
    Codeowners,
    DistributionData,
    GithubData,
    Metadata,
    Status,
)


def mock_github_members(skip_github, github_org):
    return {"user1", "user2", "user3"}


def make_generator(skip_github):
    return CodeownersGenerator(skip_github=skip_github, get_github_members=mock_github_members)


def test_member_also_on_allowlist():
    data = GithubData(codeowners=["user1", "user2", "user3"])
    with pytest.raises(CodeownersError, match="codeowners members duplicate in allowlist: user1"):
        make_generator(True).verify_code_owner_org_membership(b"user1", data)


def test_not_member_and_not_in_allowlist():
    data = GithubData(codeowners=["user4"])
    with pytest.raises(CodeownersError, match="codeowners are not members: user4"):
        make_generator(False).verify_code_owner_org_membership(b"", data)


def test_user_in_allowlist_but_not_codeowner():
    data = GithubData(codeowners=["user4"])
    with pytest.raises(CodeownersError, match="unused members in allowlist: user5"):
        make_generator(True).verify_code_owner_org_membership(b"user4\nuser5", data)


def test_missing_members_sorted_in_message():
    data = GithubData(codeowners=["zed", "amy"])
    with pytest.raises(CodeownersError) as info:
        make_generator(False).verify_code_owner_org_membership("", data)
    assert str(info.value) == "codeowners are not members: amy, zed"


def test_longest_name_spaces():
    long_name = "name-looooong"
    data = GithubData(
        distributions=[DistributionData(name="name-short"), DistributionData(name=long_name)]
    )
    assert CodeownersGenerator().longest_name_spaces(data) == len(long_name)


def test_longest_name_spaces_without_distributions():
    assert CodeownersGenerator().longest_name_spaces(GithubData()) == 0


def test_get_github_members_skipped():
    assert get_github_members(True, "some-org") == set()


def test_get_github_members_requires_token(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    with pytest.raises(CodeownersError, match="GITHUB_TOKEN"):
        get_github_members(False, "some-org")


def _repo_data(allowlist_path, codeowners):
    components = {
        "exporter/old": Metadata(
            type="old", status=Status(stability={"unmaintained": ["traces"]})
        ),
        "processor/dep": Metadata(
            type="dep", status=Status(stability={"deprecated": ["logs"]})
        ),
        "receiver/areceiver": Metadata(
            type="a",
            status=Status(
                stability={"beta": ["traces"]},
                codeowners=Codeowners(active=["user1"]),
            ),
        ),
    }
    return GithubData(
        root_folder=".",
        folders=sorted(components),
        codeowners=codeowners,
        allowlist_file_path=allowlist_path,
        max_length=len("receiver/areceiver"),
        components=components,
        distributions=[DistributionData(name="core", maintainers=["alice"])],
        default_code_owner="@org/approvers",
        github_org="org",
    )


def test_generate_writes_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".github").mkdir()
    (tmp_path / "allowlist.txt").write_text("user4\n")
    data = _repo_data("allowlist.txt", ["org/team", "user1", "user4"])

    generator = make_generator(True)
    generator.generate(data)

    assert generator.longest_name_spaces(data) == len("core")
    codeowners = (tmp_path / ".github" / "CODEOWNERS").read_text()
    assert codeowners == (
        CODEOWNERS_HEADER % "@org/approvers"
        + "\n"
        + "receiver/areceiver/ @org/approvers @user1\n"
        + DISTRIBUTION_CODEOWNERS_HEADER
        + "\nreports/distributions/core.yaml @org/approvers @alice"
        + UNMAINTAINED_HEADER
        + "exporter/old/" + " " * 6 + " @org/approvers\n"
    )
    allowlist = (tmp_path / ".github" / "ALLOWLIST").read_text()
    assert allowlist == (
        ALLOWLIST_HEADER
        + DEPRECATED_LIST_HEADER
        + "processor/dep/\n"
        + UNMAINTAINED_LIST_HEADER
        + "exporter/old/\n"
    )


def test_generate_stops_on_failed_verification(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".github").mkdir()
    (tmp_path / "allowlist.txt").write_text("")
    data = _repo_data("allowlist.txt", ["user9"])

    with pytest.raises(CodeownersError, match="codeowners are not members"):
        make_generator(False).generate(data)
    assert not os.path.exists(tmp_path / ".github" / "CODEOWNERS")