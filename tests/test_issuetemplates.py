import pytest

from repotools.githubgen.constants import END_COMPONENT_LIST, START_COMPONENT_LIST
from repotools.githubgen.datatype import GithubData
from repotools.githubgen.issuetemplates import IssueTemplatesGenerator

SUFFIXES = ["receiver", "exporter", "extension", "processor", "connector", "internal"]


@pytest.mark.parametrize(
    "folder, want",
    [
        ("internal/coreinternal", "internal/core"),
        (
            "processor/resourcedetectionprocessor/internal/aws/ec2",
            "processor/resourcedetection/internal/aws/ec2",
        ),
        (
            "receiver/hostmetricsreceiver/internal/scraper/loadscraper",
            "receiver/hostmetrics/internal/scraper/loadscraper",
        ),
        ("receiver/apachesparkreceiver", "receiver/apachespark"),
        ("testbed", "testbed"),
    ],
)
def test_folder_to_slug(folder, want):
    assert IssueTemplatesGenerator(trim_suffixes=SUFFIXES).folder_to_slug(folder) == want


def test_folder_to_slug_single_matching_level():
    with pytest.raises(ValueError):
        IssueTemplatesGenerator(trim_suffixes=SUFFIXES).folder_to_slug("receiver")


def test_generate_replaces_component_list(tmp_path):
    templates = tmp_path / ".github" / "ISSUE_TEMPLATE"
    templates.mkdir(parents=True)
    original = (
        "name: Bug\nbody:\n  - options:\n      "
        + START_COMPONENT_LIST
        + "\n      - old\n      "
        + END_COMPONENT_LIST
        + "\nend\n"
    )
    (templates / "bug.yaml").write_text(original)
    untouched = "name: Other\n"
    (templates / "other.yaml").write_text(untouched)

    root = str(tmp_path)
    data = GithubData(
        root_folder=root,
        folders=[f"{root}/receiver/barreceiver", f"{root}/exporter/fooexporter"],
    )
    generator = IssueTemplatesGenerator(trim_suffixes=SUFFIXES)
    generator.generate(data)

    slugs = sorted(generator.folder_to_slug(f.removeprefix(root + "/")) for f in data.folders)
    assert slugs == ["exporter/foo", "receiver/bar"]
    assert (templates / "bug.yaml").read_text() == (
        "name: Bug\nbody:\n  - options:\n      "
        + START_COMPONENT_LIST
        + "\n      - exporter/foo\n      - receiver/bar\n      "
        + END_COMPONENT_LIST
        + "\nend\n"
    )
    assert (templates / "other.yaml").read_text() == untouched


def test_generate_without_template_folder(tmp_path):
    data = GithubData(root_folder=str(tmp_path), folders=[])
    with pytest.raises(FileNotFoundError):
        IssueTemplatesGenerator(trim_suffixes=SUFFIXES).generate(data)