import pytest
import yaml

from repotools.githubgen.datatype import DistributionData, GithubData, Metadata, Status
from repotools.githubgen.distributions import (
    DistOutput,
    DistributionsGenerator,
    write_distribution,
)


def _collecting_generator():
    calls = []

    def mock_write(root, name, output):
        calls.append((root, name, output))

    return DistributionsGenerator(write_distribution=mock_write), calls


def test_generate_basic():
    generator, calls = _collecting_generator()
    data = GithubData(
        root_folder="some-folder",
        components={
            "some-component": Metadata(
                type="otlp",
                parent="",
                status=Status(distributions=["some-distro"], class_="exporter"),
            )
        },
        distributions=[DistributionData(name="some-distro")],
    )
    generator.generate(data)

    assert [(root, name) for root, name, _ in calls] == [("some-folder", "some-distro")]
    assert calls[0][2].to_dict()["name"] == "some-distro"
    assert calls[0][2].to_dict()["components"] == {"exporter": ["otlp"]}


def test_generate_sorts_and_filters():
    generator, calls = _collecting_generator()
    data = GithubData(
        components={
            "a": Metadata(type="zipkin", status=Status(distributions=["core"], class_="receiver")),
            "b": Metadata(type="otlp", status=Status(distributions=["core", "contrib"], class_="receiver")),
            "c": Metadata(type="kafka", status=Status(distributions=["contrib"], class_="exporter")),
        },
        distributions=[
            DistributionData(name="core", url="core-url", maintainers=["alice"]),
            DistributionData(name="contrib"),
        ],
    )
    generator.generate(data)

    assert [name for _, name, _ in calls] == ["core", "contrib"]
    assert calls[0][2].to_dict()["components"] == {"receiver": ["otlp", "zipkin"]}
    assert calls[0][2].to_dict()["maintainers"] == ["alice"]
    assert calls[0][2].to_dict()["url"] == "core-url"
    assert calls[1][2].to_dict()["components"] == {
        "exporter": ["kafka"],
        "receiver": ["otlp"],
    }


def test_generate_writes_files(tmp_path):
    (tmp_path / "reports" / "distributions").mkdir(parents=True)
    data = GithubData(
        root_folder=str(tmp_path),
        components={
            "x": Metadata(type="otlp", status=Status(distributions=["core"], class_="receiver")),
        },
        distributions=[DistributionData(name="core", url="core-url", maintainers=["alice"])],
    )
    DistributionsGenerator(write_distribution=write_distribution).generate(data)

    loaded = yaml.safe_load((tmp_path / "reports" / "distributions" / "core.yaml").read_text())
    assert loaded["name"] == "core"
    assert loaded["url"] == "core-url"
    assert loaded["maintainers"] == ["alice"]
    assert loaded["components"] == {"receiver": ["otlp"]}


def test_write_distribution_round_trip(tmp_path):
    (tmp_path / "reports" / "distributions").mkdir(parents=True)
    output = DistOutput(
        name="core",
        url="some-url",
        maintainers=[],
        components={"receiver": ["otlp"], "exporter": ["debug", "otlp"]},
    )
    write_distribution(str(tmp_path), "core", output)

    written = (tmp_path / "reports" / "distributions" / "core.yaml").read_text()
    assert yaml.safe_load(written) == output.to_dict()
    assert written.startswith("name: core\nurl: some-url\nmaintainers: []\n")


def test_write_distribution_missing_folder(tmp_path):
    with pytest.raises(FileNotFoundError):
        write_distribution(str(tmp_path), "core", DistOutput(name="core"))