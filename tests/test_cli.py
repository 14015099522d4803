"""Tests for photofolio CLI commands."""

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from photofolio.cli.main import cli

POOL = {
    "images": [
        {
            "filename": "a.jpg",
            "sourcePath": "01 Events/a.jpg",
            "dateTaken": "2024-01-01T09:00:00",
            "exif": {"make": "Canon", "iso": 100, "raw": {"Rating": "5"}},
        },
        {
            "filename": "b.jpg",
            "sourcePath": "01 Events/b.jpg",
            "dateTaken": "2024-03-01T09:00:00",
            "exif": {"make": "Sony", "iso": 3200},
        },
        {
            "filename": "c.jpg",
            "sourcePath": "Travel/c.jpg",
            "dateTaken": "2024-02-01T09:00:00",
            "exif": {"make": "Canon", "iso": 1600, "raw": {"Rating": "2"}},
        },
    ]
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def manifest(tmp_path) -> Path:
    path = tmp_path / "manifest.yaml"
    path.write_text(yaml.dump(POOL))
    return path


@pytest.fixture
def in_tmp_dir(tmp_path, monkeypatch):
    """Run commands from an empty directory with no PHOTOFOLIO_CONFIG."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PHOTOFOLIO_CONFIG", raising=False)
    return tmp_path


def _gallery_source(tmp_path: Path) -> Path:
    source = tmp_path / "source"
    (source / "01 Events").mkdir(parents=True)
    (source / "Travel").mkdir()
    (source / "Canon").mkdir()
    (source / "Canon" / "_index.md").write_text(
        "---\ntitle: Canon Only\nfilter: \"exif.make == 'Canon'\"\n---\n"
    )
    return source


class TestFilterValidate:
    def test_valid(self, runner):
        result = runner.invoke(cli, ["filter", "validate", "exif.iso >= 800 | limit 3"])

        assert result.exit_code == 0
        assert "Filter is valid." in result.output

    def test_invalid_prints_detail(self, runner):
        result = runner.invoke(cli, ["filter", "validate", "exif.make == xyz"])

        assert result.exit_code == 1
        assert "Filter parse error at position 13: Unknown property 'xyz'" in result.output
        assert "^^^" in result.output


class TestFilterRun:
    def test_run(self, runner, manifest, in_tmp_dir):
        result = runner.invoke(
            cli, ["filter", "run", "exif.make == 'Canon'", "--manifest", str(manifest)]
        )

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[:2] == ["Travel/c.jpg", "01 Events/a.jpg"]
        assert "2 of 3 image(s) matched" in result.output

    def test_run_with_sort_override(self, runner, manifest, in_tmp_dir):
        result = runner.invoke(
            cli,
            ["filter", "run", "all", "--manifest", str(manifest), "--sort", "exif.iso:asc"],
        )

        assert result.exit_code == 0
        assert result.output.splitlines()[:3] == [
            "01 Events/a.jpg",
            "Travel/c.jpg",
            "01 Events/b.jpg",
        ]

    def test_run_uses_config(self, runner, manifest, in_tmp_dir):
        config = in_tmp_dir / "project.yaml"
        config.write_text(
            yaml.dump({"sorting": {"images": {"field": "filename", "direction": "asc"}}})
        )

        result = runner.invoke(
            cli, ["filter", "run", "all", "--manifest", str(manifest), "--config", str(config)]
        )

        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "01 Events/a.jpg"

    def test_evaluation_error(self, runner, manifest, in_tmp_dir):
        result = runner.invoke(
            cli, ["filter", "run", "year(exif.make) == 2024", "--manifest", str(manifest)]
        )

        assert result.exit_code == 1
        assert "Filter evaluation error" in result.output

    def test_missing_manifest(self, runner, in_tmp_dir):
        result = runner.invoke(cli, ["filter", "run", "all", "--manifest", "nope.yaml"])

        assert result.exit_code != 0


class TestFilterFunctions:
    def test_lists_functions(self, runner):
        result = runner.invoke(cli, ["filter", "functions"])

        assert result.exit_code == 0
        assert "year(date: datetime) -> number" in result.output
        assert "starts_with" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["filter", "functions", "--json"])

        assert result.exit_code == 0
        assert "contains" in json.loads(result.output)["functions"]


class TestGalleryBuild:
    def test_build(self, runner, manifest, tmp_path, in_tmp_dir):
        result = runner.invoke(
            cli,
            [
                "gallery",
                "build",
                str(_gallery_source(tmp_path)),
                "--manifest",
                str(manifest),
                "--show-images",
            ],
        )

        assert result.exit_code == 0
        assert "Events (01 Events, folder): 2 image(s)" in result.output
        assert "Canon Only (Canon, filter): 2 image(s)" in result.output
        assert "Built 3 gallery(ies)." in result.output

    def test_failing_gallery_continues(self, runner, manifest, tmp_path, in_tmp_dir):
        source = _gallery_source(tmp_path)
        (source / "Broken").mkdir()
        (source / "Broken" / "_index.md").write_text("---\nfilter: bogus == 1\n---\n")

        result = runner.invoke(
            cli, ["gallery", "build", str(source), "--manifest", str(manifest)]
        )

        assert result.exit_code == 1
        assert "Unknown property 'bogus'" in result.output
        assert "Canon Only (Canon, filter): 2 image(s)" in result.output
        assert "1 of 4 gallery(ies) failed" in result.output


class TestConfigCommands:
    def test_validate_valid(self, runner, in_tmp_dir):
        (in_tmp_dir / "project.yaml").write_text(
            yaml.dump({"sorting": {"galleries": "asc"}})
        )

        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 0
        assert "is valid" in result.output

    def test_validate_invalid(self, runner, in_tmp_dir):
        config = in_tmp_dir / "project.yaml"
        config.write_text(yaml.dump({"sorting": {"images": {"direction": "up"}}}))

        result = runner.invoke(cli, ["config", "validate", "--config", str(config)])

        assert result.exit_code == 1
        assert "sorting/images/direction" in result.output

    def test_show_defaults(self, runner, in_tmp_dir):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert "dateTaken desc" in result.output
        assert "(defaults)" in result.output


class TestLogLevel:
    def test_log_level_option(self, runner):
        result = runner.invoke(cli, ["--log-level", "debug", "filter", "validate", "all"])

        assert result.exit_code == 0

    def test_invalid_log_level(self, runner):
        result = runner.invoke(cli, ["--log-level", "loud", "filter", "validate", "all"])

        assert result.exit_code == 2
