"""Tests for the mapperbridge CLI commands."""

import json

import click
import pytest
from click.testing import CliRunner

from mapperbridge import __version__
from mapperbridge.cli import cli
from mapperbridge.utils.error_handler import handle_exceptions

XML_RELATIVE = "src/main/resources/mapper/UserMapper.xml"
JAVA_RELATIVE = "src/main/java/com/example/mapper/UserMapper.java"
SERVICE_RELATIVE = "src/main/java/com/example/service/UserService.java"


@pytest.fixture
def runner():
    return CliRunner()


class TestCliBasics:
    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("scan", "find-statement", "find-method", "usages", "links", "watch"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestScan:
    def test_scan_json(self, runner, sample_project):
        result = runner.invoke(cli, ["scan", "--root", str(sample_project), "--json"])

        assert result.exit_code == 0, result.output
        rows = json.loads(result.output)
        assert rows == [{
            "namespace": "com.example.mapper.UserMapper",
            "xml": XML_RELATIVE,
            "java": JAVA_RELATIVE,
            "statements": 5,
            "methods": 4,
            "unmatched_methods": ["findByName"],
        }]

    def test_scan_table(self, runner, sample_project):
        result = runner.invoke(cli, ["scan", "--root", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "1 namespaces indexed" in result.output


class TestLookup:
    def test_find_statement(self, runner, sample_project):
        result = runner.invoke(
            cli, ["find-statement", "com.example.mapper.UserMapper", "findById", "--root", str(sample_project)]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"{XML_RELATIVE}:13:3"

    def test_find_method(self, runner, sample_project):
        result = runner.invoke(
            cli, ["find-method", "com.example.mapper.UserMapper", "findAll", "--root", str(sample_project)]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"{JAVA_RELATIVE}:12:16"

    def test_missing_statement_exits_1(self, runner, sample_project):
        result = runner.invoke(
            cli, ["find-statement", "com.example.mapper.UserMapper", "nope", "--root", str(sample_project)]
        )

        assert result.exit_code == 1
        assert "Statement not found" in result.output


class TestUsagesAndLinks:
    def test_usages_json(self, runner, sample_project):
        result = runner.invoke(
            cli, ["usages", str(sample_project / SERVICE_RELATIVE), "--root", str(sample_project), "--json"]
        )

        assert result.exit_code == 0, result.output
        usages = json.loads(result.output)
        assert [(u["field"], u["method"]) for u in usages] == [
            ("userMapper", "findById"),
            ("archiveMapper", "insert"),
        ]
        assert usages[0]["statement"]["line"] == 12

    def test_usages_disabled_by_config(self, runner, sample_project):
        state_dir = sample_project / ".mapperbridge"
        state_dir.mkdir()
        (state_dir / "config.json").write_text(
            json.dumps({"features": {"enable_usage_links": False}}), encoding="utf-8"
        )

        result = runner.invoke(cli, ["usages", str(sample_project / SERVICE_RELATIVE), "--root", str(sample_project)])

        assert result.exit_code == 0
        assert "disabled" in result.output

    def test_links_for_java_mapper(self, runner, sample_project):
        result = runner.invoke(cli, ["links", str(sample_project / JAVA_RELATIVE), "--root", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "3 links" in result.output

    def test_links_for_xml_mapper(self, runner, sample_project):
        result = runner.invoke(cli, ["links", str(sample_project / XML_RELATIVE), "--root", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "3 links" in result.output

    def test_links_rejects_other_files(self, runner, sample_project):
        other = sample_project / "notes.txt"
        other.write_text("hello", encoding="utf-8")

        result = runner.invoke(cli, ["links", str(other), "--root", str(sample_project)])

        assert result.exit_code == 2


class TestErrorHandling:
    def test_unexpected_error_logged_under_root(self, runner, tmp_path, monkeypatch):
        project = tmp_path / "project"
        project.mkdir()
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        @click.command()
        @click.option("--root", default=".")
        @handle_exceptions
        def explode(root):
            raise RuntimeError("index exploded")

        result = runner.invoke(explode, ["--root", str(project)])

        assert result.exit_code == 1
        assert "RuntimeError: index exploded" in result.output
        error_log = project / ".mapperbridge" / "error.log"
        assert "index exploded" in error_log.read_text(encoding="utf-8")
        assert str(error_log) in result.output
        assert not (elsewhere / ".mapperbridge").exists()

    def test_command_without_root_logs_to_cwd(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        @click.command()
        @handle_exceptions
        def explode():
            raise RuntimeError("index exploded")

        result = runner.invoke(explode, [])

        assert result.exit_code == 1
        error_log = tmp_path / ".mapperbridge" / "error.log"
        assert "index exploded" in error_log.read_text(encoding="utf-8")

    def test_click_errors_pass_through(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        @click.command()
        @handle_exceptions
        def reject():
            raise click.UsageError("bad usage")

        result = runner.invoke(reject, [])

        assert result.exit_code == 2
        assert not (tmp_path / ".mapperbridge" / "error.log").exists()
