"""Tests for the command line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from typedi18n.cli import cli, load_config

EN = 'greet = "Hi {name}"\n\n[menu]\nfamily = "{count} {{pet|pets}}"\n'
SV = 'greet = "Hej {name}"\n\n[menu]\nfamily = "{count} {{husdjur|husdjur}}"\n'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def translations(tmp_path):
    folder = tmp_path / "translations"
    folder.mkdir()
    (folder / "en.toml").write_text(EN, "utf-8")
    (folder / "sv.toml").write_text(SV, "utf-8")
    return folder


class TestCheck:
    def test_clean(self, runner, translations):
        result = runner.invoke(cli, ["check", "--input", str(translations)])
        assert result.exit_code == 0, result.output
        assert "All 2 locales match en" in result.output

    def test_drift(self, runner, translations, tmp_path):
        (translations / "fr.toml").write_text('greet = "Salut"\n', "utf-8")
        report = tmp_path / "report.md"
        result = runner.invoke(
            cli, ["check", "--input", str(translations), "--report", str(report)]
        )
        assert result.exit_code == 1
        assert "fr has the wrong signature for 'greet'" in result.output
        assert "fr is missing section [menu]" in result.output
        assert report.read_text("utf-8").startswith("## fr\n")

    def test_syntax_error(self, runner, translations):
        (translations / "sv.toml").write_text('greet = "Hej {name"\n', "utf-8")
        result = runner.invoke(cli, ["check", "--input", str(translations)])
        assert result.exit_code == 1
        assert "sv: syntax error in 'greet'" in result.output

    def test_base_locale_option(self, runner, translations):
        result = runner.invoke(
            cli, ["check", "--input", str(translations), "--base-locale", "sv", "--workers", "2"]
        )
        assert result.exit_code == 0, result.output
        assert "match sv" in result.output

    def test_no_files(self, runner, tmp_path):
        result = runner.invoke(cli, ["check", "--input", str(tmp_path)])
        assert result.exit_code == 1
        assert "No TOML files found" in result.output


class TestGenerate:
    def test_generate(self, runner, translations, tmp_path):
        output = tmp_path / "out" / "i18n"
        result = runner.invoke(
            cli, ["generate", "--input", str(translations), "--output", str(output)]
        )
        assert result.exit_code == 0, result.output
        assert "Generated translation files for locales: en, sv" in result.output
        assert sorted(p.name for p in output.iterdir()) == [
            "__init__.py",
            "base.py",
            "locale_en.py",
            "locale_sv.py",
            "translator.py",
        ]
        assert "def family(self, count: int) -> str:" in (output / "locale_sv.py").read_text("utf-8")

    def test_invalid_package_name(self, runner, translations, tmp_path):
        result = runner.invoke(
            cli,
            ["generate", "--input", str(translations), "--output", str(tmp_path / "my-i18n")],
        )
        assert result.exit_code == 1
        assert "Invalid package name: my-i18n" in result.output
        assert not (tmp_path / "my-i18n").exists()

    def test_prevented(self, runner, translations, tmp_path):
        (translations / "sv.toml").write_text('greet = "Hej"\n', "utf-8")
        output = tmp_path / "i18n"
        result = runner.invoke(
            cli, ["generate", "--input", str(translations), "--output", str(output)]
        )
        assert result.exit_code == 1
        assert "Generation prevented" in result.output
        assert not output.exists()


class TestConfig:
    def test_defaults_without_file(self, tmp_path):
        config = load_config(str(tmp_path))
        assert config["logging"]["level"] == "INFO"

    def test_overrides(self, tmp_path):
        Path(tmp_path, "config.yml").write_text("logging:\n  level: DEBUG\n", "utf-8")
        config = load_config(str(tmp_path))
        assert config["logging"]["level"] == "DEBUG"
        assert "datefmt" in config["logging"]

    def test_malformed(self, tmp_path):
        Path(tmp_path, "config.yml").write_text("logging: [unclosed\n", "utf-8")
        with pytest.raises(SystemExit):
            load_config(str(tmp_path))
