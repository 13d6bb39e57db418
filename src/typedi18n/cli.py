import logging
import os
import pathlib
import sys
from typing import Any

import yaml

import click
from typedi18n import emitter, parser
from typedi18n.classes import ProcessResult
from typedi18n.errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_LOGGING = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}


def load_config(config_folder: str) -> dict[str, Any]:
    config_file_path = os.path.abspath(f"{config_folder}/config.yml")

    config: dict[str, Any] = {}
    try:
        with open(config_file_path, "r") as file:
            config = yaml.safe_load(file) or {}
    except FileNotFoundError:
        logger.debug(f"No config file at {config_file_path}, using defaults")
    except yaml.YAMLError as exc:
        click.echo(f"Invalid config file {config_file_path}: {exc}", err=True)
        sys.exit(1)

    config["logging"] = {**DEFAULT_LOGGING, **(config.get("logging") or {})}
    return config


def setup_logging(config_folder: str, verbose: bool = False) -> None:
    settings = load_config(config_folder)["logging"]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.getLevelName(settings["level"]),
        format=settings["format"],
        datefmt=settings["datefmt"],
        force=True,
    )


def report(result: ProcessResult) -> None:
    for errors in result.errors.values():
        for error in errors:
            click.echo(f"  {error}", err=True)
    for messages in result.report.values():
        for message in messages:
            click.echo(f"  {message}", err=True)


config_option = click.option(
    "--config-folder", default="config", help="Configuration folder path."
)
input_option = click.option(
    "--input",
    "input_folder",
    default="translations",
    type=click.Path(exists=True, file_okay=False),
    help="Folder containing one <locale>.toml per locale.",
)
base_locale_option = click.option(
    "--base-locale", default=None, help="Locale all others are checked against."
)
workers_option = click.option(
    "--workers", default=1, show_default=True, type=click.IntRange(min=1),
    help="Number of locales loaded in parallel.",
)


@click.group()
@click.version_option(package_name="typed-i18n")
def cli() -> None:
    pass


@cli.command("check")
@config_option
@input_option
@base_locale_option
@workers_option
@click.option("--report", "report_path", default=None, help="Write a markdown report to this file.")
def check(
    config_folder: str,
    input_folder: str,
    base_locale: str | None,
    workers: int,
    report_path: str | None,
) -> None:
    setup_logging(config_folder)

    result = parser.process_directory(input_folder, base_locale, workers)
    if not result.results:
        click.echo(f"No TOML files found in {input_folder}", err=True)
        sys.exit(1)

    if report_path:
        pathlib.Path(report_path).write_text(parser.render_markdown(result), "utf-8")
        logger.info(f"Wrote report to {report_path}")

    if not result.ok:
        report(result)
        sys.exit(1)
    click.echo(f"All {len(result.results)} locales match {result.base_locale}")


@cli.command("generate")
@config_option
@input_option
@base_locale_option
@workers_option
@click.option("--output", "output_folder", default="i18n", help="Output folder for generated files.")
@click.option(
    "--package", "package_name", default=None,
    help="Package name for generated files (defaults to output folder name).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
def generate(
    config_folder: str,
    input_folder: str,
    base_locale: str | None,
    workers: int,
    output_folder: str,
    package_name: str | None,
    verbose: bool,
) -> None:
    setup_logging(config_folder, verbose)

    output_path = pathlib.Path(output_folder)
    package_name = package_name or output_path.resolve().name
    try:
        emitter.validate_package_name(package_name)
    except GenerationError as ex:
        click.echo(str(ex), err=True)
        sys.exit(1)

    result = parser.process_directory(input_folder, base_locale, workers)
    if not result.results:
        click.echo(f"No TOML files found in {input_folder}", err=True)
        sys.exit(1)
    if not result.ok:
        click.echo("Generation prevented:", err=True)
        report(result)
        sys.exit(1)

    files = emitter.render_package(result, package_name)
    output_path.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        target = output_path / filename
        target.write_text(content, "utf-8")
        logger.debug(f"Wrote {len(content)} bytes to {target}")

    click.echo(
        f"Generated translation files for locales: {', '.join(sorted(result.catalogs))}"
    )
