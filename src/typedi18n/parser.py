import logging
import pathlib
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Mapping

from typedi18n.classes import LoadResult, ProcessResult
from typedi18n.loader import load_source
from typedi18n.validator import validate

logger = logging.getLogger(__name__)

LOCALE_PATTERN = re.compile(r"^[a-z]{2}(_[a-z]{2})?$")

DEFAULT_BASE_LOCALE = "en"


def discover_sources(path: str | pathlib.Path) -> dict[str, str]:
    sources = {}
    for file in sorted(pathlib.Path(path).glob("*.toml")):
        if not file.is_file():
            continue
        # File systems may not be case sensitive, locale names are
        locale = file.stem.lower()
        if not LOCALE_PATTERN.match(locale):
            logger.warning(
                f"Ignoring non-locale named file {file.name} "
                f"(got locale '{locale}', only accepting 'xx' or 'xx_xx')"
            )
            continue
        logger.debug(f"Reading {file}")
        sources[locale] = file.read_text("utf-8")
    return sources


def select_base_locale(locales: Iterable[str], requested: str | None = None) -> str:
    if requested:
        return requested.lower()
    locales = sorted(locales)
    if DEFAULT_BASE_LOCALE in locales or not locales:
        return DEFAULT_BASE_LOCALE
    return locales[0]


def process(
    sources: Mapping[str, str], base_locale: str | None = None, max_workers: int = 1
) -> ProcessResult:
    base = select_base_locale(sources, base_locale)
    logger.info(f"Loading {len(sources)} locales, base locale is {base}")

    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            loaded = list(executor.map(load_source, sources.keys(), sources.values()))
    else:
        loaded = [load_source(locale, text) for locale, text in sources.items()]
    results: dict[str, LoadResult] = {res.locale: res for res in loaded}

    result = ProcessResult(base, results)
    if result.errors:
        # Signatures of a broken catalog are meaningless, so don't compare
        for locale, errors in result.errors.items():
            logger.error(f"Found {len(errors)} errors in {locale}")
        return result

    result.report = validate(result.catalogs, base)
    for locale in sorted(results):
        if locale == base:
            continue
        if locale in result.report:
            logger.error(f"Found {len(result.report[locale])} issues for {locale}")
        else:
            logger.info(f"No issues found for {locale}")
    return result


def process_directory(
    path: str | pathlib.Path, base_locale: str | None = None, max_workers: int = 1
) -> ProcessResult:
    return process(discover_sources(path), base_locale, max_workers)


def render_markdown(result: ProcessResult) -> str:
    """Markdown summary with one table of issues per locale."""
    problems: dict[str, list[tuple[str, str]]] = {}
    for locale, errors in result.errors.items():
        problems[locale] = [(_key_label(err.section, err.key), err.message) for err in errors]
    for locale, messages in result.report.items():
        problems.setdefault(locale, []).extend(("", message) for message in messages)

    if not problems:
        return "No issues found\n"

    markdown = ""
    for locale, issues in problems.items():
        marker = " (base)" if locale == result.base_locale else ""
        markdown += f"## {locale}{marker}\n"
        markdown += "| Key | Issue |\n| ------- | --------- |\n"
        for key, message in issues:
            key_cell = f"`{key}`" if key else ""
            markdown += f"| {key_cell} | {_escape_cell(message)} |\n"
        markdown += "\n"
    return markdown


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _key_label(section: str, key: str) -> str:
    if section and key:
        return f"{section} > {key}"
    return section or key
