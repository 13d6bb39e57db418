"""Structural comparison of every locale against the base locale.

All functions here are pure: they read already-built catalogs and return
plain lists of messages. Keys and sections are visited in sorted order so
the report never depends on mapping order.
"""
import logging
from typing import Iterable, Mapping

from typedi18n.classes import Catalog, FunctionSpec, InterfaceShape

logger = logging.getLogger(__name__)


def _label(section: str, key: str) -> str:
    """Key as shown in report messages.

    Root keys appear bare (``'greet'``). Section keys are qualified as
    ``'menu > title'`` so the same key in two sections stays distinguishable,
    matching the loader's "expected string under menu > title" messages.
    """
    return f"{section} > {key}" if section else key


def validate_section(
    base: Mapping[str, FunctionSpec],
    other: Mapping[str, FunctionSpec],
    locale: str,
    section: str = "",
) -> list[str]:
    errors = []
    for key in sorted(base.keys() - other.keys()):
        errors.append(f"{locale} is missing translation '{_label(section, key)}'")

    for key in sorted(base.keys() & other.keys()):
        expected = base[key].signature()
        actual = other[key].signature()
        if expected != actual:
            errors.append(
                f"{locale} has the wrong signature for '{_label(section, key)}'. "
                f"Should be `{expected}`, but was `{actual}`"
            )

    for key in sorted(other.keys() - base.keys()):
        errors.append(f"{locale} has an unknown translation '{_label(section, key)}'")
    return errors


def validate_catalog(base: Catalog, other: Catalog) -> list[str]:
    locale = other.locale
    errors = validate_section(base.root, other.root, locale)

    for name in sorted(base.sections):
        if name not in other.sections:
            errors.append(f"{locale} is missing section [{name}]")
            continue
        errors.extend(validate_section(base.sections[name], other.sections[name], locale, name))

    for name in sorted(other.sections.keys() - base.sections.keys()):
        errors.append(f"{locale} has unknown section [{name}]")
    return errors


def validate(catalogs: Mapping[str, Catalog], base_locale: str) -> dict[str, list[str]]:
    """Compare every catalog with the one for ``base_locale``.

    Returns locale -> messages, listing only locales with discrepancies. A
    missing base locale is reported once under its own name and nothing
    else is compared.
    """
    if base_locale not in catalogs:
        known = ", ".join(sorted(catalogs)) or "none"
        return {base_locale: [f"base locale '{base_locale}' not found (available: {known})"]}

    base = catalogs[base_locale]
    report: dict[str, list[str]] = {}
    for locale in sorted(catalogs):
        if locale == base_locale:
            continue
        errors = validate_catalog(base, catalogs[locale])
        if errors:
            logger.debug(f"{locale}: {len(errors)} discrepancies with {base_locale}")
            report[locale] = errors
    return report


def _shape(entries: Mapping[str, FunctionSpec]) -> tuple[tuple[str, str], ...]:
    return tuple((key, entries[key].signature()) for key in sorted(entries))


def interface_shape(base: Catalog, locales: Iterable[str]) -> InterfaceShape:
    return InterfaceShape(
        root=_shape(base.root),
        sections=tuple((name, _shape(base.sections[name])) for name in sorted(base.sections)),
        locales=tuple(sorted(locales)),
    )
