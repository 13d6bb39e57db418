import logging
import tomllib
from typing import Any, Mapping

from typedi18n.classes import Catalog, CatalogError, FunctionSpec, LoadResult, python_name
from typedi18n.compiler import check_reserved, compile_entry, to_public_name
from typedi18n.errors import (
    DecodeError,
    NameConflictError,
    TranslationSyntaxError,
    TypedI18nError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)


def decode_document(text: str) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as ex:
        raise DecodeError(f"failed to decode TOML content: {ex}") from ex


class _Namespace:
    """Callable names already handed out within one generated class."""

    def __init__(self, section: str = "") -> None:
        self.section = section
        self._owners: dict[str, str] = {}

    def claim(self, key: str, name: str) -> None:
        owner = self._owners.setdefault(name, key)
        if owner != key:
            where = f" in [{self.section}]" if self.section else ""
            raise NameConflictError(
                f"'{key}' and '{owner}'{where} both normalize to '{name}'",
                key=key,
                section=self.section,
            )


def _compile(namespace: _Namespace, key: str, value: str) -> FunctionSpec:
    spec = compile_entry(key, value)
    namespace.claim(key, spec.callable_name)
    namespace.claim(key, spec.method_name)
    return spec


def load_catalog(locale: str, document: Mapping[str, Any]) -> LoadResult:
    root: dict[str, FunctionSpec] = {}
    sections: dict[str, dict[str, FunctionSpec]] = {}
    errors: list[CatalogError] = []
    top = _Namespace()

    def collect(ex: TypedI18nError, section: str = "") -> None:
        logger.debug(f"{locale}: {ex.message}")
        errors.append(CatalogError(ex.kind, locale, ex.message, ex.key, section or ex.section))

    for key, entry in document.items():
        try:
            if isinstance(entry, str):
                root[key] = _compile(top, key, entry)
            elif isinstance(entry, Mapping):
                name = to_public_name(key)
                if not name:
                    raise TranslationSyntaxError(
                        f"cannot derive a section name from key '{key}'", key=key
                    )
                check_reserved(key, name)
                top.claim(key, name)
                top.claim(key, python_name(name))
                sections[key] = _load_section(key, entry, collect)
            else:
                raise TypeMismatchError(
                    f"unexpected type for key {key}: {type(entry).__name__}", key=key
                )
        except TypedI18nError as ex:
            collect(ex)

    logger.debug(
        f"Loaded {locale}: {len(root)} root entries, {len(sections)} sections, {len(errors)} errors"
    )
    return LoadResult(locale, Catalog(locale, root, sections), errors)


def _load_section(section: str, entries: Mapping[str, Any], collect) -> dict[str, FunctionSpec]:
    compiled: dict[str, FunctionSpec] = {}
    namespace = _Namespace(section)
    for key, value in entries.items():
        try:
            if isinstance(value, str):
                compiled[key] = _compile(namespace, key, value)
            elif isinstance(value, Mapping):
                raise TypeMismatchError(
                    f"expected string under {section} > {key}, but found nested structure",
                    key=key,
                )
            else:
                raise TypeMismatchError(
                    f"expected string under {section} > {key}, but found '{value}'", key=key
                )
        except TypedI18nError as ex:
            collect(ex, section)
    return compiled


def load_source(locale: str, text: str) -> LoadResult:
    try:
        document = decode_document(text)
    except DecodeError as ex:
        logger.error(f"{locale}: {ex.message}")
        return LoadResult(locale, None, [CatalogError(ex.kind, locale, ex.message)])
    return load_catalog(locale, document)
