"""Render compiled catalogs into an importable Python package."""

import logging
import re
from typing import Mapping

from jinja2 import Environment, PackageLoader, StrictUndefined

from typedi18n.classes import Catalog, FunctionSpec, ProcessResult, python_name
from typedi18n.compiler import to_public_name
from typedi18n.errors import GenerationError
from typedi18n.validator import interface_shape

logger = logging.getLogger(__name__)

PACKAGE_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_env = Environment(
    loader=PackageLoader("typedi18n", "templates"),
    autoescape=False,  # nosec B701: Python source, not markup
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)
_env.filters["pyrepr"] = repr


def validate_package_name(name: str) -> None:
    if not name:
        raise GenerationError("Package name cannot be empty")
    if not PACKAGE_NAME_PATTERN.match(name):
        raise GenerationError(f"Invalid package name: {name}")


def _args_tuple(spec: FunctionSpec) -> str:
    args = [spec.argument(name) for name in spec.format_args]
    if len(args) == 1:
        return f"({args[0]},)"
    return "(" + ", ".join(args) + ")"


def _method(spec: FunctionSpec) -> dict[str, object]:
    params = ["self"] + [f"{p.identifier}: {p.type_name}" for p in spec.parameters]
    return {
        "name": spec.method_name,
        "params": ", ".join(params),
        "call_args": ", ".join(p.identifier for p in spec.parameters),
        "doc_lines": spec.doc_lines,
        "has_plural": spec.has_plural,
        "singular": spec.singular_template,
        "plural": spec.plural_template,
        "args": _args_tuple(spec),
    }


def _methods(entries: Mapping[str, FunctionSpec]) -> list[dict[str, object]]:
    return [_method(entries[key]) for key in sorted(entries)]


def _sections(catalog: Catalog, class_prefix: str = "") -> list[dict[str, object]]:
    sections = []
    for name in sorted(catalog.sections):
        public = to_public_name(name)
        sections.append(
            {
                "name": name,
                "accessor": python_name(public),
                "doc": f"Entries of the [{name}] section.",
                "base_class": f"{public}Section",
                "class_name": f"_{class_prefix}{public}",
                "methods": _methods(catalog.sections[name]),
            }
        )
    return sections


def render_base(base: Catalog) -> str:
    return _env.get_template("base.py.jinja").render(
        base_locale=base.locale,
        methods=_methods(base.root),
        sections=_sections(base),
    )


def render_locale(catalog: Catalog) -> str:
    class_name = to_public_name(catalog.locale)
    return _env.get_template("locale.py.jinja").render(
        locale=catalog.locale,
        class_name=class_name,
        methods=_methods(catalog.root),
        sections=_sections(catalog, class_name),
    )


def render_translator(base: Catalog, locales: list[str]) -> str:
    shape = interface_shape(base, locales)
    return _env.get_template("translator.py.jinja").render(
        base_locale=base.locale,
        locales=[{"name": locale, "class_name": to_public_name(locale)} for locale in shape.locales],
        methods=_methods(base.root),
        sections=_sections(base),
    )


def render_package(result: ProcessResult, package_name: str) -> dict[str, str]:
    """Return file name -> source for every module of the generated package.

    Refuses to render unless every catalog loaded cleanly and matches the
    base locale.
    """
    validate_package_name(package_name)
    if not result.ok:
        raise GenerationError("Generation prevented: catalogs have errors")

    catalogs = result.catalogs
    base = catalogs[result.base_locale]
    files = {f"locale_{locale}.py": render_locale(catalog) for locale, catalog in catalogs.items()}
    files["base.py"] = render_base(base)
    files["translator.py"] = render_translator(base, list(catalogs))
    files["__init__.py"] = _env.get_template("init.py.jinja").render(
        package_name=package_name,
        base_locale=base.locale,
        locales=sorted(catalogs),
    )
    logger.debug(f"Rendered {len(files)} files for package {package_name}")
    return files
