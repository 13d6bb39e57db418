import keyword
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class TokenKind(Enum):
    TEXT = "text"
    SUBSTITUTION = "substitution"
    PLURAL = "plural"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    start: int  # inclusive
    end: int  # exclusive
    error: str | None = None


class ParamKind(Enum):
    COUNT = "count"
    NAMED = "named"


@dataclass(frozen=True)
class Parameter:
    name: str
    kind: ParamKind

    @property
    def type_name(self) -> str:
        return "int" if self.kind is ParamKind.COUNT else "str"

    @property
    def identifier(self) -> str:
        """Argument name usable in generated Python code."""
        if not self.name:
            return "value"
        ident = re.sub(r"\W", "_", self.name)
        if ident[0].isdigit():
            ident = "_" + ident
        if keyword.iskeyword(ident) or ident == "self":
            ident += "_"
        return ident


@dataclass(frozen=True)
class FunctionSpec:
    """A compiled catalog entry.

    ``singular_template`` and ``plural_template`` are mirror images for
    plural clauses: the singular buffer carries the plural form and the
    plural buffer carries the singular override. ``format_args`` lists the
    substitution names in the order their placeholders appear in both
    templates.
    """

    source_key: str
    callable_name: str
    documentation: str
    parameters: tuple[Parameter, ...]
    singular_template: str
    plural_template: str
    has_plural: bool
    format_args: tuple[str, ...] = ()

    def signature(self) -> str:
        params = ", ".join(f"{p.name}: {p.type_name}" for p in self.parameters)
        return f"{self.callable_name}({params})"

    @property
    def method_name(self) -> str:
        return python_name(self.callable_name)

    @property
    def doc_lines(self) -> list[str]:
        return self.documentation.splitlines() or [""]

    def argument(self, name: str) -> str:
        return next(p.identifier for p in self.parameters if p.name == name)


def snake_case(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()


def python_name(name: str) -> str:
    """snake_case method name for a public name, never a Python keyword."""
    name = snake_case(name)
    if keyword.iskeyword(name):
        name += "_"
    return name


@dataclass(frozen=True)
class Catalog:
    locale: str
    root: Mapping[str, FunctionSpec] = field(default_factory=dict)
    sections: Mapping[str, Mapping[str, FunctionSpec]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", MappingProxyType(dict(self.root)))
        object.__setattr__(
            self,
            "sections",
            MappingProxyType(
                {name: MappingProxyType(dict(entries)) for name, entries in self.sections.items()}
            ),
        )


class ErrorKind(Enum):
    DECODE = "decode"
    SYNTAX = "syntax"
    NAME_CONFLICT = "name conflict"
    TYPE_MISMATCH = "type mismatch"
    VALIDATION = "validation"


@dataclass(frozen=True)
class CatalogError:
    kind: ErrorKind
    locale: str
    message: str
    key: str = ""
    section: str = ""

    def __str__(self) -> str:
        return f"{self.locale}: {self.message}"


@dataclass
class LoadResult:
    locale: str
    catalog: Catalog | None
    errors: list[CatalogError] = field(default_factory=list)


@dataclass(frozen=True)
class InterfaceShape:
    root: tuple[tuple[str, str], ...]
    sections: tuple[tuple[str, tuple[tuple[str, str], ...]], ...]
    locales: tuple[str, ...]


@dataclass
class ProcessResult:
    base_locale: str
    results: dict[str, LoadResult]
    report: dict[str, list[str]] = field(default_factory=dict)

    @property
    def errors(self) -> dict[str, list[CatalogError]]:
        return {locale: res.errors for locale, res in sorted(self.results.items()) if res.errors}

    @property
    def catalogs(self) -> dict[str, Catalog]:
        return {
            locale: res.catalog
            for locale, res in sorted(self.results.items())
            if res.catalog is not None
        }

    @property
    def ok(self) -> bool:
        return not self.errors and not self.report
