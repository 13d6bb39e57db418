import logging
import re

from typedi18n.classes import FunctionSpec, Parameter, ParamKind, TokenKind
from typedi18n.errors import NameConflictError, TranslationSyntaxError
from typedi18n.tokenizer import split_plural, tokenize

logger = logging.getLogger(__name__)

COUNT = "count"

# Names taken by the generated translator itself
RESERVED_NAMES = frozenset({"SetLanguage", "NewTranslator"})

_WORD_BOUNDARY = re.compile(r"[^0-9A-Za-z]+|(?<=[a-z0-9])(?=[A-Z])")


def to_public_name(key: str) -> str:
    """Normalize a catalog key into a PascalCase identifier.

    ``set_language`` and ``set-language`` both become ``SetLanguage``,
    ``helloWorld`` becomes ``HelloWorld``. Returns an empty string when the
    key has no ASCII letters or digits at all.
    """
    name = "".join(part[:1].upper() + part[1:] for part in _WORD_BOUNDARY.split(key) if part)
    if name[:1].isdigit():
        name = "N" + name
    return name


def check_reserved(key: str, name: str) -> None:
    if name in RESERVED_NAMES:
        raise NameConflictError(
            f"'{key}' conflicts with '{name}' and cannot be used as translation key",
            key=key,
        )


def check_arguments(key: str, parameters: tuple[Parameter, ...]) -> None:
    owners: dict[str, str] = {}
    for param in parameters:
        owner = owners.setdefault(param.identifier, param.name)
        if owner != param.name:
            raise NameConflictError(
                f"'{key}' has parameters '{owner}' and '{param.name}' "
                f"that both become argument '{param.identifier}'",
                key=key,
            )


class ParameterList:
    """Ordered parameters, unique by name, with ``count`` kept in front."""

    def __init__(self) -> None:
        self._params: list[Parameter] = []

    def __contains__(self, name: str) -> bool:
        return any(p.name == name for p in self._params)

    def add(self, name: str) -> None:
        if name in self:
            return
        if name == COUNT:
            self._params.insert(0, Parameter(name, ParamKind.COUNT))
        else:
            self._params.append(Parameter(name, ParamKind.NAMED))

    def as_tuple(self) -> tuple[Parameter, ...]:
        return tuple(self._params)


def compile_entry(key: str, value: str) -> FunctionSpec:
    callable_name = to_public_name(key)
    if not callable_name:
        raise TranslationSyntaxError(f"cannot derive a function name from key '{key}'", key=key)
    check_reserved(key, callable_name)

    tokens = tokenize(value)
    for token in tokens:
        if token.error:
            raise TranslationSyntaxError(
                f"syntax error in '{key}' at offset {token.start}: {token.error} in \"{value}\"",
                key=key,
            )

    params = ParameterList()
    format_args: list[str] = []
    singular: list[str] = []
    plural: list[str] = []
    has_plural = False

    for token in tokens:
        if token.kind is TokenKind.TEXT:
            escaped = token.value.replace("%", "%%")
            singular.append(escaped)
            plural.append(escaped)
        elif token.kind is TokenKind.SUBSTITUTION:
            params.add(token.value)
            format_args.append(token.value)
            placeholder = "%d" if token.value == COUNT else "%s"
            singular.append(placeholder)
            plural.append(placeholder)
        else:
            params.add(COUNT)
            has_plural = True
            singular_form, plural_form = split_plural(token.value)
            # Mirror image: the template picked for count == 1 is plural_template
            singular.append(plural_form.replace("%", "%%"))
            plural.append(singular_form.replace("%", "%%"))

    parameters = params.as_tuple()
    check_arguments(key, parameters)

    logger.debug(f"Compiled {key} -> {callable_name}")
    return FunctionSpec(
        source_key=key,
        callable_name=callable_name,
        documentation=value,
        parameters=parameters,
        singular_template="".join(singular),
        plural_template="".join(plural),
        has_plural=has_plural,
        format_args=tuple(format_args),
    )
