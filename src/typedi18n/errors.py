from typedi18n.classes import ErrorKind


class TypedI18nError(Exception):
    kind: ErrorKind | None = None

    def __init__(self, message: str, *, key: str = "", section: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.section = section


class DecodeError(TypedI18nError):
    kind = ErrorKind.DECODE


class TranslationSyntaxError(TypedI18nError):
    kind = ErrorKind.SYNTAX


class NameConflictError(TypedI18nError):
    kind = ErrorKind.NAME_CONFLICT


class TypeMismatchError(TypedI18nError):
    kind = ErrorKind.TYPE_MISMATCH


class GenerationError(TypedI18nError):
    pass
