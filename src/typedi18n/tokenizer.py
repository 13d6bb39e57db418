"""Scanner for the interpolation mini-language used in translation strings.

``{name}`` is a substitution, ``{{s}}`` / ``{{one|many}}`` is a plural
clause, everything else is literal text. An opening brace inside a clause
is kept as clause content instead of starting a nested clause, so
``"{name{nested}}"`` scans as the substitution ``name{nested`` followed by
the text ``}``.
"""
from typedi18n.classes import Token, TokenKind

# Width of the opening/closing delimiter of each clause kind
_DELIMITER = {TokenKind.TEXT: 0, TokenKind.SUBSTITUTION: 1, TokenKind.PLURAL: 2}

_UNTERMINATED = {
    TokenKind.SUBSTITUTION: "missing end '}'",
    TokenKind.PLURAL: "missing end '}}'",
}


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    state = TokenKind.TEXT
    start = 0
    i = 0

    def emit(end: int, closed: bool = True) -> None:
        if start == end:
            return
        width = _DELIMITER[state]
        value = text[start + width : end - width if closed else end]
        error = None if closed or state is TokenKind.TEXT else _UNTERMINATED[state]
        tokens.append(Token(state, value, start, end, error))

    while i < len(text):
        c = text[i]
        nxt = text[i + 1] if i + 1 < len(text) else ""
        if c == "{" and state is TokenKind.TEXT:
            emit(i)
            start = i
            if nxt == "{":
                state = TokenKind.PLURAL
                i += 1
            else:
                state = TokenKind.SUBSTITUTION
        elif c == "}" and state is TokenKind.SUBSTITUTION:
            emit(i + 1)
            start = i + 1
            state = TokenKind.TEXT
        elif c == "}" and state is TokenKind.PLURAL and nxt == "}":
            emit(i + 2)
            start = i + 2
            state = TokenKind.TEXT
            i += 1
        i += 1

    if start < len(text):
        emit(len(text), closed=state is TokenKind.TEXT)

    return tokens


def split_plural(value: str) -> tuple[str, str]:
    """Return ``(singular_override, plural_form)`` for a plural clause value."""
    parts = value.split("|")
    if len(parts) == 1:
        return "", parts[0]
    return parts[0], "".join(parts[1:])
