"""tinytac tokenizer — lexes source into a flat token list."""

from __future__ import annotations


# Token kind constants
TK_KEYWORD = "KEYWORD"
TK_IDENT = "IDENTIFIER"
TK_NUMBER = "NUMBER"
TK_OP = "OPERATOR"
TK_PUNCT = "PUNCTUATION"
TK_EOF = "EOF"

KEYWORDS: set[str] = {"let", "const"}

OPERATORS: set[str] = {"+", "-", "*", "/", "="}

PUNCTUATION: set[str] = {"(", ")", ";", ","}


class LexError(Exception):
    """Unrecognized character in the source."""

    def __init__(self, msg: str, char: str, line: int):
        self.msg: str = msg
        self.char: str = char
        self.line: int = line
        super().__init__(msg + " at line " + str(line))


class Token:
    """A token with kind, lexeme, and line."""

    def __init__(self, kind: str, lexeme: str, line: int):
        self.kind: str = kind
        self.lexeme: str = lexeme
        self.line: int = line

    def __repr__(self) -> str:
        return "Token(" + self.kind + ", " + repr(self.lexeme) + ", " + str(self.line) + ")"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.lexeme == other.lexeme
            and self.line == other.line
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def tokenize(source: str) -> list[Token]:
    """Tokenize source into a flat list ending with a single TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Whitespace
        if c.isspace():
            if c == "\n":
                line += 1
            pos += 1
            continue

        # Line comment: //
        if c == "/" and pos + 1 < length and source[pos + 1] == "/":
            while pos < length and source[pos] != "\n":
                pos += 1
            continue

        start_pos = pos

        # Number
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
            tokens.append(Token(TK_NUMBER, source[start_pos:pos], line))
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                tokens.append(Token(TK_KEYWORD, word, line))
            else:
                tokens.append(Token(TK_IDENT, word, line))
            continue

        if c in OPERATORS:
            tokens.append(Token(TK_OP, c, line))
            pos += 1
            continue

        if c in PUNCTUATION:
            tokens.append(Token(TK_PUNCT, c, line))
            pos += 1
            continue

        raise LexError("unexpected character: " + repr(c), c, line)

    tokens.append(Token(TK_EOF, "EOF", line))
    return tokens
