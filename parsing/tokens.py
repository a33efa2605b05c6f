"""
Token model shared by the tokenizer, the token cursor and the parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional

from parsing.config import KEYWORDS


class TokenKind(Enum):
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    COMMENT = auto()
    IDENTIFIER = auto()
    SYMBOL = auto()
    PREPROCESSOR = auto()
    EOF = auto()


# Reserved words, matched by value
AUTO = "auto"
CLASS = "class"
CONST = "const"
CONSTEXPR = "constexpr"
DECLTYPE = "decltype"
DEFAULT = "default"
DEFINE = "define"
DELETE = "delete"
ELIF = "elif"
ELSE = "else"
ENDIF = "endif"
ENUM = "enum"
EXPLICIT = "explicit"
EXTERN = "extern"
FINAL = "final"
FRIEND = "friend"
IF = "if"
IFDEF = "ifdef"
IFNDEF = "ifndef"
INLINE = "inline"
NAMESPACE = "namespace"
NOEXCEPT = "noexcept"
OPERATOR = "operator"
OVERRIDE = "override"
PRIVATE = "private"
PROTECTED = "protected"
PUBLIC = "public"
STATIC = "static"
STATIC_ASSERT = "static_assert"
STRUCT = "struct"
TEMPLATE = "template"
TYPEDEF = "typedef"
UNION = "union"
USING = "using"
VIRTUAL = "virtual"


class ParserError(Exception):
    """Raised on unrecognizable input, with source location context."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        line: int = 0,
        token: Optional[str] = None,
    ):
        self.file = file
        self.line = line
        self.token = token
        location = f"{file}:{line}: " if file is not None else ""
        super().__init__(f"{location}{message}")


@dataclass(frozen=True)
class Token:
    """A lexical token with the verbatim spacing that preceded it.

    Attributes:
        kind: Lexical category.
        value: Token text (normalized for numeric literals).
        spacing: Whitespace and line breaks found before the token.
        file: Source file name, or None for in-memory text.
        line: 1-indexed source line.
    """

    kind: TokenKind
    value: str = ""
    spacing: str = ""
    file: Optional[str] = field(default=None, compare=False)
    line: int = field(default=0, compare=False)

    @property
    def is_keyword(self) -> bool:
        return self.kind is TokenKind.IDENTIFIER and self.value in KEYWORDS

    def match(self, *candidates) -> bool:
        """Check the token against kinds, exact values, or other tokens."""
        for c in candidates:
            if isinstance(c, TokenKind):
                if self.kind is c:
                    return True
            elif isinstance(c, Token):
                if self.kind is c.kind and self.value == c.value:
                    return True
            elif self.kind is not TokenKind.EOF and c == self.value:
                return True
        return False

    def expect(self, *candidates) -> "Token":
        if not self.match(*candidates):
            raise ParserError(
                f"Unexpected token '{self}'", self.file, self.line, str(self)
            )
        return self

    def with_spacing(self, spacing: str) -> "Token":
        return replace(self, spacing=spacing)

    def with_value(self, value: str) -> "Token":
        return replace(self, value=value)

    def __str__(self) -> str:
        return self.value


EOF = Token(TokenKind.EOF)
