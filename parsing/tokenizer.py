"""
Lexer for C/C++ header text.

The tokenizer is lenient: malformed literals are tokenized best-effort and
never raise. Comments are kept as tokens and whitespace is attached to the
following token as ``spacing``, so untouched regions can be reproduced
verbatim.
"""

import logging
import re
from typing import List, Optional, Sequence

from parsing.config import DEFAULT_ENCODING, MULTI_CHAR_SYMBOLS
from parsing.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_NUMBER_CHARS = "._"


class Tokenizer:
    """Splits source text into a list of ``Token`` objects."""

    def __init__(self, text: str, file: Optional[str] = None, line: int = 1):
        self.file = file
        self.line_number = line
        self.line_separator: Optional[str] = None
        if "\r" in text:
            crlf = text.find("\r\n")
            cr = text.find("\r")
            self.line_separator = "\r\n" if crlf >= 0 and crlf == cr else "\r"
            text = text.replace("\r\n", "\n").replace("\r", "\n")
        elif "\n" in text:
            self.line_separator = "\n"
        self.text = text

    @classmethod
    def from_file(cls, path: str, encoding: Optional[str] = None) -> "Tokenizer":
        with open(path, "r", encoding=encoding or DEFAULT_ENCODING, newline="") as f:
            text = f.read()
        return cls(text, file=path)

    def filter_lines(self, patterns: Optional[Sequence[str]], skip: bool) -> None:
        """Keep (or drop, when ``skip``) ranges of lines.

        ``patterns`` holds pairs of regular expressions: a line fully matching
        ``patterns[i]`` opens a range that ends at the next line fully matching
        ``patterns[i + 1]``.
        """
        if not patterns:
            return
        lines = self.text.split("\n")
        trailing_newline = self.text.endswith("\n")
        if trailing_newline:
            lines.pop()
        kept: List[str] = []
        it = iter(lines)
        for line in it:
            i = 0
            while i < len(patterns) and not re.fullmatch(patterns[i], line):
                i += 2
            if i < len(patterns):
                if not skip:
                    kept.append(line)
                if i + 1 < len(patterns):
                    for inner in it:
                        if not skip:
                            kept.append(inner)
                        if re.fullmatch(patterns[i + 1], inner):
                            break
            elif skip:
                kept.append(line)
        self.text = "\n".join(kept) + ("\n" if kept else "")
        logger.debug("Line filter kept %d of %d lines", len(kept), len(lines))

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        text = self.text
        n = len(text)
        i = 0
        line = self.line_number
        at_line_start = True
        while True:
            start = i
            while i < n and text[i].isspace():
                i += 1
            spacing = text[start:i]
            line += spacing.count("\n")
            if "\n" in spacing:
                at_line_start = True
            if i >= n:
                if spacing:
                    tokens.append(Token(TokenKind.COMMENT, "", spacing, self.file, line))
                break

            c = text[i]
            kind = TokenKind.SYMBOL
            j = i + 1
            if c.isalpha() or c == "_":
                while j < n and (text[j].isalnum() or text[j] == "_"):
                    j += 1
                kind = TokenKind.IDENTIFIER
                value = text[i:j]
            elif c.isdigit() or (c == "." and i + 1 < n and text[i + 1].isdigit()):
                j = self._scan_number(i)
                kind, value = self._number(text[i:j])
            elif c == "'" or c == '"':
                while j < n and text[j] != c and text[j] != "\n":
                    j += 2 if text[j] == "\\" else 1
                j = min(j + 1, n)
                kind = TokenKind.INTEGER if c == "'" else TokenKind.STRING
                value = text[i:j]
            elif c == "/" and text.startswith("//", i):
                while j < n and (text[j] != "\n" or text[j - 1] == "\\"):
                    j += 1
                kind = TokenKind.COMMENT
                value = text[i:j]
            elif c == "/" and text.startswith("/*", i):
                end = text.find("*/", i + 2)
                j = n if end < 0 else end + 2
                kind = TokenKind.COMMENT
                value = text[i:j]
            elif c == "\\" and text.startswith("\\\n", i):
                # line continuation keeps the preprocessor line going
                j = i + 2
                kind = TokenKind.COMMENT
                value = "\n"
            elif c == "#" and not text.startswith("##", i):
                kind = TokenKind.PREPROCESSOR if at_line_start else TokenKind.SYMBOL
                value = "#"
            else:
                value = c
                for symbol in MULTI_CHAR_SYMBOLS:
                    if text.startswith(symbol, i):
                        value = symbol
                        j = i + len(symbol)
                        break

            tokens.append(Token(kind, value, spacing, self.file, line))
            line += text.count("\n", i, j)
            if kind is not TokenKind.COMMENT:
                at_line_start = False
            i = j
        return tokens

    def _scan_number(self, i: int) -> int:
        text = self.text
        n = len(text)
        hex_literal = text.startswith(("0x", "0X"), i)
        j = i + 1
        while j < n:
            c = text[j]
            if c.isalnum() or c in _NUMBER_CHARS:
                j += 1
            elif c in "+-" and text[j - 1] in ("pP" if hex_literal else "eE"):
                j += 1
            else:
                break
        return j

    @staticmethod
    def _number(raw: str):
        """Classify a numeric literal and normalize its suffix."""
        lower = raw.lower()
        hex_literal = lower.startswith("0x")
        body = raw
        large = unsigned = False
        if lower.endswith("i64"):
            body = body[:-3]
            large = True
        while body and body[-1] in "uUlL":
            if body[-1] in "lL":
                large = True
            else:
                unsigned = True
            body = body[:-1]
        lower_body = body.lower()
        is_float = not hex_literal and (
            "." in body or "e" in lower_body or lower_body.endswith("f")
        )
        if hex_literal and "p" in lower_body:
            is_float = True
        if is_float:
            return TokenKind.FLOAT, body
        if not large:
            try:
                if len(body) > 1 and body[0] == "0" and body.isdigit():
                    value = int(body, 8)
                else:
                    value = int(body, 0)
                high = value >> 32
                large = high != 0 and high != -1
            except ValueError:
                # set as large, for things like 0x8000000000000000
                large = len(body) >= 16
        if large or (unsigned and not hex_literal):
            body += "L"
        return TokenKind.INTEGER, body


def tokenize(text: str, file: Optional[str] = None) -> List[Token]:
    """Tokenize in-memory text."""
    return Tokenizer(text, file).tokenize()
