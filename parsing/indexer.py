"""
Seekable token cursor with on-demand preprocessing.

The cursor exposes ``index`` as a plain integer so any parse can be rolled
back. Unless ``raw`` is set, reads go through ``preprocess``, which filters
conditional blocks and expands macros known to the rule table in place.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from parsing.infomap import InfoMap
from parsing.tokenizer import tokenize
from parsing.tokens import (
    DEFINE,
    ELIF,
    ELSE,
    ENDIF,
    EOF,
    IF,
    IFDEF,
    IFNDEF,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)

_OPEN = ("(", "[", "{")
_CLOSE = (")", "]", "}")


class TokenIndexer:
    """Cursor over a mutable token array.

    Attributes:
        info_map: Rule table consulted for ``#if`` conditions and macros.
        array: Token list, rewritten by preprocessing as the cursor advances.
        index: Current position in ``array``.
        raw: When True, preprocessing and comment skipping are disabled.
    """

    def __init__(self, info_map: InfoMap, tokens: List[Token]):
        self.info_map = info_map
        self.array: List[Token] = list(tokens)
        self.index = 0
        self.raw = False

    # ------------------------------------------------------------------
    # Backtracking
    # ------------------------------------------------------------------

    def mark(self) -> int:
        return self.index

    def reset(self, mark: int) -> None:
        self.index = mark

    @contextmanager
    def raw_mode(self, raw: bool = True) -> Iterator["TokenIndexer"]:
        previous = self.raw
        self.raw = raw
        try:
            yield self
        finally:
            self.raw = previous

    # ------------------------------------------------------------------
    # Preprocessing
    # ------------------------------------------------------------------

    def _directive_at(self, index: int) -> Optional[Token]:
        array = self.array
        if index + 1 < len(array) and array[index].match(TokenKind.PREPROCESSOR):
            return array[index + 1]
        return None

    def filter(self, index: int) -> None:
        """Resolve the conditional block starting at ``index``, if any."""
        array = self.array
        first = self._directive_at(index)
        if first is None or not first.match(IF, IFDEF, IFNDEF):
            return
        start = index
        kept: List[Token] = []
        count = 0
        info = None
        define = True
        defined = False
        while index < len(array):
            token = array[index]
            spacing = token.spacing
            n = spacing.rfind("\n") + 1
            keyword = None
            directive = self._directive_at(index)
            if directive is not None:
                if directive.match(IF, IFDEF, IFNDEF):
                    count += 1
                if count == 1 and directive.match(IF, IFDEF, IFNDEF, ELIF, ELSE, ENDIF):
                    keyword = directive
                if directive.match(ENDIF):
                    count -= 1
            if keyword is not None:
                index += 2
                comment = "// " + spacing[n:] + "#" + keyword.spacing + keyword.value
                if keyword.match(IF, IFDEF, IFNDEF, ELIF):
                    value = ""
                    while index < len(array) and "\n" not in array[index].spacing:
                        item = array[index]
                        if not item.match(TokenKind.COMMENT):
                            value += item.spacing + item.value
                        comment += "\n// " if item.value == "\n" else item.spacing + item.value
                        index += 1
                    define = info is None or not defined
                    info = self.info_map.get_first(value)
                    if info is not None:
                        define = not info.define if keyword.match(IFNDEF) else info.define
                    else:
                        try:
                            define = int(value.strip()) != 0
                        except ValueError:
                            pass
                    logger.debug("Conditional '%s' evaluated to %s", value.strip(), define)
                elif keyword.match(ELSE):
                    define = info is None or not define
                kept.append(Token(TokenKind.COMMENT, comment, spacing[:n], token.file, token.line))
                if keyword.match(ENDIF) and count == 0:
                    break
            elif define:
                kept.append(token)
                index += 1
            else:
                index += 1
            defined = define or defined
        array[start:index] = kept

    def expand(self, index: int) -> None:
        """Expand the macro invocation starting at ``index``, if any."""
        array = self.array
        if index >= len(array) or not array[index].match(TokenKind.IDENTIFIER):
            return
        info = self.info_map.get_first(array[index].value)
        if info is None or info.cpp_text is None:
            return
        body = [t for t in tokenize(info.cpp_text) if not t.match(TokenKind.COMMENT)]
        if (
            len(body) < 3
            or not body[0].match("#")
            or not body[1].match(DEFINE)
            or not body[2].match(info.cpp_names[0])
        ):
            return
        start = index
        pos = 3
        params: List[str] = []
        args: List[List[Token]] = []
        name = array[index].value
        if pos < len(body) and body[pos].match("(") and not body[pos].spacing:
            pos += 1
            while pos < len(body):
                if body[pos].match(TokenKind.IDENTIFIER):
                    params.append(body[pos].value)
                elif body[pos].match(")"):
                    pos += 1
                    break
                pos += 1
            index += 1
            if params and (index >= len(array) or not array[index].match("(")):
                return
            if index < len(array):
                name += array[index].spacing + array[index].value
            args = [[] for _ in params]
            count = depth = 0
            index += 1
            while index < len(array):
                item = array[index]
                name += item.spacing + item.value
                if depth == 0 and item.match(")"):
                    break
                elif depth == 0 and item.match(","):
                    count += 1
                    index += 1
                    continue
                elif item.match(*_OPEN):
                    depth += 1
                elif item.match(*_CLOSE):
                    depth -= 1
                if count < len(args):
                    args[count].append(item)
                index += 1
        replacement: List[Token] = []
        skip_info = self.info_map.get_first(name)
        if skip_info is None or not skip_info.skip:
            for token in body[pos:]:
                if token.value in params:
                    replacement.extend(args[params.index(token.value)])
                else:
                    replacement.append(token)
            i = 0
            while i < len(replacement):
                if replacement[i].match("##") and 0 < i < len(replacement) - 1:
                    pasted = replacement[i - 1].with_value(replacement[i - 1].value + replacement[i + 1].value)
                    replacement[i - 1:i + 2] = [pasted]
                else:
                    i += 1
            if replacement:
                replacement[0] = replacement[0].with_spacing(array[start].spacing)
            if replacement and replacement[0].value == array[start].value and len(replacement) > 1:
                # self-referencing macro, leave it alone
                return
            logger.debug("Expanded macro %s", name)
        array[start:index + 1] = replacement

    def preprocess(self, index: int, count: int) -> int:
        array = self.array
        while index < len(array):
            self.filter(index)
            self.expand(index)
            if index < len(array) and not array[index].match(TokenKind.COMMENT):
                count -= 1
                if count < 0:
                    break
            index += 1
        self.filter(index)
        self.expand(index)
        return index

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, offset: int = 0) -> Token:
        k = self.index + offset if self.raw else self.preprocess(self.index, offset)
        return self.array[k] if 0 <= k < len(self.array) else EOF

    def position(self, offset: int = 0) -> int:
        """Absolute array index that ``get(offset)`` would read."""
        return self.index + offset if self.raw else self.preprocess(self.index, offset)

    def respace(self, spacing: str, offset: int = 0) -> None:
        """Replace the spacing of the token at ``offset``."""
        k = self.position(offset)
        if 0 <= k < len(self.array):
            self.array[k] = self.array[k].with_spacing(spacing)

    def next(self) -> Token:
        self.index = self.index + 1 if self.raw else self.preprocess(self.index, 1)
        return self.array[self.index] if self.index < len(self.array) else EOF

    def __len__(self) -> int:
        return len(self.array)
