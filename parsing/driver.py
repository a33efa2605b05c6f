"""
Multi-file parsing driver.

Resolves include names against an include path, tokenizes each header and
runs one ``Parser`` over all of them so that types, macros and aliases
learned from earlier headers are visible to later ones.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.signature_contract import make_signature_hash
from core.structured_logging import header_scope
from parsing.containers import containers
from parsing.context import Context
from parsing.declarations import DeclarationList
from parsing.indexer import TokenIndexer
from parsing.infomap import InfoMap
from parsing.models import Declarator, Type
from parsing.parser import Parser
from parsing.tokenizer import Tokenizer, tokenize
from parsing.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class ParseStats:
    """Statistics for a parse operation."""

    def __init__(self):
        self.files_parsed = 0
        self.files_skipped = 0
        self.files_missing = 0
        self.declarations = 0
        self.functions = 0
        self.variables = 0
        self.types = 0

    def count(self, decl_list: DeclarationList) -> None:
        """Tally the declarations of a finished parse."""
        self.declarations = len(decl_list)
        self.functions = len(decl_list.functions())
        self.variables = len(decl_list.variables())
        self.types = sum(1 for d in decl_list if d.type is not None)

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_parsed": self.files_parsed,
            "files_skipped": self.files_skipped,
            "files_missing": self.files_missing,
            "declarations": self.declarations,
            "functions": self.functions,
            "variables": self.variables,
            "types": self.types,
        }

    def __str__(self) -> str:
        return (
            f"ParseStats(parsed={self.files_parsed}, skipped={self.files_skipped}, "
            f"missing={self.files_missing}, declarations={self.declarations})"
        )


@dataclass
class ParseResult:
    """Outcome of parsing one or more headers.

    Attributes:
        declarations: Ordered, de-duplicated declarations.
        stats: Counters for the run report.
        line_separator: Line separator of the first parsed file.
        files: Resolved paths of the parsed files, in order.
    """

    declarations: DeclarationList
    stats: ParseStats = field(default_factory=ParseStats)
    line_separator: Optional[str] = None
    files: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.declarations.render()

    def to_report(self) -> Dict[str, Any]:
        signatures = self.declarations.signatures()
        return {
            "files": list(self.files),
            "stats": self.stats.to_dict(),
            "signatures": signatures,
            "signature_hash": make_signature_hash(signatures),
        }


def resolve_include(include: str, include_paths: Sequence[str] = ()) -> Optional[str]:
    """Find the file an include name refers to.

    ``<name>`` is only searched on the include path. ``"name"`` and bare
    names are tried as given first, then on the include path.

    Returns:
        The path of an existing file, or None.
    """
    system = include.startswith("<") and include.endswith(">")
    name = include[1:-1] if system or (include.startswith('"') and include.endswith('"')) else include
    if not system and os.path.isfile(name):
        return name
    for directory in include_paths:
        candidate = os.path.join(directory, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def _header_token(include: str, path: str) -> Token:
    return Token(TokenKind.COMMENT, f"// Parsed from {include}\n\n", "\n", path, 0)


def _run(parser: Parser, context: Context, decl_list: DeclarationList) -> None:
    tokens = parser.tokens
    while True:
        parser.declarations(context, decl_list)
        token = tokens.get()
        if token.match(TokenKind.EOF):
            break
        # unbalanced closing brace, left over from conditional blocks
        logger.warning("Ignoring unmatched '%s' at %s:%d", token.value, token.file, token.line)
        tokens.next()


def parse_includes(
    includes: Iterable[str],
    info_map: Optional[InfoMap] = None,
    include_paths: Sequence[str] = (),
    excludes: Iterable[str] = (),
    c_includes: Iterable[str] = (),
    context: Optional[Context] = None,
) -> ParseResult:
    """Parse headers in order into a single declaration list.

    C headers listed in ``c_includes`` are parsed first, with
    ``context.c_only`` set.

    Raises:
        FileNotFoundError: If an include cannot be resolved and is not
            listed in ``excludes``.
        ParserError: If a header contains an unrecognizable declaration.
    """
    info_map = info_map if info_map is not None else InfoMap.with_defaults()
    context = context if context is not None else Context()
    excluded = set(excludes)
    decl_list = DeclarationList(info_map)
    result = ParseResult(declarations=decl_list)
    parser = Parser(info_map, TokenIndexer(info_map, []))

    work = [(include, True) for include in c_includes] + [(include, False) for include in includes]
    added = containers(parser, context, decl_list)
    if added:
        logger.info("Generated %d container wrappers", added)

    for include, c_only in work:
        base_name = os.path.basename(include.strip('<>"'))
        info = info_map.get_first(base_name)
        if info is not None and info.skip:
            logger.info("Skipping %s per rule", include)
            result.stats.files_skipped += 1
            continue
        path = resolve_include(include, include_paths)
        if path is None:
            if include in excluded or base_name in excluded:
                logger.warning("Include %s not found; excluded, continuing", include)
                result.stats.files_missing += 1
                continue
            raise FileNotFoundError(f"Could not find include file: {include}")

        with header_scope(path):
            tokenizer = Tokenizer.from_file(path)
            file_tokens = tokenizer.tokenize()
            if result.line_separator is None:
                result.line_separator = tokenizer.line_separator
                parser.line_separator = tokenizer.line_separator
            parser.tokens = TokenIndexer(info_map, [_header_token(include, path)] + file_tokens)
            ctx = context.clone(c_only=context.c_only or c_only)
            _run(parser, ctx, decl_list)
            result.files.append(path)
            result.stats.files_parsed += 1
            logger.info("Parsed %s (%d tokens)", path, len(file_tokens))

    result.stats.count(decl_list)
    return result


def parse_text(
    text: str,
    info_map: Optional[InfoMap] = None,
    context: Optional[Context] = None,
    file: Optional[str] = None,
) -> ParseResult:
    """Parse header text held in memory."""
    info_map = info_map if info_map is not None else InfoMap.with_defaults()
    tokenizer = Tokenizer(text, file)
    parser = Parser(info_map, TokenIndexer(info_map, tokenizer.tokenize()), tokenizer.line_separator)
    context = context if context is not None else Context()
    decl_list = parser.parse(context)
    result = ParseResult(declarations=decl_list, line_separator=tokenizer.line_separator)
    if file is not None:
        result.files.append(file)
    result.stats.files_parsed = 1
    result.stats.count(decl_list)
    return result


def parse_fragment(info_map: InfoMap, context: Context, text: str, kind: str = "type"):
    """Parse a lone type or declarator, as written in rule entries.

    Args:
        info_map: Rule table used for resolution.
        context: Scope to resolve names in.
        text: Native text, e.g. ``"const std::vector<int>&"``.
        kind: ``"type"`` or ``"declarator"``.

    Returns:
        A ``Type`` or ``Declarator``, or None if ``text`` does not parse.

    Raises:
        ValueError: If ``kind`` is unknown.
    """
    parser = Parser(info_map, TokenIndexer(info_map, tokenize(text)))
    if kind == "type":
        result: Optional[Type] = parser.type(context)
        return result
    if kind == "declarator":
        dcl: Optional[Declarator] = parser.declarator(context)
        return dcl
    raise ValueError(f"Unknown fragment kind: {kind}")
