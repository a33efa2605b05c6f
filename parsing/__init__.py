"""
C/C++ header parsing for JavaCPP-style bindings.

Tokenizes headers, resolves native names through a layered rule table and
produces an ordered list of Java-ready declarations.
"""

from parsing.tokens import ParserError, Token, TokenKind
from parsing.tokenizer import Tokenizer, tokenize
from parsing.indexer import TokenIndexer
from parsing.infomap import Info, InfoMap, normalize
from parsing.defaults import default_info_map
from parsing.rules import load_rule_file, load_rule_files
from parsing.context import Context
from parsing.models import Declaration, Declarator, Parameters, Type
from parsing.declarations import DeclarationList
from parsing.parser import Parser
from parsing.driver import (
    ParseResult,
    ParseStats,
    parse_fragment,
    parse_includes,
    parse_text,
    resolve_include,
)

__all__ = [
    # Lexing
    "ParserError",
    "Token",
    "TokenKind",
    "Tokenizer",
    "tokenize",
    "TokenIndexer",
    # Rule table
    "Info",
    "InfoMap",
    "normalize",
    "default_info_map",
    "load_rule_file",
    "load_rule_files",
    # Data model
    "Context",
    "Declaration",
    "Declarator",
    "Parameters",
    "Type",
    "DeclarationList",
    # Parsing
    "Parser",
    "ParseResult",
    "ParseStats",
    "parse_fragment",
    "parse_includes",
    "parse_text",
    "resolve_include",
]
