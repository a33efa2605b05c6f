"""
Configuration constants for C/C++ header parsing.

Defines the lexical keyword sets used by the tokenizer and parser, and the
runtime defaults resolved from the environment. Environment variables are
loaded from a .env file at module import time via python-dotenv.
"""

import os
from typing import FrozenSet, Set

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load .env file (idempotent; does nothing if already loaded or missing)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Runtime defaults
# ---------------------------------------------------------------------------
DEFAULT_ENCODING: str = os.getenv("HEADERBIND_ENCODING", "utf-8")

# Upper bound on the overload variants produced for one function declaration
MAX_OVERLOAD_VARIANTS: int = int(os.getenv("HEADERBIND_MAX_OVERLOADS", "64"))

LOG_LEVEL: str = os.getenv("HEADERBIND_LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Lexical configuration
# ---------------------------------------------------------------------------

# Fundamental type keywords, sorted once so normalization is permutation-invariant
SIMPLE_TYPES: tuple = tuple(sorted((
    "signed",
    "unsigned",
    "char",
    "short",
    "int",
    "long",
    "bool",
    "float",
    "double",
)))

# Reserved words recognized by the parser. They stay identifier tokens.
KEYWORDS: FrozenSet[str] = frozenset({
    "alignas",
    "auto",
    "class",
    "const",
    "constexpr",
    "decltype",
    "default",
    "define",
    "delete",
    "elif",
    "else",
    "endif",
    "enum",
    "explicit",
    "extern",
    "final",
    "friend",
    "if",
    "ifdef",
    "ifndef",
    "inline",
    "mutable",
    "namespace",
    "noexcept",
    "operator",
    "override",
    "private",
    "protected",
    "public",
    "register",
    "static",
    "static_assert",
    "struct",
    "template",
    "typedef",
    "typename",
    "undef",
    "union",
    "using",
    "virtual",
    "volatile",
    "__attribute__",
})

# Multi-character operators, longest first so greedy matching works
MULTI_CHAR_SYMBOLS: tuple = (
    "->*",
    "<<=",
    "...",
    "::",
    "->",
    "&&",
    "||",
    "++",
    "--",
    "<<",
    "==",
    "!=",
    "<=",
    ">=",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "##",
)

# Doxygen comment prefixes migrated to Javadoc
DOXYGEN_PREFIXES: tuple = (
    "/**",
    "///",
    "//!",
    "/*!",
)

# Keywords skipped by the type parser without affecting the type name
TYPE_SKIPPED_KEYWORDS: Set[str] = {
    "enum",
    "explicit",
    "extern",
    "inline",
    "class",
    "struct",
    "union",
    "typedef",
    "typename",
    "using",
    "constexpr",
    "mutable",
    "register",
    "volatile",
}

# Java identifiers that collide with Pointer members
RESERVED_MEMBER_NAMES: tuple = (
    "address",
    "allocate",
    "capacity",
    "deallocate",
    "limit",
    "position",
)
