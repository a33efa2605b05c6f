"""
Rule table mapping native C/C++ names to Java representations.

An ``InfoMap`` is a multi-valued table keyed by normalized native names and
layered over a parent table. Entries are immutable ``Info`` records: new
facts are registered by inserting new records, never by mutating old ones,
so earlier resolutions stay valid.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from parsing.config import SIMPLE_TYPES
from parsing.tokenizer import tokenize
from parsing.tokens import TokenKind

logger = logging.getLogger(__name__)

_TUPLE_FIELDS = (
    "cpp_names",
    "java_names",
    "annotations",
    "cpp_types",
    "value_types",
    "pointer_types",
)


@dataclass(frozen=True)
class Info:
    """One rule-table entry.

    Attributes:
        cpp_names: Native names (aliases) this entry matches.
        java_names: Java names for functions, variables and enumerators.
        annotations: Java annotations added to matching types.
        cpp_types: Native type replacing the matched name, or the C signature
            of a macro (return type first).
        value_types: Java types for by-value crossings.
        pointer_types: Java types for by-pointer and by-reference crossings.
        cpp_text: Native text, a ``#define`` for macro expansion.
        java_text: Verbatim Java text replacing the whole declaration.
        base: Java base class overriding the parsed one.
        cast: Force an explicit ``@Cast`` on the native type.
        define: Macro-expand inline, or instantiate a container template.
        translate: Translate a macro value instead of reading it natively.
        skip: Suppress emission.
        flatten: Inline the members of this base class into subclasses.
        purify: Treat the class as abstract.
        virtualize: Generate overridable hooks for virtual functions.
        immutable: Suppress setters.
        beanify: Name accessors ``getX``/``setX``.
        enumerate: Emit a value-carrying Java enum.
        objectify: Map static members to instance methods.
    """

    cpp_names: Optional[Tuple[str, ...]] = None
    java_names: Optional[Tuple[str, ...]] = None
    annotations: Optional[Tuple[str, ...]] = None
    cpp_types: Optional[Tuple[str, ...]] = None
    value_types: Optional[Tuple[str, ...]] = None
    pointer_types: Optional[Tuple[str, ...]] = None
    cpp_text: Optional[str] = None
    java_text: Optional[str] = None
    base: Optional[str] = None
    cast: bool = False
    define: bool = False
    translate: bool = False
    skip: bool = False
    flatten: bool = False
    purify: bool = False
    virtualize: bool = False
    immutable: bool = False
    beanify: bool = False
    enumerate: bool = False
    objectify: bool = False

    def __post_init__(self):
        for name in _TUPLE_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    @classmethod
    def of(cls, *cpp_names: str, **kwargs) -> "Info":
        return cls(cpp_names=cpp_names or None, **kwargs)

    def derive(self, **changes) -> "Info":
        """Return a new entry with ``changes`` applied."""
        return replace(self, **changes)

    # identity semantics: two separately registered rules never collapse
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    def to_dict(self) -> dict:
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value is False:
                continue
            payload[f.name] = list(value) if isinstance(value, tuple) else value
        return payload


def normalize(name: Optional[str], unconst: bool = False, untemplate: bool = False) -> Optional[str]:
    """Canonicalize a native name for rule-table lookups.

    Fundamental type spellings are sorted into a canonical order, so
    ``"unsigned long int"`` and ``"long unsigned int"`` hash identically.
    Otherwise, with ``untemplate``, a single trailing template argument list
    is stripped. With ``unconst`` a leading ``const`` is removed.
    """
    if not name:
        return name
    tokens = [t for t in tokenize(name) if not t.match(TokenKind.COMMENT)]
    found_const = False
    simple_type = True
    values: List[str] = []
    rest_start = len(tokens)
    for i, token in enumerate(tokens):
        if token.value == "const":
            found_const = True
        elif token.value in SIMPLE_TYPES:
            values.append(token.value)
        else:
            simple_type = False
            rest_start = i
            break
    if simple_type and values:
        name = ("const " if found_const else "") + " ".join(sorted(values))
    elif not simple_type and untemplate:
        remaining = [t for t in tokens[:rest_start] if t.value != "const"] + tokens[rest_start:]
        count = 0
        template = -1
        for i, token in enumerate(remaining):
            if token.value == "<":
                if count == 0:
                    template = i
                count += 1
            elif token.value == ">":
                count -= 1
                if count == 0 and i + 1 != len(remaining):
                    template = -1
        if template >= 0:
            name = ("const " if found_const else "") + "".join(
                t.value for t in remaining[:template]
            )
    if unconst and found_const:
        name = name[name.index("const") + 5:]
    return name.strip()


class InfoMap:
    """Layered, multi-valued rule table.

    Local entries always come before parent entries in lookups. The parent is
    shared, not copied, so a child built per include sees entries learned by
    earlier parses in the same build.
    """

    def __init__(self, parent: Optional["InfoMap"] = None):
        self.parent = parent
        self._entries: Dict[Optional[str], List[Info]] = {}

    @classmethod
    def with_defaults(cls) -> "InfoMap":
        """Build a user table over a freshly built default table."""
        from parsing.defaults import default_info_map

        return cls(default_info_map())

    def __contains__(self, cpp_name: Optional[str]) -> bool:
        return len(self.get(cpp_name)) > 0

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> Iterator[Optional[str]]:
        return iter(self._entries.keys())

    def get(self, cpp_name: Optional[str], partial: bool = True) -> List[Info]:
        key = normalize(cpp_name)
        info_list = self._entries.get(key)
        if info_list is None:
            info_list = self._entries.get(normalize(cpp_name, unconst=True))
        if info_list is None and partial:
            info_list = self._entries.get(normalize(cpp_name, unconst=True, untemplate=True))
        result = list(info_list) if info_list else []
        if self.parent is not None:
            result.extend(self.parent.get(cpp_name, partial))
        return result

    def get_at(self, index: int, cpp_name: Optional[str], partial: bool = True) -> Optional[Info]:
        info_list = self.get(cpp_name, partial)
        return info_list[index] if info_list else None

    def get_first(self, cpp_name: Optional[str], partial: bool = True) -> Optional[Info]:
        info_list = self.get(cpp_name, partial)
        return info_list[0] if info_list else None

    def put(self, info: Info, index: int = -1) -> "InfoMap":
        """Register ``info`` under each of its names.

        ``index`` is ``-1`` to append, ``0`` to take precedence over existing
        entries, or an explicit list position.
        """
        for cpp_name in info.cpp_names or (None,):
            keys = (normalize(cpp_name), normalize(cpp_name, untemplate=True))
            for key in dict.fromkeys(keys):
                info_list = self._entries.setdefault(key, [])
                if any(i is info for i in info_list):
                    continue
                if index == -1:
                    info_list.append(info)
                elif index == 0:
                    info_list.insert(0, info)
                else:
                    info_list.insert(index, info)
        return self

    def put_first(self, info: Info) -> "InfoMap":
        return self.put(info, 0)

    def put_all(self, infos: Iterable[Info]) -> "InfoMap":
        for info in infos:
            self.put(info)
        return self

    def merge(self, other: "InfoMap") -> "InfoMap":
        """Append the local entries of ``other`` after ours."""
        for key, info_list in other._entries.items():
            target = self._entries.setdefault(key, [])
            for info in info_list:
                if not any(i is info for i in target):
                    target.append(info)
        return self

    def clone(self) -> "InfoMap":
        """Independent copy of the local table (the parent stays shared)."""
        other = InfoMap(self.parent)
        other._entries = copy.copy(self._entries)
        for key, info_list in other._entries.items():
            other._entries[key] = list(info_list)
        return other

    def __repr__(self) -> str:
        return f"InfoMap(keys={len(self._entries)}, parent={self.parent is not None})"
