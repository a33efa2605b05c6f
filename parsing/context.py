"""
Scope context threaded through the recursive-descent parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from parsing.infomap import normalize
from parsing.models import Declarator, Type
from parsing.templates import TemplateMap


@dataclass
class Context:
    """Per-scope parsing state.

    Nested scopes get a copy through ``clone``; a parent context is never
    changed by a child scope, except for ``using_list`` which is shared on
    purpose so that ``using`` imports stay visible to the enclosing file.

    Attributes:
        namespace: Current ``::``-separated namespace or class path.
        group: Enclosing class, struct or union.
        inaccessible: Current access level is private or protected.
        virtualize: Virtual functions get overridable hooks.
        immutable: Variables get no setters.
        beanify: Accessors are named ``getX``/``setX``.
        objectify: Static members become instance methods.
        c_only: Parsing a C header, which disables implicit constructors.
        variable: Member variable whose anonymous struct is being parsed.
        template_map: Active template bindings.
        using_list: Names imported by ``using`` declarations.
        inherited_constructors: Bases named by ``using Base::Base;``.
    """

    namespace: Optional[str] = None
    group: Optional[Type] = None
    inaccessible: bool = False
    virtualize: bool = False
    immutable: bool = False
    beanify: bool = False
    objectify: bool = False
    c_only: bool = False
    variable: Optional[Declarator] = None
    template_map: Optional[TemplateMap] = None
    using_list: List[str] = field(default_factory=list)
    inherited_constructors: List[str] = field(default_factory=list)

    def clone(self, **changes) -> "Context":
        return replace(self, **changes)

    def qualify(self, cpp_name: Optional[str]) -> List[str]:
        """Return likely qualified names for ``cpp_name``, innermost first."""
        if not cpp_name:
            return []
        names: List[str] = []
        ns: Optional[str] = self.namespace or ""
        while ns is not None:
            name = f"{ns}::{cpp_name}" if ns else cpp_name
            template_map = self.template_map
            while template_map is not None:
                if name == template_map.name:
                    names.append(name + template_map.arguments_text())
                    break
                template_map = template_map.parent
            names.append(name)
            ns = normalize(ns, untemplate=True) or ""
            i = ns.rfind("::")
            ns = ns[:i] if i >= 0 else ("" if ns else None)
        prefix = normalize(cpp_name, untemplate=True)
        for using in self.using_list:
            i = using.rfind("::") + 2
            suffix = using[i:] if i >= 2 else using
            scope = using[:i] if i >= 2 else ""
            if not suffix or prefix == suffix:
                candidate = scope + cpp_name
                if candidate not in names:
                    names.append(candidate)
        return names

    def shorten(self, java_name: str) -> str:
        """Drop the enclosing group's Java prefix from ``java_name``."""
        if self.group is None:
            return java_name
        last_dot = 0
        prefix = self.group.java_name + "."
        for i, (a, b) in enumerate(zip(java_name, prefix)):
            if a != b:
                break
            if a == ".":
                last_dot = i
        if last_dot > 0:
            java_name = java_name[last_dot + 1:]
        return java_name
