"""
Template parameter bindings active while parsing a template body.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Optional, Set

if TYPE_CHECKING:
    from parsing.models import Declarator, Type


class TemplateMap(Dict[str, Optional[str]]):
    """Ordered mapping from template parameter names to bound native types.

    Unbound parameters map to None. Lookups fall back to the parent map so
    member templates still see the bindings of their enclosing class.

    Attributes:
        parent: Enclosing template map, if any.
        type: Templated type, remembered by the declaration list.
        declarator: Templated function or variable, remembered likewise.
        variadic: Parameters declared as packs (``typename... Ts``).
    """

    def __init__(self, parent: Optional["TemplateMap"] = None):
        super().__init__()
        self.parent = parent
        self.type: Optional["Type"] = None
        self.declarator: Optional["Declarator"] = None
        self.variadic: Set[str] = set()

    @property
    def name(self) -> Optional[str]:
        if self.type is not None:
            return self.type.cpp_name
        if self.declarator is not None:
            return self.declarator.cpp_name
        return None

    def full(self) -> bool:
        return all(value is not None for value in self.values())

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = super().get(key)
        if value is None and self.parent is not None:
            return self.parent.get(key, default)
        return default if value is None else value

    def bind(self, arguments: Iterable["Type"]) -> "TemplateMap":
        """Bind parameters positionally to the native text of ``arguments``.

        A variadic parameter absorbs all remaining arguments.
        """
        args = [arg.native_text() for arg in arguments]
        keys = list(self.keys())
        for i, key in enumerate(keys):
            if i >= len(args):
                break
            if key in self.variadic:
                self[key] = ",".join(args[i:])
                break
            self[key] = args[i]
        return self

    def arguments_text(self) -> str:
        """Render the bound values as a template argument list."""
        args = "<" + ",".join(value or "" for value in self.values())
        return args + (" >" if args.endswith(">") else ">")
