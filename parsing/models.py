"""
Data models for parsed declarations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Attribute:
    """A macro-like attribute such as ``DLL_EXPORT`` or ``__attribute__((x))``.

    Attributes:
        cpp_name: Attribute identifier.
        java_name: Annotation text, when the rule table maps it to one.
        arguments: Concatenated argument tokens, if parenthesized.
        annotation: Whether the rule table maps it to Java annotations.
    """

    cpp_name: str = ""
    java_name: str = ""
    arguments: str = ""
    annotation: bool = False


@dataclass(eq=False)
class Type:
    """A parsed native type reference.

    ``cpp_name`` never keeps cv-qualifiers or trailing ``*``/``&``: those are
    hoisted into ``const_value``, ``const_pointer``, ``pointer``,
    ``reference`` and ``rvalue``.
    """

    cpp_name: str = ""
    java_name: str = ""
    annotations: str = ""
    arguments: Optional[List["Type"]] = None
    attributes: Optional[List[Attribute]] = None
    anonymous: bool = False
    const_pointer: bool = False
    const_value: bool = False
    constructor: bool = False
    destructor: bool = False
    operator: bool = False
    simple: bool = False
    static_member: bool = False
    pointer: bool = False
    reference: bool = False
    rvalue: bool = False
    friend: bool = False
    virtual: bool = False

    @classmethod
    def named(cls, name: str) -> "Type":
        return cls(cpp_name=name, java_name=name)

    def native_text(self) -> str:
        """Native spelling including cv-qualifiers and indirection."""
        text = self.cpp_name
        if self.const_value:
            text = "const " + text
        if self.const_pointer:
            text += " const"
        if self.pointer:
            text += "*"
        if self.reference:
            text += "&&" if self.rvalue else "&"
        return text

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Type):
            return NotImplemented
        return self.cpp_name == other.cpp_name and self.java_name == other.java_name

    def __hash__(self) -> int:
        return hash((self.cpp_name, self.java_name))


@dataclass
class Parameters:
    """A parenthesized parameter list.

    Attributes:
        list: Java rendering, e.g. ``"(int a, float b)"``.
        names: Bare argument names, e.g. ``"(a, b)"``.
        declarators: One declarator per emitted parameter.
        signature: Overload signature suffix, e.g. ``"_int_float"``.
        info_number: Highest rule variant index used by any parameter.
        defaults: Number of trailing parameters carrying a default value.
        elide_defaults: False when a default value cannot be dropped safely.
    """

    list: str = ""
    names: str = ""
    # the "list" field above shadows the builtin inside this class body
    declarators: List["Declarator"] = field(default_factory=lambda: [])
    signature: str = ""
    info_number: int = 0
    defaults: int = 0
    elide_defaults: bool = True


@dataclass
class Declarator:
    """A named instance of a ``Type``."""

    cpp_name: Optional[str] = ""
    java_name: Optional[str] = ""
    type: Optional[Type] = None
    indirections: int = 0
    reference: bool = False
    rvalue: bool = False
    const_pointer: bool = False
    dims: List[int] = field(default_factory=list)
    parameters: Optional[Parameters] = None
    definition: Optional["Declaration"] = None
    signature: str = ""
    info_number: int = 0
    bitfield: bool = False
    default_value: Optional[str] = None

    @property
    def indices(self) -> int:
        return len(self.dims)


@dataclass
class Declaration:
    """One emittable unit of output.

    Attributes:
        text: Rendered Java text, including preserved spacing and comments.
        signature: Overload signature used for de-duplication.
        type: Declared type, for groups and forward declarations.
        declarator: Declared function or variable.
        function: Declares a function.
        variable: Declares a variable accessor.
        comment: Carries only comments or pass-through text.
        abstract_member: Pure virtual function.
        const_member: Const member function.
        custom: Text replaced by a rule's ``java_text``.
        inaccessible: Not public.
        incomplete: Forward declaration only.
    """

    text: str = ""
    signature: str = ""
    type: Optional[Type] = None
    declarator: Optional[Declarator] = None
    function: bool = False
    variable: bool = False
    comment: bool = False
    abstract_member: bool = False
    const_member: bool = False
    custom: bool = False
    inaccessible: bool = False
    incomplete: bool = False

    @property
    def kind(self) -> str:
        if self.function:
            return "function"
        if self.variable:
            return "variable"
        if self.type is not None:
            return "type"
        if self.comment or not self.signature:
            return "comment"
        return "constant"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "signature": self.signature,
            "cpp_name": self.declarator.cpp_name if self.declarator else (
                self.type.cpp_name if self.type else None
            ),
            "text": self.text,
            "abstract_member": self.abstract_member,
            "const_member": self.const_member,
            "custom": self.custom,
            "inaccessible": self.inaccessible,
            "incomplete": self.incomplete,
        }
