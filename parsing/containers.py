"""
Wrapper classes for instantiated standard containers.

For every rule flagged ``define`` that names an instantiation of a known
container, e.g. ``std::vector<int>``, a Java peer class with size, element
access, iterator and bulk ``put`` methods is generated ahead of the header's
own declarations. Tuple-like and function-like families get indexed
``getN`` accessors and a ``call`` method instead.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from parsing.context import Context
from parsing.declarations import DeclarationList
from parsing.defaults import CONTAINERS
from parsing.models import Declaration, Type

if TYPE_CHECKING:
    from parsing.declarators import DeclaratorParser

logger = logging.getLogger(__name__)

SIZE_TYPE = Type(cpp_name="size_t", java_name="long", annotations='@Cast("size_t") ')

# Containers addressed by key, with no resize support
_ASSOCIATIVE = ("std::map", "std::unordered_map")
_SETS = ("std::set", "std::unordered_set")
_TUPLES = ("std::tuple",)
_FUNCTIONS = ("std::function",)
_PRIMITIVES = ("boolean", "byte", "char", "short", "int", "long", "float", "double")


def _by_ref(type_: Type) -> Type:
    if not type_.annotations and type_.java_name not in _PRIMITIVES:
        type_.annotations = "@ByRef "
    return type_


def _index_list(index_type: Type, count: int) -> str:
    return ", ".join(
        f"{index_type.annotations}{index_type.java_name} {chr(ord('i') + i)}" for i in range(count)
    )


def _header(container: Type, value_type: Type, brackets: str, resizable: bool, bulk: bool) -> str:
    name = container.java_name
    text = (
        "\n"
        f'@Name("{container.cpp_name}") public static class {name} extends Pointer {{\n'
        "    static { Loader.load(); }\n"
        f"    public {name}(Pointer p) {{ super(p); }}\n"
    )
    if bulk:
        text += f"    public {name}({value_type.java_name}{brackets} ... array) {{ this(array.length); put(array); }}\n"
    text += f"    public {name}()       {{ allocate();  }}\n"
    if resizable:
        text += f"    public {name}(long n) {{ allocate(n); }}\n"
    text += "    private native void allocate();\n"
    if resizable:
        text += '    private native void allocate(@Cast("size_t") long n);\n'
    text += f'    public native @Name("operator=") @ByRef {name} put(@ByRef {name} x);\n\n'
    return text


def _sizes(index_type: Type, dim: int, resizable: bool) -> str:
    text = ""
    for i in range(dim):
        index_annotation = ("@Index" + (f"({i}) " if i > 1 else " ")) if i > 0 else ""
        indices = _index_list(index_type, i)
        separator = ", " if indices else ""
        text += f"    public native {index_annotation}long size({indices});\n"
        if resizable:
            text += f'    public native {index_annotation}void resize({indices}{separator}@Cast("size_t") long n);\n'
    return text


def _bulk_put(container: Type, value_type: Type, brackets: str, dim: int) -> str:
    text = f"\n    public {container.java_name} put({value_type.java_name}{brackets} ... array) {{\n"
    indent = "        "
    indices = args = separator = ""
    for i in range(dim):
        c = chr(ord("i") + i)
        text += (
            f"{indent}if (size({args}) != array{indices}.length) {{ resize({args}{separator}array{indices}.length); }}\n"
            f"{indent}for (int {c} = 0; {c} < array{indices}.length; {c}++) {{\n"
        )
        indent += "    "
        indices += f"[{c}]"
        args += separator + c
        separator = ", "
    text += f"{indent}put({args}{separator}array{indices});\n"
    for _ in range(dim):
        indent = indent[4:]
        text += f"{indent}}}\n"
    text += "        return this;\n    }\n"
    return text


def _iterator(value_type: Type, first_type: Optional[Type] = None, second_type: Optional[Type] = None) -> str:
    """Nested ``iterator`` peer class plus the ``begin``/``end`` pair.

    Iterators over key/value elements expose ``first``/``second`` through
    the dereferenced element, all others a single ``get``.
    """
    text = (
        "\n"
        "    public native @ByVal Iterator begin();\n"
        "    public native @ByVal Iterator end();\n"
        '    @NoOffset @Name("iterator") public static class Iterator extends Pointer {\n'
        "        public Iterator(Pointer p) { super(p); }\n"
        "        public Iterator() { }\n"
        "\n"
        '        public native @Name("operator ++") @ByRef Iterator increment();\n'
        '        public native @Name("operator ==") boolean equals(@ByRef Iterator it);\n'
    )
    if first_type is not None and second_type is not None:
        text += (
            '        public native @Name("operator *().first") @MemberGetter '
            f"{first_type.annotations}@Const {first_type.java_name} first();\n"
            '        public native @Name("operator *().second") @MemberGetter '
            f"{second_type.annotations}@Const {second_type.java_name} second();\n"
        )
    else:
        text += (
            f'        public native @Name("operator *") {value_type.annotations}@Const '
            f"{value_type.java_name} get();\n"
        )
    return text + "    }\n"


def _sequence_text(container: Type, container_name: str, resizable: bool, index_type: Type, value_type: Type) -> str:
    dim = 1
    while value_type.cpp_name.startswith(container_name) and value_type.arguments:
        dim += 1
        value_type = value_type.arguments[0]
    first_type: Optional[Type] = None
    second_type: Optional[Type] = None
    if value_type.cpp_name.startswith("std::pair") and value_type.arguments and len(value_type.arguments) > 1:
        first_type = _by_ref(value_type.arguments[0])
        second_type = _by_ref(value_type.arguments[1])
    _by_ref(value_type)
    brackets = "[]" * (dim - 1)
    pairs = first_type is not None
    name = container.java_name

    text = _header(container, value_type, brackets, resizable, resizable and not pairs)
    text += _sizes(index_type, dim, resizable)
    params = _index_list(index_type, dim)
    separator = ", " if params else ""
    if pairs:
        index_annotation = "@Index" + (f"({dim}) " if dim > 1 else " ")
        text += (
            "\n"
            f"    {index_annotation}public native {first_type.annotations}{first_type.java_name} first({params});"
            f" public native {name} first({params}{separator}{first_type.java_name} first);\n"
            f"    {index_annotation}public native {second_type.annotations}{second_type.java_name} second({params}); "
            f" public native {name} second({params}{separator}{second_type.java_name} second);\n"
        )
    else:
        text += (
            "\n"
            f"    @Index public native {value_type.annotations}{value_type.java_name} get({params});\n"
            f"    public native {name} put({params}{separator}{value_type.java_name} value);\n"
        )
    if dim == 1:
        if not resizable:
            # map elements are key/value pairs
            text += _iterator(value_type, _by_ref(index_type), value_type)
        else:
            text += _iterator(value_type, first_type, second_type)
    if resizable and not pairs:
        text += _bulk_put(container, value_type, brackets, dim)
    return text + "}\n"


def _set_text(container: Type, value_type: Type) -> str:
    _by_ref(value_type)
    return (
        _header(container, value_type, "", False, False)
        + "    public boolean empty() { return size() == 0; }\n"
        "    public native long size();\n"
        "\n"
        f"    public native void insert({value_type.annotations}{value_type.java_name} value);\n"
        f"    public native void erase({value_type.annotations}{value_type.java_name} value);\n"
        + _iterator(value_type)
        + "}\n"
    )


def _pair_text(container: Type) -> str:
    first_type = _by_ref(container.arguments[0])
    second_type = _by_ref(container.arguments[1])
    name = container.java_name
    return (
        _header(container, first_type, "", False, False)
        + f"    public {name}({first_type.java_name} firstValue, {second_type.java_name} secondValue) "
        "{ this(); put(firstValue, secondValue); }\n"
        "\n"
        f"    @MemberGetter public native {first_type.annotations}{first_type.java_name} first();"
        f" public native {name} first({first_type.java_name} first);\n"
        f"    @MemberGetter public native {second_type.annotations}{second_type.java_name} second();"
        f" public native {name} second({second_type.java_name} second);\n"
        "\n"
        f"    public {name} put({first_type.java_name} firstValue, {second_type.java_name} secondValue) {{\n"
        "        first(firstValue);\n"
        "        second(secondValue);\n"
        "        return this;\n"
        "    }\n"
        "}\n"
    )


def _tuple_text(container: Type) -> str:
    element_types = [_by_ref(t) for t in container.arguments]
    name = container.java_name
    values = ", ".join(f"{t.java_name} value{i}" for i, t in enumerate(element_types))
    typed_values = ", ".join(f"{t.annotations}{t.java_name} value{i}" for i, t in enumerate(element_types))
    names = ", ".join(f"value{i}" for i in range(len(element_types)))
    text = (
        _header(container, element_types[0], "", False, False)
        + f"    public {name}({values}) {{ allocate({names}); }}\n"
        f"    private native void allocate({typed_values});\n"
        "\n"
    )
    for i, t in enumerate(element_types):
        text += (
            f"    public {t.java_name} get{i}() {{ return get{i}(this); }}\n"
            f'    @Namespace @Name("std::get<{i}>") public static native '
            f"{t.annotations}{t.java_name} get{i}(@ByRef {name} container);\n"
        )
    return text + "}\n"


def _function_text(parser: "DeclaratorParser", context: Context, container: Type) -> Optional[str]:
    # the single template argument reads like "int(int,float)"
    signature = container.arguments[0].cpp_name
    paren = signature.find("(")
    if paren <= 0:
        return None
    params = signature[paren:].replace(",", ", ")
    dcl = parser.fork(f"{signature[:paren]} call{params}").declarator(context)
    if dcl is None or dcl.parameters is None:
        return None
    return (
        _header(container, container, "", False, False)
        + '    public native @Cast("bool") @Name("operator bool") boolean callable();\n'
        f'    public native @Name("operator ()") {dcl.type.annotations}{dcl.type.java_name} '
        f"call{dcl.parameters.list};\n"
        "}\n"
    )


def _optional_text(container: Type) -> str:
    value_type = _by_ref(container.arguments[0])
    name = container.java_name
    return (
        _header(container, value_type, "", False, False)
        + f"    public {name}({value_type.java_name} value) {{ this(); put(value); }}\n"
        "\n"
        "    public native boolean has_value();\n"
        f'    public native @Name("value") {value_type.annotations}{value_type.java_name} get();\n'
        f'    @ValueSetter public native {name} put({value_type.annotations}{value_type.java_name} value);\n'
        "}\n"
    )


def container_text(parser: "DeclaratorParser", context: Context, container_name: str, cpp_name: str) -> Optional[str]:
    """Render the Java peer class of one container instantiation.

    Returns None when ``cpp_name`` carries no template arguments.
    """
    container = parser.fork(cpp_name).type(context)
    if container is None or not container.arguments:
        return None
    arguments: List[Type] = container.arguments
    if container_name == "std::pair":
        if len(arguments) < 2:
            return None
        return _pair_text(container)
    if container_name == "std::optional":
        return _optional_text(container)
    if container_name in _TUPLES:
        return _tuple_text(container)
    if container_name in _FUNCTIONS:
        return _function_text(parser, context, container)
    if container_name in _SETS:
        return _set_text(container, arguments[0])
    if len(arguments) > 1 or container_name in _ASSOCIATIVE:
        if len(arguments) < 2:
            return None
        return _sequence_text(container, container_name, False, arguments[0], arguments[1])
    index_type = Type(
        cpp_name=SIZE_TYPE.cpp_name, java_name=SIZE_TYPE.java_name, annotations=SIZE_TYPE.annotations
    )
    return _sequence_text(container, container_name, True, index_type, arguments[0])


def containers(parser: "DeclaratorParser", context: Context, decl_list: DeclarationList) -> int:
    """Add a wrapper class for every defined container instantiation.

    Returns:
        Number of wrapper classes added.
    """
    added = 0
    seen = set()
    for container_name in CONTAINERS:
        for info in parser.info_map.get(container_name):
            if info is None or info.skip or not info.define or not info.cpp_names or id(info) in seen:
                continue
            seen.add(id(info))
            text = container_text(parser, context, container_name, info.cpp_names[0])
            if text is None:
                continue
            decl_list.add(Declaration(text=text, signature=info.cpp_names[0]))
            logger.debug("Generated container wrapper for %s", info.cpp_names[0])
            added += 1
    return added
