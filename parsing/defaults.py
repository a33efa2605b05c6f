"""
Default rule set mapping fundamental and standard library types to Java.

Every call to ``default_info_map`` builds a fresh table, so concurrent builds
never share mutable state.
"""

from typing import List

from parsing.config import RESERVED_MEMBER_NAMES
from parsing.infomap import Info, InfoMap

# Standard containers eligible for wrapper synthesis
CONTAINERS: tuple = (
    "std::deque",
    "std::function",
    "std::list",
    "std::map",
    "std::optional",
    "std::pair",
    "std::queue",
    "std::set",
    "std::stack",
    "std::tuple",
    "std::vector",
    "std::valarray",
    "std::unordered_map",
    "std::unordered_set",
)

# Java method names for overloaded operators
OPERATOR_NAMES: dict = {
    "operator->": "access",
    "operator()": "apply",
    "operator[]": "get",
    "operator=": "put",
    "operator+": "add",
    "operator-": "subtract",
    "operator*": "multiply",
    "operator/": "divide",
    "operator%": "mod",
    "operator++": "increment",
    "operator--": "decrement",
    "operator==": "equals",
    "operator!=": "notEquals",
    "operator<": "lessThan",
    "operator>": "greaterThan",
    "operator<=": "lessThanEquals",
    "operator>=": "greaterThanEquals",
    "operator!": "not",
    "operator&&": "and",
    "operator||": "or",
    "operator&": "and",
    "operator|": "or",
    "operator^": "xor",
    "operator~": "not",
    "operator<<": "shiftLeft",
    "operator>>": "shiftRight",
    "operator+=": "addPut",
    "operator-=": "subtractPut",
    "operator*=": "multiplyPut",
    "operator/=": "dividePut",
    "operator%=": "modPut",
    "operator&=": "andPut",
    "operator|=": "orPut",
    "operator^=": "xorPut",
    "operator<<=": "shiftLeftPut",
    "operator>>=": "shiftRightPut",
}


def _pointers(java_type: str) -> tuple:
    name = java_type.capitalize()
    return (f"{name}Pointer", f"{name}Buffer", f"{java_type}[]")


def default_rules() -> List[Info]:
    rules = [
        Info.of("__attribute__", "__declspec", "alignas", annotations=(), skip=True),
        Info.of("void", value_types=("void",), pointer_types=("Pointer",)),
        Info.of("std::nullptr_t", cast=True, pointer_types=("Pointer",)),
        Info.of(
            "va_list", "FILE", "std::exception", "std::istream", "std::ostream",
            "std::iostream", "std::ifstream", "std::ofstream", "std::fstream",
            cast=True, pointer_types=("Pointer",),
        ),
        Info.of(
            "int8_t", "__int8", "jbyte", "signed char",
            value_types=("byte",), pointer_types=_pointers("byte"),
        ),
        Info.of(
            "uint8_t", "unsigned __int8", "char", "unsigned char",
            cast=True, value_types=("byte",), pointer_types=_pointers("byte"),
        ),
        Info.of(
            "int16_t", "__int16", "jshort", "short", "signed short", "short int",
            "signed short int",
            value_types=("short",), pointer_types=_pointers("short"),
        ),
        Info.of(
            "uint16_t", "unsigned __int16", "unsigned short", "unsigned short int",
            "char16_t",
            cast=True, value_types=("short",), pointer_types=_pointers("short"),
        ),
        Info.of(
            "int32_t", "__int32", "jint", "int", "signed int", "signed",
            value_types=("int",), pointer_types=_pointers("int"),
        ),
        Info.of(
            "uint32_t", "unsigned __int32", "unsigned int", "unsigned", "char32_t",
            cast=True, value_types=("int",), pointer_types=_pointers("int"),
        ),
        Info.of(
            "int64_t", "__int64", "jlong", "long long", "signed long long",
            "long long int", "signed long long int",
            value_types=("long",), pointer_types=_pointers("long"),
        ),
        Info.of(
            "uint64_t", "unsigned __int64", "unsigned long long",
            "unsigned long long int",
            cast=True, value_types=("long",), pointer_types=_pointers("long"),
        ),
        Info.of(
            "long", "signed long", "long int", "signed long int",
            value_types=("long",), pointer_types=("CLongPointer",),
        ),
        Info.of(
            "unsigned long", "unsigned long int",
            cast=True, value_types=("long",), pointer_types=("CLongPointer",),
        ),
        Info.of(
            "size_t", "std::size_t", "ptrdiff_t", "intptr_t", "uintptr_t", "off_t",
            "ssize_t",
            cast=True, value_types=("long",), pointer_types=("SizeTPointer",),
        ),
        Info.of("float", "jfloat", value_types=("float",), pointer_types=_pointers("float")),
        Info.of("double", "jdouble", value_types=("double",), pointer_types=_pointers("double")),
        Info.of("long double", cast=True, value_types=("double",), pointer_types=("Pointer",)),
        Info.of(
            "std::complex<float>", cast=True, pointer_types=_pointers("float"),
        ),
        Info.of(
            "std::complex<double>", cast=True, pointer_types=_pointers("double"),
        ),
        Info.of(
            "bool", "jboolean",
            cast=True, value_types=("boolean",), pointer_types=("BoolPointer",),
        ),
        Info.of(
            "wchar_t", "WCHAR",
            cast=True, value_types=("char",), pointer_types=("CharPointer",),
        ),
        Info.of(
            "const char",
            value_types=("byte",),
            pointer_types=('@Cast("const char*") BytePointer', "String"),
        ),
        Info.of(
            "std::string",
            annotations=("@StdString",), value_types=("BytePointer", "String"),
        ),
        Info.of("std::vector", annotations=("@StdVector",)),
    ]
    rules.extend(
        Info.of(cpp_name, java_names=(java_name,))
        for cpp_name, java_name in OPERATOR_NAMES.items()
    )
    rules.extend(
        Info.of(name, java_names=("_" + name,)) for name in RESERVED_MEMBER_NAMES
    )
    return rules


def default_info_map() -> InfoMap:
    """Build a fresh root table holding the default rules."""
    return InfoMap().put_all(default_rules())
