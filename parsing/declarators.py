"""
Sub-parsers for types, declarators, parameter lists and attributes.

These are the building blocks shared by the top-level construct recognizers
in ``parsing.parser``. Every method reads from the shared ``TokenIndexer`` and
resolves names through the rule table; none of them emits declarations.
"""

import logging
from typing import List, Optional

from core.signature_contract import is_java_identifier, sanitize_java_name, signature_part
from parsing.config import DOXYGEN_PREFIXES, SIMPLE_TYPES, TYPE_SKIPPED_KEYWORDS
from parsing.context import Context
from parsing.indexer import TokenIndexer
from parsing.infomap import Info, InfoMap
from parsing.models import Attribute, Declaration, Declarator, Parameters, Type
from parsing.templates import TemplateMap
from parsing.tokenizer import tokenize
from parsing.tokens import (
    CONST,
    CONSTEXPR,
    DECLTYPE,
    FRIEND,
    OPERATOR,
    STATIC,
    TEMPLATE,
    TYPEDEF,
    USING,
    VIRTUAL,
    ParserError,
    Token,
    TokenKind,
)

logger = logging.getLogger(__name__)


def _hoist_qualifiers(type_: Type) -> None:
    """Move leading ``const`` and trailing ``*``/``&``/``const`` into flags."""
    name = type_.cpp_name.strip()
    if name.startswith("const "):
        type_.const_value = True
        name = name[6:]
    if name.endswith("*"):
        type_.pointer = True
        name = name[:-1]
    if name.endswith("&&"):
        type_.reference = type_.rvalue = True
        name = name[:-2]
    elif name.endswith("&"):
        type_.reference = True
        name = name[:-1]
    if name.endswith(" const"):
        type_.const_pointer = True
        name = name[:-6]
    type_.cpp_name = name.strip()


def _parse_dimension(token: Token) -> int:
    if not token.match(TokenKind.INTEGER):
        return -1
    try:
        return int(token.value.rstrip("L"), 0)
    except ValueError:
        return -1


class DeclaratorParser:
    """Recursive-descent sub-parsers over a token cursor.

    Attributes:
        info_map: Rule table shared by every parser of one build.
        tokens: Token cursor.
        line_separator: Line separator of the first parsed file.
    """

    def __init__(
        self,
        info_map: InfoMap,
        tokens: TokenIndexer,
        line_separator: Optional[str] = None,
    ):
        self.info_map = info_map
        self.tokens = tokens
        self.line_separator = line_separator

    def fork(self, text: str) -> "DeclaratorParser":
        """Parser over an isolated ``text`` fragment sharing the rule table."""
        tokens = TokenIndexer(self.info_map, tokenize(text))
        return self.__class__(self.info_map, tokens, self.line_separator)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def translate(self, text: str) -> str:
        """Rewrite a trailing ``Scope::NAME`` reference to its Java form."""
        namespace = text.rfind("::")
        if namespace >= 0:
            info = self.info_map.get_first(text[:namespace])
            text = text[namespace + 2:]
            if info is None:
                pass
            elif info.enumerate and info.value_types:
                text = info.value_types[0] + "." + text
            elif info.pointer_types and not info.value_types:
                text = info.pointer_types[0] + "." + text
        return text

    def skip_balanced(self, *stops: str) -> str:
        """Advance to the first of ``stops`` outside brackets.

        Returns the text of the skipped tokens.
        """
        tokens = self.tokens
        text = ""
        depth = 0
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if depth == 0 and token.match(*stops):
                break
            if token.match("(", "[", "{"):
                depth += 1
            elif token.match(")", "]", "}"):
                depth -= 1
            text += token.spacing + token.value
            token = tokens.next()
        return text

    def lookup(self, context: Context, cpp_name: str):
        """Qualify ``cpp_name`` in ``context`` and return ``(name, info)``.

        An exact rule wins immediately; a partial match is remembered as a
        fallback name without an associated exact rule.
        """
        info = None
        for name in context.qualify(cpp_name):
            info = self.info_map.get_first(name, partial=False)
            if info is not None:
                return name, info
            if self.info_map.get_first(name) is not None:
                cpp_name = name
        return cpp_name, None

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def template(self, context: Context) -> Optional[TemplateMap]:
        tokens = self.tokens
        if not tokens.get().match(TEMPLATE) or not tokens.get(1).match("<"):
            return None
        template_map = TemplateMap(context.template_map)
        tokens.next().expect("<")
        token = tokens.next()
        while not token.match(TokenKind.EOF):
            if token.match(TEMPLATE):
                # template template parameter
                tokens.next().expect("<")
                tokens.next()
                self.skip_balanced(">")
                token = tokens.next()
            if token.match(TokenKind.IDENTIFIER):
                token = tokens.next()
                variadic = token.match("...")
                if variadic:
                    token = tokens.next()
                key = token.expect(TokenKind.IDENTIFIER).value
                template_map[key] = template_map.get(key)
                if variadic:
                    template_map.variadic.add(key)
                token = tokens.next()
            if not token.match(",", ">"):
                # ignore default argument
                count = 0
                token = tokens.get()
                while not token.match(TokenKind.EOF):
                    if count == 0 and token.match(",", ">"):
                        break
                    elif token.match("<", "("):
                        count += 1
                    elif token.match(">", ")"):
                        count -= 1
                    token = tokens.next()
            if token.expect(",", ">").match(">"):
                if tokens.next().match(TEMPLATE) and tokens.get(1).match("<"):
                    tokens.next()
                else:
                    break
            token = tokens.next()
        return template_map

    def template_arguments(self, context: Context) -> Optional[List[Type]]:
        tokens = self.tokens
        if not tokens.get().match("<"):
            return None
        arguments: List[Type] = []
        token = tokens.next()
        while not token.match(TokenKind.EOF):
            if token.match(">"):
                break
            type_ = self.type(context)
            token = tokens.get()
            if type_ is not None:
                arguments.append(type_)
                if not token.match(",", ">"):
                    # may not actually be a type
                    count = 0
                    while not token.match(TokenKind.EOF):
                        if count == 0 and token.match(",", ">"):
                            break
                        elif token.match("<", "("):
                            count += 1
                        elif token.match(">", ")"):
                            count -= 1
                        type_.cpp_name += token.value
                        token = tokens.next()
                    if type_.cpp_name.endswith("*"):
                        type_.java_name = "PointerPointer"
                        type_.annotations += f'@Cast("{type_.cpp_name}*") '
            if token.expect(",", ">").match(">"):
                break
            token = tokens.next()
        return arguments

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _argument_text(self, argument: Type) -> str:
        info = self.info_map.get_first(argument.cpp_name)
        text = info.cpp_types[0] if info is not None and info.cpp_types else argument.cpp_name
        spelled = Type(
            cpp_name=text,
            const_value=argument.const_value,
            const_pointer=argument.const_pointer,
            pointer=argument.pointer,
            reference=argument.reference,
            rvalue=argument.rvalue,
        )
        return spelled.native_text()

    def type(self, context: Context) -> Optional[Type]:
        """Parse a type reference at the cursor.

        Returns None when the type is a variadic ``...``.
        """
        tokens = self.tokens
        type_ = Type()
        attributes: List[Attribute] = []
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            advance = True
            if token.match("::"):
                type_.cpp_name += token.value
            elif token.match(DECLTYPE) and tokens.get(1).match("("):
                tokens.next()
                tokens.next()
                type_.cpp_name += "decltype(" + self.skip_balanced(")").strip() + ")"
            elif token.match("<") and type_.cpp_name:
                type_.arguments = self.template_arguments(context)
                args = ",".join(self._argument_text(t) for t in type_.arguments)
                type_.cpp_name += "<" + args + (" >" if args.endswith(">") else ">")
            elif token.match("[") and tokens.get(1).match("["):
                # C++11 attribute, carries no type information
                self.attribute()
                advance = False
            elif token.match(CONST, CONSTEXPR):
                if not type_.cpp_name:
                    type_.const_value = True
                else:
                    type_.const_pointer = True
            elif token.match("*"):
                type_.pointer = True
                tokens.next()
                break
            elif token.match("&&"):
                type_.reference = type_.rvalue = True
                tokens.next()
                break
            elif token.match("&"):
                type_.reference = True
                tokens.next()
                break
            elif token.match("~"):
                type_.destructor = True
            elif token.match(STATIC):
                type_.static_member = True
            elif token.match(VIRTUAL):
                type_.virtual = True
            elif token.match(FRIEND):
                type_.friend = True
            elif token.match(OPERATOR):
                if not type_.cpp_name:
                    type_.operator = True
                elif type_.cpp_name.endswith("::"):
                    type_.operator = True
                    tokens.next()
                    break
                else:
                    break
            elif token.match(TEMPLATE) and type_.cpp_name.endswith("::"):
                pass
            elif token.match(*TYPE_SKIPPED_KEYWORDS):
                pass
            elif token.match(*SIMPLE_TYPES):
                type_.cpp_name += token.value + " "
                type_.simple = True
            elif token.match(TokenKind.IDENTIFIER):
                back_index = tokens.index
                attr = self.attribute()
                if attr is not None and attr.annotation:
                    type_.annotations += attr.java_name
                    attributes.append(attr)
                    advance = False
                else:
                    tokens.index = back_index
                    if not type_.cpp_name or type_.cpp_name.endswith("::"):
                        type_.cpp_name += token.value
                    else:
                        following = tokens.get(1)
                        info = self.info_map.get_first(following.value)
                        if (info is not None and info.annotations is not None) or not following.match(
                            "*", "&", "&&", TokenKind.IDENTIFIER, CONST
                        ):
                            # we probably reached a variable or function name identifier
                            break
            else:
                if token.match("}"):
                    type_.anonymous = True
                    tokens.next()
                break
            if advance:
                tokens.next()
            token = tokens.get()

        if attributes:
            type_.attributes = attributes
        type_.cpp_name = type_.cpp_name.strip()
        if tokens.get().match("..."):
            tokens.next()
            return None
        if type_.operator:
            token = tokens.get()
            while not token.match(TokenKind.EOF, "("):
                type_.cpp_name += token.value
                token = tokens.next()

        _hoist_qualifiers(type_)

        # perform template substitution
        template_map = context.template_map
        if template_map is not None:
            bound = template_map.get(type_.cpp_name)
            if bound is not None:
                type_.cpp_name = bound
            elif "::" in type_.cpp_name and "<" not in type_.cpp_name:
                segments = type_.cpp_name.split("::")
                type_.cpp_name = "::".join(template_map.get(s) or s for s in segments)
            _hoist_qualifiers(type_)

        # guess the fully qualified C++ type with what's available in the rule table
        type_.cpp_name, info = self.lookup(context, type_.cpp_name)

        # produce some appropriate name for the peer Java class
        namespace = type_.cpp_name.rfind("::")
        template = type_.cpp_name.rfind("<")
        type_.java_name = (
            type_.cpp_name[namespace + 2:] if namespace >= 0 and template < 0 else type_.cpp_name
        )
        if info is not None:
            if not type_.pointer and not type_.reference and info.value_types:
                type_.java_name = info.value_types[0]
            elif info.pointer_types:
                type_.java_name = info.pointer_types[0]

        if info is not None and info.annotations:
            for annotation in info.annotations:
                type_.annotations += annotation + " "
        if context.group is not None and type_.java_name:
            group_name = context.group.cpp_name
            template2 = group_name.rfind("<") if group_name else -1
            if template < 0 and template2 >= 0:
                group_name = group_name[:template2]
            if type_.cpp_name == group_name and not context.c_only:
                type_.constructor = (
                    not type_.destructor
                    and not type_.operator
                    and not type_.pointer
                    and not type_.reference
                    and tokens.get().match("(", ":")
                )
            type_.java_name = context.shorten(type_.java_name)
        return type_

    # ------------------------------------------------------------------
    # Declarators
    # ------------------------------------------------------------------

    def declarator(
        self,
        context: Context,
        default_name: Optional[str] = None,
        info_number: int = 0,
        keep_defaults: Optional[int] = None,
        var_number: int = 0,
        array_as_pointer: bool = False,
        pointer_as_array: bool = False,
        alias: bool = False,
    ) -> Optional[Declarator]:
        """Parse a declarator, the type included.

        Args:
            context: Current scope.
            default_name: Name used when the declarator is abstract.
            info_number: Rule variant index used to pick among alternative
                Java pointer types; negative disables ``@ByPtrPtr``.
            keep_defaults: Number of default-valued parameters to keep, or
                None to keep all of them.
            var_number: Index of the declarator to pick in a multi-variable
                statement such as ``int a, b, *c;``.
            array_as_pointer: Fold array dimensions into an indirection.
            pointer_as_array: Fold a second indirection into a dimension.
            alias: Parse as the target of a ``typedef`` or ``using`` alias.

        Returns:
            The declarator, or None for a variadic parameter or when
            ``var_number`` is past the end of the statement.
        """
        tokens = self.tokens
        typedef = alias or tokens.get().match(TYPEDEF)
        using = tokens.get().match(USING)
        dcl = Declarator()
        type_ = self.type(context)
        if type_ is None:
            return None

        # pick the requested identifier out of the statement in the case of multiple variable declarations
        count = 0
        number = 0
        token = tokens.get()
        while number < var_number and not token.match(TokenKind.EOF):
            if token.match("(", "[", "{"):
                count += 1
            elif token.match(")", "]", "}"):
                count -= 1
            elif count > 0:
                pass
            elif token.match(","):
                number += 1
            elif token.match(";"):
                tokens.next()
                return None
            token = tokens.next()
        if number < var_number:
            # the statement ran out before the requested declarator
            return None

        # start building an appropriate cast for the C++ type
        cast = type_.cpp_name
        if type_.const_pointer:
            dcl.const_pointer = True
            cast += " const"
        if var_number == 0 and type_.pointer:
            dcl.indirections += 1
            cast += "*"
        if var_number == 0 and type_.reference:
            dcl.reference = True
            dcl.rvalue = type_.rvalue
            cast += "&&" if type_.rvalue else "&"
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if token.match("*"):
                dcl.indirections += 1
            elif token.match("&&"):
                dcl.reference = dcl.rvalue = True
            elif token.match("&"):
                dcl.reference = True
            elif token.match(CONST):
                dcl.const_pointer = True
            else:
                break
            cast += token.value
            token = tokens.next()

        # translate C++ attributes to equivalent Java annotations
        attributes: List[Attribute] = list(type_.attributes or [])
        back_index = tokens.index
        attr = self.attribute()
        while attr is not None and attr.annotation:
            type_.annotations += attr.java_name
            attributes.append(attr)
            back_index = tokens.index
            attr = self.attribute()
        tokens.index = back_index

        # consider attributes of the form SOMETHING(name) as hints for an appropriate Java name
        hint = None
        for a in attributes:
            if is_java_identifier(a.arguments):
                hint = a
                break

        # ignore superfluous parentheses
        parens = 0
        while tokens.get().match("(") and tokens.get(1).match("("):
            tokens.next()
            parens += 1

        dims: List[int] = []
        indirections2 = 0
        dcl.cpp_name = ""
        group_info: Optional[Info] = None
        definition = Declaration()
        operator = False
        if type_.operator:
            # conversion operator, named after its target type
            operator = True
            suffix = "*" if type_.pointer else "&" if type_.reference else ""
            const = "const " if type_.const_value else ""
            dcl.cpp_name = f"operator {const}{type_.cpp_name}{suffix}"
        elif tokens.get().match("(") or (typedef and tokens.get(1).match("(")):
            # probably a function pointer declaration
            if tokens.get().match("("):
                tokens.next()
            token = tokens.get()
            while not token.match(TokenKind.EOF):
                if token.match(TokenKind.IDENTIFIER, "::"):
                    dcl.cpp_name += token.value
                elif token.match("*", "&"):
                    indirections2 += 1
                    if dcl.cpp_name.endswith("::"):
                        dcl.cpp_name, group_info = self.lookup(context, dcl.cpp_name[:-2])
                        definition.text += f'@Namespace("{dcl.cpp_name}") '
                    elif dcl.cpp_name:
                        definition.text += f'@Convention("{dcl.cpp_name}") '
                    dcl.cpp_name = ""
                elif token.match("["):
                    dims.append(_parse_dimension(tokens.get(1)))
                elif token.match("(", ")"):
                    break
                token = tokens.next()
            if tokens.get().match(")"):
                tokens.next()
        elif tokens.get().match(TokenKind.IDENTIFIER, "~"):
            token = tokens.get()
            while not token.match(TokenKind.EOF):
                if token.match("::"):
                    dcl.cpp_name += token.value
                elif token.match("~") and (not dcl.cpp_name or dcl.cpp_name.endswith("::")):
                    dcl.cpp_name += token.value
                elif token.match(OPERATOR):
                    operator = True
                    # assume we can have any symbols until the first open parenthesis
                    following = tokens.next()
                    dcl.cpp_name += "operator" + (" " if following.match(TokenKind.IDENTIFIER) else "")
                    dcl.cpp_name += following.value
                    token = tokens.next()
                    while not token.match(TokenKind.EOF, "("):
                        dcl.cpp_name += token.value
                        token = tokens.next()
                    break
                elif token.match("<") and dcl.cpp_name:
                    # template arguments
                    dcl.cpp_name += token.value
                    count2 = 0
                    token = tokens.next()
                    while not token.match(TokenKind.EOF):
                        dcl.cpp_name += token.value
                        if count2 == 0 and token.match(">"):
                            break
                        elif token.match("<"):
                            count2 += 1
                        elif token.match(">"):
                            count2 -= 1
                        token = tokens.next()
                elif token.match(TokenKind.IDENTIFIER) and (
                    not dcl.cpp_name or dcl.cpp_name.endswith(("::", "~"))
                ):
                    dcl.cpp_name += token.value
                else:
                    break
                token = tokens.next()
        if not dcl.cpp_name:
            dcl.cpp_name = default_name

        bracket = False
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if not bracket and token.match("["):
                bracket = True
                dims.append(_parse_dimension(tokens.get(1)))
            elif not bracket:
                break
            elif token.match("]"):
                bracket = False
            token = tokens.next()
        while dims and indirections2 > 0:
            # treat complex combinations of arrays and pointers as multidimensional arrays
            dims.append(-1)
            indirections2 -= 1
        if array_as_pointer and dims:
            # treat array as an additional indirection
            dcl.indirections += 1
            dim_cast = "".join(f"[{d}]" for d in dims[1:] if d > 0)
            cast += "(*)" + dim_cast if dim_cast else "*"
        if pointer_as_array and dcl.indirections > (0 if type_.anonymous else 1):
            # treat second indirection as an array, unless anonymous
            dims.append(-1)
            dcl.indirections -= 1
            cast = cast[:-1]
        dcl.dims = dims

        if tokens.get().match(":") and not typedef:
            # ignore bitfields
            type_.annotations += "@NoOffset "
            dcl.bitfield = True
            tokens.next()
            self.skip_balanced(",", ";", "}")

        info_length = 1
        value_type = False
        need_cast = array_as_pointer and len(dims) > 1
        implicit_const = False
        prefix = "const " if type_.const_value and dcl.indirections < 2 and not dcl.reference else ""
        info = self.info_map.get_first(prefix + type_.cpp_name, partial=False)
        if not typedef and (info is None or info.cpp_types):
            # substitute template types that have no rule with appropriate adapter annotation
            type2 = type_
            if info is not None:
                type2 = self.fork(info.cpp_types[0]).type(context) or type_
            for info2 in self.info_map.get(type2.cpp_name):
                if type2.arguments and info2.annotations:
                    argument = type2.arguments[0]
                    type_.const_pointer = argument.const_pointer
                    type_.const_value = argument.const_value
                    type_.simple = argument.simple
                    type_.pointer = argument.pointer
                    type_.reference = argument.reference
                    type_.annotations = argument.annotations
                    type_.cpp_name = argument.cpp_name
                    type_.java_name = argument.java_name
                    dcl.indirections = 1
                    dcl.reference = False
                    cast = type_.cpp_name + "*"
                    if type_.const_value:
                        cast = "const " + cast
                    if type_.const_pointer:
                        cast = cast + " const"
                    if type_.pointer:
                        dcl.indirections += 1
                        cast += "*"
                    if type_.reference:
                        dcl.reference = True
                        cast += "&"
                    for annotation in info2.annotations:
                        type_.annotations += annotation + " "
                    info = self.info_map.get_first(type_.cpp_name, partial=False)
                    break
        if not using and info is not None:
            value_type = info.value_types is not None and (
                (type_.const_value and dcl.reference)
                or (dcl.indirections == 0 and not dcl.reference)
                or info.pointer_types is None
            )
            implicit_const = bool(info.cpp_names) and info.cpp_names[0].startswith("const ")
            if value_type:
                info_length = len(info.value_types)
            elif info.pointer_types is not None:
                info_length = len(info.pointer_types)
            info_length = max(info_length, 1)
            dcl.info_number = 0 if info_number < 0 else info_number % info_length
            if value_type:
                type_.java_name = info.value_types[dcl.info_number]
            elif info.pointer_types:
                type_.java_name = info.pointer_types[dcl.info_number]
            type_.java_name = context.shorten(type_.java_name)
            need_cast |= info.cast and type_.cpp_name != type_.java_name

        if not value_type:
            if dcl.indirections == 0 and not dcl.reference:
                type_.annotations += "@ByVal "
            elif dcl.indirections == 0 and dcl.reference:
                type_.annotations += "@ByRef(true) " if dcl.rvalue else "@ByRef "
            elif dcl.indirections == 1 and dcl.reference:
                type_.annotations += "@ByPtrRef "
            elif dcl.indirections == 2 and not dcl.reference and info_number >= 0:
                type_.annotations += "@ByPtrPtr "
                need_cast |= type_.cpp_name == "void"
            elif dcl.indirections >= 2:
                dcl.info_number += info_length
                need_cast = True
                type_.java_name = "PointerPointer"
                if dcl.reference:
                    type_.annotations += "@ByRef "

            if not need_cast and type_.const_value and not implicit_const and "@Cast" not in type_.java_name:
                type_.annotations = "@Const " + type_.annotations
        if need_cast:
            if dcl.indirections == 0 and dcl.reference:
                # consider as pointer type
                cast = cast.replace("&", "*")
            if value_type and type_.const_value and dcl.reference:
                # consider as value type
                cast = cast[:-1]
            if type_.const_value:
                cast = "const " + cast
            if not value_type and dcl.indirections == 0 and not dcl.reference:
                type_.annotations += f'@Cast("{cast}*") '
            else:
                type_.annotations = f'@Cast("{cast}") ' + type_.annotations

        # initialize shorten Java name and get fully qualified C++ name
        dcl.java_name = hint.arguments if hint is not None else dcl.cpp_name
        if dcl.java_name and "::" in dcl.java_name and not operator:
            dcl.java_name = dcl.java_name[dcl.java_name.rfind("::") + 2:]
        if dcl.cpp_name:
            dcl.cpp_name, found = self.lookup(context, dcl.cpp_name)
            info = found
        else:
            info = None

        # pick the Java name from the rule table if appropriate
        if (
            hint is None
            and default_name is None
            and info is not None
            and info.java_names
            and (
                operator
                or "<" not in (info.cpp_names[0] if info.cpp_names else "")
                or (context.template_map is not None and context.template_map.type is None)
            )
        ):
            dcl.java_name = info.java_names[0]
        elif type_.operator:
            java_type = type_.java_name[type_.java_name.rfind(" ") + 1:]
            java_type = sanitize_java_name(java_type, "")
            dcl.java_name = "as" + java_type[:1].upper() + java_type[1:]
        elif operator and dcl.cpp_name:
            # unknown operators keep a legal Java name
            dcl.java_name = sanitize_java_name(dcl.cpp_name)

        # annotate with @Name if the Java name doesn't match with the C++ name
        if dcl.cpp_name:
            local_name = dcl.cpp_name
            namespace = local_name.rfind("::")
            if namespace >= 0 and context.namespace is not None and (
                context.namespace == local_name[:namespace]
                or context.namespace.startswith(local_name[:namespace] + "::")
            ):
                local_name = local_name[namespace + 2:]
            if local_name != dcl.java_name:
                type_.annotations += f'@Name("{local_name}") '
        if info is not None and info.annotations:
            for annotation in info.annotations:
                type_.annotations += annotation + " "

        # deal with function parameters and function pointers
        dcl.signature = dcl.java_name or ""
        dcl.parameters = self.parameters(context, info_number, keep_defaults)
        if dcl.parameters is not None:
            dcl.info_number = max(dcl.info_number, dcl.parameters.info_number)
            if indirections2 == 0 and not typedef:
                dcl.signature += dcl.parameters.signature
            else:
                java_name = dcl.java_name or "Callback"
                function_type = java_name[0].upper() + java_name[1:]
                if typedef:
                    function_type = java_name
                elif dcl.parameters.signature:
                    function_type += dcl.parameters.signature
                elif type_.java_name != "void":
                    function_type = type_.java_name + "_" + function_type
                const = "@Const " if tokens.get().match(CONST) else ""
                if group_info is not None and group_info.pointer_types:
                    owner = group_info.pointer_types[0]
                    rest = dcl.parameters.list[1:]
                    call_params = f"({owner} o" + (")" if rest.startswith(")") else ", " + rest)
                    allocate = ""
                else:
                    call_params = dcl.parameters.list
                    allocate = (
                        f"    protected {function_type}() {{ allocate(); }}\n"
                        "    private native void allocate();\n"
                    )
                definition.text += (
                    f"{const}public static class {function_type} extends FunctionPointer {{\n"
                    "    static { Loader.load(); }\n"
                    f"    public    {function_type}(Pointer p) {{ super(p); }}\n"
                    f"{allocate}"
                    f"    public native {type_.annotations}{type_.java_name} call{call_params};\n"
                    "}\n"
                )
                definition.signature = function_type
                definition.declarator = Declarator(parameters=dcl.parameters)
                dcl.definition = definition
                dcl.parameters = None
                type_.annotations = ""
                type_.java_name = function_type
        dcl.type = type_

        # ignore superfluous parentheses
        while tokens.get().match(")") and parens > 0:
            tokens.next()
            parens -= 1

        return dcl

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _default_expression(self) -> tuple:
        """Consume a default argument after ``=`` up to its balanced end.

        Returns ``(text, skipped)`` where ``skipped`` tells whether the
        expression names a rule flagged ``skip``.
        """
        tokens = self.tokens
        if tokens.get().match("="):
            tokens.next()
        text = ""
        skipped = False
        depth = 0
        token = tokens.get()
        first = True
        while not token.match(TokenKind.EOF):
            if depth == 0 and token.match(",", ")"):
                break
            if token.match("(", "{", "<", "["):
                depth += 1
            elif token.match(")", "}", ">", "]"):
                depth -= 1
            if token.match(TokenKind.IDENTIFIER):
                info = self.info_map.get_first(token.value)
                skipped = skipped or (info is not None and info.skip)
            text += ("" if first else token.spacing) + token.value
            first = False
            token = tokens.next()
        return text, skipped

    def parameters(
        self,
        context: Context,
        info_number: int = 0,
        keep_defaults: Optional[int] = None,
    ) -> Optional[Parameters]:
        """Parse a parenthesized parameter list.

        Default-valued parameters beyond the first ``keep_defaults`` are
        dropped; kept ones render their default as a ``/*=value*/`` comment.
        """
        tokens = self.tokens
        if not tokens.get().match("("):
            return None

        count = 0
        defaults_seen = 0
        params = Parameters(list="(", names="(")
        token = tokens.next()
        while not token.match(TokenKind.EOF):
            spacing = token.spacing
            if token.match(")"):
                params.list += spacing + ")"
                params.names += ")"
                tokens.next()
                break
            dcl = self.declarator(context, f"arg{count}", info_number, keep_defaults, 0, True, False)
            count += 1
            if dcl is None:
                # C variadic or parameter pack, no Java counterpart
                self.skip_balanced(",", ")")
            else:
                has_default = not tokens.get().match(",", ")")
                drop = has_default and keep_defaults is not None and defaults_seen >= keep_defaults
                default_text = ""
                if has_default:
                    defaults_seen += 1
                    params.defaults += 1
                    default_text, skipped = self._default_expression()
                    dcl.default_value = default_text
                    if skipped:
                        logger.warning(
                            "Default value '%s' of %s names a skipped rule; keeping all parameters",
                            default_text,
                            dcl.java_name,
                        )
                        params.elide_defaults = False
                if dcl.type.java_name != "void" and not drop:
                    if has_default:
                        null_value = self.translate(default_text).replace('"', '\\"')
                        for by in ("@ByVal ", "@ByRef "):
                            if by in dcl.type.annotations:
                                dcl.type.annotations = dcl.type.annotations.replace(
                                    by, f'{by[:-1]}(nullValue = "{null_value}") ', 1
                                )
                                break
                    params.info_number = max(params.info_number, dcl.info_number)
                    separator = "," if len(params.declarators) > 0 else ""
                    params.list += (
                        f"{separator}{spacing}{dcl.type.annotations}{dcl.type.java_name} {dcl.java_name}"
                    )
                    if has_default:
                        params.list += f"/*={default_text}*/"
                    params.signature += signature_part(dcl.type.java_name)
                    params.names += (", " if len(params.declarators) > 0 else "") + dcl.java_name
                    if dcl.java_name.startswith("arg"):
                        try:
                            count = int(dcl.java_name[3:]) + 1
                        except ValueError:
                            pass
                    params.declarators.append(dcl)
            if tokens.get().expect(",", ")").match(","):
                tokens.next()
            token = tokens.get()
        if not params.elide_defaults:
            params.defaults = 0
        return params

    # ------------------------------------------------------------------
    # Attributes, bodies and comments
    # ------------------------------------------------------------------

    def attribute(self) -> Optional[Attribute]:
        """Parse a macro-like or bracketed attribute at the cursor."""
        tokens = self.tokens
        if tokens.get().match("[") and tokens.get(1).match("["):
            attr = Attribute(cpp_name="[[", annotation=True)
            tokens.next()
            tokens.next()
            attr.arguments = self.skip_balanced("]").strip()
            tokens.next()
            tokens.get().expect("]")
            tokens.next()
            return attr
        if not tokens.get().match(TokenKind.IDENTIFIER):
            return None
        attr = Attribute(cpp_name=tokens.get().value)
        info = self.info_map.get_first(attr.cpp_name)
        attr.annotation = (
            info is not None
            and info.annotations is not None
            and info.java_names is None
            and info.value_types is None
            and info.pointer_types is None
        )
        if attr.annotation:
            for annotation in info.annotations:
                attr.java_name += annotation + " "
        if not tokens.next().match("("):
            return attr

        count = 1
        with tokens.raw_mode():
            token = tokens.next()
            while not token.match(TokenKind.EOF) and count > 0:
                if token.match("("):
                    count += 1
                elif token.match(")"):
                    count -= 1
                elif info is None or not info.skip:
                    if not token.match(TokenKind.COMMENT):
                        attr.arguments += token.value
                token = tokens.next()
        return attr

    def body(self) -> Optional[str]:
        """Skip a brace-enclosed body, returning "" or None if absent."""
        tokens = self.tokens
        if not tokens.get().match("{"):
            return None
        start = tokens.get()
        count = 1
        with tokens.raw_mode():
            token = tokens.next()
            while not token.match(TokenKind.EOF) and count > 0:
                if token.match("{"):
                    count += 1
                elif token.match("}"):
                    count -= 1
                token = tokens.next()
        if count > 0:
            raise ParserError("Unterminated body", start.file, start.line, start.value)
        return ""

    def comment_before(self) -> str:
        """Convert documentation comments before a declaration to Javadoc.

        Non-documentation comments are kept as they are.
        """
        tokens = self.tokens
        comment = ""
        close_comment = False
        with tokens.raw_mode():
            while tokens.index > 0 and tokens.get(-1).match(TokenKind.COMMENT):
                tokens.index -= 1
            token = tokens.get()
            while token.match(TokenKind.COMMENT):
                s = token.value
                if s.startswith(DOXYGEN_PREFIXES):
                    if len(s) > 3 and s[3] == "<":
                        token = tokens.next()
                        continue
                    elif s.startswith("/// ") or s.startswith("//!"):
                        opener = not comment or "*/" in comment or "/*" not in comment
                        s = ("/**" if opener else " * ") + s[3:]
                        close_comment = True
                    elif not s.startswith("///"):
                        s = "/**" + s[3:]
                elif close_comment and not comment.endswith("*/"):
                    close_comment = False
                    comment += " */"
                comment += token.spacing + s
                token = tokens.next()
            if close_comment and not comment.endswith("*/"):
                comment += " */"
        return comment

    def comment_after(self) -> str:
        """Convert trailing ``///<`` style documentation comments to Javadoc."""
        tokens = self.tokens
        comment = ""
        close_comment = False
        with tokens.raw_mode():
            while tokens.index > 0 and tokens.get(-1).match(TokenKind.COMMENT):
                tokens.index -= 1
            token = tokens.get()
            while token.match(TokenKind.COMMENT):
                s = token.value
                spacing = token.spacing
                n = spacing.rfind("\n") + 1
                if s.startswith(DOXYGEN_PREFIXES) and len(s) > 3 and s[3] == "<":
                    if s.startswith("///") or s.startswith("//!"):
                        opener = not comment or "*/" in comment or "/*" not in comment
                        s = ("/**" if opener else " * ") + s[4:]
                        close_comment = True
                    else:
                        s = "/**" + s[4:]
                    comment += spacing[:n] + s
                token = tokens.next()
            if close_comment and not comment.endswith("*/"):
                comment += " */"
            if comment:
                comment += "\n"
        return comment
