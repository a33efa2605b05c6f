"""
Top-level construct recognizers and the declaration loop.

Each recognizer takes ``(context, decl_list)``, consumes one construct and
returns True, or returns False with the cursor restored so the next
recognizer can try. ``Parser.declarations`` runs them in a fixed order:
macro, extern, namespace, enumeration, group, typedef, using, function,
variable.
"""

import functools
import itertools
import logging
import re
from typing import Callable, Dict, List, Optional

from core.signature_contract import qualify, unqualified
from parsing.config import MAX_OVERLOAD_VARIANTS
from parsing.containers import containers
from parsing.context import Context
from parsing.declarations import DeclarationList
from parsing.declarators import DeclaratorParser
from parsing.infomap import Info
from parsing.models import Declaration, Declarator, Parameters, Type
from parsing.tokens import (
    AUTO,
    CLASS,
    CONST,
    CONSTEXPR,
    DEFAULT,
    DEFINE,
    DELETE,
    ENUM,
    EXPLICIT,
    EXTERN,
    FINAL,
    FRIEND,
    INLINE,
    NAMESPACE,
    NOEXCEPT,
    OVERRIDE,
    PRIVATE,
    PROTECTED,
    PUBLIC,
    STATIC,
    STATIC_ASSERT,
    STRUCT,
    TEMPLATE,
    TYPEDEF,
    UNION,
    USING,
    VIRTUAL,
    ParserError,
    TokenKind,
)

logger = logging.getLogger(__name__)

Recognizer = Callable[[Context, DeclarationList], bool]

# Name prefixes of member functions returning fresh instances of their class
ALLOCATOR_PREFIXES = ("create", "new", "alloc", "clone", "make")

_NAME_ANNOTATION = re.compile(r'@Name\([^)]*\) ')


def recognizer(method):
    """Restore the token cursor whenever ``method`` declines the input."""

    @functools.wraps(method)
    def wrapper(self, context: Context, decl_list: DeclarationList) -> bool:
        start = self.tokens.mark()
        if method(self, context, decl_list):
            return True
        self.tokens.reset(start)
        return False

    return wrapper


def guess_accessor(dcl: Declarator, group: Optional[Type] = None) -> Optional[str]:
    """Guess whether a member function acts as an allocator, setter or getter.

    Heuristics are tried in that order and the first match wins. When more
    than one matches, a warning is logged so the ambiguity shows up in runs.

    Returns:
        ``"allocator"``, ``"setter"``, ``"getter"`` or None.
    """
    params = dcl.parameters.declarators if dcl.parameters is not None else []
    returns_void = dcl.type.java_name == "void" and dcl.indirections == 0
    name = dcl.java_name or ""
    matches = []
    if (
        group is not None
        and dcl.indirections > 0
        and dcl.type.cpp_name == group.cpp_name
        and name.lower().startswith(ALLOCATOR_PREFIXES)
    ):
        matches.append("allocator")
    if len(params) == 1 and returns_void:
        matches.append("setter")
    if not params and not returns_void:
        matches.append("getter")
    if len(matches) > 1:
        logger.warning(
            "Accessor heuristics disagree on %s (%s); using %s",
            name,
            ", ".join(matches),
            matches[0],
        )
    return matches[0] if matches else None


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _indices(count: int) -> str:
    return ", ".join(f"int {chr(ord('i') + i)}" for i in range(count))


def _detach(decl_list: DeclarationList) -> None:
    """Clear per-statement state so replayed members keep their own access level."""
    decl_list.context = None
    decl_list.template_map = None
    decl_list.info_iterator = None
    decl_list.spacing = None


class Parser(DeclaratorParser):
    """Recursive-descent parser producing Java-ready declarations.

    Attributes:
        group_members: Member declarations of every parsed class, by
            qualified native name, for flattening and constructor
            inheritance.
    """

    def __init__(self, info_map, tokens, line_separator=None):
        super().__init__(info_map, tokens, line_separator)
        self.group_members: Dict[str, DeclarationList] = {}

    @property
    def recognizers(self) -> List[Recognizer]:
        return [
            self.macro,
            self.extern,
            self.namespace,
            self.enumeration,
            self.group,
            self.typedef,
            self.using,
            self.function,
            self.variable,
        ]

    def first_of(self, context: Context, decl_list: DeclarationList, *recognizers: Recognizer) -> bool:
        """Run ``recognizers`` in order until one accepts the input."""
        return any(r(context, decl_list) for r in recognizers)

    def _skip_statement(self) -> None:
        self.skip_balanced(";")
        self.tokens.next()

    def _skip_initializers(self) -> None:
        """Skip a constructor initializer list, stopping at the body."""
        tokens = self.tokens
        if not tokens.get().match(":"):
            return
        prev = tokens.get()
        token = tokens.next()
        while not token.match(TokenKind.EOF, ";"):
            if token.match("{") and not prev.match(TokenKind.IDENTIFIER, ">"):
                break
            if token.match("(", "{"):
                tokens.next()
                self.skip_balanced(")" if token.match("(") else "}")
            prev = tokens.get()
            token = tokens.next()

    def _skip_definition(self) -> None:
        """Skip an initializer list and a body or the rest of the statement."""
        self._skip_initializers()
        if self.tokens.get().match("{"):
            self.body()
        else:
            self._skip_statement()

    # ------------------------------------------------------------------
    # Macros
    # ------------------------------------------------------------------

    def _macro_functions(self, context: Context, info: Info, name: str, begin: int, last: int, has_args: bool) -> str:
        tokens = self.tokens
        text = ""
        seen = set()
        java_name = name
        if info.java_names:
            java_name = f'@Name("{info.cpp_names[0]}") {info.java_names[0]}'
        for n in itertools.count(-1):
            types = list(info.cpp_types)
            params = []
            tokens.index = begin + 2
            token = tokens.get()
            while has_args and tokens.index < last and len(params) + 1 < len(types):
                if token.match(TokenKind.IDENTIFIER):
                    params.append(f"{types[len(params) + 1]} {token.value}")
                elif token.match(")"):
                    break
                token = tokens.next()
            while len(params) + 1 < len(types):
                params.append(f"{types[len(params) + 1]} arg{len(params) + 1}")
            source = f"{types[0]} {name}({', '.join(params)})"
            dcl = self.fork(source).declarator(context, None, n, None, 0, False, False)
            if dcl.signature not in seen:
                text += (
                    f"public static native {dcl.type.annotations}{dcl.type.java_name} "
                    f"{java_name}{dcl.parameters.list};\n"
                )
            elif n > 0:
                break
            seen.add(dcl.signature)
            if n >= MAX_OVERLOAD_VARIANTS:
                break
        return text

    def _macro_constant(self, context: Context, info: Optional[Info], name: str, begin: int, last: int):
        """Render a value macro as a constant, returning ``(text, cpp_type, translate)``."""
        tokens = self.tokens
        java_type = "int"
        cpp_type = "int"
        cat = ""
        translate = True
        inferred: Optional[Info] = None
        literal = False
        prev = None
        tokens.index = begin + 1
        token = tokens.get()
        while tokens.index < last:
            if token.match(TokenKind.STRING):
                java_type, cpp_type, cat, literal = "String", "const char*", " + ", True
                break
            elif token.match(TokenKind.FLOAT):
                java_type, cpp_type, literal = "double", "double", True
                break
            elif token.match(TokenKind.INTEGER) and token.value.endswith("L"):
                java_type, cpp_type, literal = "long", "long long", True
                break
            elif (prev is not None and prev.match(TokenKind.IDENTIFIER, ">") and token.match("(")) or token.match(
                "{", "}"
            ):
                translate = False
            elif token.match(TokenKind.IDENTIFIER) and inferred is None:
                known = self.info_map.get_first(token.value)
                if known is not None and known.cpp_types and known.cpp_text is None:
                    inferred = known
            prev = token
            token = tokens.next()

        java_name = name
        source = info if info is not None else (inferred if not literal else None)
        if source is not None and source.cpp_types:
            dcl = self.fork(source.cpp_types[0]).declarator(context, None, -1, None, 0, False, True)
            java_type = dcl.type.annotations + dcl.type.java_name
            cpp_type = source.cpp_types[0]
        if info is not None:
            if info.java_names and info.cpp_names:
                java_name = f'@Name("{info.cpp_names[0]}") {info.java_names[0]}'
            translate = info.translate

        text = ""
        value = ""
        tokens.index = begin + 1
        if translate:
            token = tokens.get()
            while tokens.index < last:
                value += token.spacing + token.value + (cat if tokens.index + 1 < last else "")
                token = tokens.next()
            value = self.translate(value)
        else:
            text += f"public static native @MemberGetter {java_type} {java_name}();\n"
            value = f" {java_name}()"
        java_type = java_type[java_type.rfind(" ") + 1:]
        if value:
            text += f"public static final {java_type} {java_name} ={value};\n"
        return text, cpp_type, translate

    @recognizer
    def macro(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        back_index = tokens.index
        if not tokens.get().match("#"):
            return False
        decl = Declaration()
        with tokens.raw_mode():
            spacing = tokens.get().spacing
            keyword = tokens.next()

            # parse all of the macro to find its last token
            tokens.next()
            begin = tokens.index
            token = tokens.get()
            while not token.match(TokenKind.EOF):
                if "\n" in token.spacing:
                    break
                token = tokens.next()
            end = tokens.index
            while tokens.get(-1).match(TokenKind.COMMENT) and tokens.index > begin:
                tokens.index -= 1
            last = tokens.index

            if keyword.match(DEFINE) and begin < end:
                tokens.index = begin
                name = tokens.get().value
                first = tokens.next()
                has_args = not first.spacing and first.match("(")
                infos = self.info_map.get(name) or [None]
                for info in infos:
                    if info is not None and info.skip:
                        break
                    elif (info is None and (has_args or begin + 1 == end)) or (
                        info is not None and info.cpp_text is None and info.cpp_types is not None
                        and len(info.cpp_types) == 0
                    ):
                        # save declaration for expansion
                        cpp_text = ""
                        tokens.index = back_index
                        token = tokens.get()
                        while tokens.index < end:
                            cpp_text += token.value if token.match("\n") else token.spacing + token.value
                            token = tokens.next()
                        self.info_map.put_first(Info.of(name, cpp_text=cpp_text))
                        logger.debug("Saved macro %s for expansion", name)
                        break
                    elif (
                        info is not None
                        and info.cpp_text is None
                        and info.cpp_types is not None
                        and len(info.cpp_types) > (0 if has_args else 1)
                    ):
                        # declare as a static native method
                        decl.text += self._macro_functions(context, info, name, begin, last, has_args)
                        decl.signature = name
                    elif info is None or (
                        info.cpp_text is None and (info.cpp_types is None or len(info.cpp_types) == 1)
                    ):
                        # declare as a static final variable
                        text, cpp_type, translate = self._macro_constant(context, info, name, begin, last)
                        decl.text += text
                        decl.signature = name
                        if info is None:
                            self.info_map.put(Info.of(name, cpp_types=(cpp_type,), translate=translate))
                    if info is not None and info.java_text is not None:
                        decl.text = info.java_text
                        decl.custom = True
                        break

            if not decl.text:
                # output whatever we did not process as comment
                tokens.index = begin
                n = spacing.rfind("\n") + 1
                decl.text += "// " + spacing[n:] + "#" + keyword.spacing + keyword.value
                token = tokens.get()
                while tokens.index < last:
                    decl.text += "\n// " if token.match("\n") else token.spacing + token.value
                    token = tokens.next()
                spacing = spacing[:n]
                decl.comment = True
            tokens.index = last
            comment = self.comment_after()
            decl.text = comment + decl.text
        decl_list.spacing = spacing
        decl_list.add(decl)
        decl_list.spacing = None
        return True

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    @recognizer
    def extern(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        if not tokens.get().match(EXTERN) or not tokens.get(1).match(TokenKind.STRING):
            return False
        spacing = tokens.get().spacing
        tokens.next().expect('"C"', '"C++"')
        if not tokens.next().match("{"):
            # single declaration, parsed on the next round
            tokens.respace(spacing)
            decl_list.add(Declaration())
            return True
        tokens.next()
        self.declarations(context, decl_list)
        tokens.get().expect("}")
        tokens.next()
        decl_list.add(Declaration())
        return True

    @recognizer
    def namespace(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        inline = tokens.get().match(INLINE) and tokens.get(1).match(NAMESPACE)
        if inline:
            tokens.next()
        if not tokens.get().match(NAMESPACE):
            return False
        name = ""
        token = tokens.next()
        while token.match(TokenKind.IDENTIFIER, "::"):
            name += token.value
            token = tokens.next()
        if token.match("="):
            # namespace alias
            target = self.skip_balanced(";").strip()
            tokens.next()
            context.using_list.append(target + "::")
            logger.debug("Namespace alias %s = %s", name, target)
            decl_list.add(Declaration())
            return True
        token.expect("{")
        tokens.next()

        ctx = context
        if name:
            full = f"{context.namespace}::{name}" if context.namespace else name
            ctx = context.clone(namespace=full)
            if inline:
                context.using_list.append(full + "::")
        self.declarations(ctx, decl_list)
        decl = Declaration(text=tokens.get().expect("}").spacing)
        tokens.next()
        decl_list.add(decl)
        return True

    # ------------------------------------------------------------------
    # Enumerations
    # ------------------------------------------------------------------

    def _enum_text(self, java_name: str, entries: list, value_type: str, spacing: str) -> str:
        """Render enumerators as a value-carrying Java enum."""
        names = {e[1] for e in entries}
        lines = []
        for entry_spacing, name, prefix, count in entries:
            prefix = prefix.strip()
            if not prefix:
                value = str(count)
            elif prefix in names:
                value = prefix if count == 0 else f"{prefix}.value + {count}"
            else:
                value = prefix if count == 0 else f"{prefix} + {count}"
            if value_type != "int" and prefix not in names:
                value = f"({value_type})({value})"
            lines.append(f"{entry_spacing or ' '}{name}({value})")
        indent = spacing[spacing.rfind("\n") + 1:]
        return (
            f"public enum {java_name} {{"
            + ",".join(lines)
            + ";\n\n"
            + f"{indent}    public final {value_type} value;\n"
            + f"{indent}    private {java_name}({value_type} v) {{ this.value = v; }}\n"
            + f"{indent}    private {java_name}({java_name} e) {{ this.value = e.value; }}\n"
            + f"{indent}    public {java_name} intern() {{ for ({java_name} e : values()) if (e.value == value) return e; return this; }}\n"
            + f"{indent}    @Override public String toString() {{ return intern().name(); }}\n"
            + f"{indent}}}"
        )

    @recognizer
    def enumeration(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        enum_spacing = tokens.get().spacing
        typedef = tokens.get().match(TYPEDEF)
        found = False
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if token.match(ENUM):
                found = True
                break
            elif not token.match(TokenKind.IDENTIFIER):
                break
            token = tokens.next()
        if not found:
            return False

        enum_class = tokens.get(1).match(CLASS, STRUCT)
        if enum_class:
            tokens.next()
        if typedef and not tokens.get(1).match("{") and tokens.get(2).match(TokenKind.IDENTIFIER):
            tokens.next()
        token = tokens.next().expect(TokenKind.IDENTIFIER, "{", ":")
        name = ""
        if token.match(TokenKind.IDENTIFIER):
            name = token.value
            token = tokens.next()
        underlying: Optional[Type] = None
        if token.match(":"):
            tokens.next()
            underlying = self.type(context)
            token = tokens.get()
        if token.match(";") and name:
            # opaque declaration, only registers the type
            tokens.next()
            self._register_enum(context, name, underlying, enum_class)
            decl_list.add(Declaration(text=enum_spacing, incomplete=True))
            return True
        if not token.match("{"):
            return False

        count = 0
        separator = ""
        enum_prefix = "public static final int"
        count_prefix = " "
        enumerators = ""
        extra_text = ""
        entries = []
        token = tokens.next()
        while not token.match(TokenKind.EOF, "}"):
            comment = self.comment_before()
            if self.macro(context, decl_list):
                macro_decl = decl_list.remove_last()
                extra_text += comment + macro_decl.text
                if separator == "," and not macro_decl.text.strip().startswith("//"):
                    separator = ";"
                    enum_prefix = "\npublic static final int"
                token = tokens.get()
                continue
            enumerator = tokens.get().expect(TokenKind.IDENTIFIER)
            cpp_name = enumerator.value
            java_name = cpp_name
            qualified = qualify(context.namespace, cpp_name)
            info = self.info_map.get_first(qualified)
            if info is not None and info.java_names:
                java_name = info.java_names[0]
            spacing2 = " "
            token = tokens.next()
            while token.match("[") and tokens.get(1).match("["):
                self.attribute()
                token = tokens.get()
            if token.match("="):
                spacing2 = tokens.get().spacing
                count_prefix = " "
                depth = 0
                prev = None
                translate = True
                token = tokens.next()
                while not token.match(TokenKind.EOF) and (depth > 0 or not token.match(",", "}")):
                    count_prefix += (token.spacing if len(count_prefix) > 1 else "") + token.value
                    if token.match("("):
                        depth += 1
                    elif token.match(")"):
                        depth -= 1
                    if (prev is not None and prev.match(TokenKind.IDENTIFIER) and token.match("(")) or token.match(
                        "{", "}"
                    ):
                        translate = False
                    prev = token
                    token = tokens.next()
                try:
                    count = int(count_prefix.strip())
                    count_prefix = " "
                except ValueError:
                    count = 0
                    if translate:
                        count_prefix = self.translate(count_prefix)
                    else:
                        logger.warning("Enumerator %s has an untranslatable value; reading it natively", cpp_name)
                        if separator == ",":
                            separator = ";"
                        extra_text = f"\npublic static native @MemberGetter int {java_name}();\n"
                        enum_prefix = "public static final int"
                        count_prefix = f" {java_name}()"
            enumerators += separator + extra_text + enum_prefix + comment
            separator = ","
            enum_prefix = ""
            extra_text = ""
            comment = self.comment_after()
            if not comment and tokens.get().match(","):
                tokens.next()
                comment = self.comment_after()
            elif tokens.get().match(","):
                tokens.next()
            spacing = enumerator.spacing
            if comment:
                enumerators += spacing + comment
                newline = spacing.rfind("\n")
                if newline >= 0:
                    spacing = spacing[newline + 1:]
            if not spacing and not enumerators.endswith(","):
                spacing = " "
            enumerators += spacing + java_name + spacing2 + "=" + count_prefix
            if count_prefix.strip():
                if count > 0:
                    enumerators += f" + {count}"
            else:
                enumerators += str(count)
            entries.append((enumerator.spacing, java_name, count_prefix, count))
            count += 1
            token = tokens.get()

        comment = self.comment_before()
        decl = Declaration()
        token = tokens.next()
        if token.match(TokenKind.IDENTIFIER):
            # typedef name, or a variable of anonymous enum type
            name = token.value
            token = tokens.next()
        qualified = qualify(context.namespace, name) if name else name
        info = self.info_map.get_first(qualified) if name else None
        value_type = self._register_enum(context, name, underlying, enum_class) if name else "int"
        keyword = "enum class" if enum_class else "enum"
        newline = enum_spacing.rfind("\n")
        if name:
            decl.text += f"{enum_spacing}/** {keyword} {qualified} */\n"
            if newline >= 0:
                enum_spacing = enum_spacing[newline + 1:]
        if name and (enum_class or (info is not None and info.enumerate)):
            java_name = unqualified(name)
            decl.text += enum_spacing + self._enum_text(java_name, entries, value_type, enum_spacing)
            decl.text += token.expect(";").spacing
        else:
            if value_type != "int":
                enumerators = enumerators.replace("public static final int", f"public static final {value_type}")
            decl.text += enum_spacing + enumerators + token.expect(";").spacing + ";"
        tokens.next()
        decl.text += extra_text + comment
        decl.signature = qualified
        decl_list.add(decl)
        return True

    def _register_enum(self, context: Context, name: str, underlying: Optional[Type], enum_class: bool) -> str:
        """Register an enum type in the rule table, returning its Java value type."""
        qualified = qualify(context.namespace, name)
        value_type = "int"
        pointer_types = ("IntPointer", "IntBuffer", "int[]")
        if underlying is not None:
            base = self.info_map.get_first(underlying.cpp_name)
            if base is not None and base.value_types:
                value_type = base.value_types[0]
                pointer_types = base.pointer_types or pointer_types
        existing = self.info_map.get_first(qualified)
        if enum_class or (existing is not None and existing.enumerate):
            java_name = unqualified(name)
            if context.group is not None:
                java_name = f"{context.group.java_name}.{java_name}"
            info = Info.of(
                qualified, cast=True, enumerate=True,
                value_types=(java_name,), pointer_types=pointer_types,
            )
        else:
            info = Info.of(qualified, cast=True, value_types=(value_type,), pointer_types=pointer_types)
        self.info_map.put(info)
        return value_type

    # ------------------------------------------------------------------
    # Classes, structs and unions
    # ------------------------------------------------------------------

    def _accessors(
        self,
        modifiers: str,
        setter_type: str,
        annotations: str,
        java_type: str,
        java_name: str,
        indices: str,
        getter_only: bool,
        beanify: bool,
        name_annotation: str = "",
    ) -> str:
        """Render a getter and, unless ``getter_only``, a chaining setter."""
        getter = setter = java_name
        prefix = name_annotation
        match = _NAME_ANNOTATION.search(annotations)
        if match is not None and "@Name(" not in prefix:
            prefix += match.group(0)
            annotations = annotations.replace(match.group(0), "")
        if beanify:
            getter = "get" + _capitalize(java_name)
            setter = "set" + _capitalize(java_name)
            if "@Name(" not in prefix:
                prefix += f'@Name("{java_name}") '
        text = f"{prefix}{modifiers}{annotations.replace('@ByVal ', '@ByRef ')}{java_type} {getter}({indices});"
        if not getter_only:
            separator = ", " if indices else ""
            text += f" {prefix}{modifiers}{setter_type}{setter}({indices}{separator}{java_type} setter);"
        return text + "\n"

    def _inherit_constructors(self, ctx: Context, name: str, decl_list2: DeclarationList) -> None:
        _detach(decl_list2)
        for base in ctx.inherited_constructors:
            members = None
            for candidate in ctx.qualify(base):
                members = self.group_members.get(candidate)
                if members is not None:
                    break
            if members is None:
                logger.warning("Cannot inherit constructors of unknown class %s", base)
                continue
            base_name = unqualified(base)
            for d in list(members):
                dcl = d.declarator
                if dcl is None or dcl.type is None or not dcl.type.constructor or d.inaccessible:
                    continue
                text = d.text.replace(f"public {base_name}(", f"public {name}(")
                decl_list2.add(
                    Declaration(
                        text=text,
                        signature=name + d.signature[len(base_name):],
                        declarator=dcl,
                        function=True,
                    )
                )

    def _flatten_bases(self, ctx: Context, bases: List[Type], decl_list2: DeclarationList) -> None:
        _detach(decl_list2)
        for base in bases:
            members = self.group_members.get(base.cpp_name)
            if members is None:
                logger.warning("Cannot flatten unknown base class %s", base.cpp_name)
                continue
            for d in list(members):
                dcl = d.declarator
                if d.inaccessible or (dcl is not None and dcl.type is not None and dcl.type.constructor):
                    continue
                decl_list2.add(
                    Declaration(
                        text=d.text,
                        signature=d.signature,
                        declarator=None,
                        function=d.function,
                        variable=d.variable,
                        abstract_member=d.abstract_member,
                        const_member=d.const_member,
                    )
                )

    @recognizer
    def group(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        spacing = tokens.get().spacing
        typedef = tokens.get().match(TYPEDEF)
        found = friend = False
        ctx = context.clone(inherited_constructors=[])
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if token.match(CLASS, STRUCT, UNION):
                found = True
                ctx.inaccessible = token.match(CLASS)
                break
            elif token.match(FRIEND):
                friend = True
            elif not token.match(TokenKind.IDENTIFIER):
                break
            token = tokens.next()
        if not found:
            return False

        tokens.next().expect(TokenKind.IDENTIFIER, "{", "::")
        if (
            not tokens.get().match("{")
            and tokens.get(1).match(TokenKind.IDENTIFIER)
            and not tokens.get(1).match(FINAL)
            and (typedef or not tokens.get(2).match(";"))
        ):
            # attribute macro before the name
            tokens.next()
        type_ = self.type(context)
        if type_ is None:
            return False
        if tokens.get().match(FINAL):
            tokens.next()
        base_classes: List[Type] = []
        decl = Declaration(text=type_.annotations)
        name = type_.java_name
        anonymous = not typedef and not type_.cpp_name
        derived = False
        if type_.cpp_name and tokens.get().match(":"):
            derived = True
            token = tokens.next()
            while not token.match(TokenKind.EOF):
                accessible = not ctx.inaccessible
                if token.match(VIRTUAL):
                    token = tokens.next()
                    continue
                elif token.match(PRIVATE, PROTECTED, PUBLIC):
                    accessible = token.match(PUBLIC)
                    tokens.next()
                if tokens.get().match(VIRTUAL):
                    tokens.next()
                t = self.type(context)
                if t is not None and accessible:
                    base_classes.append(t)
                if tokens.get().expect(",", "{").match("{"):
                    break
                token = tokens.next()
        if typedef and type_.pointer:
            # skip pointer typedef
            while not tokens.get().match(";", TokenKind.EOF):
                tokens.next()
        if not tokens.get().match("{", ";"):
            return False

        start_index = tokens.index
        variables: List[Declarator] = []
        if self.body() is not None and not tokens.get().match(";"):
            if typedef:
                named = False
                token = tokens.get()
                while not token.match(TokenKind.EOF):
                    if token.match(";"):
                        decl.text += token.spacing
                        break
                    elif token.match(TokenKind.IDENTIFIER) and not named:
                        name = type_.java_name = type_.cpp_name = token.value
                        named = True
                    token = tokens.next()
            else:
                index = tokens.index - 1
                for n in itertools.count():
                    tokens.index = index
                    dcl = self.declarator(context, None, -1, None, n, False, True)
                    if dcl is None:
                        break
                    variables.append(dcl)
                newline = spacing.rfind("\n")
                if newline >= 0 and anonymous:
                    decl.text += spacing[:newline]

        if type_.cpp_name and context.namespace is not None and "::" not in type_.cpp_name:
            type_.cpp_name = f"{context.namespace}::{type_.cpp_name}"
        info = self.info_map.get_first(type_.cpp_name) if type_.cpp_name else None
        if info is not None and info.skip:
            decl.text = ""
            decl_list.add(decl)
            return True
        elif info is not None and info.pointer_types:
            name = type_.java_name = info.pointer_types[0]
        elif info is None and type_.cpp_name:
            if type_.java_name and context.group is not None:
                type_.java_name = f"{context.group.java_name}.{type_.java_name}"
            info = Info.of(type_.cpp_name, pointer_types=(type_.java_name,))
            self.info_map.put(info)
        name = name[name.rfind(".") + 1:]

        base = Type.named("Pointer")
        flattened: List[Type] = []
        casts = ""
        first = True
        for t in base_classes:
            base_info = self.info_map.get_first(t.cpp_name)
            if base_info is not None and base_info.flatten:
                flattened.append(t)
            elif first:
                base = t
                first = False
            else:
                casts += (
                    f"    public {t.java_name} as{t.java_name}() {{ return as{t.java_name}(this); }}\n"
                    f'    @Namespace public static native @Name("static_cast<{t.cpp_name}*>") '
                    f"{t.java_name} as{t.java_name}({name} pointer);\n"
                )
        decl.signature = type_.java_name
        tokens.index = start_index
        if name and tokens.get().match(";"):
            # incomplete type (forward or friend declaration)
            tokens.next()
            if friend:
                decl.text = ""
                decl_list.add(decl)
                return True
            base_name = info.base if info is not None and info.base else base.java_name
            full_name = f"{context.namespace}::{name}" if context.namespace else name
            if full_name != type_.cpp_name:
                decl.text += f'@Name("{type_.cpp_name}") '
            elif context.namespace is not None and context.group is None:
                decl.text += f'@Namespace("{context.namespace}") '
            decl.text += (
                f"@Opaque public static class {name} extends {base_name} {{\n"
                "    /** Empty constructor. Calls {@code super((Pointer)null)}. */\n"
                f"    public {name}() {{ super((Pointer)null); }}\n"
                "    /** Pointer cast constructor. Invokes {@link Pointer#Pointer(Pointer)}. */\n"
                f"    public {name}(Pointer p) {{ super(p); }}\n"
                "}"
            )
            decl.type = type_
            decl.incomplete = True
            decl.text = self.comment_after() + decl.text
            decl_list.spacing = spacing
            decl_list.add(decl)
            decl_list.spacing = None
            return True
        elif tokens.get().match("{"):
            tokens.next()

        if not anonymous:
            ctx.namespace = type_.cpp_name
            ctx.group = type_
        if info is not None:
            ctx.virtualize = ctx.virtualize or info.virtualize
            ctx.immutable = ctx.immutable or info.immutable
            ctx.beanify = ctx.beanify or info.beanify
            ctx.objectify = ctx.objectify or info.objectify

        decl_list2 = DeclarationList(self.info_map)
        body_index = tokens.index
        hoisted = variables if anonymous else []
        if not hoisted:
            self.declarations(ctx, decl_list2)
        else:
            for var in hoisted:
                if context.variable is not None:
                    var.cpp_name = f"{context.variable.cpp_name}.{var.cpp_name}"
                    var.java_name = f"{context.variable.java_name}_{var.java_name}"
                tokens.index = body_index
                self.declarations(ctx.clone(variable=var), decl_list2)
        self._inherit_constructors(ctx, name, decl_list2)
        self._flatten_bases(ctx, flattened, decl_list2)
        if type_.cpp_name:
            self.group_members[type_.cpp_name] = decl_list2

        modifiers = "public static "
        implicit_constructor = True
        default_constructor = int_constructor = have_variables = False
        abstract_class = info is not None and info.purify
        if abstract_class:
            implicit_constructor = False
        for d in decl_list2:
            dcl = d.declarator
            if dcl is not None and dcl.type is not None and dcl.type.constructor:
                implicit_constructor = False
                params = dcl.parameters.declarators if dcl.parameters is not None else []
                default_constructor |= len(params) == 0 and not d.inaccessible
                int_constructor |= (
                    len(params) == 1 and params[0].type.java_name in ("int", "long") and not d.inaccessible
                )
            elif d.abstract_member:
                implicit_constructor = False
                abstract_class = True
                if ctx.virtualize:
                    modifiers = "public static abstract "
            have_variables |= d.variable

        if not anonymous:
            full_name = f"{context.namespace}::{name}" if context.namespace else name
            if full_name != type_.cpp_name:
                decl.text += f'@Name("{type_.cpp_name}") '
            elif context.namespace is not None and context.group is None:
                decl.text += f'@Namespace("{context.namespace}") '
            if (not implicit_constructor or derived) and have_variables:
                decl.text += "@NoOffset "
            base_name = info.base if info is not None and info.base else base.java_name
            decl.text += f"{modifiers}class {name} extends {base_name} {{\n    static {{ Loader.load(); }}\n"
            if implicit_constructor:
                decl.text += (
                    "    /** Default native constructor. */\n"
                    f"    public {name}() {{ super((Pointer)null); allocate(); }}\n"
                    "    /** Native array allocator. Access with {@link Pointer#position(long)}. */\n"
                    f"    public {name}(long size) {{ super((Pointer)null); allocateArray(size); }}\n"
                    "    /** Pointer cast constructor. Invokes {@link Pointer#Pointer(Pointer)}. */\n"
                    f"    public {name}(Pointer p) {{ super(p); }}\n"
                    "    private native void allocate();\n"
                    "    private native void allocateArray(long size);\n"
                    f"    @Override public {name} position(long position) {{\n"
                    f"        return ({name})super.position(position);\n"
                    "    }\n"
                )
            else:
                if not default_constructor or abstract_class:
                    decl.text += (
                        "    /** Empty constructor. Calls {@code super((Pointer)null)}. */\n"
                        f"    public {name}() {{ super((Pointer)null); }}\n"
                    )
                decl.text += (
                    "    /** Pointer cast constructor. Invokes {@link Pointer#Pointer(Pointer)}. */\n"
                    f"    public {name}(Pointer p) {{ super(p); }}\n"
                )
                if default_constructor and not abstract_class and not int_constructor:
                    decl.text += (
                        "    /** Native array allocator. Access with {@link Pointer#position(long)}. */\n"
                        f"    public {name}(long size) {{ super((Pointer)null); allocateArray(size); }}\n"
                        "    private native void allocateArray(long size);\n"
                        f"    @Override public {name} position(long position) {{\n"
                        f"        return ({name})super.position(position);\n"
                        "    }\n"
                    )
            decl_list.spacing = spacing
            decl.text = decl_list.rescan(decl.text + casts + "\n")
            decl_list.spacing = None
        for d in decl_list2:
            dcl = d.declarator
            constructor = dcl is not None and dcl.type is not None and dcl.type.constructor
            if not d.inaccessible and (not constructor or not abstract_class):
                decl.text += d.text
        if not anonymous:
            decl.text += tokens.get().spacing + "}"
        token = tokens.next()
        while not token.match(TokenKind.EOF):
            if token.match(";"):
                decl.text += token.spacing
                break
            token = tokens.next()
        tokens.next()

        if variables and not anonymous:
            # variables declared along with a named class
            indent = "\n" + spacing[spacing.rfind("\n") + 1:]
            member = context.group is not None
            accessor_modifiers = "public native " if member else "public static native "
            setter_type = (context.shorten(context.group.java_name) + " ") if member else "void "
            for var in variables:
                annotations = "" if var.indirections > 0 else "@ByRef "
                decl.text += indent + self._accessors(
                    accessor_modifiers, setter_type, annotations, name, var.java_name,
                    _indices(var.indices), context.immutable, context.beanify,
                ).rstrip("\n")
        decl.type = type_
        if info is not None and info.java_text is not None:
            decl.text = info.java_text
            decl.custom = True
        decl_list.add(decl)
        return True

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def _register_alias(self, context: Context, dcl: Declarator, decl: Declaration) -> Declaration:
        """Register a typedef or alias in the rule table.

        Returns the declaration to emit, which is the function pointer
        wrapper for function types.
        """
        type_name = dcl.type.cpp_name
        def_name = dcl.cpp_name
        def_name = qualify(context.namespace, def_name)
        if dcl.definition is not None:
            # a function pointer or something
            decl = dcl.definition
            java_name = dcl.java_name
            if java_name and context.group is not None:
                java_name = f"{context.group.java_name}.{java_name}"
            ptr = "@ByPtrPtr " if dcl.indirections > 0 else ""
            self.info_map.put(Info.of(def_name, value_types=(java_name,), pointer_types=(ptr + java_name,)))
        elif type_name == "void":
            # some opaque data type
            info = self.info_map.get_first(def_name)
            if info is None or not info.skip:
                if dcl.indirections > 0:
                    decl.text += '@Namespace @Name("void") '
                    base = info if info is not None else Info.of(def_name)
                    self.info_map.put(
                        base.derive(
                            cpp_names=(def_name,),
                            value_types=(dcl.java_name,),
                            pointer_types=("@ByPtrPtr " + dcl.java_name,),
                        )
                    )
                elif context.namespace is not None and context.group is None:
                    decl.text += f'@Namespace("{context.namespace}") '
                decl.text += (
                    f"@Opaque public static class {dcl.java_name} extends Pointer {{\n"
                    "    /** Empty constructor. Calls {@code super((Pointer)null)}. */\n"
                    f"    public {dcl.java_name}() {{ super((Pointer)null); }}\n"
                    "    /** Pointer cast constructor. Invokes {@link Pointer#Pointer(Pointer)}. */\n"
                    f"    public {dcl.java_name}(Pointer p) {{ super(p); }}\n"
                    "}"
                )
                decl.signature = dcl.java_name
                decl.type = Type.named(dcl.java_name)
        else:
            # point back to original type
            info = self.info_map.get_first(type_name)
            if info is None or not info.skip:
                alias = info.derive(cpp_names=(def_name,)) if info is not None else Info.of(def_name)
                changes = {}
                if alias.cpp_types is None:
                    changes["cpp_types"] = (type_name,)
                if alias.value_types is None and dcl.indirections > 0:
                    changes["value_types"] = (type_name,)
                    changes["pointer_types"] = ("PointerPointer",)
                elif alias.pointer_types is None:
                    changes["pointer_types"] = (type_name,)
                pointer_types = changes.get("pointer_types", alias.pointer_types)
                if alias.annotations is None:
                    changes["cast"] = dcl.cpp_name != pointer_types[0]
                self.info_map.put(alias.derive(**changes))
                logger.debug("Registered alias %s for %s", def_name, type_name)
        return decl

    @recognizer
    def typedef(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        spacing = tokens.get().spacing
        if not tokens.get().match(TYPEDEF):
            return False
        dcl = self.declarator(context, None, 0, None, 0, True, False)
        if dcl is None or dcl.cpp_name is None:
            return False
        self.skip_balanced(";")
        tokens.next()
        decl = self._register_alias(context, dcl, Declaration())
        decl.text = self.comment_after() + decl.text
        decl_list.spacing = spacing
        decl_list.add(decl)
        decl_list.spacing = None
        return True

    @recognizer
    def using(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        if not tokens.get().match(USING):
            return False
        spacing = tokens.get().spacing
        decl = Declaration()
        if tokens.get(1).match(NAMESPACE):
            tokens.next()
            tokens.next()
            name = self.skip_balanced(";").strip()
            tokens.next()
            context.using_list.append(name + "::")
        elif tokens.get(1).match(TokenKind.IDENTIFIER) and tokens.get(2).match("="):
            # alias declaration, same as a typedef
            alias = tokens.next().value
            tokens.next()
            tokens.next()
            dcl = self.declarator(context, alias, 0, None, 0, True, False, alias=True)
            if dcl is None:
                return False
            self.skip_balanced(";")
            tokens.next()
            decl = self._register_alias(context, dcl, decl)
        else:
            tokens.next()
            name = self.skip_balanced(";").replace("typename ", "").strip()
            tokens.next()
            segments = name.split("::")
            if len(segments) >= 2 and segments[-1] == segments[-2]:
                # inheriting constructors
                context.inherited_constructors.append("::".join(segments[:-1]))
            else:
                context.using_list.append(name)
        decl.text = self.comment_after() + decl.text
        decl_list.spacing = spacing
        decl_list.add(decl)
        decl_list.spacing = None
        return True

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def _hoist_trailing_return(self) -> None:
        """Rewrite ``auto f(...) -> T`` in place as ``T f(...)``."""
        tokens = self.tokens
        i = 0
        while not tokens.get(i).match(AUTO):
            if not tokens.get(i).match(STATIC, VIRTUAL, INLINE, CONSTEXPR, EXPLICIT, FRIEND, EXTERN):
                return
            i += 1
        auto = tokens.position(i)
        depth = 0
        i += 1
        while True:
            token = tokens.get(i)
            if token.match(TokenKind.EOF) or (depth == 0 and token.match(";", "{", "=")):
                return
            if token.match("(", "["):
                depth += 1
            elif token.match(")", "]"):
                depth -= 1
            elif depth == 0 and token.match("->"):
                break
            i += 1
        arrow = tokens.position(i)
        i += 1
        depth = 0
        while True:
            token = tokens.get(i)
            if token.match(TokenKind.EOF):
                return
            if depth == 0 and token.match(";", "{", "=", OVERRIDE, FINAL, NOEXCEPT):
                break
            if token.match("(", "<"):
                depth += 1
            elif token.match(")", ">"):
                depth -= 1
            i += 1
        end = tokens.position(i)
        array = tokens.array
        target = [t for t in array[arrow + 1:end] if not t.match(TokenKind.COMMENT)]
        if not target:
            return
        target[0] = target[0].with_spacing(array[auto].spacing)
        del array[arrow:end]
        array[auto:auto + 1] = target

    def _constructor_declarator(self, type_: Type, params: Optional[Parameters]) -> Optional[Declarator]:
        if params is None:
            return None
        java_name = type_.java_name[type_.java_name.rfind(" ") + 1:]
        java_name = java_name[java_name.rfind(".") + 1:]
        return Declarator(
            cpp_name=type_.cpp_name,
            java_name=java_name,
            type=type_,
            parameters=params,
            signature=java_name + params.signature,
        )

    def _parse_function(self, context: Context, start_index: int, special: bool, info_number: int, keep_defaults):
        tokens = self.tokens
        tokens.index = start_index
        if special:
            type_ = self.type(context)
            params = self.parameters(context, info_number, keep_defaults)
            dcl = self._constructor_declarator(type_, params)
            self._skip_initializers()
        else:
            dcl = self.declarator(context, None, info_number, keep_defaults, 0, False, False)
            if dcl is not None and dcl.cpp_name and context.namespace is not None and "::" not in dcl.cpp_name:
                dcl.cpp_name = f"{context.namespace}::{dcl.cpp_name}"
        return dcl

    def _function_tail(self, decl: Declaration) -> Optional[str]:
        """Consume qualifiers and the body, returning ``"0"``, ``"delete"``, ``"default"`` or None."""
        tokens = self.tokens
        token = tokens.get()
        while not token.match(TokenKind.EOF):
            if token.match("&", "&&"):
                tokens.next()
            else:
                decl.const_member |= token.match(CONST)
                if self.attribute() is None:
                    break
            token = tokens.get()
        initializer = None
        if tokens.get().match("{"):
            self.body()
        else:
            if tokens.get().match("="):
                initializer = tokens.next().expect("0", DELETE, DEFAULT).value
                tokens.next()
            tokens.get().expect(";")
            tokens.next()
        return initializer

    @recognizer
    def function(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        back_index = tokens.index
        spacing = tokens.get().spacing
        modifiers = "public native "
        friend = False
        if tokens.get().match(FRIEND):
            friend = True
            tokens.next()
        self._hoist_trailing_return()
        start_index = tokens.index
        type_ = self.type(context)
        if type_ is None:
            return False
        params = self.parameters(context, 0, None)
        decl = Declaration()
        special = False
        if not type_.java_name:
            # not a function, probably an attribute
            return False
        elif context.group is None and not type_.operator and params is not None:
            # this is a constructor definition or specialization, skip over
            self._skip_definition()
            decl.text = spacing
            decl_list.add(decl)
            return True
        elif type_.constructor or type_.destructor:
            special = True
            dcl = self._constructor_declarator(type_, params)
        else:
            tokens.index = start_index
            dcl = self.declarator(context, None, 0, None, 0, False, False)
        if dcl is None or dcl.cpp_name is None:
            return False
        type_ = dcl.type

        if context.namespace is not None and "::" not in dcl.cpp_name:
            dcl.cpp_name = f"{context.namespace}::{dcl.cpp_name}"
        info = None
        if dcl.parameters is not None:
            args = []
            for d in dcl.parameters.declarators:
                args.append(d.type.cpp_name + "*" * d.indirections + ("&" if d.reference else ""))
            info = self.info_map.get_first(f"{dcl.cpp_name}({', '.join(args)})")
        if info is None:
            info = self.info_map.get_first(dcl.cpp_name)
        local_name = dcl.cpp_name
        if context.namespace is not None and local_name.startswith(context.namespace + "::"):
            local_name = local_name[len(context.namespace) + 2:]
        if not type_.java_name or dcl.parameters is None:
            tokens.index = back_index
            return False
        elif friend or (context.group is None and "::" in local_name) or (info is not None and info.skip):
            # friend declaration, member function definition or specialization
            token = tokens.get()
            while not token.match(TokenKind.EOF) and self.attribute() is not None:
                token = tokens.get()
            self._skip_definition()
            decl.text = spacing
            decl_list.add(decl)
            return True
        elif type_.static_member or context.group is None:
            objectify = context.objectify or (info is not None and info.objectify)
            modifiers = "public native " if objectify and context.group is not None else "public static native "
        beanify = context.beanify or (info is not None and info.beanify)

        seen = set()
        first = True
        emitted = 0
        for info_number in itertools.count(-1):
            tokens.index = start_index
            full = self._parse_function(context, start_index, special, info_number, None)
            if full is None or full.parameters is None:
                break
            defaults = full.parameters.defaults if full.parameters.elide_defaults else 0
            stop = False
            for keep in [None] + list(range(defaults - 1, -1, -1)):
                if emitted >= MAX_OVERLOAD_VARIANTS:
                    logger.warning("Too many overload variants for %s, truncating", dcl.cpp_name)
                    stop = True
                    break
                decl = Declaration(function=True)
                dcl = full if keep is None else self._parse_function(
                    context, start_index, special, info_number, keep
                )
                type_ = dcl.type
                initializer = self._function_tail(decl)
                if initializer == DELETE:
                    stop = True
                    break
                fn_modifiers = modifiers
                if initializer == "0":
                    decl.abstract_member = True
                    if context.virtualize:
                        fn_modifiers = "@Virtual public abstract "
                elif context.virtualize and type_.virtual:
                    fn_modifiers = "@Virtual public native "

                if beanify and context.group is not None and not special:
                    kind = guess_accessor(dcl, context.group)
                    renamed = None
                    if kind == "getter" and not dcl.java_name.startswith(("get", "is")):
                        renamed = "get" + _capitalize(dcl.java_name)
                    elif kind == "setter" and not dcl.java_name.startswith("set"):
                        renamed = "set" + _capitalize(dcl.java_name)
                    if renamed is not None:
                        if "@Name(" not in type_.annotations:
                            type_.annotations += f'@Name("{dcl.java_name}") '
                        dcl.signature = renamed + dcl.signature[len(dcl.java_name):]
                        dcl.java_name = renamed

                # compose the text of the declaration with the info we got up until this point
                decl.declarator = dcl
                if context.namespace is not None and context.group is None:
                    decl.text += f'@Namespace("{context.namespace}") '
                if type_.constructor:
                    decl.text += (
                        f"public {dcl.java_name}{dcl.parameters.list} {{ super((Pointer)null); "
                        f"allocate{dcl.parameters.names}; }}\n"
                        f"private native void allocate{dcl.parameters.list};\n"
                    )
                else:
                    decl.text += (
                        f"{fn_modifiers}{type_.annotations}{type_.java_name} "
                        f"{dcl.java_name}{dcl.parameters.list};\n"
                    )
                decl.signature = dcl.signature

                # replace all of the declaration by user specified text
                if info is not None and info.java_text is not None:
                    if not first:
                        stop = True
                        break
                    decl.text = info.java_text
                    decl.custom = True
                comment = self.comment_after()
                if first:
                    first = False
                    decl_list.spacing = spacing
                    decl.text = comment + decl.text

                # only add nonduplicate declarations and ignore destructors
                found = dcl.signature in seen
                if dcl.java_name and not found and not type_.destructor:
                    decl_list.add(decl)
                    emitted += 1
                    if context.virtualize and decl.abstract_member:
                        stop = True
                        break
                elif found and info_number > 0 and keep is None:
                    stop = True
                    break
                seen.add(dcl.signature)
                if decl.custom:
                    stop = True
                    break
            if stop or type_.destructor:
                break
        decl_list.spacing = None
        return True

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _member_name(self, context: Context, metadcl: Optional[Declarator], dcl: Declarator):
        """Return ``(annotations, java_name)`` naming ``dcl`` through ``metadcl``, if any."""
        annotations = ""
        java_name = dcl.java_name
        if context.namespace is not None and context.group is None:
            annotations += f'@Namespace("{context.namespace}") '
        if metadcl is not None and metadcl.cpp_name:
            if metadcl.indices == 0:
                annotations += f'@Name("{metadcl.cpp_name}.{dcl.cpp_name}") '
            else:
                annotations += f'@Name({{"{metadcl.cpp_name}", ".{dcl.cpp_name}"}}) '
            java_name = f"{metadcl.java_name}_{dcl.java_name}"
        return annotations, java_name

    @recognizer
    def variable(self, context: Context, decl_list: DeclarationList) -> bool:
        tokens = self.tokens
        back_index = tokens.index
        spacing = tokens.get().spacing
        modifiers = "public static native "
        setter_type = "void "
        dcl = self.declarator(context, None, 0, None, 0, False, True)
        if dcl is None or dcl.cpp_name is None or not tokens.get().match("[", "=", ",", ":", ";"):
            return False
        elif not dcl.type.static_member and context.group is not None:
            modifiers = "public native "
            setter_type = context.shorten(context.group.java_name) + " "

        cpp_name = dcl.cpp_name
        if context.namespace is not None and "::" not in cpp_name:
            cpp_name = f"{context.namespace}::{cpp_name}"
        info = self.info_map.get_first(cpp_name)
        if info is not None and info.skip:
            self._skip_statement()
            decl_list.add(Declaration(text=spacing))
            return True
        immutable = context.immutable or (info is not None and info.immutable)
        beanify = context.beanify or (info is not None and info.beanify)

        first = True
        metadcl = context.variable
        for n in itertools.count():
            decl = Declaration(variable=True)
            tokens.index = back_index
            dcl = self.declarator(context, None, -1, None, n, False, True)
            if dcl is None:
                break
            decl.declarator = dcl
            if metadcl is None or metadcl.indices == 0 or dcl.indices == 0:
                # arrays are currently not supported for both metadcl and dcl at the same time
                count = dcl.indices if metadcl is None or metadcl.indices == 0 else metadcl.indices
                name_annotation, java_name = self._member_name(context, metadcl, dcl)
                getter_only = dcl.type.const_value or immutable
                if dcl.type.const_value:
                    decl.text += "@MemberGetter "
                decl.text += self._accessors(
                    modifiers, setter_type, dcl.type.annotations, dcl.type.java_name,
                    java_name, _indices(count), getter_only, beanify, name_annotation,
                )
            if dcl.indices > 0:
                # in the case of arrays, also add a pointer accessor
                tokens.index = back_index
                dcl = self.declarator(context, None, -1, None, n, True, False)
                count = metadcl.indices if metadcl is not None else 0
                name_annotation, java_name = self._member_name(context, metadcl, dcl)
                annotations = dcl.type.annotations.replace("@ByVal ", "@ByRef ")
                decl.text += (
                    f"@MemberGetter {name_annotation}{modifiers}{annotations}"
                    f"{dcl.type.java_name} {java_name}({_indices(count)});\n"
                )
            decl.signature = dcl.signature
            if info is not None and info.java_text is not None:
                decl.text = info.java_text
                decl.declarator = None
                decl.custom = True
            while not tokens.get().match(TokenKind.EOF, ";"):
                tokens.next()
            tokens.next()
            comment = self.comment_after()
            if first:
                first = False
                decl_list.spacing = spacing
                decl.text = comment + decl.text
            decl_list.add(decl)
        decl_list.spacing = None
        return True

    # ------------------------------------------------------------------
    # Driver loop
    # ------------------------------------------------------------------

    def declarations(self, context: Context, decl_list: DeclarationList) -> None:
        """Parse declarations until the end of input or of the enclosing scope."""
        tokens = self.tokens
        token = tokens.get()
        while not token.match(TokenKind.EOF, "}"):
            while token.match(PRIVATE, PROTECTED, PUBLIC) and tokens.get(1).match(":"):
                context.inaccessible = not token.match(PUBLIC)
                tokens.next()
                tokens.next()
                token = tokens.get()
            ctx = context
            comment = self.comment_before()
            token = tokens.get()
            spacing = token.spacing
            template_map = self.template(ctx)
            if template_map is not None:
                tokens.respace(spacing)
                token = tokens.get()
                ctx = ctx.clone(template_map=template_map)
            decl_list.info_map = self.info_map
            decl_list.context = ctx
            decl_list.template_map = template_map
            decl_list.info_iterator = None
            decl_list.spacing = None
            if comment:
                decl_list.add(Declaration(text=comment, comment=True))
            if token.match(TokenKind.EOF, "}"):
                break
            if token.match(STATIC_ASSERT) or (token.match(TEMPLATE) and not tokens.get(1).match("<")):
                # compile-time checks and explicit instantiations
                self._skip_statement()
                token = tokens.get()
                continue

            start_index = tokens.mark()
            while True:
                if template_map is not None and decl_list.info_iterator is not None:
                    info = next(decl_list.info_iterator, None)
                    if info is None:
                        break
                    type_ = self.fork(info.cpp_names[0]).type(context) if info.cpp_names else None
                    if type_ is None or not type_.arguments:
                        continue
                    template_map.bind(type_.arguments)
                    tokens.reset(start_index)
                    logger.debug("Instantiating %s", info.cpp_names[0])

                if not self.first_of(ctx, decl_list, *self.recognizers):
                    spacing = tokens.get().spacing
                    if self.attribute() is not None:
                        tokens.respace(spacing)
                    else:
                        raise ParserError(
                            f"Could not parse declaration at '{token}'",
                            token.file,
                            token.line,
                            token.value,
                        )
                while tokens.get().match(";") and not tokens.get().match(TokenKind.EOF):
                    tokens.next()
                if decl_list.info_iterator is None:
                    break
            token = tokens.get()

        # for comments at the end without declarations
        comment = self.comment_before()
        if comment:
            decl_list.add(Declaration(text=comment, comment=True))

    def parse(self, context: Optional[Context] = None) -> DeclarationList:
        """Parse the whole token stream into a new declaration list."""
        context = context if context is not None else Context()
        decl_list = DeclarationList(self.info_map)
        containers(self, context, decl_list)
        self.declarations(context, decl_list)
        return decl_list
