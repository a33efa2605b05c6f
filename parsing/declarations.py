"""
Ordered, de-duplicated sink for parsed declarations.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, List, Optional

from parsing.infomap import Info, InfoMap
from parsing.models import Declaration
from parsing.templates import TemplateMap

if TYPE_CHECKING:
    from parsing.context import Context

logger = logging.getLogger(__name__)


class DeclarationList(List[Declaration]):
    """List of declarations with signature-based uniqueness.

    While a declaration is being recognized, ``spacing`` holds the verbatim
    whitespace and comments that preceded it; ``rescan`` applies it to the
    first line of the rendered text so untouched regions keep their layout.

    Attributes:
        info_map: Rule table used to filter skipped types.
        context: Context of the statement being added.
        template_map: Bindings of the template header being parsed, if any.
        info_iterator: Pending rule entries naming instantiations of it.
        spacing: Spacing to apply to the next added text.
    """

    def __init__(self, info_map: Optional[InfoMap] = None):
        super().__init__()
        self.info_map = info_map if info_map is not None else InfoMap()
        self.context: Optional["Context"] = None
        self.template_map: Optional[TemplateMap] = None
        self.info_iterator: Optional[Iterator[Info]] = None
        self.pending: List[Info] = []
        self.spacing: Optional[str] = None

    def rescan(self, lines: str) -> str:
        if self.spacing is None:
            return lines
        text = ""
        for line in lines.splitlines():
            text += self.spacing + line
            newline = self.spacing.rfind("\n")
            self.spacing = self.spacing[newline:] if newline >= 0 else "\n"
        return text

    def _skipped(self, cpp_name: Optional[str]) -> bool:
        info = self.info_map.get_first(cpp_name)
        return (
            info is not None
            and info.skip
            and info.value_types is None
            and info.pointer_types is None
        )

    def add(self, decl: Declaration) -> bool:
        """Add ``decl`` and its nested definitions.

        Returns False when the declaration was withheld, either because it
        belongs to an unbound template or because it names a skipped type.
        """
        template_map = self.template_map
        if (
            template_map is not None
            and not template_map.full()
            and (decl.type is not None or decl.declarator is not None)
        ):
            if self.info_iterator is None:
                template_map.type = decl.type
                template_map.declarator = decl.declarator
                dcl = decl.declarator
                name = dcl.cpp_name if dcl is not None else decl.type.cpp_name
                self.pending = [
                    info for info in self.info_map.get(name) if info is not None
                ]
                self.info_iterator = iter(list(self.pending)) if self.pending else None
                logger.debug("Template %s has %d instantiations", name, len(self.pending))
            return False
        dcl = decl.declarator
        if dcl is not None and dcl.type is not None:
            if self._skipped(dcl.type.cpp_name):
                return False
            if dcl.parameters is not None:
                for d in dcl.parameters.declarators:
                    if d is not None and d.type is not None and self._skipped(d.type.cpp_name):
                        return False

        # definitions nested in declarators go in front of their user
        stack = [decl]
        i = 0
        while i < len(stack):
            dcl = stack[i].declarator
            i += 1
            if dcl is None:
                continue
            if dcl.definition is not None:
                stack.insert(i, dcl.definition)
            if dcl.parameters is not None:
                for d in dcl.parameters.declarators:
                    if d is not None and d.definition is not None:
                        stack.insert(i, d.definition)

        while stack:
            decl = stack.pop()
            if self.context is not None:
                decl.inaccessible = self.context.inaccessible
            if not decl.text:
                decl.inaccessible = True
            found = False
            j = 0
            while j < len(self):
                existing = self[j]
                if existing.signature and existing.signature == decl.signature:
                    if (
                        (existing.const_member and not decl.const_member)
                        or (existing.inaccessible and not decl.inaccessible)
                        or (existing.incomplete and not decl.incomplete)
                    ):
                        # prefer non-const, accessible, complete variants
                        del self[j]
                        continue
                    found = True
                j += 1
            if not found:
                decl.text = self.rescan(decl.text)
                super().append(decl)
        return True

    def remove_last(self) -> Declaration:
        return self.pop()

    def functions(self) -> List[Declaration]:
        return [d for d in self if d.function]

    def variables(self) -> List[Declaration]:
        return [d for d in self if d.variable]

    def signatures(self) -> List[str]:
        return [d.signature for d in self if d.signature]

    def render(self) -> str:
        return "".join(d.text for d in self)
