"""
Indent Context - Immutable description of where a fragment is being rendered

Every renderer receives a context and derives new ones for nested
fragments. Contexts are never mutated, so a child can never disturb the
layout of its parent or siblings.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..constants import CASE_WHEN_ADJUSTMENT, CLAUSE_ADJUSTMENT


class ContextKind(Enum):
    """Syntactic position of the fragment being rendered."""
    MAIN = "main"
    SELECT_CLAUSE = "select_clause"
    WHERE_CLAUSE = "where_clause"
    CASE_WHEN = "case_when"
    FUNCTION_ARG = "function_arg"
    SUBQUERY = "subquery"
    JOIN_CONDITION = "join_condition"


_KIND_ADJUSTMENTS = {
    ContextKind.CASE_WHEN: CASE_WHEN_ADJUSTMENT,
    ContextKind.SELECT_CLAUSE: CLAUSE_ADJUSTMENT,
    ContextKind.WHERE_CLAUSE: CLAUSE_ADJUSTMENT,
    ContextKind.FUNCTION_ARG: CLAUSE_ADJUSTMENT,
    ContextKind.SUBQUERY: CLAUSE_ADJUSTMENT,
}


@dataclass(frozen=True)
class IndentContext:
    """
    Rendering position: nesting depth, context kind and gutter width.

    base_keyword_width is the gutter width shared by a whole statement
    block (main query, its CTE bodies and set-operation branches). Only
    derive_subquery and with_width change it.
    """
    nest_level: int = 0
    kind: ContextKind = ContextKind.MAIN
    base_keyword_width: int = 0
    parent: Optional["IndentContext"] = None
    is_first_select: bool = False

    def derive_child(self, kind: ContextKind) -> "IndentContext":
        """One level deeper, same gutter width, parent is this context."""
        return IndentContext(
            nest_level=self.nest_level + 1,
            kind=kind,
            base_keyword_width=self.base_keyword_width,
            parent=self,
        )

    def derive_sibling(self, kind: ContextKind) -> "IndentContext":
        """Same level and width, shares this context's parent."""
        return IndentContext(
            nest_level=self.nest_level,
            kind=kind,
            base_keyword_width=self.base_keyword_width,
            parent=self.parent,
        )

    def derive_subquery(self, width: int) -> "IndentContext":
        """One level deeper for a nested query with its own gutter width."""
        return IndentContext(
            nest_level=self.nest_level + 1,
            kind=ContextKind.SUBQUERY,
            base_keyword_width=width,
            parent=self,
        )

    def with_width(self, width: int) -> "IndentContext":
        """Same position with the gutter width of a freshly analysed block."""
        return replace(self, base_keyword_width=width)

    def indent_width(self) -> int:
        """Column at which content of this context starts."""
        if self.nest_level == 0:
            base = self.base_keyword_width
        else:
            base = self.base_keyword_width + self.nest_level * 2
        return base + _KIND_ADJUSTMENTS.get(self.kind, 0)

    def closing_indent_width(self) -> int:
        """Column of the closing parenthesis of this context's block."""
        if self.parent is None:
            return self.base_keyword_width
        if self.kind is ContextKind.SUBQUERY:
            return self.parent.indent_width() + 1
        return self.parent.indent_width()

    @property
    def is_condition(self) -> bool:
        """WHERE and JOIN ... ON conditions use the compact layouts."""
        return self.kind in (ContextKind.WHERE_CLAUSE, ContextKind.JOIN_CONDITION)


def root_context(width: int) -> IndentContext:
    """Context for the top of a statement."""
    return IndentContext(base_keyword_width=width, is_first_select=True)
