"""
Statement nodes - SELECT and DML statements plus their clauses
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .expressions import Expression, OrderItem


class Statement:
    """Base class of every statement node."""


# ---------------------------------------------------------------------------
# FROM sources
# ---------------------------------------------------------------------------

@dataclass
class TableRef:
    name: str
    alias: Optional[str] = None


@dataclass
class DerivedTable:
    select: "Select"
    alias: Optional[str] = None


@dataclass
class UnknownTableSource:
    """Best-effort name for a FROM source no loader rule understood."""
    name: str
    alias: Optional[str] = None


TableSource = Union[TableRef, DerivedTable, UnknownTableSource]


@dataclass
class FromItem:
    """
    One entry of the FROM list.

    join holds the join keyword text ("LEFT JOIN", ...); None means the
    first table or a comma-separated one.
    """
    source: TableSource
    join: Optional[str] = None
    on: Optional[Expression] = None
    using: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------

@dataclass
class SelectColumn:
    expression: Expression
    alias: Optional[str] = None


@dataclass
class Limit:
    count: Optional[Expression] = None
    offset: Optional[Expression] = None


@dataclass
class CommonTableExpression:
    name: str
    statement: Statement
    columns: List[str] = field(default_factory=list)


@dataclass
class WithClause:
    """ctes is None when the parser handed over a malformed payload."""
    ctes: Optional[List[CommonTableExpression]]
    recursive: bool = False


@dataclass
class Select(Statement):
    columns: List[SelectColumn] = field(default_factory=list)
    distinct: bool = False
    from_items: List[FromItem] = field(default_factory=list)
    where: Optional[Expression] = None
    group_by: List[Expression] = field(default_factory=list)
    having: Optional[Expression] = None
    order_by: List[OrderItem] = field(default_factory=list)
    limit: Optional[Limit] = None
    with_clause: Optional[WithClause] = None
    set_op: Optional[str] = None        # UNION / UNION ALL / INTERSECT / EXCEPT
    next: Optional["Select"] = None     # continuation joined by set_op


# ---------------------------------------------------------------------------
# DML
# ---------------------------------------------------------------------------

@dataclass
class Assignment:
    column: str
    value: Expression


@dataclass
class Update(Statement):
    table: TableSource
    assignments: List[Assignment] = field(default_factory=list)
    where: Optional[Expression] = None


@dataclass
class Delete(Statement):
    table: TableSource
    where: Optional[Expression] = None


@dataclass
class Insert(Statement):
    table: TableSource
    columns: List[str] = field(default_factory=list)
    rows: List[List[Expression]] = field(default_factory=list)
    select: Optional[Select] = None


@dataclass
class UnsupportedStatement(Statement):
    """Statement kinds without a gutter layout (CREATE, DROP, ...)."""
    kind: str
    text: Optional[str] = None
