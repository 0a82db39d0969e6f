"""
Expression nodes - Typed sum type for SQL expressions

Loaders convert parser output into these dataclasses once; renderers
dispatch on the concrete class and never inspect raw parser shapes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .statements import Select


class Expression:
    """Base class of every expression node."""


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------

@dataclass
class ColumnRef(Expression):
    column: str
    table: Optional[str] = None


class QuoteStyle(Enum):
    """Quoting of a string literal, as a format template."""
    SINGLE = "'{}'"
    DOUBLE = '"{}"'
    BACKTICK = "`{}`"
    REGEX = "~'{}'"
    HEX = "X'{}'"
    BIT = "B'{}'"
    NATIONAL = "N'{}'"


@dataclass
class StringLiteral(Expression):
    value: str
    style: QuoteStyle = QuoteStyle.SINGLE


@dataclass
class NumberLiteral(Expression):
    value: str


@dataclass
class BooleanLiteral(Expression):
    value: bool


@dataclass
class NullLiteral(Expression):
    pass


@dataclass
class TypedLiteral(Expression):
    """DATE '2024-01-01', TIMESTAMP '...' and friends."""
    type_name: str
    value: str


@dataclass
class KeywordLiteral(Expression):
    """A bare keyword used as a value (DEFAULT, CURRENT_DATE, ...)."""
    value: str


@dataclass
class Star(Expression):
    pass


@dataclass
class Parameter(Expression):
    value: str


@dataclass
class Unrecognized(Expression):
    """Fallback for anything a loader could not map; rendered verbatim."""
    value: Optional[str] = None
    kind: Optional[str] = None


# ---------------------------------------------------------------------------
# Operators and predicates
# ---------------------------------------------------------------------------

@dataclass
class BinaryOp(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass
class UnaryOp(Expression):
    operator: str
    operand: Expression
    postfix: bool = False


@dataclass
class Paren(Expression):
    expression: Expression


@dataclass
class Between(Expression):
    value: Expression
    low: Expression
    high: Expression
    negated: bool = False


@dataclass
class InPredicate(Expression):
    """value IN (items) or value IN (subquery)."""
    value: Expression
    items: List[Expression] = field(default_factory=list)
    subquery: Optional["Select"] = None
    negated: bool = False


@dataclass
class Exists(Expression):
    subquery: "Select"
    negated: bool = False


@dataclass
class Quantified(Expression):
    """ANY (subquery) / ALL (subquery) as the right side of a comparison."""
    quantifier: str
    subquery: "Select"


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------

@dataclass
class OrderItem:
    expression: Expression
    direction: Optional[str] = None     # ASC / DESC
    nulls: Optional[str] = None         # FIRST / LAST


@dataclass
class WindowSpec:
    partition_by: List[Expression] = field(default_factory=list)
    order_by: List[OrderItem] = field(default_factory=list)


@dataclass
class FunctionCall(Expression):
    name: str
    args: List[Expression] = field(default_factory=list)


@dataclass
class AggregateCall(Expression):
    name: str
    args: List[Expression] = field(default_factory=list)
    distinct: bool = False
    over: Optional[WindowSpec] = None


@dataclass
class WindowCall(Expression):
    """Ranking functions (ROW_NUMBER, RANK, ...) that always carry OVER."""
    name: str
    args: List[Expression] = field(default_factory=list)
    over: WindowSpec = field(default_factory=WindowSpec)


# ---------------------------------------------------------------------------
# Compound expressions
# ---------------------------------------------------------------------------

@dataclass
class CaseWhen:
    condition: Expression
    result: Expression


@dataclass
class Case(Expression):
    whens: List[CaseWhen]
    operand: Optional[Expression] = None
    else_result: Optional[Expression] = None


class CastSyntax(Enum):
    CALL = "call"           # CAST(x AS type)
    OPERATOR = "operator"   # x::type


@dataclass
class Cast(Expression):
    expression: Expression
    target_type: str
    syntax: CastSyntax = CastSyntax.CALL


@dataclass
class ArrayLiteral(Expression):
    items: List[Expression] = field(default_factory=list)


@dataclass
class ExpressionList(Expression):
    items: List[Expression] = field(default_factory=list)
    parenthesized: bool = True


@dataclass
class Interval(Expression):
    expression: Expression
    unit: Optional[str] = None


@dataclass
class Extract(Expression):
    field: str
    source: Expression


@dataclass
class Subquery(Expression):
    select: "Select"


LITERAL_TYPES = (
    StringLiteral,
    NumberLiteral,
    BooleanLiteral,
    NullLiteral,
    TypedLiteral,
    KeywordLiteral,
    Parameter,
)


def is_literal(expression: Expression) -> bool:
    """True for constant values (including bind parameters)."""
    if isinstance(expression, UnaryOp) and expression.operator in ("-", "+"):
        return is_literal(expression.operand)
    return isinstance(expression, LITERAL_TYPES)
