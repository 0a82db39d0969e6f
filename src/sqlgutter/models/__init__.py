"""
Node model shared by loaders and renderers
"""

from .expressions import (
    AggregateCall,
    ArrayLiteral,
    Between,
    BinaryOp,
    BooleanLiteral,
    Case,
    CaseWhen,
    Cast,
    CastSyntax,
    ColumnRef,
    Exists,
    Expression,
    ExpressionList,
    Extract,
    FunctionCall,
    InPredicate,
    Interval,
    KeywordLiteral,
    NullLiteral,
    NumberLiteral,
    OrderItem,
    Parameter,
    Paren,
    Quantified,
    QuoteStyle,
    Star,
    StringLiteral,
    Subquery,
    TypedLiteral,
    UnaryOp,
    Unrecognized,
    WindowCall,
    WindowSpec,
    is_literal,
)
from .statements import (
    Assignment,
    CommonTableExpression,
    Delete,
    DerivedTable,
    FromItem,
    Insert,
    Limit,
    Select,
    SelectColumn,
    Statement,
    TableRef,
    TableSource,
    UnknownTableSource,
    UnsupportedStatement,
    Update,
    WithClause,
)

__all__ = [
    "AggregateCall", "ArrayLiteral", "Between", "BinaryOp", "BooleanLiteral",
    "Case", "CaseWhen", "Cast", "CastSyntax", "ColumnRef", "Exists",
    "Expression", "ExpressionList", "Extract", "FunctionCall", "InPredicate",
    "Interval", "KeywordLiteral", "NullLiteral", "NumberLiteral", "OrderItem",
    "Parameter", "Paren", "Quantified", "QuoteStyle", "Star", "StringLiteral",
    "Subquery", "TypedLiteral", "UnaryOp", "Unrecognized", "WindowCall",
    "WindowSpec", "is_literal",
    "Assignment", "CommonTableExpression", "Delete", "DerivedTable",
    "FromItem", "Insert", "Limit", "Select", "SelectColumn", "Statement",
    "TableRef", "TableSource", "UnknownTableSource", "UnsupportedStatement",
    "Update", "WithClause",
]
