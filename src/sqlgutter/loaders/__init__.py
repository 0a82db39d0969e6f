"""
Parser bindings that produce the sqlgutter node model
"""

from .base import AstLoader, SqlFormatError, SqlParseError
from .factory import LoaderFactory
from .node_sql_parser_loader import NodeSqlParserLoader
from .sqlglot_loader import SqlglotLoader

__all__ = [
    "AstLoader",
    "LoaderFactory",
    "NodeSqlParserLoader",
    "SqlFormatError",
    "SqlParseError",
    "SqlglotLoader",
]
