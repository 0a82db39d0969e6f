"""
Base AST Loader - Abstract base class for parser bindings

Loaders turn the output of an external SQL parser into the typed node
model of sqlgutter.models. All knowledge of parser-specific shapes stays
behind this boundary.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..models import Statement

import logging
logger = logging.getLogger(__name__)


class SqlFormatError(Exception):
    """Base class of errors raised while formatting."""


class SqlParseError(SqlFormatError):
    """
    The external parser rejected the input.

    Rendering never raises; parse failures are the only error surfaced
    to callers of the formatter.
    """

    def __init__(self, message: str, sql: str = "", line: Optional[int] = None,
                 column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.sql = sql
        self.line = line
        self.column = column


class AstLoader(ABC):
    """
    Abstract base class for AST loaders.

    Each parser binding (sqlglot, node-sql-parser JSON, ...) has its own
    implementation that knows the shape of that parser's output.
    """

    name = "base"
    accepts_sql = True      # False for loaders that take a parsed AST

    def __init__(self, dialect: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            dialect: SQL dialect understood by the underlying parser
        """
        self.dialect = dialect

    @abstractmethod
    def load(self, source: Any) -> List[Statement]:
        """
        Convert parser input into statement nodes.

        Args:
            source: SQL text or an already parsed AST, depending on the loader

        Returns:
            One node per statement

        Raises:
            SqlParseError: If the source cannot be parsed
        """
        pass
