"""
Loader Factory - Create the AST loader for a parser name
"""

from typing import Dict, Optional, Type

from .base import AstLoader

import logging
logger = logging.getLogger(__name__)


class LoaderFactory:
    """
    Factory for creating AST loaders.

    Usage:
        loader = LoaderFactory.create("sqlglot", dialect="postgres")
        statements = loader.load("select 1")
    """

    # Registry of supported parsers
    _loaders: Dict[str, Type[AstLoader]] = {}

    @classmethod
    def create(cls, parser: str, dialect: Optional[str] = None) -> Optional[AstLoader]:
        """
        Create a loader for the specified parser.

        Args:
            parser: Parser name (sqlglot, node-sql-parser)
            dialect: SQL dialect passed to the loader

        Returns:
            AstLoader instance or None if the parser is not supported
        """
        loader_class = cls._loaders.get(parser.lower())
        if loader_class is None:
            logger.warning(f"No loader for parser: {parser}")
            return None

        return loader_class(dialect)

    @classmethod
    def is_supported(cls, parser: str) -> bool:
        """Check if a parser is supported."""
        return parser.lower() in cls._loaders

    @classmethod
    def supported_types(cls) -> list:
        """Get list of supported parser names."""
        return list(cls._loaders.keys())

    @classmethod
    def register(cls, parser: str, loader_class: Type[AstLoader]):
        """
        Register a new loader type.

        Args:
            parser: Parser identifier
            loader_class: AstLoader subclass
        """
        cls._loaders[parser.lower()] = loader_class
        logger.debug(f"Registered loader for: {parser}")


def _register_default_loaders():
    """Register built-in loaders. Called on module import."""
    from .sqlglot_loader import SqlglotLoader
    from .node_sql_parser_loader import NodeSqlParserLoader

    LoaderFactory.register("sqlglot", SqlglotLoader)
    LoaderFactory.register("node-sql-parser", NodeSqlParserLoader)
    LoaderFactory.register("json", NodeSqlParserLoader)  # Alias


# Register on module import
_register_default_loaders()
