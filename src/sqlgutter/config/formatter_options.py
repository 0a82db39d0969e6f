"""
Formatter Options - Caller-supplied settings for a formatting pass
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict

from ..constants import DEFAULT_DIALECT, DEFAULT_INDENT_SIZE, DEFAULT_PARSER

import logging
logger = logging.getLogger(__name__)


class KeywordCase(Enum):
    """Casing applied to every emitted keyword token."""
    UPPER = "upper"
    LOWER = "lower"

    @classmethod
    def from_value(cls, value: Any) -> "KeywordCase":
        """Accept an enum member or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown keyword case '{value}', using upper")
            return cls.UPPER


@dataclass(frozen=True)
class FormatterOptions:
    """
    Options for one formatting pass.

    keyword_case decides the casing of keywords in the output.
    indent_size is carried for editor integrations and is not used by
    the gutter layout, which derives every column from keyword widths.
    """
    keyword_case: KeywordCase = KeywordCase.UPPER
    indent_size: int = DEFAULT_INDENT_SIZE
    dialect: str = DEFAULT_DIALECT
    parser: str = DEFAULT_PARSER
    insert_terminator: bool = True

    def keyword(self, text: str) -> str:
        """Apply the configured casing to a keyword."""
        if self.keyword_case is KeywordCase.LOWER:
            return text.lower()
        return text.upper()

    def with_changes(self, **changes) -> "FormatterOptions":
        """Return a copy with some fields replaced."""
        if "keyword_case" in changes:
            changes["keyword_case"] = KeywordCase.from_value(changes["keyword_case"])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormatterOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        known = {"keyword_case", "indent_size", "dialect", "parser", "insert_terminator"}
        values = {k: v for k, v in (data or {}).items() if k in known and v is not None}
        if "keyword_case" in values:
            values["keyword_case"] = KeywordCase.from_value(values["keyword_case"])
        if "indent_size" in values:
            values["indent_size"] = int(values["indent_size"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword_case": self.keyword_case.value,
            "indent_size": self.indent_size,
            "dialect": self.dialect,
            "parser": self.parser,
            "insert_terminator": self.insert_terminator,
        }
