"""
Format Error Handler - User-friendly parse error messages

Translates parser error messages into short messages with a suggestion,
for display by the command line and editor integrations.
"""

import re
from dataclasses import dataclass

from ..loaders.base import SqlParseError

import logging
logger = logging.getLogger(__name__)


@dataclass
class FormatErrorInfo:
    """Structured parse error information."""
    title: str  # Short error title
    message: str  # User-friendly message
    suggestion: str  # What to do to fix it
    original_error: str  # Original error for debugging

    def format_full(self) -> str:
        """Format complete error message for display."""
        parts = [self.title, "", self.message]
        if self.suggestion:
            parts.extend(["", "Suggestion:", self.suggestion])
        return "\n".join(parts)

    def format_short(self) -> str:
        """Format short error message."""
        return f"{self.title}: {self.message}"


# Format: (regex_pattern, title, message_template, suggestion)
# Use {match} in message_template to include regex group(1)
PARSE_ERROR_PATTERNS = [
    (
        r"Invalid AST JSON",
        "Invalid AST document",
        "The AST input is not valid JSON.",
        "Pass the raw JSON output of the parser."
    ),
    (
        r"nesting too deep|maximum recursion depth",
        "Statement too deeply nested",
        "The statement nests expressions deeper than the formatter supports.",
        "Split the statement or simplify the nested expressions."
    ),
    (
        r"Expecting \)|unbalanced paren|missing \)",
        "Unbalanced parentheses",
        "A parenthesis is opened but never closed.",
        "Check that every '(' has a matching ')'."
    ),
    (
        r"Required keyword: '(\w+)'",
        "Incomplete clause",
        "A clause is missing its '{match}' part.",
        "Complete the clause or remove it."
    ),
    (
        r"Unsupported (.+?):",
        "Unsupported syntax",
        "The formatter does not lay out {match}.",
        "Format this statement by hand, or remove the unsupported part."
    ),
    (
        r"Error tokenizing|unterminated|Missing closing",
        "Unterminated literal",
        "A quoted string, identifier or comment is not closed.",
        "Check the quotes and comment delimiters."
    ),
    (
        r"Invalid expression / Unexpected token|Unexpected token",
        "Unexpected token",
        "The parser found a token it did not expect.",
        "Look for a missing comma, keyword or operator near the reported position."
    ),
]


def parse_format_error(error: Exception) -> FormatErrorInfo:
    """
    Parse a formatting error and return user-friendly information.

    Args:
        error: The exception that occurred

    Returns:
        FormatErrorInfo with user-friendly message and suggestion
    """
    original_error = str(error)

    for pattern, title, message_template, suggestion in PARSE_ERROR_PATTERNS:
        match = re.search(pattern, original_error, re.IGNORECASE)
        if match:
            message = message_template
            if "{match}" in message and match.groups():
                message = message.replace("{match}", match.group(1))
            break
    else:
        title = "Cannot parse SQL"
        message = "The statement could not be parsed."
        suggestion = "Check the statement syntax and the selected dialect."

    if isinstance(error, SqlParseError) and error.line is not None:
        location = f"line {error.line}"
        if error.column is not None:
            location += f", column {error.column}"
        message = f"{message} ({location})"

    return FormatErrorInfo(
        title=title,
        message=message,
        suggestion=suggestion,
        original_error=original_error
    )


def format_parse_error(error: Exception, include_original: bool = True) -> str:
    """
    Format a parse error for display to the user.

    Args:
        error: The exception that occurred
        include_original: Whether to include original error message

    Returns:
        Formatted error message string
    """
    info = parse_format_error(error)

    parts = [info.title, "", info.message]

    if info.suggestion:
        parts.extend(["", "Suggestion:", info.suggestion])

    if include_original:
        parts.extend(["", "---", "Details:", info.original_error[:500]])

    return "\n".join(parts)
