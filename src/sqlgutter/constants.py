"""
Centralized constants for SQL Gutter.

Eliminates magic numbers scattered across the renderers.
Import from here instead of hardcoding values.
"""

# ===========================================================================
# Keyword gutter
# ===========================================================================
DEFAULT_KEYWORD_WIDTH = 6       # Width used when a block has no keywords ("SELECT")
MIN_DERIVED_TABLE_WIDTH = 8     # Narrowest gutter for a derived table in FROM
DEFAULT_INDENT_SIZE = 2

# Extra columns added to a context's indent, per context kind
CASE_WHEN_ADJUSTMENT = 3
CLAUSE_ADJUSTMENT = 1

# ===========================================================================
# Recursion guard
# ===========================================================================
MAX_RENDER_DEPTH = 200          # Deepest expression nesting rendered structurally

# ===========================================================================
# Placeholders emitted for nodes that cannot be rendered
# ===========================================================================
UNSUPPORTED_EXPRESSION = "/* unsupported expression */"
INVALID_CTE = "/* invalid CTE */"
NESTING_TOO_DEEP = "/* nesting too deep */"

UNKNOWN_COLUMN = "unknown_column"
UNKNOWN_FUNCTION = "unknown_function"
UNKNOWN_TABLE = "unknown_table"
UNNAMED_CTE = "unnamed_cte"

# ===========================================================================
# Parsing
# ===========================================================================
DEFAULT_DIALECT = "postgres"
DEFAULT_PARSER = "sqlglot"
STATEMENT_TERMINATOR = ";"
STATEMENT_SEPARATOR = "\n\n"
