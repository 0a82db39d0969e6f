"""
Pytest configuration and fixtures for SQL Gutter tests.
"""
import pytest

from sqlgutter.config import FormatterOptions, KeywordCase, UserPreferences
from sqlgutter.core import ContextKind, IndentContext
from sqlgutter.renderers import ExpressionRenderer


@pytest.fixture
def options():
    """Default formatter options (upper-case keywords, terminator on)."""
    return FormatterOptions()


@pytest.fixture
def lower_options():
    """Formatter options with lower-case keywords."""
    return FormatterOptions(keyword_case=KeywordCase.LOWER)


@pytest.fixture
def renderer(options):
    """Expression renderer in standard SELECT mode."""
    return ExpressionRenderer(options)


@pytest.fixture
def where_context():
    """WHERE condition context of a statement with a gutter of 6."""
    return IndentContext(base_keyword_width=6, kind=ContextKind.WHERE_CLAUSE)


@pytest.fixture
def select_context():
    """SELECT list context of a statement with a gutter of 6."""
    return IndentContext(base_keyword_width=6, kind=ContextKind.SELECT_CLAUSE)


@pytest.fixture
def preferences_file(tmp_path):
    """Path for a temporary preferences file (not created)."""
    return tmp_path / "sqlgutter" / "preferences.json"


@pytest.fixture
def preferences(preferences_file):
    """UserPreferences bound to a temporary file."""
    return UserPreferences(config_file=preferences_file)
