"""
Configuration for SQL Gutter - formatter options and persisted preferences
"""

from .formatter_options import FormatterOptions, KeywordCase
from .user_preferences import UserPreferences, get_preferences

__all__ = ["FormatterOptions", "KeywordCase", "UserPreferences", "get_preferences"]
