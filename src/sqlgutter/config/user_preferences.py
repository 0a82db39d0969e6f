"""
User Preferences - Persistent storage for formatter settings
"""
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Union

from .formatter_options import FormatterOptions, KeywordCase
from ..constants import DEFAULT_DIALECT, DEFAULT_INDENT_SIZE

logger = logging.getLogger(__name__)


class UserPreferences:
    """
    Manages formatter preferences with persistent storage

    Preferences include:
    - keyword_case: Casing of emitted keywords (upper/lower)
    - indent_size: Indent size reported to editor integrations
    - dialect: SQL dialect used to parse input text
    """

    DEFAULT_PREFERENCES = {
        'keyword_case': KeywordCase.UPPER.value,
        'indent_size': DEFAULT_INDENT_SIZE,
        'dialect': DEFAULT_DIALECT,
    }

    DEFAULT_CONFIG_FILE = Path.home() / '.sqlgutter' / 'preferences.json'

    _instance: Optional['UserPreferences'] = None

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize user preferences"""
        self._preferences = self.DEFAULT_PREFERENCES.copy()
        self._config_file = Path(config_file) if config_file else self.DEFAULT_CONFIG_FILE
        self._config_dir = self._config_file.parent

        self.load()

        logger.debug(f"UserPreferences initialized: {self._preferences}")

    @classmethod
    def get_instance(cls) -> 'UserPreferences':
        """Get singleton instance of UserPreferences"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def config_file(self) -> Path:
        return self._config_file

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a preference value

        Args:
            key: Preference key
            default: Default value if key not found

        Returns:
            Preference value or default
        """
        return self._preferences.get(key, default)

    def set(self, key: str, value: Any, save: bool = True):
        """
        Set a preference value

        Args:
            key: Preference key
            value: New value
            save: Whether to save to disk immediately
        """
        self._preferences[key] = value

        if save:
            self.save()

        logger.info(f"Preference changed: {key} = {value}")

    def get_keyword_case(self) -> KeywordCase:
        """Get keyword casing"""
        return KeywordCase.from_value(self.get('keyword_case', KeywordCase.UPPER.value))

    def set_keyword_case(self, keyword_case: Union[str, KeywordCase]):
        """Set keyword casing and save"""
        self.set('keyword_case', KeywordCase.from_value(keyword_case).value)

    def get_dialect(self) -> str:
        return self.get('dialect', DEFAULT_DIALECT)

    def set_dialect(self, dialect: str):
        self.set('dialect', dialect)

    def load(self):
        """Load preferences from file (missing file means defaults)"""
        if not self._config_file.exists():
            logger.debug("No preferences file found, using defaults")
            return
        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                loaded_prefs = json.load(f)
            if not isinstance(loaded_prefs, dict):
                raise ValueError("preferences file must contain a JSON object")
            # Merge with defaults to ensure all keys exist
            self._preferences = self.DEFAULT_PREFERENCES.copy()
            self._preferences.update(loaded_prefs)
            logger.info(f"Loaded preferences from {self._config_file}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading preferences: {e}")
            self._preferences = self.DEFAULT_PREFERENCES.copy()

    def save(self):
        """Save preferences to file"""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)

            with open(self._config_file, 'w', encoding='utf-8') as f:
                json.dump(self._preferences, f, indent=2)

            logger.info(f"Saved preferences to {self._config_file}")
        except OSError as e:
            logger.error(f"Error saving preferences: {e}")

    def reset_to_defaults(self):
        """Reset all preferences to default values"""
        self._preferences = self.DEFAULT_PREFERENCES.copy()
        self.save()
        logger.info("Preferences reset to defaults")

    def get_all(self) -> Dict[str, Any]:
        """Get all preferences as a dictionary"""
        return self._preferences.copy()

    def to_formatter_options(self, **overrides) -> FormatterOptions:
        """Build FormatterOptions from the stored preferences plus overrides."""
        values = self.get_all()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return FormatterOptions.from_dict(values)


# Convenience function for global access
def get_preferences() -> UserPreferences:
    """Get the global UserPreferences instance"""
    return UserPreferences.get_instance()
