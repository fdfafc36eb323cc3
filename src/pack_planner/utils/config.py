"""
Configuration management for the Pack Planner application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- The default unit system used when a caller does not choose one
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import DATABASE_FILENAME

logger = logging.getLogger(__name__)

ENV_VAR_ENVIRONMENT = "PACK_PLANNER_ENV"
ENV_VAR_IMPERIAL = "PACK_PLANNER_IMPERIAL"

_TRUTHY = {"1", "true", "yes", "on", "imperial"}


def _parse_imperial(value: Optional[str]) -> bool:
    """Interpret an environment string as the imperial flag."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


class Config:
    """
    Application configuration manager.

    Handles database paths, environment settings and the default
    unit system. The unit system is only a default: every weight
    computation takes an explicit ``imperial`` argument.
    """

    def __init__(self, environment: str = "production", imperial: Optional[bool] = None):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
            imperial: Default unit system. If None, read from PACK_PLANNER_IMPERIAL.
        """
        self.environment = environment

        if imperial is None:
            imperial = _parse_imperial(os.environ.get(ENV_VAR_IMPERIAL))
        self._imperial = imperial

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_documents_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME

    def _get_project_data_dir(self) -> Path:
        """
        Get the project's data directory for development.

        Returns:
            Path to project data/ directory
        """
        project_root = Path(__file__).parent.parent.parent.parent
        return project_root / "data"

    def _get_user_documents_dir(self) -> Path:
        """
        Get the user's Documents directory for production.

        Returns:
            Path to user's Documents folder with app subdirectory
        """
        return Path.home() / "Documents" / "PackPlanner"

    def ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """SQLAlchemy database URL."""
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def imperial(self) -> bool:
        """Default unit system (True = pounds/ounces)."""
        return self._imperial

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def database_exists(self) -> bool:
        """Check if the database file exists."""
        return self._database_path.exists()

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"Config(environment='{self.environment}', "
            f"database_path='{self._database_path}', imperial={self._imperial})"
        )


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument - this prevents accidental database
    switching mid-session.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    PACK_PLANNER_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None
