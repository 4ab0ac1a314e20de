"""
Configuration module for the OS package scanner.

Loads configuration from environment variables and .env file,
validates settings, and provides typed access to configuration values.
"""

import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Optional
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Advisory database
    advisory_db_path: str = "./data/advisories.db"

    # Logging Configuration
    log_level: str = "INFO"
    log_file: str = ""

    # Extra end-of-life dates, merged over the built-in tables
    eol_overrides_path: str = "./eol_overrides.yaml"
    eol_overrides: Dict[str, Dict[str, datetime]] = field(default_factory=dict)


def load_config(env_path: Optional[str] = None) -> Config:
    """
    Load configuration from environment variables and optional .env file.

    Args:
        env_path: Optional path to .env file. If not provided, searches
                  current directory and parent directories.

    Returns:
        Config object with loaded values.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        env_file = Path(".env")
        if env_file.exists():
            load_dotenv(env_file)
        else:
            for parent in Path.cwd().parents:
                env_file = parent / ".env"
                if env_file.exists():
                    load_dotenv(env_file)
                    break

    config = Config(
        advisory_db_path=os.getenv("ADVISORY_DB_PATH", "./data/advisories.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", ""),
        eol_overrides_path=os.getenv("EOL_OVERRIDES_PATH", "./eol_overrides.yaml"),
    )

    config.eol_overrides = load_eol_overrides(config.eol_overrides_path)

    return config


def _parse_eol(value) -> datetime:
    """Parse an EOL value from YAML into an aware UTC datetime."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day, 23, 59, 59)
    else:
        moment = datetime.fromisoformat(str(value))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def load_eol_overrides(config_path: str) -> Dict[str, Dict[str, datetime]]:
    """
    Load extra end-of-life dates from a YAML file.

    The file maps family to release to date or timestamp:

        alpine:
          "3.11": 2021-11-01
        ubuntu:
          "20.04": "2030-04-02T23:59:59+00:00"

    Plain dates are taken as the last second of that day in UTC.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Dict of family to {release: eol}. Empty if the file is absent or invalid.
    """
    overrides_path = Path(config_path)

    if not overrides_path.exists():
        return {}

    try:
        with open(overrides_path) as f:
            data = yaml.safe_load(f) or {}

        overrides: Dict[str, Dict[str, datetime]] = {}
        for family, releases in data.items():
            overrides[str(family).lower()] = {
                str(release): _parse_eol(value)
                for release, value in (releases or {}).items()
            }
        return overrides

    except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
        print(f"Warning: Failed to load EOL overrides from {config_path}: {e}", file=sys.stderr)
        print(f"  Error type: {e.__class__.__name__}", file=sys.stderr)
        return {}


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration values.

    Args:
        config: Configuration object to validate.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors = []

    if not config.advisory_db_path:
        errors.append("ADVISORY_DB_PATH is required")

    if config.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    return errors


# Global config instance (lazy loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance, loading if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """Reset the global configuration instance (useful for testing)."""
    global _config
    _config = None
