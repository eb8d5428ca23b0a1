"""Configuration loading for tradejournal.

Settings live in ``~/.config/tradejournal/config.toml``. The directory can be
moved with the ``TRADEJOURNAL_HOME`` environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from tradejournal.errors import ConfigError
from tradejournal.journal.policy import EditWindow

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TRADEJOURNAL_HOME"


def config_dir() -> Path:
    """Directory holding the config file, session file and database."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".config" / "tradejournal"


def config_path() -> Path:
    return config_dir() / "config.toml"


class Settings(BaseModel):
    """Validated application settings."""

    database_path: Path = Field(..., description="SQLite database file")
    edit_window: EditWindow = Field(
        default=EditWindow.TODAY, description="Which dates accept edits"
    )
    debounce_seconds: float = Field(
        default=1.0, gt=0, le=60, description="Quiet period before auto-save"
    )
    currency: str = Field(default="₹", description="Currency symbol for display")
    log_level: str = Field(default="WARNING", description="Logging level name")

    model_config = {"frozen": True}


def default_config() -> dict:
    """Template configuration written on first run."""
    return {
        "database": {
            "path": str(config_dir() / "tradejournal.db"),
        },
        "journal": {
            "edit_window": EditWindow.TODAY.value,  # today or any
            "debounce_seconds": 1.0,
            "currency": "₹",
        },
        "logging": {
            "level": "WARNING",
        },
    }


def create_template_config() -> Path:
    """Write the default configuration file and return its path."""
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        toml.dump(default_config(), f)
    return path


def settings_from_dict(config: dict) -> Settings:
    """Build Settings from a parsed config, filling in defaults.

    Raises:
        ConfigError: If a value fails validation.
    """
    defaults = default_config()
    database = {**defaults["database"], **config.get("database", {})}
    journal = {**defaults["journal"], **config.get("journal", {})}
    logging_section = {**defaults["logging"], **config.get("logging", {})}

    try:
        return Settings(
            database_path=Path(database["path"]).expanduser(),
            edit_window=journal["edit_window"],
            debounce_seconds=journal["debounce_seconds"],
            currency=journal["currency"],
            log_level=str(logging_section["level"]).upper(),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from the config file.

    A missing file yields the defaults. An unparseable file is reported
    and the defaults are used.

    Raises:
        ConfigError: If the file parses but holds invalid values.
    """
    path = path or config_path()
    if not path.exists():
        return settings_from_dict({})

    try:
        config = toml.load(path)
    except toml.TomlDecodeError as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        config = {}
    return settings_from_dict(config)
