"""Configuration loading and defaults for notetrail."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


def get_config_dir() -> Path:
    """Get the notetrail config directory (XDG-style)."""
    return Path.home() / ".config" / "notetrail"


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory for logs."""
    return Path.home() / ".local" / "share" / "notetrail"


@dataclass
class LoggingConfig:
    """Log output configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str = ""  # empty = <data_directory>/notetrail.log


@dataclass
class Config:
    """Application configuration."""

    site_url: str = "http://localhost:8000"
    fetch_timeout: float = 10.0
    data_directory: Path = field(default_factory=lambda: get_default_data_dir())
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def get_log_path(self) -> Path:
        """Get the log file path, defaulting to the data directory."""
        if self.logging.file:
            return Path(self.logging.file).expanduser()
        return self.data_directory / "notetrail.log"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create defaults."""
        config_path = get_config_path()

        # Ensure config directory exists
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        if not config_path.exists():
            # Create default config file
            default_config = cls()
            default_config.data_directory.mkdir(parents=True, exist_ok=True)
            default_config.save()
            return default_config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        site_url = str(data.get("site_url", "http://localhost:8000")).rstrip("/")

        fetch_timeout = float(data.get("fetch_timeout", 10.0))
        if fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {fetch_timeout}")

        data_dir = data.get("data_directory", str(get_default_data_dir()))
        data_directory = Path(data_dir).expanduser()

        log_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=str(log_data.get("level", "INFO")).upper(),
            file=log_data.get("file", ""),
        )

        config = cls(
            site_url=site_url,
            fetch_timeout=fetch_timeout,
            data_directory=data_directory,
            logging=logging_config,
        )

        # Ensure data directory exists
        config.data_directory.mkdir(parents=True, exist_ok=True)

        return config

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Build TOML content manually (tomllib is read-only)
        lines = [
            '# notetrail Configuration',
            '',
            '# Root URL of the notes site',
            f'site_url = "{self.site_url}"',
            '',
            '# Seconds to wait for a note before giving up',
            f'fetch_timeout = {self.fetch_timeout}',
            '',
            '# Directory for the log file',
            '# Default: ~/.local/share/notetrail',
            f'data_directory = "{self.data_directory}"',
            '',
            '[logging]',
            f'level = "{self.logging.level}"  # DEBUG, INFO, WARNING or ERROR',
            f'file = "{self.logging.file}"  # empty = <data_directory>/notetrail.log',
        ]

        config_path.write_text("\n".join(lines) + "\n")
