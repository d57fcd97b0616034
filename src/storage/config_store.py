"""
Configuration store: one TOML file per named decision.

Files live directly in the data directory as <name>.toml with the fields
name, chance, grace, pity and variance, in that order.
"""

from pathlib import Path
import logging
import os
import tempfile
import tomllib

import tomli_w

from src.data_models import (
    Configuration,
    NotFoundError,
    PersistenceError,
    ValidationError,
    validate_name,
)

logger = logging.getLogger(__name__)

CONFIG_SUFFIX = ".toml"


class ConfigStore:
    """
    Saves, loads, lists and deletes Configuration files.

    The directory must already exist; the command surface creates it at
    startup.
    """

    def __init__(self, config_dir: Path):
        self.config_dir = Path(config_dir)

    def path_for(self, name: str) -> Path:
        """Path of the file backing a configuration name."""
        return self.config_dir / f"{validate_name(name)}{CONFIG_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def save(self, config: Configuration) -> Path:
        """
        Write a configuration to its TOML file.

        The content goes to a temporary file in the same directory first and
        is renamed into place, so a failed write never leaves a partial
        <name>.toml behind.

        Returns:
            Path to the written file
        """
        filepath = self.path_for(config.name)
        content = tomli_w.dumps(config.to_dict()).encode("utf-8")

        tmp_path = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.config_dir, prefix=f".{config.name}.", suffix=".tmp")
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_path, filepath)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write config file {filepath}: {e}") from e

        logger.info(f"Saved configuration to: {filepath}")
        return filepath

    def load(self, name: str) -> Configuration:
        """
        Read a configuration by name.

        Raises:
            NotFoundError: If no file exists for the name
            PersistenceError: If the file cannot be read or is malformed
        """
        filepath = self.path_for(name)
        try:
            with open(filepath, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise NotFoundError(name) from e
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise PersistenceError(f"Failed to read config file {filepath}: {e}") from e

        try:
            config = Configuration.from_dict(data).validate()
        except (KeyError, ValidationError) as e:
            raise PersistenceError(f"Invalid config file {filepath}: {e}") from e

        if config.name != name:
            raise PersistenceError(
                f"Invalid config file {filepath}: records name '{config.name}', expected '{name}'"
            )
        return config

    def list_names(self) -> list[str]:
        """Names of all stored configurations, sorted."""
        try:
            return sorted(p.stem for p in self.config_dir.glob(f"*{CONFIG_SUFFIX}") if p.is_file())
        except OSError as e:
            raise PersistenceError(f"Failed to read config directory {self.config_dir}: {e}") from e

    def delete(self, name: str) -> None:
        """
        Remove a configuration file.

        Raises:
            NotFoundError: If no file exists for the name
        """
        filepath = self.path_for(name)
        try:
            filepath.unlink()
        except FileNotFoundError as e:
            raise NotFoundError(name) from e
        except OSError as e:
            raise PersistenceError(f"Failed to delete config file {filepath}: {e}") from e
        logger.info(f"Deleted config file: {filepath}")
