"""Configuration management for the lot inventory."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from real_estate.exceptions import ConfigurationError

DEFAULT_DATA_FILE = "real_estate_data.dat"


@dataclass
class CacheConfig:
    """Search cache configuration."""

    max_entries: int = 50
    expiration_ms: int = 30_000

    @property
    def ttl_seconds(self) -> float:
        """Expiration expressed in seconds."""
        return self.expiration_ms / 1000.0


@dataclass
class StorageConfig:
    """Data file configuration."""

    data_file: Path = field(default_factory=lambda: Path(DEFAULT_DATA_FILE))
    backup_file: Path | None = None

    @property
    def backup_path(self) -> Path:
        """Backup location, derived from the data file when not set."""
        if self.backup_file is not None:
            return self.backup_file
        return self.data_file.with_suffix(".bak")


@dataclass
class RealEstateConfig:
    """Main configuration for the lot inventory."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = "INFO"
    log_file: Path | None = None

    @classmethod
    def from_env(cls) -> "RealEstateConfig":
        """Create config from environment variables."""
        import os

        cache = CacheConfig(
            max_entries=_parse_int("CACHE_SIZE", os.getenv("CACHE_SIZE", "50")),
            expiration_ms=_parse_int(
                "CACHE_EXPIRATION_MS", os.getenv("CACHE_EXPIRATION_MS", "30000")
            ),
        )

        backup = os.getenv("BACKUP_FILE")
        storage = StorageConfig(
            data_file=Path(os.getenv("DATA_FILE", DEFAULT_DATA_FILE)),
            backup_file=Path(backup) if backup else None,
        )

        log_file = os.getenv("LOG_FILE")
        return cls(
            cache=cache,
            storage=storage,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=Path(log_file) if log_file else None,
        )

    @classmethod
    def from_properties(cls, path: str | Path) -> "RealEstateConfig":
        """Create config from a ``key=value`` properties file.

        Recognised keys are ``cache.size``, ``cache.expiration`` (milliseconds),
        ``data.file``, ``backup.file``, ``log.file`` and ``log.level``. Missing
        keys keep their defaults.

        Parameters
        ----------
        path : str | Path
            Properties file location.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or a numeric value is malformed.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e

        props = parse_properties(text)
        config = cls()

        if "cache.size" in props:
            config.cache.max_entries = _parse_int("cache.size", props["cache.size"])
        if "cache.expiration" in props:
            config.cache.expiration_ms = _parse_int(
                "cache.expiration", props["cache.expiration"]
            )
        if "data.file" in props:
            config.storage.data_file = Path(props["data.file"])
        if "backup.file" in props:
            config.storage.backup_file = Path(props["backup.file"])
        if "log.file" in props:
            config.log_file = Path(props["log.file"])
        if "log.level" in props:
            config.log_level = props["log.level"]

        return config

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the dotted property names."""
        return {
            "cache.size": self.cache.max_entries,
            "cache.expiration": self.cache.expiration_ms,
            "data.file": str(self.storage.data_file),
            "backup.file": str(self.storage.backup_path),
            "log.file": str(self.log_file) if self.log_file else "",
            "log.level": self.log_level,
        }


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines, skipping blanks and ``#``/``!`` comments."""
    props: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        parts = re.split(r"[=:]", line, maxsplit=1)
        if len(parts) == 2:
            props[parts[0].strip()] = parts[1].strip()
    return props


def _parse_int(key: str, value: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e
    if parsed <= 0:
        raise ConfigurationError(f"{key} must be positive, got {parsed}")
    return parsed
