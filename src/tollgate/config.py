"""Tollgate configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tollgate.storage.cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL


@dataclass
class Config:
    """Tollgate configuration."""

    home_path: Path = field(default_factory=lambda: Path.home() / ".tollgate")
    log_level: str = "INFO"
    wal_mode: bool = True

    # Decision cache
    cache_ttl: float = DEFAULT_TTL
    cache_max_entries: int = DEFAULT_MAX_ENTRIES

    @classmethod
    def load(cls, home_path: Path | None = None) -> Config:
        """Load config from env vars, then YAML file, then defaults."""
        config = cls()

        if home_path:
            config.home_path = home_path

        env_path = os.environ.get("TOLLGATE_HOME")
        if env_path:
            config.home_path = Path(env_path)

        config_file = config.home_path / "config.yaml"
        if config_file.exists():
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
            for key, value in data.items():
                if hasattr(config, key):
                    expected_type = type(getattr(config, key))
                    if expected_type is Path:
                        setattr(config, key, Path(value))
                    else:
                        setattr(config, key, expected_type(value))

        # Env wins over the file
        env_log = os.environ.get("TOLLGATE_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        env_ttl = os.environ.get("TOLLGATE_CACHE_TTL")
        if env_ttl:
            config.cache_ttl = float(env_ttl)

        return config

    @property
    def membership_db_path(self) -> Path:
        return self.home_path / "membership.db"

    def save(self) -> None:
        """Save current config to YAML."""
        self.home_path.mkdir(parents=True, exist_ok=True)
        config_file = self.home_path / "config.yaml"
        data = {
            "log_level": self.log_level,
            "wal_mode": self.wal_mode,
            "cache_ttl": self.cache_ttl,
            "cache_max_entries": self.cache_max_entries,
        }
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
