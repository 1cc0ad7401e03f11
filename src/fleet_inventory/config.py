"""Configuration for the fleet inventory service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .hierarchy.walker import MAX_NESTING

# Environment variable naming a YAML or JSON config file
CONFIG_ENV_VAR = "FLEET_INVENTORY_CONFIG"


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 8060
    reload: bool = False


@dataclass
class HierarchyConfig:
    """Inventory contents and walk limits."""
    # YAML inventory loaded at startup (regions, sites, schedules, ...)
    definition_file: str | None = None

    # Parent hops followed by every ancestor walk
    max_nesting: int = MAX_NESTING


@dataclass
class PaginationConfig:
    """List endpoint paging."""
    default_page_size: int = 20
    max_page_size: int = 100

    def clamp(self, page_size: int | None) -> int:
        """Requested page size, defaulted and capped."""
        if not page_size:
            return self.default_page_size
        return min(page_size, self.max_page_size)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Config:
    """Main configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    hierarchy: HierarchyConfig = field(default_factory=HierarchyConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            server=ServerConfig(**data.get("server", {})),
            hierarchy=HierarchyConfig(**data.get("hierarchy", {})),
            pagination=PaginationConfig(**data.get("pagination", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def from_yaml(cls, path: str) -> Config:
        """Load config from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str) -> Config:
        """Load config from JSON file."""
        import json
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> Config:
        """Load the file named by ``FLEET_INVENTORY_CONFIG``, or defaults if unset."""
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return cls()
        if path.endswith(".json"):
            return cls.from_json(path)
        return cls.from_yaml(path)
