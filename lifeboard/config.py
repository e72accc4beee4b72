# LifeBoard: configuration
# Override paths and endpoints via config.yaml or environment variables.

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent / "config.yaml"


@dataclass
class Config:
    """Runtime configuration for the LifeBoard store and local API."""

    # Storage
    db_path: str = "~/.local/share/lifeboard/lifeboard.db"

    # Remote task source + identity (None = local only)
    remote_url: Optional[str] = None
    remote_api_key: str = ""

    # Quote of the day
    quote_url: str = "https://api.quotable.io/random"

    # Outbound HTTP timeout, seconds
    request_timeout: float = 5.0

    # Local API
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def apply_env(self):
        """Environment variables win over file values."""
        self.db_path = os.environ.get("LIFEBOARD_DB", self.db_path)
        self.remote_url = os.environ.get("LIFEBOARD_REMOTE_URL", self.remote_url) or None
        self.remote_api_key = os.environ.get("LIFEBOARD_REMOTE_KEY", self.remote_api_key)

    def resolve_paths(self):
        """Expand ~ in filesystem paths."""
        self.db_path = str(Path(self.db_path).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except Exception as e:
                logger.warning("Ignoring config %s: %s", cfg_path, e)
                cfg = cls()
        else:
            cfg = cls()
        cfg.apply_env()
        cfg.resolve_paths()
        return cfg
