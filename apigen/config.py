"""Project configuration stored in ``api-gen.json``.

``source`` is a URL or path of the Swagger document, ``path`` is the
TypeScript file to generate.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError

from .errors import ConfigError

CONFIG_FILE = Path("api-gen.json")

SOURCE_PLACEHOLDER = "__REPLACE__"


class Config(BaseModel):
    """Persisted generator settings."""

    source: str = SOURCE_PLACEHOLDER
    path: str = "lib/types.ts"

    @property
    def output_path(self) -> Path:
        return Path(self.path)


def init_config(config_path: Path = CONFIG_FILE, force: bool = False) -> Config:
    """Write a default configuration record."""
    if config_path.exists() and not force:
        raise ConfigError("Configuration already exists, use --force to overwrite", str(config_path))

    config = Config()
    try:
        config_path.write_text(config.model_dump_json(indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write to file: {e.strerror or e}", str(config_path)) from e
    return config


def load_config(config_path: Path = CONFIG_FILE) -> Config:
    """Read and validate the configuration record."""
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError("Configuration not found, run 'apigen init' first", str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Unable to read file: {e.strerror or e}", str(config_path)) from e

    try:
        config = Config.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Unable to parse JSON: {e.msg}", str(config_path)) from e
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {errors}", str(config_path)) from e

    if config.source == SOURCE_PLACEHOLDER:
        raise ConfigError("Set 'source' to the URL or path of your Swagger document", str(config_path))
    return config
