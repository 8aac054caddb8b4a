"""
YAML configuration for the quickstart run.

The file has two optional sections: ``elasticsearch`` (passed on to
``ElasticClient.from_config``) and ``demo`` (what to index and search for).
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml

from es_quickstart.index.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
CONFIG_ENV_VAR = "ES_QUICKSTART_CONFIG"


@dataclass(frozen=True)
class DemoSettings:
    index: str = "test-index"
    document_id: str = "john-due"
    document: Dict[str, Any] = field(default_factory=lambda: {"name": "John Doe"})
    query_field: str = "name"
    query_text: str = "John"

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DemoSettings":
        values = dict(raw)
        query = values.pop("query", None) or {}
        if "field" in query:
            values["query_field"] = query["field"]
        if "text" in query:
            values["query_text"] = query["text"]

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"unknown demo settings: {', '.join(unknown)}")
        if not isinstance(values.get("document", {}), dict):
            raise ConfigError("demo.document must be a mapping")

        return cls(**values)


@dataclass(frozen=True)
class Settings:
    elasticsearch: Dict[str, Any] = field(default_factory=dict)
    demo: DemoSettings = field(default_factory=DemoSettings)


def resolve_config_path(explicit: Optional[str | Path] = None) -> Optional[Path]:
    """
    Pick the config file to read.

    An explicit path or ``$ES_QUICKSTART_CONFIG`` must exist; the default
    ``config.yaml`` is optional and ``None`` is returned when it is absent.
    """
    chosen = explicit or os.getenv(CONFIG_ENV_VAR)
    if chosen:
        path = Path(chosen)
        if not path.exists():
            raise ConfigError(f"config file {path} not found")
        return path

    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    path = resolve_config_path(config_path)
    if path is None:
        logger.info("No config file found; using built-in defaults")
        return Settings()

    logger.info("Loading configuration from %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"could not parse {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    es_cfg = config.get("elasticsearch") or {}
    demo_cfg = config.get("demo") or {}
    if not isinstance(es_cfg, dict) or not isinstance(demo_cfg, dict):
        raise ConfigError("'elasticsearch' and 'demo' sections must be mappings")

    return Settings(elasticsearch=es_cfg, demo=DemoSettings.from_dict(demo_cfg))
