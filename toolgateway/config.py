"""
File: toolgateway/config.py
Purpose: Central configuration management -- process settings from environment variables and
    .env file, plus the typed instance configuration files (one JSON file per vendor).
When Used: Imported at application startup (by toolgateway/main.py) to build the gateway, and by
    the vendor plugins, which subclass InstanceConfig with their own credential fields.
Why Created: Keeps every configurable knob in a single Pydantic Settings class and makes the
    instance files all-or-nothing: a bad file aborts startup with the offending location instead
    of silently serving a partial set of instances.
"""
import os
import json
import logging
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolgateway.errors import ConfigError

logger = logging.getLogger(__name__)


class InstanceConfig(BaseModel):
    """Base configuration for one named instance of a backend system.

    Vendors subclass this with their credential fields. Keys are camelCase in the
    config file (baseUrl, apiToken, allowedProjectKey) and snake_case in Python.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(min_length=1)
    base_url: str = Field(min_length=1)

    def restriction(self):
        """Access restriction for this instance, or None when unrestricted"""
        return None


class Settings(BaseSettings):
    """Application settings"""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "DevOps Tool Gateway"
    app_version: str = "1.0.0"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 3009
    cors_origins: list = ["*"]
    log_level: str = "INFO"

    # Comma-separated vendor plugins served by this process
    vendors: str = "jenkins"
    # Directory holding <vendor>.config.json; <VENDOR>_CONFIG_PATH overrides per vendor
    config_dir: str = "config"

    http_timeout: float = 30.0
    sse_ping_interval: float = 15.0
    messages_path: str = "/messages"

    def enabled_vendors(self) -> List[str]:
        names = [v.strip().lower() for v in self.vendors.split(",") if v.strip()]
        if not names:
            raise ConfigError("no vendors configured", source="VENDORS")
        # Keep first occurrence order, drop repeats
        return list(dict.fromkeys(names))

    def config_path_for(self, vendor: str) -> str:
        override = os.environ.get(f"{vendor.upper()}_CONFIG_PATH")
        if override:
            return override
        return os.path.join(self.config_dir, f"{vendor}.config.json")


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def parse_instances(data: Any, model: Type[InstanceConfig], source: str) -> List[InstanceConfig]:
    """Validate already-decoded config data into a list of instances"""
    if not isinstance(data, dict):
        raise ConfigError("top level must be an object with an 'instances' list", source=source)
    if "instances" not in data:
        raise ConfigError("instances: Field required", source=source)

    raw_instances = data["instances"]
    if not isinstance(raw_instances, list):
        raise ConfigError("instances: must be a list", source=source)
    if not raw_instances:
        raise ConfigError("instances: at least one instance is required", source=source)

    instances: List[InstanceConfig] = []
    problems: List[str] = []
    for index, raw in enumerate(raw_instances):
        try:
            instances.append(model.model_validate(raw))
        except ValidationError as e:
            for error in e.errors():
                problems.append(f"instances.{index}.{_format_location(error['loc'])}: {error['msg']}")
    if problems:
        raise ConfigError("; ".join(problems), source=source)

    seen: Dict[str, int] = {}
    for index, instance in enumerate(instances):
        if instance.name in seen:
            raise ConfigError(
                f"instances.{index}.name: duplicate instance name '{instance.name}' "
                f"(first defined at instances.{seen[instance.name]})",
                source=source,
            )
        seen[instance.name] = index

    return instances


def load_instances(path: str, model: Type[InstanceConfig]) -> List[InstanceConfig]:
    """Load and validate an instance config file; all or nothing"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e.strerror or e}", source=path) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}", source=path) from e

    instances = parse_instances(data, model, source=path)
    logger.info(f"Loaded {len(instances)} instance(s) from {path}: {', '.join(i.name for i in instances)}")
    return instances


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, created on first use"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
