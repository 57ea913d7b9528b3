"""Configuration handling for the OpenAI-compatible client."""

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .errors import ConfigError

logger = logging.getLogger(__name__)

load_dotenv()

PRESETS = {
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "groq": "https://api.groq.com/openai/v1",
}

DEFAULT_CONFIG = {
    "backend": {"name": "openai", "url": PRESETS["openai"], "model": ""},
    "settings": {"timeout": 60},
}


def load_config() -> Dict[str, Any]:
    """
    Load configuration from config.yaml file.
    Returns a dictionary containing the configuration.
    """
    try:
        config_path = Path(__file__).parent.parent.parent / "config.yaml"
        config_yaml = config_path.read_text()
        config = yaml.safe_load(config_yaml)
        if not isinstance(config, dict):
            raise ValueError("config.yaml must contain a mapping")
        logger.info("Successfully loaded configuration from config.yaml")
        return config
    except Exception as e:
        logger.info(f"Error loading config.yaml, using defaults: {str(e)}")
        return DEFAULT_CONFIG


def resolve_base_url(name_or_url: str) -> str:
    """
    Return the base URL for a preset name, or the given URL without trailing slashes.

    Args:
        name_or_url: A key of PRESETS (e.g. "openai") or a full base URL
    """
    if not name_or_url or not name_or_url.strip():
        raise ConfigError("Base URL must not be empty")
    value = name_or_url.strip()
    if value.lower() in PRESETS:
        return PRESETS[value.lower()]
    if not value.startswith(("http://", "https://")):
        raise ConfigError(f"Unknown provider or invalid base URL: {value}")
    return value.rstrip("/")


config = load_config()

backend = config.get("backend") or DEFAULT_CONFIG["backend"]
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE") or backend.get("url") or backend.get("name")
DEFAULT_MODEL = backend.get("model", "")

if not OPENAI_API_BASE:
    logger.warning("Backend URL not set in config.yaml, using default value")
    OPENAI_API_BASE = PRESETS["openai"]

TIMEOUT = (config.get("settings") or {}).get("timeout", 60)


class ClientConfig(BaseModel):
    """Immutable connection settings shared by every call of one client."""
    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str
    organization_id: Optional[str] = None
    timeout: float = 60
    header_items: Tuple[Tuple[str, str], ...]

    @property
    def headers(self) -> Mapping[str, str]:
        """Read-only view of the headers sent with every request."""
        return MappingProxyType(dict(self.header_items))

    @classmethod
    def create(
        cls,
        api_key: Optional[str],
        base_url: str = PRESETS["openai"],
        organization_id: Optional[str] = None,
        timeout: float = 60,
    ) -> "ClientConfig":
        """Validate the credentials and derive the request headers."""
        if api_key is None or not api_key.strip():
            raise ConfigError("An API key is required to construct a client")

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if organization_id:
            headers["OpenAI-Organization"] = organization_id

        return cls(
            base_url=resolve_base_url(base_url),
            api_key=api_key,
            organization_id=organization_id,
            timeout=timeout,
            header_items=tuple(headers.items()),
        )
