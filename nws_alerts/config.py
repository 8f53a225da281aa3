"""Configuration and logging setup."""

import copy
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .fetchers.base import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, AlertService
from .fetchers.point import NWSPointAlertsService
from .fetchers.zone import NWSZoneAlertsService

DEFAULT_CONFIG = {
    "app": {
        "mode": "direct",  # "direct" | "aggregate"
        "sources": ["zone"],
    },
    "nws": {
        "base_url": DEFAULT_BASE_URL,
        "user_agent": DEFAULT_USER_AGENT,
        "request_timeout": DEFAULT_TIMEOUT,
    },
}

SERVICE_TYPES = {
    NWSZoneAlertsService.name: NWSZoneAlertsService,
    NWSPointAlertsService.name: NWSPointAlertsService,
}


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Log to stdout, and to `log_file` when given."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    # connection pool chatter only with --verbose
    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict):
            # an empty section ("app:") keeps the defaults
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ValueError(f"Config section '{key}' must be a mapping")
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> dict:
    """Load configuration from a YAML file, filling in defaults."""
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_file = Path(config_path)
    if not config_file.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config = yaml.safe_load(config_file.read_text()) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return _merge(DEFAULT_CONFIG, config)


def build_services(config: dict) -> List[AlertService]:
    """Create the alert services named in `app.sources`."""
    nws_config = config.get("nws", {})
    sources = config.get("app", {}).get("sources", [])

    services = []
    for source in sources:
        service_type = SERVICE_TYPES.get(source)
        if service_type is None:
            raise ValueError(f"Unknown alert source: {source}")
        services.append(
            service_type(
                base_url=nws_config.get("base_url", DEFAULT_BASE_URL),
                user_agent=nws_config.get("user_agent", DEFAULT_USER_AGENT),
                timeout=nws_config.get("request_timeout", DEFAULT_TIMEOUT),
            )
        )
    return services
