"""AWS Lambda entry point."""

import logging
import os
from typing import Optional

from . import aggregate
from .config import build_services, load_config
from .errors import AlertServiceError
from .models import AlertReport
from .version import get_version

logger = logging.getLogger(__name__)


def get_report(lat: str, long: str, config: dict) -> AlertReport:
    """
    Fetch the alert report for a location and stamp the service version.

    In "direct" mode the first configured source is called and its errors
    propagate. In "aggregate" mode all sources race and the first report wins.
    """
    mode = config.get("app", {}).get("mode", "direct")
    if mode not in ("direct", "aggregate"):
        raise ValueError(f"Unknown mode: {mode}")

    services = build_services(config)
    if mode == "direct" and not services:
        raise ValueError("No alert sources configured")

    try:
        if mode == "direct":
            report = services[0].get_weather_alerts(lat, long)
        else:
            report = aggregate.get_weather_alerts(services, lat, long)
    finally:
        # losing services are cancelled; a request still in flight finishes on its own connection
        for service in services:
            service.close()

    report.version = get_version()
    return report


def lambda_handler(event: dict, context=None, config: Optional[dict] = None) -> dict:
    """
    Handle a Lambda invocation.

    Input event:
        {"lat": "41.25", "long": "-70.11"}

    Returns the alert report as a JSON-compatible dict.
    """
    if config is None:
        config = load_config(os.environ.get("NWS_ALERTS_CONFIG"))

    lat = str(event.get("lat", ""))
    long = str(event.get("long", ""))

    try:
        report = get_report(lat, long, config)
    except AlertServiceError:
        logger.exception(f"problem getting weather alerts for {lat},{long}")
        raise

    return report.to_dict()
