"""Shared pieces of the NWS alert source clients."""

import logging
import threading
from datetime import datetime
from typing import List, Optional, Protocol

import requests
from dateutil import parser as date_parser

from ..errors import (
    DecodeError,
    FetchCancelled,
    NetworkError,
    RequestConstructionError,
)
from ..models import AlertItem, AlertReport

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.weather.gov"
DEFAULT_USER_AGENT = "nws-alerts"
DEFAULT_TIMEOUT = 10
GEOJSON_CONTENT_TYPE = "application/geo+json; charset=UTF-8"


class AlertService(Protocol):
    """A data source capable of returning weather alerts for a location."""

    name: str

    def get_weather_alerts(
        self, lat: str, long: str, cancel: Optional[threading.Event] = None
    ) -> AlertReport:
        """Fetch the alert report for decimal-degree coordinates."""
        ...

    def close(self) -> None:
        ...


class NWSService:
    """Common configuration for clients of the api.weather.gov service."""

    name = "nws"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def _get_json(
        self, url: str, label: str, cancel: Optional[threading.Event] = None
    ) -> dict:
        return fetch_json(
            self.session,
            url,
            label,
            user_agent=self.user_agent,
            timeout=self.timeout,
            cancel=cancel,
        )


def fetch_json(
    session: requests.Session,
    url: str,
    label: str,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
    cancel: Optional[threading.Event] = None,
) -> dict:
    """
    GET a geo+json document and decode it.

    Args:
        session: HTTP session used to send the request
        url: Fully built request URL
        label: Name of the upstream service, used in error messages
        user_agent: User-Agent header value (skipped when empty)
        timeout: Socket timeout in seconds
        cancel: Optional event; when set, the request is not sent

    Returns:
        The decoded JSON object
    """
    headers = {"Content-Type": GEOJSON_CONTENT_TYPE}
    if user_agent:
        headers["User-Agent"] = user_agent

    try:
        prepared = session.prepare_request(requests.Request("GET", url, headers=headers))
    except (requests.exceptions.RequestException, ValueError) as e:
        raise RequestConstructionError(
            f"problem creating request to the {label}: {e}"
        ) from e

    if cancel is not None and cancel.is_set():
        raise FetchCancelled(f"request to the {label} was cancelled")

    logger.debug(f"Requesting {label}: {prepared.url}")
    try:
        response = session.send(prepared, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise NetworkError(
            f"error when sending request to the {label}: {e}"
        ) from e
    logger.debug(f"{label} responded with HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(
            f"problem decoding the response from the {label}: {e}"
        ) from e

    if not isinstance(data, dict):
        raise DecodeError(
            f"problem decoding the response from the {label}: expected a JSON object"
        )
    return data


def get_object(data: dict, key: str, label: str) -> dict:
    """Return a nested JSON object, treating a missing key as empty."""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(
            f"problem decoding the response from the {label}: '{key}' is not an object"
        )
    return value


def get_text(data: dict, key: str, label: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(
            f"problem decoding the response from the {label}: '{key}' is not a string"
        )
    return value


def parse_time(value, label: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; empty values map to None."""
    if value is None or value == "":
        return None
    try:
        return date_parser.isoparse(value)
    except (ValueError, TypeError, OverflowError) as e:
        raise DecodeError(
            f"problem decoding the response from the {label}: bad timestamp {value!r}"
        ) from e


def parse_alert_items(data: dict, label: str) -> List[AlertItem]:
    """
    Build one AlertItem per feature of an alerts collection.

    Items keep the order of the upstream features.
    """
    features = data.get("features")
    if features is None:
        return []
    if not isinstance(features, list):
        raise DecodeError(
            f"problem decoding the response from the {label}: 'features' is not a list"
        )

    items = []
    for feature in features:
        if not isinstance(feature, dict):
            raise DecodeError(
                f"problem decoding the response from the {label}: feature is not an object"
            )
        props = get_object(feature, "properties", label)
        items.append(
            AlertItem(
                event=get_text(props, "event", label),
                headline=get_text(props, "headline", label),
                description=get_text(props, "description", label),
                severity=get_text(props, "severity", label),
                urgency=get_text(props, "urgency", label),
                area_description=get_text(props, "areaDesc", label),
                sender=get_text(props, "sender", label),
                sender_name=get_text(props, "senderName", label),
                start=parse_time(props.get("effective"), label),
                end=parse_time(props.get("ends"), label),
            )
        )
    return items
