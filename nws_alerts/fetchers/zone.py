"""Two-step NWS client: points lookup, then active alerts for the forecast zone."""

import logging
import threading
from typing import Optional

from ..errors import DecodeError
from ..models import AlertReport
from .base import NWSService, get_object, get_text, parse_alert_items

logger = logging.getLogger(__name__)

ZONE_URL_PREFIX = "https://api.weather.gov/zones/forecast/"
ALERTS_PAGE_TEMPLATE = "https://alerts.weather.gov/cap/wwaatmget.php?x={zone}&y=1"

POINTS_LABEL = "NWS points service"
ALERTS_LABEL = "NWS alerts service"


class NWSZoneAlertsService(NWSService):
    """Resolve the forecast zone for a point, then fetch the zone's alerts."""

    name = "zone"

    def get_weather_alerts(
        self, lat: str, long: str, cancel: Optional[threading.Event] = None
    ) -> AlertReport:
        logger.debug(f"Fetching zone alerts for {lat},{long}")

        points = self._get_json(f"{self.base_url}/points/{lat},{long}", POINTS_LABEL, cancel)
        report = self._parse_points(points)

        alerts = self._get_json(
            f"{self.base_url}/alerts/active/zone/{report.zone}", ALERTS_LABEL, cancel
        )
        report.alerts = parse_alert_items(alerts, ALERTS_LABEL)

        logger.info(f"Found {len(report.alerts)} active alerts for zone {report.zone}")
        return report

    def _parse_points(self, points: dict) -> AlertReport:
        geometry = get_object(points, "geometry", POINTS_LABEL)
        coordinates = geometry.get("coordinates")
        try:
            # GeoJSON order: longitude, latitude
            longitude = float(coordinates[0])
            latitude = float(coordinates[1])
        except (TypeError, ValueError, IndexError, KeyError) as e:
            raise DecodeError(
                f"problem decoding the response from the {POINTS_LABEL}: "
                f"bad geometry coordinates {coordinates!r}"
            ) from e

        properties = get_object(points, "properties", POINTS_LABEL)
        zone_url = get_text(properties, "forecastZone", POINTS_LABEL)
        zone = zone_url.replace(ZONE_URL_PREFIX, "")

        relative = get_object(properties, "relativeLocation", POINTS_LABEL)
        place = get_object(relative, "properties", POINTS_LABEL)

        return AlertReport(
            latitude=latitude,
            longitude=longitude,
            city=get_text(place, "city", POINTS_LABEL),
            state=get_text(place, "state", POINTS_LABEL),
            zone=zone,
            zone_url=zone_url,
            alerts_url=ALERTS_PAGE_TEMPLATE.format(zone=zone),
        )
