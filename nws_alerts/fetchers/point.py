"""Single-step NWS client using the point-based alerts query."""

import logging
import threading
from typing import Optional

from ..errors import RequestConstructionError
from ..models import AlertReport
from .base import NWSService, parse_alert_items

logger = logging.getLogger(__name__)

ALERTS_LABEL = "NWS point alerts service"


class NWSPointAlertsService(NWSService):
    """
    Fetch alerts for a point with one request.

    Location metadata (city, state, zone and its URLs) is not available from
    this endpoint and stays empty.
    """

    name = "point"

    def get_weather_alerts(
        self, lat: str, long: str, cancel: Optional[threading.Event] = None
    ) -> AlertReport:
        try:
            latitude = float(lat)
            longitude = float(long)
        except (TypeError, ValueError) as e:
            raise RequestConstructionError(
                f"problem creating request to the {ALERTS_LABEL}: bad coordinates {lat!r},{long!r}"
            ) from e

        data = self._get_json(f"{self.base_url}/alerts?point={lat},{long}", ALERTS_LABEL, cancel)
        report = AlertReport(
            latitude=latitude,
            longitude=longitude,
            alerts=parse_alert_items(data, ALERTS_LABEL),
        )

        logger.info(f"Found {len(report.alerts)} active alerts for point {lat},{long}")
        return report
