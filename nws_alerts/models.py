"""Data models for weather alert reports."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def _format_time(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


@dataclass(frozen=True)
class AlertItem:
    """One active weather alert, copied from an upstream alert feature."""

    event: str = ""
    headline: str = ""
    description: str = ""
    severity: str = ""
    urgency: str = ""
    area_description: str = ""
    sender: str = ""  # sender address
    sender_name: str = ""
    start: Optional[datetime] = None  # upstream "effective"
    end: Optional[datetime] = None  # upstream "ends"

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "headline": self.headline,
            "description": self.description,
            "severity": self.severity,
            "urgency": self.urgency,
            "area_description": self.area_description,
            "sender": self.sender,
            "sendername": self.sender_name,
            "start": _format_time(self.start),
            "end": _format_time(self.end),
        }


@dataclass
class AlertReport:
    """Alerts for a single location, as returned to the caller."""

    latitude: float = 0.0
    longitude: float = 0.0
    city: str = ""
    state: str = ""
    zone: str = ""
    zone_url: str = ""
    alerts_url: str = ""  # human readable alert page for the zone
    alerts: List[AlertItem] = field(default_factory=list)
    version: str = ""

    def __post_init__(self):
        """Ensure alerts is a list."""
        if self.alerts is None:
            self.alerts = []

    def to_dict(self) -> dict:
        """Serialize using the field names of the public JSON output."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "city": self.city,
            "state": self.state,
            "zone": self.zone,
            "zoneurl": self.zone_url,
            "alertsurl": self.alerts_url,
            "alerts": [item.to_dict() for item in self.alerts],
            "version": self.version,
        }
