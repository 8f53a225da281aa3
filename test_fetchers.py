#!/usr/bin/env python3
"""Tests for the NWS alert source clients."""

import sys
import threading
from datetime import datetime, timezone
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent))

from nws_alerts.errors import (
    DecodeError,
    FetchCancelled,
    NetworkError,
    RequestConstructionError,
)
from nws_alerts.fetchers.point import NWSPointAlertsService
from nws_alerts.fetchers.zone import NWSZoneAlertsService

LAT = "41.25"
LONG = "-70.11"
POINTS_URL = f"https://api.weather.gov/points/{LAT},{LONG}"
ZONE_ALERTS_URL = "https://api.weather.gov/alerts/active/zone/ABC123"
POINT_ALERTS_URL = f"https://api.weather.gov/alerts?point={LAT},{LONG}"

POINTS_RESPONSE = {
    "id": "https://api.weather.gov/points/41.25,-70.11",
    "type": "Feature",
    "geometry": {"type": "Point", "coordinates": [-70.11, 41.25]},
    "properties": {
        "forecastZone": "https://api.weather.gov/zones/forecast/ABC123",
        "county": "https://api.weather.gov/zones/county/MAC019",
        "relativeLocation": {
            "type": "Feature",
            "properties": {"city": "Nantucket", "state": "MA"},
        },
    },
}


def make_feature(event, effective="", ends="", headline=""):
    return {
        "id": f"urn:oid:{event}",
        "type": "Feature",
        "properties": {
            "areaDesc": "Nantucket",
            "effective": effective,
            "ends": ends,
            "severity": "Moderate",
            "urgency": "Expected",
            "event": event,
            "sender": "w-nws.webmaster@noaa.gov",
            "senderName": "NWS Boston/Norton MA",
            "headline": headline,
            "description": f"{event} in effect.",
        },
    }


def alerts_response(*features):
    return {"type": "FeatureCollection", "features": list(features), "title": "Current alerts"}


def test_zone_service_resolves_location(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response())

    report = NWSZoneAlertsService().get_weather_alerts(LAT, LONG)

    assert report.longitude == -70.11
    assert report.latitude == 41.25
    assert report.zone == "ABC123"
    assert report.zone_url == "https://api.weather.gov/zones/forecast/ABC123"
    assert report.alerts_url == "https://alerts.weather.gov/cap/wwaatmget.php?x=ABC123&y=1"
    assert report.city == "Nantucket"
    assert report.state == "MA"
    assert report.version == ""


def test_zone_service_no_alerts_gives_empty_list(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response())

    report = NWSZoneAlertsService().get_weather_alerts(LAT, LONG)

    assert report.alerts == []
    assert report.to_dict()["alerts"] == []


def test_zone_service_maps_alert_fields(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(
        ZONE_ALERTS_URL,
        json=alerts_response(
            make_feature(
                "Flood Warning",
                effective="2023-01-01T00:00:00Z",
                ends="2023-01-02T00:00:00Z",
                headline="Flood Warning issued",
            )
        ),
    )

    report = NWSZoneAlertsService().get_weather_alerts(LAT, LONG)

    assert len(report.alerts) == 1
    item = report.alerts[0]
    assert item.event == "Flood Warning"
    assert item.headline == "Flood Warning issued"
    assert item.description == "Flood Warning in effect."
    assert item.severity == "Moderate"
    assert item.urgency == "Expected"
    assert item.area_description == "Nantucket"
    assert item.sender == "w-nws.webmaster@noaa.gov"
    assert item.sender_name == "NWS Boston/Norton MA"
    assert item.start == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert item.end == datetime(2023, 1, 2, tzinfo=timezone.utc)


def test_missing_end_time_is_none(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    feature = make_feature("Wind Advisory", effective="2023-01-01T00:00:00-05:00")
    del feature["properties"]["ends"]
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response(feature))

    item = NWSZoneAlertsService().get_weather_alerts(LAT, LONG).alerts[0]

    assert item.end is None
    assert item.to_dict()["end"] is None
    assert item.to_dict()["start"] == "2023-01-01T00:00:00-05:00"


def test_alert_order_is_preserved(requests_mock):
    events = ["Wind Advisory", "Flood Warning", "Beach Hazards Statement"]
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response(*[make_feature(e) for e in events]))

    report = NWSZoneAlertsService().get_weather_alerts(LAT, LONG)

    assert [item.event for item in report.alerts] == events


def test_requests_send_geojson_content_type(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response())

    NWSZoneAlertsService(user_agent="nws-alerts-test").get_weather_alerts(LAT, LONG)

    assert requests_mock.call_count == 2
    for request in requests_mock.request_history:
        assert request.headers["Content-Type"] == "application/geo+json; charset=UTF-8"
        assert request.headers["User-Agent"] == "nws-alerts-test"


def test_points_bad_json_is_decode_error(requests_mock):
    requests_mock.get(POINTS_URL, text="<html>not json</html>")

    with pytest.raises(DecodeError, match="NWS points service"):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)


def test_points_without_coordinates_is_decode_error(requests_mock):
    requests_mock.get(POINTS_URL, json={"geometry": {"coordinates": []}, "properties": {}})

    with pytest.raises(DecodeError):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)
    assert requests_mock.call_count == 1


def test_alerts_features_not_a_list_is_decode_error(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json={"features": "nope"})

    with pytest.raises(DecodeError, match="NWS alerts service"):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)


def test_bad_timestamp_is_decode_error(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, json=alerts_response(make_feature("Fog", effective="yesterday")))

    with pytest.raises(DecodeError):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)


def test_connection_failure_is_network_error(requests_mock):
    requests_mock.get(POINTS_URL, json=POINTS_RESPONSE)
    requests_mock.get(ZONE_ALERTS_URL, exc=requests.exceptions.ConnectionError)

    with pytest.raises(NetworkError, match="NWS alerts service"):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)


def test_http_error_status_is_network_error(requests_mock):
    requests_mock.get(POINTS_URL, status_code=404, json={"title": "Data Unavailable For Requested Point"})

    with pytest.raises(NetworkError):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG)


def test_malformed_base_url_is_request_construction_error(requests_mock):
    service = NWSZoneAlertsService(base_url="not a url")

    with pytest.raises(RequestConstructionError):
        service.get_weather_alerts(LAT, LONG)
    assert not requests_mock.called


def test_cancelled_fetch_sends_nothing(requests_mock):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(FetchCancelled):
        NWSZoneAlertsService().get_weather_alerts(LAT, LONG, cancel=cancel)
    assert not requests_mock.called


def test_point_service_single_request(requests_mock):
    requests_mock.get(
        POINT_ALERTS_URL,
        json=alerts_response(make_feature("Flood Warning"), make_feature("Gale Warning")),
    )

    report = NWSPointAlertsService().get_weather_alerts(LAT, LONG)

    assert requests_mock.call_count == 1
    assert requests_mock.last_request.qs == {"point": ["41.25,-70.11"]}
    assert [item.event for item in report.alerts] == ["Flood Warning", "Gale Warning"]
    assert report.latitude == 41.25
    assert report.longitude == -70.11
    assert report.city == ""
    assert report.state == ""
    assert report.zone == ""
    assert report.zone_url == ""
    assert report.alerts_url == ""


def test_point_service_rejects_non_numeric_coordinates(requests_mock):
    with pytest.raises(RequestConstructionError):
        NWSPointAlertsService().get_weather_alerts("north", LONG)
    assert not requests_mock.called


def test_point_service_bad_json_is_decode_error(requests_mock):
    requests_mock.get(POINT_ALERTS_URL, text="{truncated")

    with pytest.raises(DecodeError, match="NWS point alerts service"):
        NWSPointAlertsService().get_weather_alerts(LAT, LONG)


def test_point_service_http_error_is_network_error(requests_mock):
    requests_mock.get(POINT_ALERTS_URL, status_code=503, json={"title": "Service Unavailable"})

    with pytest.raises(NetworkError, match="NWS point alerts service"):
        NWSPointAlertsService().get_weather_alerts(LAT, LONG)
