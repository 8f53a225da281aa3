"""Query several alert services at once and keep the first report."""

import logging
import queue
import threading
from typing import Iterable

from .errors import FetchCancelled
from .fetchers.base import AlertService
from .models import AlertReport

logger = logging.getLogger(__name__)


def get_weather_alerts(services: Iterable[AlertService], lat: str, long: str) -> AlertReport:
    """
    Call all services in parallel and return the first successful report.

    Failed services are logged and otherwise ignored. Once a report is taken
    the remaining services are cancelled before their next request.

    Blocks forever if no service succeeds, including when `services` is empty.
    """
    results: "queue.Queue[AlertReport]" = queue.Queue(maxsize=1)
    cancel = threading.Event()

    def run(service: AlertService):
        try:
            report = service.get_weather_alerts(lat, long, cancel=cancel)
        except FetchCancelled:
            logger.debug(f"Alert service {service.name} cancelled")
            return
        except Exception as e:
            logger.warning(f"Alert service {service.name} failed: {e}")
            return

        try:
            results.put_nowait(report)
        except queue.Full:
            logger.debug(f"Dropping late report from {service.name}")

    for service in services:
        worker = threading.Thread(
            target=run,
            args=(service,),
            name=f"alerts-{service.name}",
            daemon=True,
        )
        worker.start()

    report = results.get()
    cancel.set()
    return report
