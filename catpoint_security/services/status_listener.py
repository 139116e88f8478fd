"""Status listener that reports security events to the log."""

import logging
from typing import Optional

from ..models.sensor import Sensor
from ..models.status import AlarmStatus
from ..logging_config import get_logger
from .interfaces import StatusListenerInterface


class LoggingStatusListener(StatusListenerInterface):
    """Writes every status notification to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("status_listener")

    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None:
        if alarm_status == AlarmStatus.ALARM:
            self.logger.warning("ALARM: intrusion detected")
        else:
            self.logger.info(f"Alarm status is now {alarm_status.value}")

    def on_sensor_status_changed(self, sensor: Sensor) -> None:
        state = "active" if sensor.active else "inactive"
        self.logger.info(f"Sensor '{sensor.name}' ({sensor.sensor_type.value}) is {state}")

    def on_cat_detected(self, cat_detected: bool) -> None:
        if cat_detected:
            self.logger.info("Cat detected in camera image")
        else:
            self.logger.debug("No cat in camera image")
