"""Repository implementations for sensors and statuses."""

import json
import os
from typing import Dict, Set

from ..models.sensor import Sensor
from ..models.status import AlarmStatus, ArmingStatus
from ..config.defaults import DEFAULT_PATHS
from ..utils import write_json_atomic
from ..logging_config import get_logger
from .error_handler import CollaboratorUnavailable
from .interfaces import SecurityRepositoryInterface

logger = get_logger("security_repository")


class InMemorySecurityRepository(SecurityRepositoryInterface):
    """Repository that keeps all state in process memory."""

    def __init__(self,
                 arming_status: ArmingStatus = ArmingStatus.DISARMED,
                 alarm_status: AlarmStatus = AlarmStatus.NO_ALARM):
        self._sensors: Dict[str, Sensor] = {}
        self._arming_status = arming_status
        self._alarm_status = alarm_status

    def get_sensors(self) -> Set[Sensor]:
        return set(self._sensors.values())

    def add_sensor(self, sensor: Sensor) -> None:
        self._sensors[sensor.sensor_id] = sensor

    def remove_sensor(self, sensor: Sensor) -> None:
        self._sensors.pop(sensor.sensor_id, None)

    def update_sensor(self, sensor: Sensor) -> None:
        self._sensors[sensor.sensor_id] = sensor

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._arming_status = arming_status

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._alarm_status = alarm_status


class JsonSecurityRepository(InMemorySecurityRepository):
    """Repository persisted to a JSON state file.

    The whole state is rewritten atomically on every mutation. Reads are
    served from memory, so they are consistent with the last write.
    """

    def __init__(self, state_path: str = DEFAULT_PATHS["state_file"]):
        super().__init__()
        self.state_path = state_path
        self._load_state()

    def _load_state(self) -> None:
        """Load state from file, keeping defaults when there is none."""
        if not os.path.exists(self.state_path):
            logger.info(f"No state file at {self.state_path}, starting with defaults")
            return

        try:
            with open(self.state_path, 'r') as f:
                state = json.load(f)
            if not isinstance(state, dict):
                raise ValueError(f"expected a JSON object, got {type(state).__name__}")
            entries = state.get("sensors", [])
            if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
                raise ValueError("sensors must be a list of objects")
            sensors = [Sensor.from_dict(entry) for entry in entries]
            arming_status = ArmingStatus(state.get("arming_status", ArmingStatus.DISARMED.value))
            alarm_status = AlarmStatus(state.get("alarm_status", AlarmStatus.NO_ALARM.value))
        except (OSError, json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Error loading state from {self.state_path}: {e}. Using defaults.")
            return

        self._sensors = {sensor.sensor_id: sensor for sensor in sensors}
        self._arming_status = arming_status
        self._alarm_status = alarm_status
        logger.debug(f"Loaded {len(self._sensors)} sensors from {self.state_path}")

    def _save_state(self) -> None:
        state = {
            "arming_status": self._arming_status.value,
            "alarm_status": self._alarm_status.value,
            "sensors": [sensor.to_dict() for sensor in self._sensors.values()]
        }
        try:
            write_json_atomic(self.state_path, state)
        except OSError as e:
            raise CollaboratorUnavailable("security_repository",
                                          f"failed to write {self.state_path}: {e}") from e

    def add_sensor(self, sensor: Sensor) -> None:
        previous = self._sensors.get(sensor.sensor_id)
        super().add_sensor(sensor)
        try:
            self._save_state()
        except CollaboratorUnavailable:
            if previous is None:
                del self._sensors[sensor.sensor_id]
            else:
                self._sensors[sensor.sensor_id] = previous
            raise

    def remove_sensor(self, sensor: Sensor) -> None:
        previous = self._sensors.get(sensor.sensor_id)
        super().remove_sensor(sensor)
        try:
            self._save_state()
        except CollaboratorUnavailable:
            if previous is not None:
                self._sensors[sensor.sensor_id] = previous
            raise

    def update_sensor(self, sensor: Sensor) -> None:
        super().update_sensor(sensor)
        self._save_state()

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        previous = self._arming_status
        super().set_arming_status(arming_status)
        try:
            self._save_state()
        except CollaboratorUnavailable:
            self._arming_status = previous
            raise

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        previous = self._alarm_status
        super().set_alarm_status(alarm_status)
        try:
            self._save_state()
        except CollaboratorUnavailable:
            self._alarm_status = previous
            raise
