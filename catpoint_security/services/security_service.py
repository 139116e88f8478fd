"""Security service facade.

Entry point for callers: sensor management, arming control and image
submission. Rule evaluation is delegated to AlarmStateMachine, results are
persisted through the repository and announced to status listeners.
"""

import logging
import threading
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Iterator, List, Optional, Set

from ..models.config import SecurityConfig
from ..models.sensor import Sensor
from ..models.status import AlarmStatus, ArmingStatus
from ..logging_config import get_logger, log_with_context
from .alarm_state_machine import AlarmStateMachine, SecuritySnapshot, Transition
from .error_handler import ErrorHandler, ErrorSeverity, InvalidSensorReference
from .interfaces import ImageServiceInterface, SecurityRepositoryInterface, StatusListenerInterface

logger = get_logger("security_service")

REPOSITORY_COMPONENT = "security_repository"
IMAGE_SERVICE_COMPONENT = "image_service"
LISTENER_COMPONENT = "status_listener"


class SecurityService:
    """Public facade of the security system.

    All operations run under one re-entrant lock, so concurrent callers never
    interleave reads and writes of the sensor set and statuses. Listeners are
    called synchronously from within the triggering operation.
    """

    def __init__(self,
                 security_repository: SecurityRepositoryInterface,
                 image_service: ImageServiceInterface,
                 config: Optional[SecurityConfig] = None,
                 state_machine: Optional[AlarmStateMachine] = None,
                 error_handler: Optional[ErrorHandler] = None):
        self.security_repository = security_repository
        self.image_service = image_service
        self.config = config or SecurityConfig()
        self.state_machine = state_machine or AlarmStateMachine()
        self.error_handler = error_handler or ErrorHandler()

        # Fixed for the lifetime of the service
        self._confidence_threshold = float(self.config.image_confidence_threshold)

        self._status_listeners: List[StatusListenerInterface] = []
        self._cat_detected = False
        self._lock = threading.RLock()

        for component in (REPOSITORY_COMPONENT, IMAGE_SERVICE_COMPONENT, LISTENER_COMPONENT):
            self.error_handler.register_component(component)

        logger.info(f"Security service initialized (confidence threshold "
                    f"{self._confidence_threshold:.1f}%)")

    @property
    def confidence_threshold(self) -> float:
        return self._confidence_threshold

    @property
    def cat_detected(self) -> bool:
        """Result of the last successfully processed image."""
        return self._cat_detected

    # Listener registry

    def add_status_listener(self, listener: StatusListenerInterface) -> None:
        with self._lock:
            if listener not in self._status_listeners:
                self._status_listeners.append(listener)

    def remove_status_listener(self, listener: StatusListenerInterface) -> None:
        with self._lock:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

    # Read accessors

    def get_sensors(self) -> Set[Sensor]:
        with self._lock, self._collaborator(REPOSITORY_COMPONENT):
            return self.security_repository.get_sensors()

    def get_alarm_status(self) -> AlarmStatus:
        with self._lock, self._collaborator(REPOSITORY_COMPONENT):
            return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        with self._lock, self._collaborator(REPOSITORY_COMPONENT):
            return self.security_repository.get_arming_status()

    # Sensor management

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            with self._collaborator(REPOSITORY_COMPONENT):
                self.security_repository.add_sensor(sensor)
            logger.info(f"Added sensor '{sensor.name}' ({sensor.sensor_type.value})")

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            snapshot = self._snapshot()
            managed = self._find_sensor(snapshot, sensor)
            with self._collaborator(REPOSITORY_COMPONENT):
                self.security_repository.remove_sensor(managed)
            logger.info(f"Removed sensor '{managed.name}' ({managed.sensor_type.value})")

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> AlarmStatus:
        """Activate or deactivate a managed sensor and apply the alarm rules."""
        with self._lock:
            snapshot = self._snapshot()
            managed = self._find_sensor(snapshot, sensor)

            if active:
                transition = self.state_machine.on_sensor_activated(snapshot, managed)
            else:
                transition = self.state_machine.on_sensor_deactivated(snapshot, managed)

            self._apply(snapshot, transition)

            # Callers may hold a different object for the same sensor
            if managed is not sensor:
                sensor.active = managed.active

            self._notify(transition)
            return transition.alarm_status

    # Arming control

    def set_arming_status(self, arming_status: ArmingStatus) -> AlarmStatus:
        with self._lock:
            snapshot = self._snapshot()
            transition = self.state_machine.on_arming_changed(snapshot, arming_status)
            self._apply(snapshot, transition, arming_status=arming_status)
            logger.info(f"Arming status {snapshot.arming_status.value} -> {arming_status.value}")
            self._notify(transition)
            return transition.alarm_status

    # Image submission

    def process_image(self, image: Any) -> AlarmStatus:
        """Run cat detection on a camera image and apply the result."""
        with self._lock:
            with self._collaborator(IMAGE_SERVICE_COMPONENT):
                cat_detected = bool(self.image_service.image_contains_cat(image, self._confidence_threshold))

            snapshot = self._snapshot()
            transition = self.state_machine.on_cat_detected(snapshot, cat_detected)
            self._apply(snapshot, transition)
            self._cat_detected = cat_detected

            self._notify(transition)
            self._dispatch("on_cat_detected", cat_detected)
            return transition.alarm_status

    # Internals

    @contextmanager
    def _collaborator(self, component: str) -> Iterator[None]:
        """Record collaborator failures before letting them propagate."""
        try:
            yield
        except Exception as e:
            self.error_handler.handle_error(component, e, ErrorSeverity.HIGH)
            raise
        self.error_handler.mark_healthy(component)

    def _snapshot(self) -> SecuritySnapshot:
        with self._collaborator(REPOSITORY_COMPONENT):
            return SecuritySnapshot(
                arming_status=self.security_repository.get_arming_status(),
                alarm_status=self.security_repository.get_alarm_status(),
                sensors=frozenset(self.security_repository.get_sensors())
            )

    def _find_sensor(self, snapshot: SecuritySnapshot, sensor: Sensor) -> Sensor:
        for managed in snapshot.sensors:
            if managed == sensor:
                return managed
        logger.warning(f"Rejected operation on unregistered sensor '{sensor.name}'")
        raise InvalidSensorReference(sensor)

    def _apply(self, snapshot: SecuritySnapshot, transition: Transition,
               arming_status: Optional[ArmingStatus] = None) -> None:
        """Persist a transition, undoing completed steps if a write fails."""
        undo: List[Callable[[], None]] = []
        try:
            with self._collaborator(REPOSITORY_COMPONENT):
                if arming_status is not None:
                    self.security_repository.set_arming_status(arming_status)
                    undo.append(partial(self.security_repository.set_arming_status,
                                        snapshot.arming_status))

                for sensor, active in transition.sensor_changes.items():
                    undo.append(partial(self._restore_sensor, sensor, sensor.active))
                    sensor.active = active
                    self.security_repository.update_sensor(sensor)

                if transition.status_changed:
                    self.security_repository.set_alarm_status(transition.alarm_status)
        except Exception:
            self._rollback(undo)
            raise

        if transition.status_changed:
            log_with_context(
                logger, logging.INFO,
                f"Alarm status {transition.previous_status.value} -> {transition.alarm_status.value}",
                {"trigger": transition.trigger.value, "reason": transition.reason}
            )
        elif not transition.is_noop:
            logger.debug(f"{transition.trigger.value}: {transition.reason or 'no alarm change'}")

    def _restore_sensor(self, sensor: Sensor, active: bool) -> None:
        sensor.active = active
        self.security_repository.update_sensor(sensor)

    def _rollback(self, undo: List[Callable[[], None]]) -> None:
        for action in reversed(undo):
            try:
                action()
            except Exception as e:
                # The triggering error is re-raised by the caller
                logger.error(f"Failed to roll back repository write: {e}")
                self.error_handler.handle_error(REPOSITORY_COMPONENT, e, ErrorSeverity.CRITICAL)

    def _notify(self, transition: Transition) -> None:
        if transition.status_changed:
            self._dispatch("on_alarm_status_changed", transition.alarm_status)
        for sensor in transition.sensor_changes:
            self._dispatch("on_sensor_status_changed", sensor)

    def _dispatch(self, callback_name: str, *args: Any) -> None:
        """Deliver a callback to every listener; a failing listener does not stop the rest."""
        for listener in list(self._status_listeners):
            callback = getattr(listener, callback_name, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Status listener {listener!r} failed in {callback_name}: {e}")
                self.error_handler.handle_error(LISTENER_COMPONENT, e, ErrorSeverity.LOW)
