"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import Any, Set

from ..models.sensor import Sensor
from ..models.status import AlarmStatus, ArmingStatus


class SecurityRepositoryInterface(ABC):
    """Interface for persistence of sensors and statuses."""

    @abstractmethod
    def get_sensors(self) -> Set[Sensor]:
        """Get the managed sensor set."""
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor to the managed set."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor from the managed set."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist the current state of a managed sensor."""
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the persisted arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Persist the arming status."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the persisted alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Persist the alarm status."""
        pass


class ImageServiceInterface(ABC):
    """Interface for image analysis."""

    @abstractmethod
    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        """Check whether the image depicts a cat with at least the given confidence."""
        pass


class StatusListenerInterface(ABC):
    """Interface for observers of the security system.

    Only alarm status changes must be handled; the other callbacks are
    optional hooks.
    """

    @abstractmethod
    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None:
        """Called after the alarm status changed."""
        pass

    def on_sensor_status_changed(self, sensor: Sensor) -> None:
        """Called after a sensor's active flag changed."""

    def on_cat_detected(self, cat_detected: bool) -> None:
        """Called after each processed image with the detection result."""
