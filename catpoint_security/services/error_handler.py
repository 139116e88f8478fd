"""Error taxonomy and error tracking for the security system."""

import traceback
from collections import deque
from datetime import datetime, timedelta
from typing import Deque, Dict, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

from ..config.defaults import SYSTEM_CONSTANTS
from ..logging_config import get_logger

logger = get_logger("error_handler")


class SecurityError(Exception):
    """Base class for errors surfaced by the security system."""


class CollaboratorUnavailable(SecurityError):
    """A repository or image-analysis collaborator could not complete a call."""

    def __init__(self, collaborator: str, message: str):
        self.collaborator = collaborator
        super().__init__(f"{collaborator}: {message}")


class InvalidSensorReference(SecurityError):
    """An operation referenced a sensor that is not in the managed sensor set."""

    def __init__(self, sensor: Any):
        self.sensor = sensor
        name = getattr(sensor, "name", sensor)
        sensor_id = getattr(sensor, "sensor_id", "?")
        super().__init__(f"Sensor '{name}' ({sensor_id}) is not registered")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComponentStatus(Enum):
    """Component status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def message(self) -> str:
        return str(self.error)


class ErrorHandler:
    """Tracks errors per component.

    Recording is synchronous and never retries or recovers on the caller's
    behalf; callers decide whether to re-raise.
    """

    def __init__(self, max_error_history: int = SYSTEM_CONSTANTS["ERROR_HISTORY_SIZE"]):
        self.error_records: Deque[ErrorRecord] = deque(maxlen=max_error_history)
        self.component_error_counts: Dict[str, int] = {}
        self.component_status: Dict[str, ComponentStatus] = {}

    def register_component(self, component_name: str) -> None:
        """Register a component for error tracking."""
        self.component_error_counts.setdefault(component_name, 0)
        self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)
        logger.debug(f"Component registered: {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity) -> ErrorRecord:
        """Record an error from a component and update its status."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str="".join(traceback.format_exception(type(error), error, error.__traceback__))
        )
        self.error_records.append(error_record)

        self.component_error_counts[component_name] = self.component_error_counts.get(component_name, 0) + 1

        if severity == ErrorSeverity.CRITICAL:
            self.component_status[component_name] = ComponentStatus.FAILED
        elif severity == ErrorSeverity.HIGH:
            self.component_status[component_name] = ComponentStatus.DEGRADED
        else:
            self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)

        if severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            logger.error(f"Error in {component_name}: {error} (Severity: {severity.value})")
        else:
            logger.warning(f"Error in {component_name}: {error} (Severity: {severity.value})")

        return error_record

    def mark_healthy(self, component_name: str) -> None:
        """Mark a component healthy again after a successful call."""
        if self.component_status.get(component_name) not in (None, ComponentStatus.HEALTHY):
            logger.info(f"Component {component_name} is healthy again")
        self.component_status[component_name] = ComponentStatus.HEALTHY

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        return {
            "total_errors": len(self.error_records),
            "component_error_counts": dict(self.component_error_counts),
            "degraded_components": [
                name for name, status in self.component_status.items()
                if status != ComponentStatus.HEALTHY
            ]
        }

    def get_component_health(self) -> Dict[str, ComponentStatus]:
        """Get health status of all known components."""
        return dict(self.component_status)

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Reset error counts for a component or all components."""
        if component_name:
            if component_name in self.component_error_counts:
                self.component_error_counts[component_name] = 0
                self.component_status[component_name] = ComponentStatus.HEALTHY
        else:
            for component in self.component_error_counts:
                self.component_error_counts[component] = 0
                self.component_status[component] = ComponentStatus.HEALTHY

    def clear_error_history(self) -> None:
        self.error_records.clear()

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Get summary of errors in the last N hours."""
        cutoff_time = datetime.now() - timedelta(hours=hours)
        recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }
