"""
Catpoint Security

Decision core of a home-security monitoring system: tracks sensors, arming
and camera cat detection, maintains the alarm status and notifies listeners.
"""

__version__ = "1.0.0"

from .config_manager import ConfigManager
from .models import (
    Sensor,
    SensorType,
    ArmingStatus,
    AlarmStatus,
    SecurityConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListenerInterface,
    AlarmStateMachine,
    SecurityService,
    InMemorySecurityRepository,
    JsonSecurityRepository,
    FakeImageService,
    OpenCVImageService,
    LoggingStatusListener,
    SecurityError,
    CollaboratorUnavailable,
    InvalidSensorReference
)

__all__ = [
    # Core
    'SecurityService',
    'AlarmStateMachine',
    'ConfigManager',

    # Data models
    'Sensor',
    'SensorType',
    'ArmingStatus',
    'AlarmStatus',
    'SecurityConfig',

    # Capability interfaces
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListenerInterface',

    # Collaborators
    'InMemorySecurityRepository',
    'JsonSecurityRepository',
    'FakeImageService',
    'OpenCVImageService',
    'LoggingStatusListener',

    # Errors
    'SecurityError',
    'CollaboratorUnavailable',
    'InvalidSensorReference'
]
