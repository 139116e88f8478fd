"""Services for the security system."""

from .interfaces import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListenerInterface
)
from .alarm_state_machine import AlarmStateMachine, SecuritySnapshot, Transition, TransitionTrigger
from .error_handler import (
    ErrorHandler,
    ErrorSeverity,
    SecurityError,
    CollaboratorUnavailable,
    InvalidSensorReference
)
from .security_repository import InMemorySecurityRepository, JsonSecurityRepository
from .image_service import FakeImageService, OpenCVImageService
from .status_listener import LoggingStatusListener
from .security_service import SecurityService

__all__ = [
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListenerInterface',
    'AlarmStateMachine',
    'SecuritySnapshot',
    'Transition',
    'TransitionTrigger',
    'ErrorHandler',
    'ErrorSeverity',
    'SecurityError',
    'CollaboratorUnavailable',
    'InvalidSensorReference',
    'InMemorySecurityRepository',
    'JsonSecurityRepository',
    'FakeImageService',
    'OpenCVImageService',
    'LoggingStatusListener',
    'SecurityService'
]
