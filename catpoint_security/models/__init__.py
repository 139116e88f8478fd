"""Data models for the catpoint security system."""

from .sensor import Sensor, SensorType
from .status import ArmingStatus, AlarmStatus
from .config import SecurityConfig

__all__ = ['Sensor', 'SensorType', 'ArmingStatus', 'AlarmStatus', 'SecurityConfig']
