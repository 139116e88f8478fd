"""Configuration components for the security system."""

from .defaults import (
    DEFAULT_CONFIG,
    SYSTEM_CONSTANTS,
    DEFAULT_PATHS
)

__all__ = [
    'DEFAULT_CONFIG',
    'SYSTEM_CONSTANTS',
    'DEFAULT_PATHS'
]
