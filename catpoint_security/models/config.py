"""Configuration data models."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class SecurityConfig:
    """Security system configuration settings."""
    # Image analysis settings
    image_confidence_threshold: float = 50.0  # Percent, 0-100
    cascade_path: Optional[str] = None  # None uses the cascade bundled with OpenCV
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_detection_size: Tuple[int, int] = (30, 30)
    max_detection_size: Tuple[int, int] = (300, 300)

    # Logging
    log_level: str = "INFO"
