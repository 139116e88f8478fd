"""Default configuration values and constants."""

from typing import Dict, Any

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Image analysis settings
    "image_confidence_threshold": 50.0,
    "cascade_path": None,
    "scale_factor": 1.1,
    "min_neighbors": 3,
    "min_detection_size": [30, 30],
    "max_detection_size": [300, 300],

    # Logging
    "log_level": "INFO"
}

# System constants
SYSTEM_CONSTANTS = {
    "MIN_CONFIDENCE_THRESHOLD": 0.0,
    "MAX_CONFIDENCE_THRESHOLD": 100.0,
    "CAT_CASCADE_FILE": "haarcascade_frontalcatface.xml",
    "LOG_ROTATION_SIZE_MB": 10,
    "LOG_BACKUP_COUNT": 5,
    "ERROR_HISTORY_SIZE": 1000
}

# File paths and directories
DEFAULT_PATHS = {
    "config_file": "config.json",
    "state_file": "data/security_state.json",
    "logs_dir": "logs"
}

# Searched for the cat cascade after the OpenCV data directory
CASCADE_SEARCH_DIRS = (
    "models",
    "/usr/local/share/opencv4/haarcascades",
    "/usr/share/opencv4/haarcascades",
    "/usr/local/share/opencv/haarcascades",
    "/usr/share/opencv/haarcascades",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
