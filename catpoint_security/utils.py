"""Utility functions for the security system."""

import json
import os
import tempfile
from typing import Any


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def write_json_atomic(path: str, data: Any) -> None:
    """Write JSON to ``path`` via a temporary file so readers never see a partial file."""
    directory = os.path.dirname(os.path.abspath(path))
    ensure_directory_exists(directory)

    fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        with os.fdopen(fd, 'w') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


