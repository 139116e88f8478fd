"""Tests for error tracking and the error taxonomy."""

import unittest
from datetime import datetime, timedelta
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.models import Sensor, SensorType
from catpoint_security.services.error_handler import (
    ErrorHandler, ErrorSeverity, ComponentStatus, SecurityError,
    CollaboratorUnavailable, InvalidSensorReference
)


class TestErrorTaxonomy(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_hierarchy(self):
        self.assertTrue(issubclass(CollaboratorUnavailable, SecurityError))
        self.assertTrue(issubclass(InvalidSensorReference, SecurityError))

    def test_collaborator_unavailable_message(self):
        error = CollaboratorUnavailable("security_repository", "disk full")
        self.assertEqual(error.collaborator, "security_repository")
        self.assertEqual(str(error), "security_repository: disk full")

    def test_invalid_sensor_reference_message(self):
        sensor = Sensor("Attic", SensorType.WINDOW)
        error = InvalidSensorReference(sensor)
        self.assertIs(error.sensor, sensor)
        self.assertIn("Attic", str(error))
        self.assertIn(sensor.sensor_id, str(error))


class TestErrorHandler(unittest.TestCase):
    """Test error handler functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler(max_error_history=10)

    def test_initialization(self):
        self.assertEqual(len(self.error_handler.error_records), 0)
        self.assertEqual(self.error_handler.get_component_health(), {})

    def test_component_registration(self):
        self.error_handler.register_component("image_service")

        self.assertEqual(self.error_handler.component_error_counts["image_service"], 0)
        self.assertEqual(self.error_handler.get_component_health()["image_service"],
                         ComponentStatus.HEALTHY)

    def test_error_handling_basic(self):
        record = self.error_handler.handle_error("status_listener", ValueError("Test error"),
                                                 ErrorSeverity.LOW)

        self.assertEqual(record.error_type, "ValueError")
        self.assertEqual(record.message, "Test error")
        self.assertEqual(self.error_handler.component_error_counts["status_listener"], 1)
        self.assertEqual(self.error_handler.component_status["status_listener"], ComponentStatus.HEALTHY)

    def test_severity_updates_status(self):
        self.error_handler.handle_error("repo", OSError("slow"), ErrorSeverity.HIGH)
        self.assertEqual(self.error_handler.component_status["repo"], ComponentStatus.DEGRADED)

        self.error_handler.handle_error("repo", OSError("gone"), ErrorSeverity.CRITICAL)
        self.assertEqual(self.error_handler.component_status["repo"], ComponentStatus.FAILED)

        self.error_handler.mark_healthy("repo")
        self.assertEqual(self.error_handler.component_status["repo"], ComponentStatus.HEALTHY)

    def test_traceback_captured(self):
        try:
            raise RuntimeError("with traceback")
        except RuntimeError as e:
            record = self.error_handler.handle_error("repo", e, ErrorSeverity.MEDIUM)

        self.assertIn("RuntimeError: with traceback", record.traceback_str)

    def test_history_is_bounded(self):
        for i in range(15):
            self.error_handler.handle_error("repo", ValueError(str(i)), ErrorSeverity.LOW)

        self.assertEqual(len(self.error_handler.error_records), 10)
        self.assertEqual(self.error_handler.error_records[0].message, "5")
        self.assertEqual(self.error_handler.component_error_counts["repo"], 15)

    def test_error_stats(self):
        self.error_handler.handle_error("repo", OSError("x"), ErrorSeverity.HIGH)
        self.error_handler.handle_error("listener", ValueError("y"), ErrorSeverity.LOW)

        stats = self.error_handler.get_error_stats()
        self.assertEqual(stats["total_errors"], 2)
        self.assertEqual(stats["component_error_counts"], {"repo": 1, "listener": 1})
        self.assertEqual(stats["degraded_components"], ["repo"])

    def test_error_summary_window(self):
        self.error_handler.handle_error("repo", OSError("new"), ErrorSeverity.HIGH)
        old = self.error_handler.handle_error("repo", OSError("old"), ErrorSeverity.LOW)
        old.timestamp = datetime.now() - timedelta(hours=48)

        summary = self.error_handler.get_error_summary(hours=24)
        self.assertEqual(summary["total_errors"], 1)
        self.assertEqual(summary["severity_counts"]["high"], 1)
        self.assertEqual(summary["severity_counts"]["low"], 0)
        self.assertEqual(summary["component_counts"], {"repo": 1})

    def test_reset_and_clear(self):
        self.error_handler.handle_error("repo", OSError("x"), ErrorSeverity.CRITICAL)
        self.error_handler.handle_error("image", OSError("y"), ErrorSeverity.HIGH)

        self.error_handler.reset_error_counts("repo")
        self.assertEqual(self.error_handler.component_error_counts["repo"], 0)
        self.assertEqual(self.error_handler.component_status["image"], ComponentStatus.DEGRADED)

        self.error_handler.reset_error_counts()
        self.assertEqual(self.error_handler.component_status["image"], ComponentStatus.HEALTHY)

        self.error_handler.clear_error_history()
        self.assertEqual(len(self.error_handler.error_records), 0)


if __name__ == '__main__':
    unittest.main()
