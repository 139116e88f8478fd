"""Unit tests for configuration manager."""

import unittest
import os
import json
import shutil
import tempfile
from unittest.mock import Mock
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.config_manager import ConfigManager
from catpoint_security.models.config import SecurityConfig


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "test_config.json")
        self.config_manager = ConfigManager(self.config_path)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_initialization_creates_default_file(self):
        self.assertEqual(self.config_manager.config_path, self.config_path)
        self.assertTrue(os.path.exists(self.config_path))
        self.assertEqual(self.config_manager.get_config(), SecurityConfig())

    def test_load_save_config(self):
        self.config_manager.update_config(image_confidence_threshold=65.0,
                                          min_detection_size=[40, 40])

        new_manager = ConfigManager(self.config_path)
        config = new_manager.get_config()
        self.assertEqual(config.image_confidence_threshold, 65.0)
        self.assertEqual(config.min_detection_size, (40, 40))

    def test_saved_file_is_plain_json(self):
        with open(self.config_path) as f:
            saved = json.load(f)

        self.assertEqual(saved["image_confidence_threshold"], 50.0)
        self.assertEqual(saved["max_detection_size"], [300, 300])
        self.assertIsNone(saved["cascade_path"])

    def test_update_ignores_unknown_keys(self):
        self.config_manager.update_config(invalid_key="value", log_level="DEBUG")

        config = self.config_manager.get_config()
        self.assertFalse(hasattr(config, "invalid_key"))
        self.assertEqual(config.log_level, "DEBUG")

    def test_corrupt_file_uses_defaults(self):
        with open(self.config_path, 'w') as f:
            f.write("{ broken")

        manager = ConfigManager(self.config_path)
        self.assertEqual(manager.get_config(), SecurityConfig())

    def test_non_object_file_uses_defaults(self):
        for content in ("[1, 2]", "null", '42'):
            with self.subTest(content=content):
                with open(self.config_path, 'w') as f:
                    f.write(content)

                with self.assertLogs("catpoint.config_manager", level="WARNING"):
                    manager = ConfigManager(self.config_path)
                self.assertEqual(manager.get_config(), SecurityConfig())

    def test_unknown_keys_in_file_are_ignored(self):
        with open(self.config_path, 'w') as f:
            json.dump({"image_confidence_threshold": 30.0, "legacy_setting": True}, f)

        manager = ConfigManager(self.config_path)
        self.assertEqual(manager.get_config().image_confidence_threshold, 30.0)

    def test_validate_config(self):
        self.assertTrue(self.config_manager.validate_config())

        invalid_updates = [
            {"image_confidence_threshold": 101.0},
            {"image_confidence_threshold": -1.0},
            {"scale_factor": 1.0},
            {"min_neighbors": -1},
            {"min_detection_size": (0, 30)},
            {"max_detection_size": (20, 20)},
            {"log_level": "VERBOSE"},
        ]
        for update in invalid_updates:
            with self.subTest(update=update):
                self.config_manager.reset_to_defaults()
                self.config_manager.update_config(**update)
                self.assertFalse(self.config_manager.validate_config())

    def test_reset_to_defaults(self):
        self.config_manager.update_config(image_confidence_threshold=90.0)
        self.config_manager.reset_to_defaults()

        self.assertEqual(self.config_manager.get_config(), SecurityConfig())
        self.assertEqual(ConfigManager(self.config_path).get_config(), SecurityConfig())

    def test_change_callbacks(self):
        callback = Mock()
        failing = Mock(side_effect=RuntimeError("boom"))
        self.config_manager.add_config_change_callback(failing)
        self.config_manager.add_config_change_callback(callback)

        self.config_manager.update_config(min_neighbors=4)

        failing.assert_called_once()
        callback.assert_called_once_with(self.config_manager.get_config())
        self.assertEqual(callback.call_args[0][0].min_neighbors, 4)


if __name__ == '__main__':
    unittest.main()
