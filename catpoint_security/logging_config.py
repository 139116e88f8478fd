"""Centralized logging configuration for the security system."""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict, Any
from pathlib import Path

from .config.defaults import DEFAULT_PATHS, SYSTEM_CONSTANTS

LOGGER_NAMESPACE = "catpoint"


class StructuredFormatter(logging.Formatter):
    """Custom formatter that adds structured information to log records."""

    def __init__(self, include_context: bool = True):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        base_format = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"

        if self.include_context and hasattr(record, 'context'):
            context_str = " | ".join([f"{k}={v}" for k, v in record.context.items()])
            base_format += f" | Context: {context_str}"

        if record.levelno >= logging.ERROR and record.exc_info:
            base_format += " | %(pathname)s:%(lineno)d"

        formatter = logging.Formatter(base_format)
        return formatter.format(record)


class ContextFilter(logging.Filter):
    """Filter that adds component and process information to log records."""

    def __init__(self, component_name: Optional[str] = None):
        super().__init__()
        self.component_name = component_name
        self.process_id = os.getpid()

    def filter(self, record: logging.LogRecord) -> bool:
        record.process_id = self.process_id
        if self.component_name:
            record.component = self.component_name
        return True


class LoggingManager:
    """Centralized logging management.

    A manager created without ``log_dir`` only hands out component loggers and
    leaves handler configuration to the host application. With ``log_dir`` it
    installs a console handler plus rotating main and error log files.
    """

    def __init__(self, log_dir: Optional[str] = None, log_level: int = logging.INFO):
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_level = log_level
        self.max_log_size = SYSTEM_CONSTANTS["LOG_ROTATION_SIZE_MB"] * 1024 * 1024
        self.backup_count = SYSTEM_CONSTANTS["LOG_BACKUP_COUNT"]

        self.component_loggers: Dict[str, logging.Logger] = {}

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.main_log_file = self.log_dir / "security.log"
            self.error_log_file = self.log_dir / "errors.log"
            self._setup_root_logger()

    def _setup_root_logger(self) -> None:
        """Setup the root logger configuration."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(StructuredFormatter(include_context=False))
        root_logger.addHandler(console_handler)

        main_file_handler = logging.handlers.RotatingFileHandler(
            self.main_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        main_file_handler.setLevel(logging.DEBUG)
        main_file_handler.setFormatter(StructuredFormatter(include_context=True))
        root_logger.addHandler(main_file_handler)

        # Errors and critical only
        error_file_handler = logging.handlers.RotatingFileHandler(
            self.error_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(StructuredFormatter(include_context=True))
        root_logger.addHandler(error_file_handler)

        logging.getLogger(LOGGER_NAMESPACE).info("Logging system initialized")

    def get_component_logger(self, component_name: str) -> logging.Logger:
        """Get or create a logger for a specific component."""
        if component_name in self.component_loggers:
            return self.component_loggers[component_name]

        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component_name}")

        logger.addFilter(ContextFilter(component_name))

        self.component_loggers[component_name] = logger
        return logger

    def log_with_context(self, logger: logging.Logger, level: int,
                         message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message with additional context information."""
        if context:
            logger.log(level, message, extra={"context": context})
        else:
            logger.log(level, message)


# Global logging manager instance
logging_manager = LoggingManager()


def get_logger(component_name: str) -> logging.Logger:
    """Convenience function to get a component logger."""
    return logging_manager.get_component_logger(component_name)


def log_with_context(logger: logging.Logger, level: int, message: str,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Convenience wrapper around LoggingManager.log_with_context."""
    logging_manager.log_with_context(logger, level, message, context)


def setup_logging(log_level: str = "INFO", log_dir: str = DEFAULT_PATHS["logs_dir"]) -> LoggingManager:
    """Setup centralized logging system."""
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Keep already handed-out component loggers registered with the new manager
    previous_loggers = logging_manager.component_loggers
    logging_manager = LoggingManager(log_dir, numeric_level)
    logging_manager.component_loggers.update(previous_loggers)

    return logging_manager
