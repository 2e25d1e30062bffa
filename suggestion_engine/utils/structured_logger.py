"""
Structured JSON logging for suggestion sessions.

This module provides a structured logger that outputs JSON-formatted
logs with session correlation IDs, component, operation and context
fields.
"""

import json
import logging
import os
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class EnumEncoder(json.JSONEncoder):
    """JSON encoder that serializes Enum members by value."""
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class StructuredLogger:
    """
    Structured JSON logger for suggestion sessions.

    Outputs logs in JSON format with:
    - Timestamp (ISO 8601)
    - Log level
    - Session correlation ID
    - Component and operation
    - Message and additional context
    """

    def __init__(self, component: str, session_id: Optional[str] = None):
        """
        Initialize structured logger.

        Args:
            component: Component name (e.g., 'SuggestionSession')
            session_id: Session identifier for correlation
        """
        self.component = component
        self.session_id = session_id
        self.logger = logging.getLogger(component)

        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        **kwargs: Any
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Log message
            operation: Operation being performed
            **kwargs: Additional context fields

        Returns:
            JSON-formatted log string
        """
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'message': message
        }

        if self.session_id:
            log_entry['sessionId'] = self.session_id

        if operation:
            log_entry['operation'] = operation

        if kwargs:
            log_entry['context'] = kwargs

        return json.dumps(log_entry, cls=EnumEncoder)

    def debug(self, message: str, operation: Optional[str] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_log('DEBUG', message, operation, **kwargs))

    def info(self, message: str, operation: Optional[str] = None, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_log('INFO', message, operation, **kwargs))

    def warning(self, message: str, operation: Optional[str] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_log('WARNING', message, operation, **kwargs))

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        exc_info: bool = False,
        **kwargs: Any
    ) -> None:
        """
        Log error message.

        Args:
            message: Log message
            operation: Operation being performed
            exc_info: Whether to attach the active exception traceback
            **kwargs: Additional context
        """
        self.logger.error(
            self._format_log('ERROR', message, operation, **kwargs),
            exc_info=exc_info
        )


def get_structured_logger(component: str, session_id: Optional[str] = None) -> StructuredLogger:
    """
    Create a structured logger for a component.

    Args:
        component: Component name
        session_id: Session identifier for correlation

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(component=component, session_id=session_id)
