"""
Invalid input error classifications.

These exceptions are raised when a caller hands the feed, the strategy
catalog or the signal processor data that breaks their contract.
"""

from datetime import datetime
from typing import Optional, Dict, Any


class InvalidInputError(Exception):
    """Base class for caller contract violations that can be corrected and retried."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MalformedDataError(InvalidInputError):
    """Data exists but a field is out of its domain."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class TemporalDataError(InvalidInputError):
    """Timestamp ordering issues between ticks or snapshots."""

    def __init__(self, message: str, timestamp: Optional[datetime] = None,
                 previous_timestamp: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.previous_timestamp = previous_timestamp
