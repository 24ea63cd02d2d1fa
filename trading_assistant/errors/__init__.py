"""
Error classification for the trading assistant core.

Invalid input errors report caller contract violations and are always
recoverable by re-issuing a corrected request. System failures report
misuse of the component lifecycle or broken configuration.
"""

from .invalid_input import (
    InvalidInputError,
    MalformedDataError,
    TemporalDataError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    ConfigurationError,
)

__all__ = [
    # Invalid Input Errors
    "InvalidInputError",
    "MalformedDataError",
    "TemporalDataError",
    # System Failures
    "SystemFailureError",
    "StateTransitionError",
    "ConfigurationError",
]
