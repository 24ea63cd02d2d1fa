"""
Centralized logging configuration for the trading assistant.

This module provides standardized logging configuration using structlog
for all components. Feed, strategy and orchestration code should log
through loggers obtained here so that audit events share one format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_feed_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for the simulated price feed.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger bound to the price feed subsystem
    """
    return get_logger(name).bind(subsystem="price_feed")


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for recompute orchestration and its state transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog logger bound to the orchestrator subsystem
    """
    return get_logger(name).bind(
        subsystem="orchestrator",
        audit_trail=True
    )


def log_state_transition(
    logger: FilteringBoundLogger,
    symbol: Optional[str],
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an orchestrator state transition with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Active symbol, if one is selected
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("state_transition")


def log_signal_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    action: str,
    confidence: float,
    reason_code: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a published recommendation with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Instrument the signal is for
        action: Recommended action
        confidence: Composite confidence score
        reason_code: Decisive factor behind the action
        trigger: What caused the recomputation (timer, tick, manual, strategy)
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        action=action,
        confidence=confidence,
        reason_code=reason_code,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("signal_decision")
