"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the catalog, aggregation and
persistence services.

Usage:
    from pack_planner.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="toggle_worn",
        outcome="success",
        hike_id=3,
        assignment_id=17,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'pack_planner.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'pack_planner.services.hike_aggregator'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"pack_planner.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "set_quantity", "delete_gear")
        outcome: Outcome description (e.g., "success", "validation_failed")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (entity IDs, error details, etc.)
            Common fields:
            - hike_id: Hike being aggregated or modified
            - gear_id: Gear item being modified
            - assignment_id: Hike gear assignment being modified
            - error: Error message if outcome is "error"

    Example:
        >>> log_operation(
        ...     logger,
        ...     operation="recompute",
        ...     outcome="success",
        ...     level=logging.DEBUG,
        ...     hike_id=3,
        ...     total_grams=5120.0,
        ... )
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
