"""Structured logging setup for synthpanel.

Uses structlog for key/value logging with timestamps and levels in
every entry. Per-run loggers carry test_id, product_id and founder_id.
"""

import logging

import structlog


def configure_logging(json_output: bool = True, level: str = "INFO") -> None:
    """Configure structlog for synthpanel.

    Args:
        json_output: If True (default), render logs as JSON.
                     If False, use console-friendly output for development.
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    level_num = getattr(logging, level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_run_logger(
    test_id: str,
    product_id: str | None = None,
    founder_id: str | None = None,
) -> structlog.BoundLogger:
    """Get a logger bound to one synthetic test run.

    Args:
        test_id: ID of the run.
        product_id: Product under test, if known.
        founder_id: Founder who requested the run, if known.

    Returns:
        A structlog BoundLogger with the run identifiers bound.
    """
    logger = structlog.get_logger().bind(test_id=test_id)
    if product_id:
        logger = logger.bind(product_id=product_id)
    if founder_id:
        logger = logger.bind(founder_id=founder_id)
    return logger
