"""
JSON logging for the advisor: one line per event on stdout.

Library modules only call structlog.get_logger(component=...); the Lambda
handler and the CLI call configure_logging() once at start-up.
"""

from __future__ import annotations
import logging
import os
import sys
import structlog

SERVICE = "ETFAdvisor"


def configure_logging(service: str = SERVICE):
    """
    Route structlog through stdlib logging at LOG_LEVEL (default INFO).

    returns:
    - structlog.BoundLogger bound with service and env.

    example:
    {"component": "market_data", "instrument": "Satrix 40 ETF", "error": "timed out",
     "event": "market.quote_failed", "level": "warning", "timestamp": "2025-10-21T13:00:00Z"}
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger().bind(service=service, env=os.getenv("ENV", "dev"))
