"""
structlog setup shared by the CLI and any host application.
"""

import logging
import sys
from typing import Any, Dict

import structlog


def setup_logging(log_config: Dict[str, Any] = None) -> None:
    """Route structlog through stdlib logging with the configured level and renderer."""
    log_config = log_config or {}
    level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # basicConfig is a no-op when the host already installed handlers
    logging.getLogger().setLevel(level)
    # httpx logs every request URL at INFO, and the URL carries the hash
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_config.get('json'):
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
