"""Structured logging configuration for the ZFS kstat metrics collector"""
import logging
import os
import sys
from typing import Any, Dict
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer


def setup_structured_logging(config) -> None:
    """Setup structured logging with JSON format for production and console for development"""
    
    # Configure processors
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    
    # Use JSON renderer for production, console for development
    is_development = os.getenv("ENVIRONMENT", "production").lower() == "development"
    if is_development:
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())
    
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    
    level = getattr(logging, config.log_level.upper())
    
    # Console handler
    handlers = [logging.StreamHandler(sys.stderr)]
    
    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(config.log_file)))
    
    for handler in handlers:
        handler.setLevel(level)
    
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_collection(logger: structlog.stdlib.BoundLogger, metrics_count: int, collection_time: float,
                   warnings: int = 0, errors: int = 0) -> None:
    """Log a completed collection pass with structured data"""
    logger.info(
        "Metrics collection completed",
        metrics_count=metrics_count,
        collection_time_seconds=round(collection_time, 3),
        warnings=warnings,
        errors=errors,
        event_type="metrics_collection"
    )


def log_startup(logger: structlog.stdlib.BoundLogger, config) -> None:
    """Log startup with configuration details"""
    logger.info(
        "Collector starting up",
        service_name=config.service_name,
        service_version=config.service_version,
        zfs_base_path=str(config.zfs_base_path),
        enabled_collectors=config.enabled_collectors,
        event_type="startup"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
