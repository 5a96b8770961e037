"""
Logging configuration and utilities for Bookcast.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from loguru import logger
from bookcast.config import get_settings


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "30 days"
) -> None:
    """
    Configure logging with Loguru.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        rotation: Log rotation size
        retention: Log retention period
    """
    # Remove default handler
    logger.remove()

    # Add console handler with structured format
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
               "<level>{level: <8}</level> | "
               "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
               "<level>{message}</level>",
        level=log_level,
        colorize=True
    )

    # Add file handler if specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} | {message}",
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip"
        )


def get_logger(name: str):
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name

    Returns:
        Logger instance
    """
    return logger.bind(name=name)


def log_agent_action(
    agent_name: str,
    action: str,
    input_data: Optional[Dict[str, Any]] = None,
    output_data: Optional[Dict[str, Any]] = None,
    duration: Optional[float] = None
) -> None:
    """
    Log AI agent actions with performance metrics.

    Args:
        agent_name: Name of the AI agent
        action: Action performed
        input_data: Input data to the agent
        output_data: Output data from the agent
        duration: Execution time in seconds
    """
    action_data = {
        "agent": agent_name,
        "action": action,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "duration": duration,
        "input_size": len(str(input_data)) if input_data else 0,
        "output_size": len(str(output_data)) if output_data else 0
    }

    logger.bind(name=agent_name, **action_data).info(f"Agent Action: {agent_name} - {action}")


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    stage: Optional[str] = None
) -> None:
    """
    Log errors with context.

    Args:
        error: Exception that occurred
        context: Additional context data
        stage: Pipeline stage the error belongs to
    """
    error_data = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context or {},
        "stage": stage,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    logger.bind(name="bookcast.errors", **error_data).error(f"Error in {stage or 'bookcast'}: {error}")


# Every record carries a name so the sink format can render it
logger.configure(extra={"name": "bookcast"})

# Initialize logging on module import
settings = get_settings()
setup_logging(
    log_level=settings.log_level,
    log_file=settings.log_file or None
)
