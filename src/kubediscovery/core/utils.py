"""Utility functions and decorators."""

import logging.config
import structlog
import yaml
from pathlib import Path
from typing import Dict, Optional, Union
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential


def _is_retryable(exc: BaseException) -> bool:
    # 4xx answers will not change on a second attempt
    status = getattr(exc, "status", None)
    return not (isinstance(status, int) and 400 <= status < 500)


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0
):
    """Decorator for retry with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        retry=retry_if_exception(_is_retryable),
        reraise=True
    )


def setup_logging(config_path: Optional[Union[str, Path]] = None, log_level: str = "INFO") -> None:
    """Setup structured logging configuration."""
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if config_path else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def to_label_selector(labels: Optional[Dict[str, str]]) -> Optional[str]:
    """Render a label mapping as a Kubernetes equality-based label selector."""
    if not labels:
        return None
    return ",".join(f"{key}={value}" for key, value in labels.items())
