"""Centralized logging configuration for the release tool."""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_infrastructure_logger(module_name: str) -> logging.Logger:
    """Get logger for infrastructure modules.

    Handlers are left to the root logger so the CLI's configuration applies.
    """
    return logging.getLogger(f"infrastructure.{module_name}")


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger for a CLI run."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path("logs").mkdir(exist_ok=True)
        handlers.append(logging.FileHandler(f"logs/{log_file}"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
