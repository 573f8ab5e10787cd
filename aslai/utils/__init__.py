"""Configuration, logging and timing utilities."""
from .config import Config
from .logger import log_timing, setup_logging, setup_logging_from_config
from .performance import Timer

__all__ = ["Config", "log_timing", "setup_logging", "setup_logging_from_config", "Timer"]
