"""Command-line service entry point and configuration."""

from .cli import build_filter, build_parser, main
from .config import add_args, check_config, config_to_dict, setup_logging

__all__ = [
    "main",
    "build_parser",
    "build_filter",
    "add_args",
    "check_config",
    "config_to_dict",
    "setup_logging",
]
