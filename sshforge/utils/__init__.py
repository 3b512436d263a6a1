"""Utilities for sshforge."""

from sshforge.utils.console import ColorfulFormatter, configure_logging
from sshforge.utils.parser import ParseError, format_target, parse_target
from sshforge.utils.validation import validate_host_format, validate_port

__all__ = [
    "ColorfulFormatter",
    "configure_logging",
    "format_target",
    "parse_target",
    "ParseError",
    "validate_host_format",
    "validate_port",
]
