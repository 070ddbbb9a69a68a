"""
Utils Package

Contains utility modules for structured logging.
"""

from .logger import (
    ConsoleTransport,
    ECIESLogger,
    FanOutTransport,
    FileTransport,
    LogLevel,
    LogLevelFilter,
    SensitiveDataFilter,
    StructuredJsonFormatter,
    StructuredLogger,
    TextFormatter,
    create_formatter,
    create_json_formatter,
)

__all__ = [
    # Logger
    "ECIESLogger",
    "StructuredLogger",
    "LogLevel",
    # Filters
    "LogLevelFilter",
    "SensitiveDataFilter",
    # Formatters
    "TextFormatter",
    "StructuredJsonFormatter",
    "create_formatter",
    "create_json_formatter",
    # Transports
    "ConsoleTransport",
    "FileTransport",
    "FanOutTransport",
]
