from .__version__ import __version__
from .errors import (
    Errors,
    ScannerError,
    ScanError,
    NumberFormatError,
    ConfigError,
)
from .source import ByteSource
from .scanner import Scanner

__all__ = [
    "__version__",
    "ByteSource",
    "ConfigError",
    "Errors",
    "NumberFormatError",
    "ScanError",
    "Scanner",
    "ScannerError",
]
