from enum import StrEnum


class Errors(StrEnum):
    EMPTY = "empty"
    INVALID_RADIX = "invalid-radix"
    INVALID_DIGIT = "invalid-digit"
    OVERFLOW = "overflow"


class ScannerError(Exception):
    """Base class for bufscan errors."""


class NumberFormatError(ScannerError, ValueError):
    def __init__(self, what: Errors, token: str):
        super().__init__(f"{what}: {token!r}")
        self.what = what
        self.token = token


class ConfigError(ScannerError):
    """Exception class for Config related errors."""


class ScanError(ScannerError):
    """The input cannot be split into tokens any further."""
