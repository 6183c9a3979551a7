"""Exception types raised by the scorebook package."""


class ScorebookError(Exception):
    """Base class for scorebook errors."""


class ConfigError(ScorebookError):
    """Raised when a configuration file cannot be read or is invalid."""
