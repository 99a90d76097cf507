"""
Custom exceptions for the prompt intelligence system.
"""


class ClavixError(Exception):
    """Base exception for clavix errors."""
    pass


class PatternRegistrationError(ClavixError):
    """Raised when a pattern declares invalid metadata or collides with a registered id."""
    pass


class PatternConfigError(ClavixError):
    """Raised when pattern settings fail validation at registry build time."""
    pass


class ConfigError(ClavixError):
    """Raised when an explicitly requested configuration file cannot be read."""
    pass
