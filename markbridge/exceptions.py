"""Custom exceptions for MarkBridge."""


class MarkBridgeError(Exception):
    """Base exception for MarkBridge."""


class ConfigurationError(MarkBridgeError):
    """Configuration-related errors."""


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""


class IdentityLookupError(MarkBridgeError):
    """An identity or channel lookup failed.

    Raised by collaborators, never by the translation functions themselves:
    the engine treats it exactly like "not found".
    """
