class ByTokenError(Exception):
    """Base class for tokenizer errors."""


class ConfigurationError(ByTokenError, ValueError):
    """Raised when training is requested with an unusable configuration."""


class SchemaError(ByTokenError, ValueError):
    """Raised when a saved tokenizer document is missing fields or malformed."""
