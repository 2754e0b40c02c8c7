# gateway_world/errors.py


class ConfigurationError(ValueError):
    """Raised when scene parameters can never produce a valid result."""
