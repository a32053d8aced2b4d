class ConfigurationError(ValueError):
    """Raised when a topology cannot be built from the parameters it was given."""
