class ConfigError(ValueError):
    """Raised for malformed startup configuration (timestamps, zoom bounds, targets...)."""
