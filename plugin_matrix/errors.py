class ConfigurationError(ValueError):
    """Raised when the settings parameters cannot produce a valid project."""


class MissingRequiredInput(ConfigurationError):
    pass


class InvalidEnumValue(ConfigurationError):
    pass


class InvalidReference(ConfigurationError):
    pass
