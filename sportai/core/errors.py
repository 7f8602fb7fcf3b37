"""Exceptions raised by SportAI."""


class SportAIError(Exception):
    """Base exception for SportAI errors."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(message)


class ResultFormatError(SportAIError):
    """Upstream analysis result could not be read."""
    pass


class ConfigError(SportAIError):
    """Invalid configuration file or value."""
    pass
