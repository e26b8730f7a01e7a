"""errors.py: Exception types raised by the perceptron models."""


class PerceptronError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(PerceptronError, ValueError):
    """Raised when the training data cannot be used by a perceptron.

    Typical causes are a non-numeric feature column or labels outside {0, 1}.
    """

    def __init__(self, message, column=None):
        super().__init__(message)
        self.column = column


class ConfigurationError(PerceptronError, ValueError):
    """Raised when a model is configured with invalid options.

    Configuration is never silently clamped: an invalid fold count, ensemble size
    or subset size always surfaces to the caller.
    """
