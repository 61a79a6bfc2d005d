# greenhouse_calc/core/errors.py


class HeatLossError(ValueError):
    """Base class for every error raised by the calculation core."""


class ConfigurationError(HeatLossError):
    """A key or shape that is not present in the material catalog."""


class InvalidInputError(HeatLossError):
    """A catalog value that cannot be used in the calculation (e.g. R-value <= 0)."""
