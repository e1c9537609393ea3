"""Custom exceptions for the calibration workflow."""


class CalibrationError(Exception):
    """Base calibration exception."""


class CalibrationInputError(CalibrationError, ValueError):
    """Raised when an operator-entered calibration point is unusable."""
