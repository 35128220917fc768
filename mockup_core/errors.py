"""Error conditions raised by the coordinate engine.

All of these are local and recoverable: the caller reports the message to the
user and waits for corrected input.
"""


class MockupEngineError(Exception):
    """Base class for engine conditions."""


class InvalidRatio(MockupEngineError, ValueError):
    """Conversion attempted with a non-positive or non-finite px/cm ratio."""

    def __init__(self, px_per_cm: float) -> None:
        self.px_per_cm = px_per_cm
        super().__init__(f"px_per_cm must be a positive finite number, got {px_per_cm}")


class CalibrationIncomplete(MockupEngineError):
    """Calibration confirmed without two points or a positive real length."""


class InvalidSizeTable(MockupEngineError, ValueError):
    """Size table cannot produce a scale factor for the requested size."""


class PresetRequiresCalibration(MockupEngineError):
    """Preset application attempted on an uncalibrated subject."""

    def __init__(self, preset_name: str) -> None:
        self.preset_name = preset_name
        super().__init__(f"Calibrate the canvas before applying preset '{preset_name}'")
