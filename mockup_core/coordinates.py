"""Pixel/centimeter conversion utilities.

This module handles:
- Scalar conversions (pixels ↔ centimeters) for a calibrated px/cm ratio
- Whole-footprint conversions that preserve aspect ratio
- Measurement helpers (point distance, canvas size in cm, display formatting)
"""

import math
from typing import Literal

from mockup_core.config import POINTS_PER_CM
from mockup_core.errors import InvalidRatio
from mockup_core.validation import (
    CalibrationRatio,
    CanvasSize,
    MeasurementPoint,
    PixelRect,
    PlacementFootprint,
    PlacementMode,
)


def check_ratio(px_per_cm: float) -> float:
    """Return px_per_cm unchanged, or raise InvalidRatio if unusable.

    NaN comparisons always return False, so finiteness is checked explicitly.
    """
    if math.isnan(px_per_cm) or math.isinf(px_per_cm) or px_per_cm <= 0:
        raise InvalidRatio(px_per_cm)
    return px_per_cm


def cm_to_px(cm: float, px_per_cm: float) -> float:
    """Convert centimeters to pixels.

    Args:
        cm: Length in centimeters
        px_per_cm: Calibration ratio (pixels per centimeter)

    Returns:
        Length in pixels

    Raises:
        InvalidRatio: If px_per_cm is not a positive finite number
    """
    return cm * check_ratio(px_per_cm)


def px_to_cm(px: float, px_per_cm: float) -> float:
    """Convert pixels to centimeters.

    Args:
        px: Length in pixels
        px_per_cm: Calibration ratio (pixels per centimeter)

    Returns:
        Length in centimeters

    Raises:
        InvalidRatio: If px_per_cm is not a positive finite number
    """
    return px / check_ratio(px_per_cm)


def footprint_cm_to_px(footprint: PlacementFootprint, px_per_cm: float) -> PixelRect:
    """Convert a footprint to a pixel rectangle for canvas rendering.

    The same ratio is applied to all four fields so the aspect ratio is kept.
    """
    ratio = check_ratio(px_per_cm)
    return PixelRect(
        x=cm_to_px(footprint.x_cm, ratio),
        y=cm_to_px(footprint.y_cm, ratio),
        width=cm_to_px(footprint.width_cm, ratio),
        height=cm_to_px(footprint.height_cm, ratio),
    )


def footprint_px_to_cm(
    rect: PixelRect,
    px_per_cm: float,
    footprint_id: str,
    mode: PlacementMode = "fixed",
) -> PlacementFootprint:
    """Convert a pixel rectangle from the canvas back to a storable footprint.

    Args:
        rect: Placement rectangle in pixels
        px_per_cm: Calibration ratio
        footprint_id: Identifier of the placement being converted
        mode: Placement mode to record ("fixed" or "proportional")

    Returns:
        PlacementFootprint in centimeters
    """
    ratio = check_ratio(px_per_cm)
    return PlacementFootprint(
        id=footprint_id,
        x_cm=px_to_cm(rect.x, ratio),
        y_cm=px_to_cm(rect.y, ratio),
        width_cm=px_to_cm(rect.width, ratio),
        height_cm=px_to_cm(rect.height, ratio),
        mode=mode,
    )


def distance_px(p0: MeasurementPoint, p1: MeasurementPoint) -> float:
    """Euclidean distance between two points in pixels."""
    return math.sqrt((p1.x - p0.x) ** 2 + (p1.y - p0.y) ** 2)


def canvas_size_cm(canvas: CanvasSize, px_per_cm: float) -> tuple[float, float]:
    """Return the (width, height) of the canvas in centimeters."""
    return px_to_cm(canvas.width, px_per_cm), px_to_cm(canvas.height, px_per_cm)


def is_valid_calibration(ratio: CalibrationRatio) -> bool:
    """True when the ratio can be used for conversions."""
    return ratio.is_calibrated and ratio.px_per_cm > 0


def format_measurement(value: float, unit: Literal["px", "cm"], decimals: int = 1) -> str:
    """Format a measurement for display, e.g. ``12.3 cm``."""
    return f"{value:.{decimals}f} {unit}"


def cm_to_pdf_coords(x_cm: float, y_cm: float, page_height_cm: float) -> tuple[float, float]:
    """Convert top-left cm coordinates to ReportLab bottom-left points.

    Args:
        x_cm: X coordinate in centimeters from top-left
        y_cm: Y coordinate in centimeters from top-left
        page_height_cm: Total page height in centimeters

    Returns:
        Tuple of (x_pt, y_pt) in ReportLab points (1pt = 1/72 inch)

    Note:
        ReportLab uses bottom-left origin, so Y axis is flipped.
    """
    x_pt = x_cm * POINTS_PER_CM
    y_pt = (page_height_cm - y_cm) * POINTS_PER_CM  # flip Y axis
    return x_pt, y_pt
