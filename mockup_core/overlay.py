"""Grid and ruler geometry derived from a calibration ratio.

Everything here is pure: results are recomputed whenever the canvas size or
the ratio changes and are never persisted. An uncalibrated ratio yields empty
geometry and the rendering layer must not draw overlays in that case.
"""

import bisect
import math

from mockup_core.config import (
    DEFAULT_GRID_SPACING_CM,
    MAJOR_MARK_INTERVAL_CM,
    MARK_TOLERANCE_PX,
    MAX_OVERLAY_MARKS,
    MINOR_MARK_INTERVAL_CM,
)
from mockup_core.coordinates import cm_to_px, is_valid_calibration
from mockup_core.validation import (
    CalibrationRatio,
    CanvasSize,
    GridGeometry,
    MeasurementPoint,
    PlacementFootprint,
    RulerGeometry,
    RulerMarks,
)


def _offsets(limit_px: float, interval_cm: float, px_per_cm: float) -> list[float]:
    """Pixel offsets of 0, interval, 2*interval, ... up to limit_px inclusive.

    Each offset is computed by multiplication rather than accumulation so long
    sequences do not drift.

    Raises:
        ValueError: If the interval is not positive, or the axis would need more
            than MAX_OVERLAY_MARKS offsets
    """
    if interval_cm <= 0 or math.isnan(interval_cm) or math.isinf(interval_cm):
        raise ValueError(f"Interval must be a positive number of centimeters, got {interval_cm}")

    step_px = cm_to_px(interval_cm, px_per_cm)
    intervals = (limit_px + MARK_TOLERANCE_PX) / step_px if step_px > 0 else math.inf
    if not math.isfinite(intervals) or math.floor(intervals) + 1 > MAX_OVERLAY_MARKS:
        raise ValueError(
            f"{interval_cm} cm at {px_per_cm} px/cm is too fine for a {limit_px} px axis "
            f"(more than {MAX_OVERLAY_MARKS} marks)"
        )

    offsets: list[float] = []
    for k in range(math.floor(intervals) + 2):
        offset = cm_to_px(k * interval_cm, px_per_cm)
        if offset > limit_px + MARK_TOLERANCE_PX:
            break
        offsets.append(offset)
    return offsets


def generate_grid_lines(
    canvas: CanvasSize,
    ratio: CalibrationRatio,
    spacing_cm: float = DEFAULT_GRID_SPACING_CM,
) -> GridGeometry:
    """Generate grid line positions for the canvas.

    Args:
        canvas: Canvas dimensions in pixels
        ratio: Current calibration
        spacing_cm: Distance between grid lines in centimeters

    Returns:
        GridGeometry with ascending vertical (x) and horizontal (y) offsets,
        both empty when the ratio is not calibrated

    Raises:
        ValueError: If spacing_cm is not positive, or so fine that an axis would
            exceed MAX_OVERLAY_MARKS lines
    """
    if not is_valid_calibration(ratio):
        return GridGeometry()

    return GridGeometry(
        vertical=_offsets(canvas.width, spacing_cm, ratio.px_per_cm),
        horizontal=_offsets(canvas.height, spacing_cm, ratio.px_per_cm),
    )


def generate_ruler_marks(
    length_px: float,
    ratio: CalibrationRatio,
    major_interval_cm: float = MAJOR_MARK_INTERVAL_CM,
    minor_interval_cm: float = MINOR_MARK_INTERVAL_CM,
) -> RulerMarks:
    """Generate ruler tick positions along one axis.

    Args:
        length_px: Ruler length in pixels (the canvas dimension it runs along)
        ratio: Current calibration
        major_interval_cm: Distance between major ticks
        minor_interval_cm: Distance between minor ticks

    Returns:
        RulerMarks where no minor offset coincides with a major offset
    """
    if not is_valid_calibration(ratio):
        return RulerMarks()

    major = _offsets(length_px, major_interval_cm, ratio.px_per_cm)
    minor: list[float] = []
    for offset in _offsets(length_px, minor_interval_cm, ratio.px_per_cm):
        i = bisect.bisect_left(major, offset)
        neighbours = major[max(i - 1, 0) : i + 1]
        if any(abs(offset - m) <= MARK_TOLERANCE_PX for m in neighbours):
            continue
        minor.append(offset)

    return RulerMarks(major=major, minor=minor)


def generate_rulers(canvas: CanvasSize, ratio: CalibrationRatio) -> RulerGeometry:
    """Rulers for both axes: horizontal along the width, vertical along the height."""
    return RulerGeometry(
        horizontal=generate_ruler_marks(canvas.width, ratio),
        vertical=generate_ruler_marks(canvas.height, ratio),
    )


def snap_to_grid(position: float, grid_size: float, snap_enabled: bool) -> float:
    """Snap a coordinate to the nearest grid line (halves round up)."""
    if not snap_enabled:
        return position
    if grid_size <= 0:
        raise ValueError(f"Grid size must be positive, got {grid_size}")
    return math.floor(position / grid_size + 0.5) * grid_size


def snap_point_to_grid(point: MeasurementPoint, grid_size: float, snap_enabled: bool) -> MeasurementPoint:
    return MeasurementPoint(
        x=snap_to_grid(point.x, grid_size, snap_enabled),
        y=snap_to_grid(point.y, grid_size, snap_enabled),
    )


def snap_footprint_cm(
    footprint: PlacementFootprint,
    spacing_cm: float = DEFAULT_GRID_SPACING_CM,
    snap_enabled: bool = True,
) -> PlacementFootprint:
    """Snap a footprint's position to the centimeter grid; size is untouched."""
    return footprint.model_copy(
        update={
            "x_cm": snap_to_grid(footprint.x_cm, spacing_cm, snap_enabled),
            "y_cm": snap_to_grid(footprint.y_cm, spacing_cm, snap_enabled),
        }
    )
