"""Unit tests for mockup_core/coordinates.py."""

import math

import pytest

from mockup_core.config import POINTS_PER_CM, ROUND_TRIP_REL_TOLERANCE
from mockup_core.coordinates import (
    canvas_size_cm,
    cm_to_pdf_coords,
    cm_to_px,
    distance_px,
    footprint_cm_to_px,
    footprint_px_to_cm,
    format_measurement,
    is_valid_calibration,
    px_to_cm,
)
from mockup_core.errors import InvalidRatio
from mockup_core.validation import (
    CalibrationRatio,
    CanvasSize,
    MeasurementPoint,
    PixelRect,
    PlacementFootprint,
)


class TestScalarConversions:
    """Tests for cm_to_px / px_to_cm."""

    def test_cm_to_px(self) -> None:
        """Test 10 cm at 28.35 px/cm."""
        assert cm_to_px(10, 28.35) == pytest.approx(283.5)

    def test_px_to_cm(self) -> None:
        """Test 240 px at 240/42 px/cm is 42 cm."""
        assert px_to_cm(240, 240 / 42) == pytest.approx(42)

    def test_zero_cm(self) -> None:
        """Test conversion of zero centimeters."""
        assert cm_to_px(0, 5.0) == 0.0

    @pytest.mark.parametrize("cm", [0.0, 0.5, 1.0, 9.409, 42.0, 123456.789])
    @pytest.mark.parametrize("ratio", [1e-3, 0.37, 5.714285, 28.35, 1e4])
    def test_roundtrip_conversion(self, cm: float, ratio: float) -> None:
        """Test that cm→px→cm roundtrip preserves value."""
        assert px_to_cm(cm_to_px(cm, ratio), ratio) == pytest.approx(
            cm, rel=ROUND_TRIP_REL_TOLERANCE, abs=1e-12
        )

    @pytest.mark.parametrize("bad_ratio", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_ratio_raises(self, bad_ratio: float) -> None:
        """Test that unusable ratios raise InvalidRatio in both directions."""
        with pytest.raises(InvalidRatio, match="positive finite"):
            cm_to_px(1.0, bad_ratio)
        with pytest.raises(InvalidRatio, match="positive finite"):
            px_to_cm(1.0, bad_ratio)

    def test_invalid_ratio_is_value_error(self) -> None:
        """Test InvalidRatio can be caught as ValueError."""
        with pytest.raises(ValueError):
            px_to_cm(10, 0)


class TestFootprintConversions:
    """Tests for whole-footprint conversions."""

    def test_cm_to_px_applies_same_ratio(self) -> None:
        """Test all four fields are scaled by the same ratio."""
        footprint = PlacementFootprint(id="p1", x_cm=3, y_cm=7.5, width_cm=9, height_cm=7.5)
        rect = footprint_cm_to_px(footprint, 10.0)

        assert rect == PixelRect(x=30, y=75, width=90, height=75)
        assert rect.width / rect.height == pytest.approx(footprint.width_cm / footprint.height_cm)

    def test_px_to_cm_builds_footprint(self) -> None:
        """Test pixel rectangle converts back to a footprint with id and mode."""
        rect = PixelRect(x=56.7, y=28.35, width=283.5, height=141.75)
        footprint = footprint_px_to_cm(rect, 28.35, "art-1", mode="proportional")

        assert footprint.id == "art-1"
        assert footprint.mode == "proportional"
        assert footprint.x_cm == pytest.approx(2)
        assert footprint.y_cm == pytest.approx(1)
        assert footprint.width_cm == pytest.approx(10)
        assert footprint.height_cm == pytest.approx(5)

    def test_px_to_cm_defaults_to_fixed(self) -> None:
        """Test footprints converted from pixels default to fixed mode."""
        rect = PixelRect(x=0, y=0, width=10, height=10)
        assert footprint_px_to_cm(rect, 5, "a").mode == "fixed"

    def test_footprint_conversion_rejects_zero_ratio(self) -> None:
        """Test uncalibrated ratio cannot be used for footprints."""
        footprint = PlacementFootprint(id="p1", x_cm=0, y_cm=0, width_cm=1, height_cm=1)
        with pytest.raises(InvalidRatio):
            footprint_cm_to_px(footprint, 0)


class TestMeasurementHelpers:
    """Tests for distance, canvas size and formatting helpers."""

    def test_distance_horizontal(self) -> None:
        """Test distance between (100, 300) and (340, 300)."""
        assert distance_px(MeasurementPoint(x=100, y=300), MeasurementPoint(x=340, y=300)) == 240

    def test_distance_diagonal(self) -> None:
        """Test 3-4-5 triangle."""
        assert distance_px(MeasurementPoint(x=0, y=0), MeasurementPoint(x=3, y=4)) == pytest.approx(5)

    def test_canvas_size_cm(self) -> None:
        """Test canvas size conversion to centimeters."""
        width_cm, height_cm = canvas_size_cm(CanvasSize(width=800, height=600), 20)
        assert width_cm == pytest.approx(40)
        assert height_cm == pytest.approx(30)

    def test_format_measurement(self) -> None:
        """Test display formatting with default and custom precision."""
        assert format_measurement(12.345, "cm") == "12.3 cm"
        assert format_measurement(5.71428, "px", 2) == "5.71 px"

    def test_is_valid_calibration(self) -> None:
        """Test only calibrated ratios are valid."""
        assert is_valid_calibration(CalibrationRatio(px_per_cm=5, is_calibrated=True))
        assert not is_valid_calibration(CalibrationRatio.uncalibrated())
        assert not is_valid_calibration(CalibrationRatio(px_per_cm=5, is_calibrated=False))


class TestPdfCoordinates:
    """Tests for top-left cm → ReportLab points."""

    def test_flip_y(self) -> None:
        """Test Y axis is flipped against page height."""
        x_pt, y_pt = cm_to_pdf_coords(1, 2, 42)
        assert x_pt == pytest.approx(POINTS_PER_CM)
        assert y_pt == pytest.approx(40 * POINTS_PER_CM)

    def test_bottom_left_corner(self) -> None:
        """Test that bottom-left maps to (0,0) in PDF coords."""
        assert cm_to_pdf_coords(0, 29.7, 29.7) == pytest.approx((0.0, 0.0))
