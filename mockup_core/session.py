"""Design editing session.

The session owns the calibration and placement footprints for one open design
and exposes them to the rendering layer through explicit read/update calls.
Footprints are kept in two versions: as authored at the size table's base size,
and as displayed at the currently selected size. Size switches always rescale
from the base version.
"""

import logging
from collections.abc import Callable

from mockup_core.calibration import CalibrationFlow, auto_calibrate
from mockup_core.config import DEFAULT_GRID_SPACING_CM
from mockup_core.coordinates import canvas_size_cm, footprint_cm_to_px, footprint_px_to_cm
from mockup_core.errors import InvalidSizeTable
from mockup_core.overlay import generate_grid_lines, generate_rulers
from mockup_core.presets import BuiltinPresetProvider, PresetProvider, apply_preset
from mockup_core.scaling import scale_proportional_placement, size_scale_factor
from mockup_core.validation import (
    CalibrationRatio,
    CanvasSize,
    GridGeometry,
    PixelRect,
    PlacementFootprint,
    ReferenceImage,
    RulerGeometry,
    SizeTable,
)

logger = logging.getLogger(__name__)


class EditingSession:
    """Calibration and placement state for a single design.

    Args:
        subject_id: Product/subject being edited
        view_id: View of the subject shown on the canvas
        image_path: Reference image the canvas currently shows (optional)
        size_table: Size table for proportional scaling (optional)
        preset_provider: Source of placement presets (built-ins by default)
        on_calibration_change: Notified whenever the committed ratio changes,
            e.g. to persist calibration per view
    """

    def __init__(
        self,
        subject_id: str,
        view_id: str,
        image_path: str | None = None,
        size_table: SizeTable | None = None,
        preset_provider: PresetProvider | None = None,
        on_calibration_change: Callable[[CalibrationRatio], None] | None = None,
    ) -> None:
        self.subject_id = subject_id
        self.view_id = view_id
        self.size_table = size_table
        self.preset_provider = preset_provider or BuiltinPresetProvider()
        self.selected_size = size_table.base_size if size_table else None
        self.image_path = image_path
        self._on_calibration_change = on_calibration_change
        self._calibration = CalibrationRatio.uncalibrated(subject_id, view_id)
        self._base_footprints: dict[str, PlacementFootprint] = {}
        self._footprints: dict[str, PlacementFootprint] = {}
        self.calibration_flow = CalibrationFlow(on_complete=self.set_calibration)

    # Calibration

    @property
    def calibration(self) -> CalibrationRatio:
        return self._calibration

    def set_calibration(self, ratio: CalibrationRatio) -> None:
        """Replace the committed ratio (interactive result or external ratio)."""
        self._calibration = ratio
        if self._on_calibration_change is not None:
            self._on_calibration_change(ratio)

    def open_calibration(self) -> None:
        """Start a fresh two-point measurement."""
        self.calibration_flow.reset()
        self.calibration_flow.start()

    def confirm_calibration(self) -> CalibrationRatio:
        """Confirm the in-progress measurement for the current subject/view.

        The flow is closed (back to its instruction step) once committed.

        Raises:
            CalibrationIncomplete: If the measurement cannot be committed
        """
        ratio = self.calibration_flow.confirm(self.subject_id, self.view_id)
        self.calibration_flow.reset()
        return ratio

    def select_reference(self, reference: ReferenceImage) -> CalibrationRatio:
        """Switch to another reference image (photo, subject and/or view).

        Any in-progress measurement is discarded. The calibration is kept only
        when it belongs to the same subject/view and the image itself is
        unchanged; otherwise it is replaced by the image's known ratio, or
        reset to uncalibrated.
        """
        if self.calibration_flow.step != "instruction":
            logger.info(f"Discarding in-progress calibration ({self.calibration_flow.step})")
        self.calibration_flow.reset()

        image_changed = reference.image_path != self.image_path
        self.subject_id = reference.subject_id
        self.view_id = reference.view_id
        self.image_path = reference.image_path

        current = self._calibration
        if image_changed or not current.belongs_to(reference.subject_id, reference.view_id):
            current = CalibrationRatio.uncalibrated(reference.subject_id, reference.view_id)

        known = auto_calibrate(current, reference)
        ratio = known if known is not None else current
        if ratio != self._calibration:
            self.set_calibration(ratio)
        return ratio

    # Footprints

    @property
    def footprints(self) -> list[PlacementFootprint]:
        return list(self._footprints.values())

    def footprint(self, footprint_id: str) -> PlacementFootprint:
        try:
            return self._footprints[footprint_id]
        except KeyError:
            raise KeyError(f"Unknown placement: {footprint_id}") from None

    def _current_factor(self) -> float:
        if self.size_table is None or self.selected_size in (None, self.size_table.base_size):
            return 1.0
        return size_scale_factor(self.size_table, self.selected_size)

    def add_footprint(self, footprint: PlacementFootprint) -> None:
        """Add or replace a footprint given at the currently selected size."""
        factor = self._current_factor()
        self._base_footprints[footprint.id] = scale_proportional_placement(footprint, 1 / factor)
        self._footprints[footprint.id] = footprint

    def update_footprint(self, footprint: PlacementFootprint) -> None:
        """Record a user edit made at the currently selected size."""
        self.footprint(footprint.id)
        self.add_footprint(footprint)

    def remove_footprint(self, footprint_id: str) -> None:
        self.footprint(footprint_id)
        del self._footprints[footprint_id]
        del self._base_footprints[footprint_id]

    def select_size(self, size_label: str) -> float:
        """Switch garment size and rescale proportional footprints.

        Returns:
            Scale factor relative to the base size

        Raises:
            InvalidSizeTable: If there is no usable size table entry. All
                footprints keep their prior values.
        """
        if self.size_table is None:
            raise InvalidSizeTable("No size table available for this subject")

        factor = size_scale_factor(self.size_table, size_label)
        self._footprints = {
            footprint_id: scale_proportional_placement(base, factor)
            for footprint_id, base in self._base_footprints.items()
        }
        logger.info(f"Size {self.size_table.base_size} -> {size_label} (x{factor:.2f})")
        self.selected_size = size_label
        return factor

    def apply_preset(self, footprint_id: str, preset_name: str) -> PlacementFootprint:
        """Apply a named preset to a footprint.

        Raises:
            KeyError: If the placement or preset doesn't exist
            PresetRequiresCalibration: If the subject is not calibrated
        """
        target = self.footprint(footprint_id)
        preset = self.preset_provider.get(preset_name)
        if preset is None:
            raise KeyError(f"Unknown preset: {preset_name}")

        updated = apply_preset(target, preset, self._calibration)
        self.update_footprint(updated)
        return updated

    # Rendering helpers

    def to_pixels(self, footprint_id: str) -> PixelRect:
        return footprint_cm_to_px(self.footprint(footprint_id), self._calibration.px_per_cm)

    def update_from_pixels(self, footprint_id: str, rect: PixelRect) -> PlacementFootprint:
        """Store a drag/resize on the canvas back in centimeters.

        Raises:
            InvalidRatio: If the session is not calibrated
        """
        current = self.footprint(footprint_id)
        converted = footprint_px_to_cm(rect, self._calibration.px_per_cm, footprint_id, current.mode)
        updated = current.model_copy(
            update={
                "x_cm": converted.x_cm,
                "y_cm": converted.y_cm,
                "width_cm": converted.width_cm,
                "height_cm": converted.height_cm,
            }
        )
        self.update_footprint(updated)
        return updated

    def grid(self, canvas: CanvasSize, spacing_cm: float = DEFAULT_GRID_SPACING_CM) -> GridGeometry:
        return generate_grid_lines(canvas, self._calibration, spacing_cm)

    def rulers(self, canvas: CanvasSize) -> RulerGeometry:
        return generate_rulers(canvas, self._calibration)

    def canvas_size_cm(self, canvas: CanvasSize) -> tuple[float, float] | None:
        """Canvas size in centimeters, or None while uncalibrated."""
        if not self._calibration.is_calibrated:
            return None
        return canvas_size_cm(canvas, self._calibration.px_per_cm)
