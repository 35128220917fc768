"""Schema validation using Pydantic models.

This module defines:
- Pydantic models for calibration, placement, size table and preset data
- Derived overlay geometry models (grid lines, ruler marks)
- JSON loading helpers used at the collaborator boundary
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PlacementMode = Literal["fixed", "proportional"]
ViewName = Literal["front", "back", "sleeveL", "sleeveR"]
CalibrationSource = Literal["manual", "known"]

ModelT = TypeVar("ModelT", bound=BaseModel)


class CalibrationRatio(BaseModel):
    """Pixel-per-centimeter ratio for one subject/view."""

    model_config = ConfigDict(frozen=True)

    px_per_cm: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Pixels per centimeter")
    is_calibrated: bool = Field(default=False, description="Whether px_per_cm is meaningful")
    calibrated_at: datetime | None = Field(default=None, description="When the ratio was committed")
    subject_id: str | None = Field(default=None, description="Product/subject the ratio belongs to")
    view_id: str | None = Field(default=None, description="View of the subject (front, back, ...)")
    source: CalibrationSource = Field(default="manual", description="manual | known")

    @model_validator(mode="after")
    def check_positive_when_calibrated(self) -> "CalibrationRatio":
        """A calibrated ratio must carry a strictly positive px_per_cm."""
        if self.is_calibrated and self.px_per_cm <= 0:
            raise ValueError(f"Calibrated ratio requires px_per_cm > 0, got {self.px_per_cm}")
        return self

    @classmethod
    def uncalibrated(cls, subject_id: str | None = None, view_id: str | None = None) -> "CalibrationRatio":
        """Empty ratio for a subject/view that has not been calibrated."""
        return cls(px_per_cm=0.0, is_calibrated=False, subject_id=subject_id, view_id=view_id)

    def belongs_to(self, subject_id: str | None, view_id: str | None) -> bool:
        return self.subject_id == subject_id and self.view_id == view_id


class MeasurementPoint(BaseModel):
    """Pointer position on the rendering surface (pixels)."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class CanvasSize(BaseModel):
    """Rendering surface dimensions in pixels."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0, allow_inf_nan=False, description="Canvas width in pixels")
    height: float = Field(gt=0, allow_inf_nan=False, description="Canvas height in pixels")


class PixelRect(BaseModel):
    """Placement rectangle in pixel space (top-left origin)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class PlacementFootprint(BaseModel):
    """Position and size of an artwork placement in centimeters."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Placement identifier, never changed by edits")
    x_cm: float = Field(allow_inf_nan=False, description="X from the view's top-left (cm)")
    y_cm: float = Field(allow_inf_nan=False, description="Y from the view's top-left (cm)")
    width_cm: float = Field(ge=0, allow_inf_nan=False, description="Width in centimeters")
    height_cm: float = Field(ge=0, allow_inf_nan=False, description="Height in centimeters")
    rotation_deg: float | None = Field(default=None, description="Rotation in degrees")
    opacity_pct: float | None = Field(default=None, ge=0, le=100, description="Opacity 0-100")
    mode: PlacementMode = Field(default="fixed", description="fixed | proportional")


class SizeEntry(BaseModel):
    """One row of a garment size table."""

    model_config = ConfigDict(frozen=True)

    size_label: str
    chest_width_cm: float = Field(allow_inf_nan=False, description="Chest width in centimeters")
    body_length_cm: float | None = None
    sleeve_length_cm: float | None = None


class SizeTable(BaseModel):
    """Ordered size table keyed by label, with the size artwork was authored at."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    base_size: str = Field(description="Size label footprints are authored against")
    sizes: list[SizeEntry]

    @field_validator("sizes")
    @classmethod
    def check_unique_labels(cls, v: list[SizeEntry]) -> list[SizeEntry]:
        labels = [entry.size_label for entry in v]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Duplicate size labels: {', '.join(duplicates)}")
        return v

    def get(self, size_label: str) -> SizeEntry | None:
        for entry in self.sizes:
            if entry.size_label == size_label:
                return entry
        return None

    @property
    def labels(self) -> list[str]:
        return [entry.size_label for entry in self.sizes]


class PlacementPreset(BaseModel):
    """Named placement template in centimeter space."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    view: ViewName
    x_cm: float = Field(allow_inf_nan=False)
    y_cm: float = Field(allow_inf_nan=False)
    width_cm: float = Field(gt=0, allow_inf_nan=False)
    height_cm: float = Field(gt=0, allow_inf_nan=False)
    mode: PlacementMode = "fixed"
    description: str = ""

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Preset names are stored trimmed and must not be blank."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Preset name must not be blank")
        return stripped


class ReferenceImage(BaseModel):
    """Reference photograph of a subject view, as supplied by product data."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    view_id: str
    image_path: str | None = None
    px_per_cm: float | None = Field(default=None, description="Known ratio from prior calibration")


class GridGeometry(BaseModel):
    """Grid line pixel offsets, ascending."""

    vertical: list[float] = Field(default_factory=list)
    horizontal: list[float] = Field(default_factory=list)


class RulerMarks(BaseModel):
    """Ruler tick pixel offsets along one axis; major and minor are disjoint."""

    major: list[float] = Field(default_factory=list)
    minor: list[float] = Field(default_factory=list)


class RulerGeometry(BaseModel):
    """Ruler ticks for both canvas axes."""

    horizontal: RulerMarks = Field(default_factory=RulerMarks)
    vertical: RulerMarks = Field(default_factory=RulerMarks)


def load_model(path: str | Path, model: type[ModelT], label: str = "JSON") -> ModelT:
    """Load and validate a JSON file into a Pydantic model.

    Args:
        path: Path to JSON file
        model: Model class to validate against
        label: Human readable name used in error messages

    Returns:
        Validated model instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        pydantic.ValidationError: If the content doesn't match the schema
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    return model.model_validate(json.loads(path_obj.read_text()))


def load_model_list(path: str | Path, model: type[ModelT], label: str = "JSON") -> list[ModelT]:
    """Load a JSON array of objects, validating each item."""
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"{label} not found: {path}")
    data = json.loads(path_obj.read_text())
    if not isinstance(data, list):
        raise ValueError(f"{label} must contain a JSON array: {path}")
    return [model.model_validate(item) for item in data]
