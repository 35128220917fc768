"""Placement presets and their application to footprints.

This module provides:
- Abstract PresetProvider interface for read-only preset sources
- BuiltinPresetProvider backed by config.PLACEMENT_PRESETS
- JsonPresetProvider for user-defined presets stored by a collaborator
- ChainedPresetProvider combining several sources
- apply_preset, gated on calibration
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from mockup_core.config import PLACEMENT_PRESETS
from mockup_core.coordinates import is_valid_calibration
from mockup_core.errors import PresetRequiresCalibration
from mockup_core.validation import (
    CalibrationRatio,
    PlacementFootprint,
    PlacementPreset,
    load_model_list,
)

logger = logging.getLogger(__name__)


class PresetProvider(ABC):
    """Abstract base class for preset sources."""

    @abstractmethod
    def list_presets(self, view: str | None = None) -> list[PlacementPreset]:
        """List available presets.

        Args:
            view: Only return presets for this view when given

        Returns:
            Presets in display order
        """
        raise NotImplementedError

    def get(self, name: str) -> PlacementPreset | None:
        """Look up a preset by name (first match wins)."""
        for preset in self.list_presets():
            if preset.name == name:
                return preset
        return None


class StaticPresetProvider(PresetProvider):
    """Provider over a fixed sequence of presets."""

    def __init__(self, presets: list[PlacementPreset]) -> None:
        self._presets = list(presets)

    def list_presets(self, view: str | None = None) -> list[PlacementPreset]:
        if view is None:
            return list(self._presets)
        return [p for p in self._presets if p.view == view]


class BuiltinPresetProvider(StaticPresetProvider):
    """Built-in presets shipped with the engine."""

    def __init__(self) -> None:
        super().__init__([PlacementPreset(**data) for data in PLACEMENT_PRESETS])


class JsonPresetProvider(StaticPresetProvider):
    """User-defined presets loaded from a JSON array file.

    Storage, editing and deletion of the file belong to the caller; this
    provider only reads it.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(load_model_list(self.path, PlacementPreset, label="Preset file"))
        logger.info(f"Loaded {len(self._presets)} custom presets from {self.path}")


class ChainedPresetProvider(PresetProvider):
    """Concatenates providers; earlier providers win on name lookups."""

    def __init__(self, *providers: PresetProvider) -> None:
        self.providers = providers

    def list_presets(self, view: str | None = None) -> list[PlacementPreset]:
        presets: list[PlacementPreset] = []
        for provider in self.providers:
            presets.extend(provider.list_presets(view))
        return presets


def apply_preset(
    footprint: PlacementFootprint,
    preset: PlacementPreset,
    ratio: CalibrationRatio,
) -> PlacementFootprint:
    """Overwrite a footprint's geometry and mode with a preset's values.

    Args:
        footprint: Target placement (its id, rotation and opacity are kept)
        preset: Preset to apply
        ratio: Calibration of the subject the footprint is placed on

    Returns:
        New footprint with x_cm, y_cm, width_cm, height_cm and mode from the preset

    Raises:
        PresetRequiresCalibration: If the subject is not calibrated. Nothing
            is changed in that case.
    """
    if not is_valid_calibration(ratio):
        raise PresetRequiresCalibration(preset.name)

    logger.info(f"Applied preset '{preset.name}' to placement {footprint.id}")
    return footprint.model_copy(
        update={
            "x_cm": preset.x_cm,
            "y_cm": preset.y_cm,
            "width_cm": preset.width_cm,
            "height_cm": preset.height_cm,
            "mode": preset.mode,
        }
    )
