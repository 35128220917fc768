"""Proportional footprint scaling across garment sizes.

Scale factors are always taken relative to the table's base size, so switching
L → XL → L returns to the footprint authored at L instead of compounding.
"""

import logging
import math

from mockup_core.errors import InvalidSizeTable
from mockup_core.validation import PlacementFootprint, SizeTable

logger = logging.getLogger(__name__)


def scale_factor(base_chest_cm: float, target_chest_cm: float) -> float:
    """Chest width ratio between a target size and the base size.

    Args:
        base_chest_cm: Chest width of the base size (cm)
        target_chest_cm: Chest width of the target size (cm)

    Returns:
        target_chest_cm / base_chest_cm

    Raises:
        InvalidSizeTable: If either chest width is not a positive finite number
    """
    if math.isnan(base_chest_cm) or math.isinf(base_chest_cm) or base_chest_cm <= 0:
        raise InvalidSizeTable(f"Base chest width must be positive, got {base_chest_cm}")
    if math.isnan(target_chest_cm) or math.isinf(target_chest_cm) or target_chest_cm <= 0:
        raise InvalidSizeTable(f"Target chest width must be positive, got {target_chest_cm}")
    return target_chest_cm / base_chest_cm


def scale_proportional_placement(footprint: PlacementFootprint, factor: float) -> PlacementFootprint:
    """Scale a footprint's size by factor when it is in proportional mode.

    Fixed-mode footprints are returned unchanged. Position is never scaled:
    print position stays relative to the reference point, only print size
    follows body size.

    Raises:
        ValueError: If factor is not a positive finite number
    """
    if math.isnan(factor) or math.isinf(factor) or factor <= 0:
        raise ValueError(f"Scale factor must be a positive finite number, got {factor}")
    if footprint.mode != "proportional" or factor == 1:
        return footprint

    return footprint.model_copy(
        update={
            "width_cm": footprint.width_cm * factor,
            "height_cm": footprint.height_cm * factor,
        }
    )


def size_scale_factor(table: SizeTable, target_size: str) -> float:
    """Scale factor from the table's base size to target_size.

    Raises:
        InvalidSizeTable: If the base or target size is missing, or the base
            chest width is not positive
    """
    base = table.get(table.base_size)
    if base is None:
        raise InvalidSizeTable(f"Base size '{table.base_size}' not found in size table")
    target = table.get(target_size)
    if target is None:
        raise InvalidSizeTable(
            f"Size '{target_size}' not found in size table (available: {', '.join(table.labels)})"
        )
    return scale_factor(base.chest_width_cm, target.chest_width_cm)


def rescale_for_size(
    base_footprint: PlacementFootprint,
    table: SizeTable,
    target_size: str,
) -> PlacementFootprint:
    """Footprint for target_size, computed from the footprint authored at the base size.

    Args:
        base_footprint: Footprint as authored at ``table.base_size``
        table: Size table for the garment
        target_size: Size label being switched to

    Returns:
        Rescaled footprint (unchanged for fixed mode)

    Raises:
        InvalidSizeTable: The caller keeps its prior footprint
    """
    factor = size_scale_factor(table, target_size)
    logger.debug(f"Size {table.base_size} -> {target_size}: factor {factor:.4f}")
    return scale_proportional_placement(base_footprint, factor)
