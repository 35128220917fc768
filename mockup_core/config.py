"""Centralized configuration constants for the mockup coordinate engine."""

# Grid and ruler settings
DEFAULT_GRID_SPACING_CM = 1.0  # Grid line spacing on the canvas
MAJOR_MARK_INTERVAL_CM = 1.0  # Ruler major tick every centimeter
MINOR_MARK_INTERVAL_CM = 0.5  # Ruler minor tick every half centimeter
MARK_TOLERANCE_PX = 1e-6  # Offsets closer than this are the same mark
MAX_OVERLAY_MARKS = 10_000  # Upper bound on grid lines or ruler ticks per axis

# Conversion precision
POINTS_PER_CM = 72 / 2.54  # ReportLab points per centimeter
ROUND_TRIP_REL_TOLERANCE = 1e-9  # px → cm → px must agree within this

# Garment views
VIEWS = ("front", "back", "sleeveL", "sleeveR")

# Built-in placement presets (centimeters, top-left origin of the view)
PLACEMENT_PRESETS = [
    {
        "name": "Left Chest",
        "view": "front",
        "x_cm": 3.0,
        "y_cm": 7.5,
        "width_cm": 9.0,
        "height_cm": 7.5,
        "mode": "fixed",
    },
    {
        "name": "Center Chest (A4)",
        "view": "front",
        "x_cm": 10.5,
        "y_cm": 15.0,
        "width_cm": 21.0,
        "height_cm": 29.7,
        "mode": "fixed",
    },
    {
        "name": "Back Center (A3)",
        "view": "back",
        "x_cm": 8.0,
        "y_cm": 12.0,
        "width_cm": 29.7,
        "height_cm": 42.0,
        "mode": "fixed",
    },
    {
        "name": "Sleeve Logo",
        "view": "sleeveL",
        "x_cm": 2.0,
        "y_cm": 6.0,
        "width_cm": 8.0,
        "height_cm": 8.0,
        "mode": "fixed",
    },
]

# Sample size charts (chest width in cm), base size L
SAMPLE_SIZE_CHARTS = {
    "tshirt_basic": {
        "name": "Basic T-Shirt",
        "base_size": "L",
        "sizes": [
            {"size_label": "S", "chest_width_cm": 40},
            {"size_label": "M", "chest_width_cm": 42},
            {"size_label": "L", "chest_width_cm": 44},
            {"size_label": "XL", "chest_width_cm": 46},
            {"size_label": "XXL", "chest_width_cm": 48},
        ],
    },
    "polo_premium": {
        "name": "Premium Polo",
        "base_size": "L",
        "sizes": [
            {"size_label": "S", "chest_width_cm": 42},
            {"size_label": "M", "chest_width_cm": 44},
            {"size_label": "L", "chest_width_cm": 46},
            {"size_label": "XL", "chest_width_cm": 48},
            {"size_label": "XXL", "chest_width_cm": 50},
        ],
    },
}

# Paper types for placement sheet export
PAPER_TYPES = {
    "A4": {
        "width_mm": 210,
        "height_mm": 297,
        "printable_margin_mm": 5,
    },
    "A3": {
        "width_mm": 297,
        "height_mm": 420,
        "printable_margin_mm": 5,
    },
}
