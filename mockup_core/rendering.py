"""Rendering handoff for calibrated placements.

This module handles:
- Drawing grid, ruler and placement overlays onto a reference photo (Pillow)
- Generating a true-size placement sheet PDF for print production (ReportLab)
"""

import logging
from pathlib import Path

from PIL import Image, ImageDraw
from reportlab.lib.units import cm as reportlab_cm
from reportlab.pdfgen import canvas

from mockup_core.config import DEFAULT_GRID_SPACING_CM, PAPER_TYPES
from mockup_core.coordinates import cm_to_pdf_coords, footprint_cm_to_px, is_valid_calibration
from mockup_core.errors import InvalidRatio
from mockup_core.overlay import generate_grid_lines, generate_rulers
from mockup_core.validation import CalibrationRatio, CanvasSize, PlacementFootprint

logger = logging.getLogger(__name__)

GRID_COLOR = (200, 200, 200)
RULER_COLOR = (40, 40, 40)
PLACEMENT_COLOR = (220, 30, 30)
MAJOR_TICK_PX = 10
MINOR_TICK_PX = 5


def render_overlay_preview(
    image_path: str,
    ratio: CalibrationRatio,
    footprints: list[PlacementFootprint],
    output_path: str,
    spacing_cm: float = DEFAULT_GRID_SPACING_CM,
) -> None:
    """Draw grid lines, rulers and placement rectangles on a reference image.

    Args:
        image_path: Reference photo of the garment view
        ratio: Calibration of that photo
        footprints: Placements to outline
        output_path: Where to save the PNG preview
        spacing_cm: Grid spacing in centimeters

    Raises:
        FileNotFoundError: If the reference image doesn't exist
        InvalidRatio: If the ratio is not calibrated
    """
    if not Path(image_path).exists():
        raise FileNotFoundError(f"Reference image not found: {image_path}")
    if not is_valid_calibration(ratio):
        raise InvalidRatio(ratio.px_per_cm)

    with Image.open(image_path) as img:
        preview = img.convert("RGB")

    canvas_size = CanvasSize(width=preview.width, height=preview.height)
    grid = generate_grid_lines(canvas_size, ratio, spacing_cm)
    rulers = generate_rulers(canvas_size, ratio)
    draw = ImageDraw.Draw(preview)

    for x in grid.vertical:
        draw.line([(x, 0), (x, preview.height)], fill=GRID_COLOR, width=1)
    for y in grid.horizontal:
        draw.line([(0, y), (preview.width, y)], fill=GRID_COLOR, width=1)

    # Top ruler
    for x in rulers.horizontal.major:
        draw.line([(x, 0), (x, MAJOR_TICK_PX)], fill=RULER_COLOR, width=1)
    for x in rulers.horizontal.minor:
        draw.line([(x, 0), (x, MINOR_TICK_PX)], fill=RULER_COLOR, width=1)

    # Left ruler
    for y in rulers.vertical.major:
        draw.line([(0, y), (MAJOR_TICK_PX, y)], fill=RULER_COLOR, width=1)
    for y in rulers.vertical.minor:
        draw.line([(0, y), (MINOR_TICK_PX, y)], fill=RULER_COLOR, width=1)

    for footprint in footprints:
        rect = footprint_cm_to_px(footprint, ratio.px_per_cm)
        draw.rectangle(
            [(rect.x, rect.y), (rect.x + rect.width, rect.y + rect.height)],
            outline=PLACEMENT_COLOR,
            width=2,
        )
        draw.text((rect.x + 3, rect.y + 3), footprint.id, fill=PLACEMENT_COLOR)

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)
    preview.save(output_path_obj, "PNG")
    logger.info(f"Saved overlay preview with {len(footprints)} placements to {output_path}")


def export_placement_sheet(
    footprints: list[PlacementFootprint],
    output_path: str,
    paper_type: str = "A3",
) -> None:
    """Generate a PDF with one page per placement, drawn at true physical size.

    Args:
        footprints: Placements to export
        output_path: Where to save the generated PDF
        paper_type: Paper type from config.PAPER_TYPES

    Raises:
        KeyError: If paper_type not in PAPER_TYPES
        ValueError: If there is nothing to export or a placement doesn't fit
            the printable area

    Note:
        - Each placement rectangle starts at the printable margin (top-left)
        - Print at ACTUAL SIZE so 1 cm on paper is 1 cm of artwork
    """
    if paper_type not in PAPER_TYPES:
        raise KeyError(f"Unknown paper type: {paper_type}")
    if not footprints:
        raise ValueError("No placements to export")

    paper_config = PAPER_TYPES[paper_type]
    page_width_cm = paper_config["width_mm"] / 10
    page_height_cm = paper_config["height_mm"] / 10
    margin_cm = paper_config["printable_margin_mm"] / 10
    label_space_cm = 1.5

    for footprint in footprints:
        if (
            footprint.width_cm > page_width_cm - 2 * margin_cm
            or footprint.height_cm > page_height_cm - 2 * margin_cm - label_space_cm
        ):
            raise ValueError(
                f"Placement {footprint.id} ({footprint.width_cm:.1f}x{footprint.height_cm:.1f} cm) "
                f"does not fit on {paper_type}"
            )

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)

    c = canvas.Canvas(
        str(output_path),
        pagesize=(page_width_cm * reportlab_cm, page_height_cm * reportlab_cm),
    )

    for footprint in footprints:
        # Label above the rectangle
        c.setFont("Helvetica-Bold", 10)
        label_x, label_y = cm_to_pdf_coords(margin_cm, margin_cm + 0.5, page_height_cm)
        c.drawString(label_x, label_y, footprint.id)
        c.setFont("Helvetica", 8)
        _, detail_y = cm_to_pdf_coords(margin_cm, margin_cm + 1.0, page_height_cm)
        c.drawString(
            label_x,
            detail_y,
            f"{footprint.width_cm:.2f} x {footprint.height_cm:.2f} cm  "
            f"at ({footprint.x_cm:.2f}, {footprint.y_cm:.2f}) cm  [{footprint.mode}]",
        )

        # Rectangle: ReportLab anchors at bottom-left
        top = margin_cm + label_space_cm
        x_pt, y_top_pt = cm_to_pdf_coords(margin_cm, top, page_height_cm)
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(0.5)
        c.rect(
            x_pt,
            y_top_pt - footprint.height_cm * reportlab_cm,
            footprint.width_cm * reportlab_cm,
            footprint.height_cm * reportlab_cm,
            stroke=1,
            fill=0,
        )
        c.showPage()

    c.save()
    logger.info(f"Exported {len(footprints)} placements to {output_path}")
