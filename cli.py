"""Command-line interface for the garment mockup coordinate engine.

Usage:
    # Calibrate from two clicked points and the known real length
    python cli.py calibrate 100 300 340 300 --cm 42 --subject tshirt --view front -o ratio.json

    # Overlay geometry for a 300x400 canvas
    python cli.py grid ratio.json --width 300 --height 400
    python cli.py rulers ratio.json --width 300 --height 400

    # Rescale a placement for another garment size
    python cli.py scale placement.json --chart tshirt_basic --size XL

    # Presets
    python cli.py presets --view front
    python cli.py apply-preset placement.json ratio.json "Left Chest"

    # Handoff
    python cli.py preview front.jpg ratio.json placements.json -o preview.png
    python cli.py export placements.json -o placements.pdf --paper-type A3
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import BaseModel

from mockup_core.calibration import CalibrationFlow
from mockup_core.config import DEFAULT_GRID_SPACING_CM, PAPER_TYPES, SAMPLE_SIZE_CHARTS, VIEWS
from mockup_core.errors import MockupEngineError
from mockup_core.overlay import generate_grid_lines, generate_rulers
from mockup_core.presets import (
    BuiltinPresetProvider,
    ChainedPresetProvider,
    JsonPresetProvider,
    PresetProvider,
)
from mockup_core.presets import apply_preset as apply_preset_to_footprint
from mockup_core.rendering import export_placement_sheet, render_overlay_preview
from mockup_core.scaling import rescale_for_size, size_scale_factor
from mockup_core.validation import (
    CalibrationRatio,
    CanvasSize,
    PlacementFootprint,
    SizeTable,
    load_model,
    load_model_list,
)

# Configure root logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

# Conditions reported to the user instead of a traceback
USER_ERRORS = (MockupEngineError, FileNotFoundError, KeyError, ValueError)


def emit(model: BaseModel, output: str | None) -> None:
    """Print a model as JSON, and save it when an output path is given."""
    text = model.model_dump_json(indent=2)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text)
        logger.info(f"Saved {output_path}")
    click.echo(text)


def build_preset_provider(custom_path: str | None) -> PresetProvider:
    builtin = BuiltinPresetProvider()
    if custom_path is None:
        return builtin
    return ChainedPresetProvider(builtin, JsonPresetProvider(custom_path))


def load_size_table(table_path: str | None, chart: str | None) -> SizeTable:
    if table_path:
        return load_model(table_path, SizeTable, label="Size table")
    if chart:
        if chart not in SAMPLE_SIZE_CHARTS:
            raise KeyError(f"Unknown size chart: {chart}")
        return SizeTable.model_validate(SAMPLE_SIZE_CHARTS[chart])
    raise click.UsageError("Provide --table or --chart")


@click.group()
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write DEBUG logs to this file")
def cli(log_file: str | None) -> None:
    """Garment Mockup - Calibration & Placement Coordinate Engine."""
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root = logging.getLogger()
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)


@cli.command()
@click.argument("x0", type=float)
@click.argument("y0", type=float)
@click.argument("x1", type=float)
@click.argument("y1", type=float)
@click.option("--cm", "cm_real", required=True, help="Known real length between the points (cm)")
@click.option("--subject", "subject_id", default=None, help="Subject/product identifier")
@click.option("--view", "view_id", default=None, type=click.Choice(VIEWS), help="Garment view")
@click.option("-o", "--output", default=None, help="Save the ratio JSON here")
def calibrate(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    cm_real: str,
    subject_id: str | None,
    view_id: str | None,
    output: str | None,
) -> None:
    """Calibrate px/cm from two points (x0 y0 x1 y1) and a known length."""
    flow = CalibrationFlow()
    try:
        flow.start()
        flow.click(x0, y0)
        flow.click(x1, y1)
        flow.enter_cm(cm_real)
        px_measured = flow.px_measured
        ratio = flow.confirm(subject_id, view_id)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ Measured {px_measured:.2f} px → {ratio.px_per_cm:.4f} px/cm", err=True)
    emit(ratio, output)


@cli.command()
@click.argument("ratio_path", type=click.Path(exists=True))
@click.option("--width", required=True, type=float, help="Canvas width (px)")
@click.option("--height", required=True, type=float, help="Canvas height (px)")
@click.option("--spacing", default=DEFAULT_GRID_SPACING_CM, type=float, help="Grid spacing (cm)")
def grid(ratio_path: str, width: float, height: float, spacing: float) -> None:
    """Print grid line pixel offsets for a canvas."""
    try:
        ratio = load_model(ratio_path, CalibrationRatio, label="Calibration")
        geometry = generate_grid_lines(CanvasSize(width=width, height=height), ratio, spacing)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    if not ratio.is_calibrated:
        click.echo("⚠ Not calibrated - no grid", err=True)
    emit(geometry, None)


@cli.command()
@click.argument("ratio_path", type=click.Path(exists=True))
@click.option("--width", required=True, type=float, help="Canvas width (px)")
@click.option("--height", required=True, type=float, help="Canvas height (px)")
def rulers(ratio_path: str, width: float, height: float) -> None:
    """Print ruler tick pixel offsets for both canvas axes."""
    try:
        ratio = load_model(ratio_path, CalibrationRatio, label="Calibration")
        geometry = generate_rulers(CanvasSize(width=width, height=height), ratio)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    if not ratio.is_calibrated:
        click.echo("⚠ Not calibrated - no rulers", err=True)
    emit(geometry, None)


@cli.command()
@click.argument("footprint_path", type=click.Path(exists=True))
@click.option("--size", "target_size", required=True, help="Target size label")
@click.option("--table", "table_path", default=None, type=click.Path(exists=True), help="Size table JSON")
@click.option("--chart", default=None, type=click.Choice(sorted(SAMPLE_SIZE_CHARTS)), help="Built-in sample chart")
@click.option("-o", "--output", default=None, help="Save the rescaled placement here")
def scale(
    footprint_path: str,
    target_size: str,
    table_path: str | None,
    chart: str | None,
    output: str | None,
) -> None:
    """Rescale a placement authored at the base size to another size."""
    try:
        footprint = load_model(footprint_path, PlacementFootprint, label="Placement")
        table = load_size_table(table_path, chart)
        factor = size_scale_factor(table, target_size)
        scaled = rescale_for_size(footprint, table, target_size)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ {table.base_size} → {target_size} (×{factor:.4f}, {footprint.mode})", err=True)
    emit(scaled, output)


@cli.command()
@click.option("--view", default=None, type=click.Choice(VIEWS), help="Only presets for this view")
@click.option("--custom", "custom_path", default=None, type=click.Path(exists=True), help="Custom presets JSON")
def presets(view: str | None, custom_path: str | None) -> None:
    """List available placement presets."""
    try:
        provider = build_preset_provider(custom_path)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    for preset in provider.list_presets(view):
        click.echo(
            f"{preset.name} [{preset.view}] "
            f"pos {preset.x_cm}×{preset.y_cm} cm, size {preset.width_cm}×{preset.height_cm} cm, {preset.mode}"
        )


@cli.command("apply-preset")
@click.argument("footprint_path", type=click.Path(exists=True))
@click.argument("ratio_path", type=click.Path(exists=True))
@click.argument("preset_name")
@click.option("--custom", "custom_path", default=None, type=click.Path(exists=True), help="Custom presets JSON")
@click.option("-o", "--output", default=None, help="Save the updated placement here")
def apply_preset(
    footprint_path: str,
    ratio_path: str,
    preset_name: str,
    custom_path: str | None,
    output: str | None,
) -> None:
    """Apply a named preset to a placement on a calibrated subject."""
    try:
        footprint = load_model(footprint_path, PlacementFootprint, label="Placement")
        ratio = load_model(ratio_path, CalibrationRatio, label="Calibration")
        preset = build_preset_provider(custom_path).get(preset_name)
        if preset is None:
            raise KeyError(f"Unknown preset: {preset_name}")
        updated = apply_preset_to_footprint(footprint, preset, ratio)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ Applied preset '{preset.name}' to {updated.id}", err=True)
    emit(updated, output)


@cli.command()
@click.argument("image_path", type=click.Path(exists=True))
@click.argument("ratio_path", type=click.Path(exists=True))
@click.argument("placements_path", required=False, type=click.Path(exists=True))
@click.option("-o", "--output", required=True, help="Output PNG path")
@click.option("--spacing", default=DEFAULT_GRID_SPACING_CM, type=float, help="Grid spacing (cm)")
def preview(
    image_path: str,
    ratio_path: str,
    placements_path: str | None,
    output: str,
    spacing: float,
) -> None:
    """Draw grid, rulers and placements over a reference photo."""
    try:
        ratio = load_model(ratio_path, CalibrationRatio, label="Calibration")
        footprints = (
            load_model_list(placements_path, PlacementFootprint, label="Placements")
            if placements_path
            else []
        )
        render_overlay_preview(image_path, ratio, footprints, output, spacing_cm=spacing)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"📁 Preview saved to: {output}")


@cli.command()
@click.argument("placements_path", type=click.Path(exists=True))
@click.option("-o", "--output", required=True, help="Output PDF path")
@click.option("--paper-type", default="A3", type=click.Choice(sorted(PAPER_TYPES)), help="Paper size")
def export(placements_path: str, output: str, paper_type: str) -> None:
    """Export placements as a true-size PDF sheet for print production."""
    try:
        footprints = load_model_list(placements_path, PlacementFootprint, label="Placements")
        export_placement_sheet(footprints, output, paper_type=paper_type)
    except USER_ERRORS as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✓ Exported {len(footprints)} placements")
    click.echo(f"📁 PDF saved to: {output}")


if __name__ == "__main__":
    cli()
