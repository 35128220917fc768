"""Integration tests for overlay preview and placement sheet export."""

import json
from pathlib import Path

import fitz  # type: ignore[import-untyped]  # PyMuPDF
import pytest
from click.testing import CliRunner
from PIL import Image

from cli import cli
from mockup_core.config import POINTS_PER_CM
from mockup_core.errors import InvalidRatio
from mockup_core.rendering import (
    GRID_COLOR,
    PLACEMENT_COLOR,
    export_placement_sheet,
    render_overlay_preview,
)
from mockup_core.validation import CalibrationRatio, PlacementFootprint

BACKGROUND = (10, 60, 120)
RATIO = CalibrationRatio(px_per_cm=20, is_calibrated=True, subject_id="tee", view_id="front")


@pytest.fixture
def garment_photo(tmp_path: Path) -> Path:
    """400x300 px solid image standing in for a garment photo."""
    path = tmp_path / "front.png"
    Image.new("RGB", (400, 300), color=BACKGROUND).save(path)
    return path


class TestOverlayPreview:
    """Tests for render_overlay_preview."""

    def test_draws_grid_and_placement(self, garment_photo: Path, tmp_path: Path) -> None:
        """Test grid lines and placement outline land at calibrated pixels."""
        footprint = PlacementFootprint(id="chest", x_cm=10, y_cm=5, width_cm=5, height_cm=5)
        output = tmp_path / "out" / "preview.png"

        render_overlay_preview(str(garment_photo), RATIO, [footprint], str(output))

        assert output.exists()
        with Image.open(output) as img:
            assert img.size == (400, 300)
            # 1 cm grid line at x=20px, away from rulers and placement
            assert img.getpixel((20, 150)) == GRID_COLOR
            # Between grid lines the photo is untouched
            assert img.getpixel((30, 150)) == BACKGROUND
            # Placement left edge at 10 cm = 200 px
            assert img.getpixel((200, 150)) == PLACEMENT_COLOR

    def test_missing_image(self, tmp_path: Path) -> None:
        """Test that a missing reference image raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Reference image not found"):
            render_overlay_preview("nope.png", RATIO, [], str(tmp_path / "p.png"))

    def test_requires_calibration(self, garment_photo: Path, tmp_path: Path) -> None:
        """Test that an uncalibrated ratio is rejected."""
        with pytest.raises(InvalidRatio):
            render_overlay_preview(
                str(garment_photo), CalibrationRatio.uncalibrated(), [], str(tmp_path / "p.png")
            )

    def test_preview_command(self, garment_photo: Path, tmp_path: Path) -> None:
        """Test the CLI writes a preview PNG."""
        ratio_path = tmp_path / "ratio.json"
        ratio_path.write_text(RATIO.model_dump_json())
        placements_path = tmp_path / "placements.json"
        placements_path.write_text(
            json.dumps([{"id": "chest", "x_cm": 10, "y_cm": 5, "width_cm": 5, "height_cm": 5}])
        )
        output = tmp_path / "preview.png"

        result = CliRunner().invoke(
            cli, ["preview", str(garment_photo), str(ratio_path), str(placements_path), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert output.exists()


class TestPlacementSheet:
    """Tests for export_placement_sheet."""

    def test_true_size_rectangle(self, tmp_path: Path) -> None:
        """Test each placement is drawn on its own page at physical size."""
        footprints = [
            PlacementFootprint(id="left-chest", x_cm=3, y_cm=7.5, width_cm=9, height_cm=7.5),
            PlacementFootprint(id="back", x_cm=8, y_cm=12, width_cm=25, height_cm=30, mode="proportional"),
        ]
        pdf_path = tmp_path / "sheet.pdf"

        export_placement_sheet(footprints, str(pdf_path), paper_type="A3")

        doc = fitz.open(str(pdf_path))
        assert len(doc) == 2

        page = doc[0]
        # A3: 297x420mm = 842x1191 points
        assert abs(page.rect.width - 842) < 2
        assert abs(page.rect.height - 1191) < 2
        assert "left-chest" in page.get_text()

        widths = [d["rect"].width for d in page.get_drawings()]
        assert any(abs(w - 9 * POINTS_PER_CM) < 1 for w in widths), widths

        assert "back" in doc[1].get_text()
        doc.close()

    def test_too_large_for_paper(self, tmp_path: Path) -> None:
        """Test placements bigger than the printable area are rejected."""
        footprint = PlacementFootprint(id="huge", x_cm=0, y_cm=0, width_cm=40, height_cm=50)
        with pytest.raises(ValueError, match="does not fit on A4"):
            export_placement_sheet([footprint], str(tmp_path / "sheet.pdf"), paper_type="A4")

    def test_invalid_paper_type(self, tmp_path: Path) -> None:
        """Test that invalid paper type raises KeyError."""
        footprint = PlacementFootprint(id="a", x_cm=0, y_cm=0, width_cm=1, height_cm=1)
        with pytest.raises(KeyError, match="Unknown paper type"):
            export_placement_sheet([footprint], str(tmp_path / "sheet.pdf"), paper_type="INVALID")

    def test_nothing_to_export(self, tmp_path: Path) -> None:
        """Test an empty placement list is rejected."""
        with pytest.raises(ValueError, match="No placements"):
            export_placement_sheet([], str(tmp_path / "sheet.pdf"))
