"""Generate sample inputs for trying the CLI by hand.

Usage:
    python tests/fixtures/generate_fixtures.py
    python cli.py preview tests/fixtures/tshirt_front.png tests/fixtures/ratio_front.json \
        tests/fixtures/placements.json -o preview.png
"""

import json
from datetime import datetime
from pathlib import Path

from PIL import Image, ImageDraw

FIXTURES_DIR = Path(__file__).parent
PX_PER_CM = 10.0


def generate_sample_calibration() -> None:
    """Generate ratio_front.json fixture."""
    fixture = {
        "px_per_cm": PX_PER_CM,
        "is_calibrated": True,
        "calibrated_at": datetime.now().isoformat(),
        "subject_id": "tshirt_basic",
        "view_id": "front",
        "source": "manual",
    }
    output_path = FIXTURES_DIR / "ratio_front.json"
    output_path.write_text(json.dumps(fixture, indent=2))
    print(f"✓ Generated {output_path}")


def generate_sample_placements() -> None:
    """Generate placements.json and size_table.json fixtures."""
    placements = [
        {"id": "left_chest", "x_cm": 28, "y_cm": 17.5, "width_cm": 9, "height_cm": 7.5, "mode": "fixed"},
        {"id": "center", "x_cm": 17, "y_cm": 28, "width_cm": 21, "height_cm": 25, "mode": "proportional"},
    ]
    size_table = {
        "name": "Basic T-Shirt",
        "base_size": "L",
        "sizes": [
            {"size_label": "M", "chest_width_cm": 42, "body_length_cm": 70},
            {"size_label": "L", "chest_width_cm": 44, "body_length_cm": 72},
            {"size_label": "XL", "chest_width_cm": 46, "body_length_cm": 74},
        ],
    }
    for name, data in (("placements.json", placements), ("size_table.json", size_table)):
        output_path = FIXTURES_DIR / name
        output_path.write_text(json.dumps(data, indent=2))
        print(f"✓ Generated {output_path}")


def generate_garment_photo() -> None:
    """Generate tshirt_front.png: a 550x650 flat t-shirt outline."""
    img = Image.new("RGB", (550, 650), color=(235, 235, 235))
    draw = ImageDraw.Draw(img)

    # Body 44 cm wide at 10 px/cm, sleeves and neckline
    body = [(55, 120), (495, 120), (495, 620), (55, 620)]
    draw.polygon(body, fill=(40, 70, 140))
    draw.polygon([(55, 120), (0, 260), (55, 300)], fill=(40, 70, 140))
    draw.polygon([(495, 120), (550, 260), (495, 300)], fill=(40, 70, 140))
    draw.ellipse([(205, 90), (345, 160)], fill=(235, 235, 235))

    # Reference line for the two-point measurement: 44 cm across the chest
    draw.line([(55, 330), (495, 330)], fill=(255, 255, 255), width=2)
    draw.text((240, 335), "44 cm", fill=(255, 255, 255))

    output_path = FIXTURES_DIR / "tshirt_front.png"
    img.save(output_path, "PNG")
    print(f"✓ Generated {output_path}")


if __name__ == "__main__":
    generate_sample_calibration()
    generate_sample_placements()
    generate_garment_photo()
    print("\n✓ All fixtures generated successfully")
