"""Tests for the Pillow rendering helpers."""
import asyncio
from io import BytesIO
from pathlib import Path

from PIL import Image

from pwa_manifest.core.generator import load_base_icon, resize_icon
from pwa_manifest.core.pipeline import ManifestGenerator


def test_cover_crops_to_the_centre(banded_icon_path: Path) -> None:
    icon = resize_icon(load_base_icon(banded_icon_path), 192, 192, "cover")

    assert icon.size == (192, 192)
    assert icon.getpixel((5, 96)) == (255, 0, 0, 255)
    assert icon.getpixel((186, 96)) == (255, 0, 0, 255)
    assert icon.getpixel((96, 0))[3] == 255


def test_fill_stretches_the_whole_image(banded_icon_path: Path) -> None:
    icon = resize_icon(load_base_icon(banded_icon_path), 192, 192, "fill")

    assert icon.getpixel((5, 96)) == (0, 255, 0, 255)
    assert icon.getpixel((96, 96)) == (255, 0, 0, 255)
    assert icon.getpixel((186, 96)) == (0, 0, 255, 255)
    assert icon.getpixel((96, 0))[3] == 255


def test_contain_pads_with_transparency(banded_icon_path: Path) -> None:
    icon = resize_icon(load_base_icon(banded_icon_path), 192, 192, "contain")

    assert icon.getpixel((96, 5))[3] == 0
    assert icon.getpixel((96, 186))[3] == 0
    assert icon.getpixel((5, 96)) == (0, 255, 0, 255)
    assert icon.getpixel((186, 96)) == (0, 0, 255, 255)


def test_resize_leaves_the_base_untouched(banded_icon_path: Path) -> None:
    base = load_base_icon(banded_icon_path)
    before = base.tobytes()

    resize_icon(base, 64, 64, "fill")

    assert base.size == (200, 100)
    assert base.tobytes() == before


def test_pipeline_honours_contain_for_tiles(banded_icon_path: Path) -> None:
    options = {
        "name": "Banded",
        "icons": {"baseIcon": str(banded_icon_path), "formats": {"png": {}}, "resize": "contain"},
    }

    generation = asyncio.run(ManifestGenerator(options, hash_method="none").generate())

    square = Image.open(BytesIO(generation.generated_icons["mstile-310x310.png"])).convert("RGBA")
    wide = Image.open(BytesIO(generation.generated_icons["mstile-310x150.png"])).convert("RGBA")
    assert square.getpixel((155, 0))[3] == 0
    assert square.getpixel((155, 155))[3] == 255
    assert wide.getpixel((1, 75))[3] == 0
    assert wide.getpixel((155, 75)) == (255, 0, 0, 255)
