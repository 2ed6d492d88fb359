"""Shared fixtures for the pwa-manifest test-suite."""
from pathlib import Path

import pytest
from PIL import Image

from pwa_manifest.core.options import ENV_VAR


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_VAR, raising=False)


@pytest.fixture
def icon_path(tmp_path: Path) -> Path:
    """A solid red, fully opaque 256x256 source icon."""
    path = tmp_path / "icon.png"
    Image.new("RGBA", (256, 256), (255, 0, 0, 255)).save(path)
    return path


@pytest.fixture
def base_options(icon_path: Path) -> dict:
    return {
        "name": "My App",
        "icons": {
            "baseIcon": str(icon_path),
            "sizes": [192, 512],
            "formats": {"png": {}},
        },
    }


@pytest.fixture
def banded_icon_path(tmp_path: Path) -> Path:
    """A 200x100 icon: green band (x < 40), red middle, blue band (x >= 160)."""
    image = Image.new("RGBA", (200, 100), (255, 0, 0, 255))
    image.paste((0, 255, 0, 255), (0, 0, 40, 100))
    image.paste((0, 0, 255, 255), (160, 0, 200, 100))
    path = tmp_path / "banded.png"
    image.save(path)
    return path
