"""Tests for options file loading."""
from pathlib import Path

import pytest

from pwa_manifest.core.errors import ValidationError
from pwa_manifest.core.project_io import load_options


def test_load_yaml_options(tmp_path: Path) -> None:
    path = tmp_path / "pwa.yaml"
    path.write_text(
        "name: My App\n"
        "theme-color: '#336699'\n"
        "icons:\n"
        "  baseIcon: icon.png\n"
        "  sizes: [48, 96]\n"
        "production:\n"
        "  disabled: false\n"
    )

    options = load_options(path)

    assert options["name"] == "My App"
    assert options["icons"]["sizes"] == [48, 96]
    assert options["production"] == {"disabled": False}


def test_load_json_options(tmp_path: Path) -> None:
    path = tmp_path / "pwa.json"
    path.write_text('{"name": "Json App", "icons": {"baseIcon": "icon.png"}}')

    assert load_options(path)["name"] == "Json App"


@pytest.mark.parametrize("content", ["", "- just\n- a list\n", "name: [unclosed\n"])
def test_rejects_unusable_documents(tmp_path: Path, content: str) -> None:
    path = tmp_path / "pwa.yaml"
    path.write_text(content)

    with pytest.raises(ValidationError):
        load_options(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValidationError, match="Could not read"):
        load_options(tmp_path / "absent.yaml")
