"""Utility helpers used across the pwa-manifest core modules."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Tuple

from PIL import ImageColor


def css_to_rgba(color: str) -> Tuple[int, int, int, int]:
    """Convert any CSS colour Pillow understands to an (r, g, b, a) tuple."""
    try:
        return ImageColor.getcolor(color.strip(), "RGBA")
    except ValueError as exc:
        raise ValueError(f"Invalid CSS color: {color}") from exc


def ensure_directory(path: Path) -> None:
    """Create the directory (and parents) if it does not already exist."""
    path.mkdir(parents=True, exist_ok=True)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def is_string_list(value: Any) -> bool:
    return is_sequence(value) and all(isinstance(item, str) for item in value)


def is_mapping_list(value: Any, required_key: str) -> bool:
    """Return True for a list of mappings that all carry a truthy ``required_key``."""
    return is_sequence(value) and all(
        isinstance(item, Mapping) and item.get(required_key) for item in value
    )
