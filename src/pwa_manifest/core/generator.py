"""Icon rendering helpers."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Mapping

from PIL import Image, ImageOps

from .utils import css_to_rgba

TRANSPARENT = (0, 0, 0, 0)

_PIL_FORMATS = {
    "png": "PNG",
    "jpeg": "JPEG",
    "webp": "WEBP",
    "tiff": "TIFF",
}


def load_base_icon(path: Path) -> Image.Image:
    """Decode the source icon once; callers must treat the result as read-only."""
    with Image.open(path) as image:
        return image.convert("RGBA")


def resize_icon(base: Image.Image, width: int, height: int, fit: str = "cover") -> Image.Image:
    """Return a resized copy of ``base``; the original is never modified."""
    image = base.copy()
    size = (width, height)
    if fit == "fill":
        return image.resize(size, Image.Resampling.LANCZOS)
    if fit == "contain":
        return ImageOps.pad(image, size, Image.Resampling.LANCZOS, color=TRANSPARENT)
    if fit == "cover":
        return ImageOps.fit(image, size, Image.Resampling.LANCZOS)
    raise ValueError(f"Unknown resize fit: {fit}")


def pad_icon(image: Image.Image, padding: int) -> Image.Image:
    """Surround the image with a transparent border of ``padding`` pixels."""
    if padding <= 0:
        return image.copy()
    return ImageOps.expand(image, border=padding, fill=TRANSPARENT)


def flatten_icon(image: Image.Image, background: str) -> Image.Image:
    """Composite the image onto an opaque background colour."""
    canvas = Image.new("RGBA", image.size, css_to_rgba(background))
    canvas.alpha_composite(image.convert("RGBA"))
    return canvas.convert("RGB")


def encode_icon(image: Image.Image, fmt: str, options: Mapping[str, Any] | None = None) -> bytes:
    """Encode ``image`` with Pillow, passing ``options`` as save parameters."""
    try:
        pil_format = _PIL_FORMATS[fmt]
    except KeyError as exc:
        raise ValueError(f"Unsupported output format: {fmt}") from exc
    if pil_format == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")
    buffer = BytesIO()
    image.save(buffer, pil_format, **dict(options or {}))
    return buffer.getvalue()


def render_apple_touch_icon(
    base: Image.Image,
    size: int,
    padding: int,
    background: str,
    options: Mapping[str, Any] | None = None,
    fit: str = "cover",
) -> bytes:
    """Resize inside the padding, pad back to ``size`` and flatten onto ``background``."""
    inner = size - 2 * padding
    padded = pad_icon(resize_icon(base, inner, inner, fit), padding)
    return encode_icon(flatten_icon(padded, background), "png", options)
