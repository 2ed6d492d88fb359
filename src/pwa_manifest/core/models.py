"""Data models shared by the option resolver and the generation pipeline."""
from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Mapping, Tuple

from .errors import GenerationError

# Sizes every web app manifest needs, whatever the user asked for.
REQUIRED_SIZES: Tuple[int, ...] = (192, 512)
DEFAULT_SIZES: Tuple[int, ...] = (96, 152, 192, 384, 512)
SUPPORTED_FORMATS: Tuple[str, ...] = ("png", "jpeg", "webp", "tiff")
RESIZE_FITS: Tuple[str, ...] = ("cover", "contain", "fill")


def default_formats() -> Dict[str, Dict[str, Any]]:
    """Return a fresh copy of the built-in encode options."""
    return {
        "png": {"compress_level": 9},
        "webp": {"quality": 60, "method": 6},
    }


@dataclass(frozen=True, slots=True)
class MetaConfig:
    """Information supplied by the host rather than by the user options."""

    base_url: str = "/"
    resolve_dir: Path = Path(".")


@dataclass(frozen=True, slots=True)
class Configuration:
    """Validated options for one generator instance."""

    name: str
    short_name: str
    base_icon_path: Path
    description: str = ""
    start_url: str = "/"
    scope: str = "/"
    base_url: str = "/"
    theme_color: str = "white"
    sizes: Tuple[int, ...] = DEFAULT_SIZES
    formats: Mapping[str, Mapping[str, Any]] = field(default_factory=default_formats)
    resize_fit: str = "cover"
    apple_touch_icon_background: str = "white"
    apple_touch_icon_padding: int = 12
    generate_favicons: bool = False
    ms_tile_color: str = "white"
    disabled: bool = False
    extra_params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def base_icon_name(self) -> str:
        return self.base_icon_path.stem

    def png_options(self) -> Mapping[str, Any]:
        return self.formats.get("png", {})


@dataclass(frozen=True, slots=True)
class IconSpec:
    """One image to render inside a pipeline stage."""

    width: int
    height: int
    format: str = "png"

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def mime_type(self) -> str:
        return f"image/{self.format}"


@dataclass(frozen=True, slots=True)
class GeneratedAsset:
    filename: str
    content: bytes


@dataclass(slots=True)
class PendingAsset:
    """Payload of the ``*Gen`` events.

    Listeners may replace ``content`` and/or set ``filename``, either with a
    plain value or with an awaitable (future, task or coroutine) resolving to
    one. The pipeline awaits both slots once the event has been delivered and
    falls back to a fingerprinted name when ``filename`` resolves to nothing.
    """

    content: bytes | Awaitable[bytes]
    filename: str | None | Awaitable[str | None] = None

    def set_content(self, content: bytes | Awaitable[bytes]) -> None:
        self.content = content

    def set_filename(self, filename: str | None | Awaitable[str | None]) -> None:
        self.filename = filename

    async def resolve(self) -> Tuple[bytes, str | None]:
        content = self.content
        if inspect.isawaitable(content):
            content = await content
        filename = self.filename
        if inspect.isawaitable(filename):
            filename = await filename
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise GenerationError(
                f"Asset content must be bytes, got {type(content).__name__}"
            )
        if filename is not None and not isinstance(filename, str):
            raise GenerationError(
                f"Asset filename must be a string, got {type(filename).__name__}"
            )
        return bytes(content), filename or None


@dataclass(slots=True)
class IconEntry:
    """Entry of the manifest ``icons`` list."""

    src: str
    sizes: str
    type: str

    def as_dict(self) -> Dict[str, str]:
        return {"src": self.src, "sizes": self.sizes, "type": self.type}


@dataclass(slots=True)
class Generation:
    """Everything produced by a generation run."""

    browser_config: str = ""
    generated_icons: Dict[str, bytes] = field(default_factory=dict)
    html: str = ""
    manifest: Dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.browser_config or self.generated_icons or self.html or self.manifest)

    def assets(self) -> List[GeneratedAsset]:
        return [GeneratedAsset(name, data) for name, data in self.generated_icons.items()]
