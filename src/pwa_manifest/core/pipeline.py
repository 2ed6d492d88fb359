"""The generation pipeline: icons, favicons, Apple touch icon, tiles and the manifest."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, TypeVar

from PIL import Image

from .errors import GenerationError
from .events import Event, EventBus, Listener
from .fingerprint import Fingerprinter, HashFunction, HashMethod, md5_hex
from .generator import encode_icon, load_base_icon, render_apple_touch_icon, resize_icon
from .manifest import (
    build_manifest,
    head_meta,
    manifest_link,
    tile_color_element,
    wrap_browser_config,
)
from .models import Configuration, Generation, IconEntry, IconSpec, MetaConfig, PendingAsset
from .options import APPLE_TOUCH_ICON_SIZE, resolve_options

logger = logging.getLogger(__name__)

T = TypeVar("T")

FAVICON_SIZES = (32, 16)
MS_TILE_SPECS = (
    IconSpec(70, 70),
    IconSpec(150, 150),
    IconSpec(310, 310),
    IconSpec(310, 150),
)


class ManifestGenerator:
    """Generate every PWA asset for one configuration.

    Subscribe with :meth:`on` before calling :meth:`generate`. Listeners on the
    ``*Gen`` events receive a :class:`PendingAsset` and may replace its content
    or choose its filename before the asset is recorded.
    """

    def __init__(
        self,
        options: Mapping[str, Any],
        meta: MetaConfig | None = None,
        fallback: Mapping[str, Any] | None = None,
        *,
        hash_function: HashFunction | None = None,
        hash_method: HashMethod = "name",
        env: str | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._setup(
            resolve_options(options, meta, fallback, env),
            Fingerprinter(hash_method, hash_function or md5_hex),
            events,
        )

    @classmethod
    def from_config(
        cls,
        config: Configuration,
        fingerprinter: Fingerprinter | None = None,
        events: EventBus | None = None,
    ) -> "ManifestGenerator":
        """Build a generator around an already resolved configuration."""
        generator = cls.__new__(cls)
        generator._setup(config, fingerprinter or Fingerprinter(), events)
        return generator

    def _setup(
        self, config: Configuration, fingerprinter: Fingerprinter, events: EventBus | None
    ) -> None:
        self.config = config
        self.fingerprinter = fingerprinter
        self.events = events or EventBus()
        self._base_icon: Image.Image | None = None
        self._reset()

    @property
    def base_icon_name(self) -> str:
        return self.config.base_icon_name

    @property
    def browser_config(self) -> str:
        return wrap_browser_config(self._tile_body)

    def on(self, event: Event | str, listener: Listener) -> "ManifestGenerator":
        self.events.on(event, listener)
        return self

    def off(self, event: Event | str, listener: Listener) -> "ManifestGenerator":
        self.events.off(event, listener)
        return self

    def emit(self, event: Event | str, *payload: Any) -> bool:
        return self.events.emit(event, *payload)

    async def generate(self) -> Generation:
        """Run every stage in order and return the generated assets.

        A disabled configuration returns an empty :class:`Generation` without
        emitting any event.
        """
        if self.config.disabled:
            logger.info("PWA manifest generation is disabled for %s", self.config.name)
            return Generation()

        self._reset()
        self.emit(Event.START)
        base = await self._load_base_icon()
        await self._gen_default_icons(base)
        if self.config.generate_favicons:
            await self._gen_favicons(base)
        await self._gen_apple_touch_icon(base)
        await self._gen_ms_tile_icons(base)
        self._gen_manifest()
        self.emit(Event.END)
        logger.info("Generated %d assets for %s", len(self.generated_icons), self.config.name)
        return Generation(
            browser_config=self.browser_config,
            generated_icons=dict(self.generated_icons),
            html=self.html,
            manifest=self.manifest,
        )

    def _reset(self) -> None:
        self.generated_icons: Dict[str, bytes] = {}
        self.manifest: Dict[str, Any] = {}
        self.html = head_meta(self.config)
        self._icons: List[IconEntry] = []
        self._tile_body = tile_color_element(self.config.ms_tile_color)

    async def _load_base_icon(self) -> Image.Image:
        if self._base_icon is None:
            self._base_icon = await self._run(
                "base icon loading", load_base_icon, self.config.base_icon_path
            )
        return self._base_icon

    async def _gen_default_icons(self, base: Image.Image) -> None:
        self._stage_start(Event.DEFAULT_ICONS_START, f"Generating icons for {self.config.name}...")
        config = self.config
        for size in config.sizes:
            resized = await self._run("icon creation process", resize_icon, base, size, size, config.resize_fit)
            for fmt, options in config.formats.items():
                spec = IconSpec(size, size, fmt)
                content = await self._run("icon creation process", encode_icon, resized, fmt, options)
                filename = await self._publish(
                    Event.DEFAULT_ICONS_GEN,
                    content,
                    f"{config.base_icon_name}-{spec.label}.{fmt}",
                )
                self._icons.append(IconEntry(config.base_url + filename, spec.label, spec.mime_type))
        self.emit(Event.DEFAULT_ICONS_END)

    async def _gen_favicons(self, base: Image.Image) -> None:
        self._stage_start(Event.FAVICON_START, "Generating favicons...")
        for size in FAVICON_SIZES:
            spec = IconSpec(size, size)
            filename = await self._render_png(
                Event.FAVICON_GEN, "favicon creation process", base, spec, f"favicon-{spec.label}.png"
            )
            self.html += f'<link rel="icon" sizes="{spec.label}" href="{self.config.base_url}{filename}">'
        self.emit(Event.FAVICON_END)

    async def _gen_apple_touch_icon(self, base: Image.Image) -> None:
        self._stage_start(Event.APPLE_TOUCH_ICON_START, "Generating Apple Touch Icon...")
        config = self.config
        content = await self._run(
            "Apple Touch Icon creation process",
            render_apple_touch_icon,
            base,
            APPLE_TOUCH_ICON_SIZE,
            config.apple_touch_icon_padding,
            config.apple_touch_icon_background,
            config.png_options(),
            config.resize_fit,
        )
        filename = await self._publish(Event.APPLE_TOUCH_ICON_GEN, content, "apple-touch-icon.png")
        self.html += (
            f'<link rel="apple-touch-icon" sizes="{APPLE_TOUCH_ICON_SIZE}x{APPLE_TOUCH_ICON_SIZE}" '
            f'href="{config.base_url}{filename}">'
        )
        self.emit(Event.APPLE_TOUCH_ICON_END)

    async def _gen_ms_tile_icons(self, base: Image.Image) -> None:
        self._stage_start(Event.MS_TILE_START, "Generating Microsoft Tile Icons...")
        for spec in MS_TILE_SPECS:
            filename = await self._render_png(
                Event.MS_TILE_GEN, "Microsoft Tile Icon creation process", base, spec, f"mstile-{spec.label}.png"
            )
            shape = "square" if spec.width == spec.height else "wide"
            self._tile_body += f'<{shape}{spec.label}logo src="{self.config.base_url}{filename}"/>'
        self.emit(Event.MS_TILE_END)

    def _gen_manifest(self) -> None:
        self.manifest = build_manifest(self.config, self._icons)
        self.html += manifest_link(self.config.base_url)

    def _stage_start(self, event: Event, message: str) -> None:
        logger.info(message)
        self.emit(event, message)

    async def _render_png(
        self, event: Event, process: str, base: Image.Image, spec: IconSpec, default_name: str
    ) -> str:
        resized = await self._run(process, resize_icon, base, spec.width, spec.height, self.config.resize_fit)
        content = await self._run(process, encode_icon, resized, "png", self.config.png_options())
        return await self._publish(event, content, default_name)

    async def _run(self, process: str, func: Callable[..., T], *args: Any) -> T:
        """Run Pillow work off the event loop, reporting failures with the stage name."""
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as exc:
            raise GenerationError(
                f"An unknown error occurred during the {process}: {exc}"
            ) from exc

    async def _publish(self, event: Event, content: bytes, default_name: str) -> str:
        pending = PendingAsset(content)
        self.emit(event, pending)
        content, override = await pending.resolve()
        filename = override or self.fingerprinter(default_name, content)
        if filename in self.generated_icons:
            logger.warning("%s was generated more than once; keeping the latest content", filename)
        self.generated_icons[filename] = content
        logger.debug("Generated %s (%d bytes)", filename, len(content))
        return filename
