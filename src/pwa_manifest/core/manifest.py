"""Assembly of the manifest document, the browserconfig XML and the HTML snippet."""
from __future__ import annotations

from typing import Any, Dict, Iterable

from .models import Configuration, IconEntry

MANIFEST_FILENAME = "manifest.webmanifest"
BROWSER_CONFIG_FILENAME = "browserconfig.xml"


def build_manifest(config: Configuration, icons: Iterable[IconEntry]) -> Dict[str, Any]:
    """Return the web app manifest.

    Extra parameters are merged last and may replace any of the baseline
    members, which lets ``include`` override them.
    """
    manifest: Dict[str, Any] = {
        "name": config.name,
        "short_name": config.short_name,
        "start_url": config.start_url,
        "scope": config.scope,
    }
    if config.description:
        manifest["description"] = config.description
    manifest["icons"] = [icon.as_dict() for icon in icons]
    manifest["theme_color"] = config.theme_color
    manifest.update(config.extra_params)
    return manifest


def manifest_link(base_url: str) -> str:
    return f'<link rel="manifest" href="{base_url}{MANIFEST_FILENAME}">'


def head_meta(config: Configuration) -> str:
    """HTML emitted before any icon is generated."""
    return (
        f'<meta name="msapplication-config" content="{config.base_url}{BROWSER_CONFIG_FILENAME}">'
        f'<meta name="theme-color" content="{config.theme_color}">'
    )


def tile_color_element(color: str) -> str:
    return f"<TileColor>{color}</TileColor>"


def wrap_browser_config(tile_body: str) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f"<browserconfig><msapplication><tile>{tile_body}</tile></msapplication></browserconfig>"
    )
