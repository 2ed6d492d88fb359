"""Export helpers for writing a generation run to disk."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import PWAManifestError
from .manifest import BROWSER_CONFIG_FILENAME, MANIFEST_FILENAME
from .models import Generation
from .utils import ensure_directory

HTML_FILENAME = "pwa-head.html"


@dataclass(slots=True)
class ExportResult:
    """Files written by :func:`export_generation`."""

    output_dir: Path
    icons: List[Path] = field(default_factory=list)
    manifest_path: Path | None = None
    browser_config_path: Path | None = None
    html_path: Path | None = None

    def all_paths(self) -> List[Path]:
        extra = [self.manifest_path, self.browser_config_path, self.html_path]
        return [*self.icons, *(path for path in extra if path is not None)]


def export_generation(generation: Generation, output_dir: Path) -> ExportResult:
    """Write icons, manifest, browserconfig.xml and the HTML snippet.

    An empty generation (disabled configuration) writes nothing.
    """
    result = ExportResult(output_dir=output_dir)
    if generation.is_empty():
        return result

    ensure_directory(output_dir)
    root = output_dir.resolve()
    targets = []
    for asset in generation.assets():
        target = (output_dir / asset.filename).resolve()
        if not target.is_relative_to(root):
            raise PWAManifestError(
                f"Refusing to write {asset.filename}: it resolves outside {output_dir}"
            )
        targets.append((target, asset.content))

    for target, content in targets:
        ensure_directory(target.parent)
        target.write_bytes(content)
        result.icons.append(target)

    result.manifest_path = output_dir / MANIFEST_FILENAME
    result.manifest_path.write_text(json.dumps(generation.manifest, indent=2), encoding="utf-8")
    result.browser_config_path = output_dir / BROWSER_CONFIG_FILENAME
    result.browser_config_path.write_text(generation.browser_config, encoding="utf-8")
    result.html_path = output_dir / HTML_FILENAME
    result.html_path.write_text(generation.html, encoding="utf-8")
    return result
