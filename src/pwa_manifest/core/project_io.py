"""Helpers for reading pwa-manifest options files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ValidationError


def load_options(path: Path) -> Dict[str, Any]:
    """Load generator options from a YAML (or JSON) document."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"Could not read the options file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValidationError(f"Could not parse the options file {path}: {exc}") from exc
    if data is None:
        raise ValidationError(f"No PWA manifest options found in {path}.")
    if not isinstance(data, dict):
        raise ValidationError(
            f"The options file {path} must contain a mapping of PWA manifest parameters."
        )
    return data
