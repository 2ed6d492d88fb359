"""Generate PWA icons, a web app manifest and browserconfig.xml from one icon."""
from __future__ import annotations

__version__ = "0.3.0"

from .core.errors import GenerationError, PWAManifestError, ValidationError
from .core.events import Event, EventBus
from .core.fingerprint import Fingerprinter, HashMethod, fingerprint
from .core.models import Configuration, Generation, MetaConfig, PendingAsset
from .core.options import resolve_options
from .core.pipeline import ManifestGenerator

__all__ = [
    "Configuration",
    "Event",
    "EventBus",
    "Fingerprinter",
    "Generation",
    "GenerationError",
    "HashMethod",
    "ManifestGenerator",
    "MetaConfig",
    "PWAManifestError",
    "PendingAsset",
    "ValidationError",
    "__version__",
    "fingerprint",
    "resolve_options",
]
