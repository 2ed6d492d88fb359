"""Exception hierarchy for pwa-manifest."""
from __future__ import annotations


class PWAManifestError(Exception):
    """Base class for every error raised by pwa-manifest."""


class ValidationError(PWAManifestError, ValueError):
    """Raised when the supplied options cannot be resolved into a configuration."""


class GenerationError(PWAManifestError, RuntimeError):
    """Raised when an image could not be produced during a generation run."""
