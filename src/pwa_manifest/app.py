"""Command line entry point for pwa-manifest."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from . import __version__
from .core.errors import PWAManifestError
from .core.events import Event
from .core.exporters import export_generation
from .core.fingerprint import HASH_METHODS
from .core.models import MetaConfig
from .core.pipeline import ManifestGenerator
from .core.project_io import load_options

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pwa-manifest",
        description="Generate PWA icons, a web app manifest and browserconfig.xml from one icon.",
    )
    parser.add_argument("options", type=Path, help="YAML or JSON file with the manifest options")
    parser.add_argument("-o", "--out", type=Path, default=Path("dist"), help="output directory")
    parser.add_argument("--base-url", default="/", help="URL prefix for generated assets")
    parser.add_argument(
        "--resolve-dir",
        type=Path,
        default=None,
        help="directory the base icon path is relative to (defaults to the options file's directory)",
    )
    parser.add_argument("--hash-method", choices=HASH_METHODS, default="name")
    parser.add_argument("--env", default=None, help="environment whose override block applies")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_progress(event: Event, *payload: Any) -> None:
    if payload and isinstance(payload[0], str):
        logger.debug("%s: %s", event, payload[0])
    else:
        logger.debug("%s", event)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        options = load_options(args.options)
        meta = MetaConfig(
            base_url=args.base_url,
            resolve_dir=args.resolve_dir or args.options.parent,
        )
        generator = ManifestGenerator(options, meta, hash_method=args.hash_method, env=args.env)
        generator.on(Event.ALL, _log_progress)
        generation = asyncio.run(generator.generate())
        result = export_generation(generation, args.out)
    except PWAManifestError as exc:
        print(f"pwa-manifest: {exc}", file=sys.stderr)
        return 1

    logger.info("Wrote %d files to %s", len(result.all_paths()), result.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
