"""Deterministic, cache-busting output filenames."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Callable, Literal

HashFunction = Callable[[str], str]
HashMethod = Literal["name", "content", "none"]

HASH_METHODS = ("name", "content", "none")
NAME_HASH_PREFIX = "_pwa-manifest-"


def md5_hex(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def fingerprint(
    filename: str,
    content: bytes | str,
    method: HashMethod = "name",
    hash_function: HashFunction = md5_hex,
) -> str:
    """Insert an 8 character hash between the stem and the extension.

    ``name`` hashes the original filename, ``content`` hashes the payload and
    ``none`` leaves the filename alone.
    """
    if method == "none":
        return filename
    if method == "name":
        digest = hash_function(NAME_HASH_PREFIX + filename)
    elif method == "content":
        if isinstance(content, bytes):
            # latin-1 maps every byte to one code point, so distinct payloads stay distinct
            content = content.decode("latin-1")
        digest = hash_function(content)
    else:
        raise ValueError(f"Unknown hash method: {method}")

    base, dot, ext = filename.rpartition(".")
    if not dot:
        return f"{filename}.{digest[-8:]}"
    return f"{base}.{digest[-8:]}.{ext}"


@dataclass(frozen=True, slots=True)
class Fingerprinter:
    """Naming mode and hash function bundled for the pipeline."""

    method: HashMethod = "name"
    hash_function: HashFunction = field(default=md5_hex)

    def __post_init__(self) -> None:
        if self.method not in HASH_METHODS:
            raise ValueError(
                f"Hash method must be one of {', '.join(HASH_METHODS)}, got {self.method!r}"
            )

    def __call__(self, filename: str, content: bytes | str) -> str:
        return fingerprint(filename, content, self.method, self.hash_function)
