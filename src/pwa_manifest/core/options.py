"""Turn the permissive user options into a validated :class:`Configuration`.

Every logical option may be spelled several ways (camelCase, kebab-case,
snake_case or an abbreviation). The alias tables below list the accepted
spellings in priority order; :func:`lookup_option` picks the first one that is
present, then consults the fallback mapping.
"""
from __future__ import annotations

import logging
import math
import os
from collections import ChainMap
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Sequence, Tuple

from .errors import ValidationError
from .models import (
    DEFAULT_SIZES,
    REQUIRED_SIZES,
    RESIZE_FITS,
    SUPPORTED_FORMATS,
    Configuration,
    MetaConfig,
    default_formats,
)
from .utils import is_mapping_list, is_number, is_sequence, is_string_list

logger = logging.getLogger(__name__)

ENV_VAR = "PWA_MANIFEST_ENV"

Aliases = Tuple[str, ...]

DISABLED: Aliases = ("disable", "disabled")
NAME: Aliases = ("name", "appName", "app-name")
SHORT_NAME: Aliases = ("shortName", "short-name", "short_name", "appShortName", "app-short-name")
DESCRIPTION: Aliases = ("desc", "description")
START_URL: Aliases = ("startURL", "startUrl", "start-url", "start_url")
SCOPE: Aliases = ("scope",)
THEME_COLOR: Aliases = ("themeColor", "theme-color", "theme_color", "theme")
INCLUDE: Aliases = ("include", "includeParams", "include-params")
ICON_OPTIONS: Aliases = (
    "genIcon",
    "gen-icon",
    "iconGen",
    "icon-gen",
    "genIconOpts",
    "gen-icon-opts",
    "iconGenOpts",
    "icon-gen-opts",
    "generateIconOptions",
    "generate-icon-options",
    "iconGenerationOptions",
    "icon-generation-options",
    "icons",
)

# Keys of the nested icon generation options.
MS_TILE_COLOR: Aliases = ("msTileColor", "ms-tile-color", "microsoftTileColor", "microsoft-tile-color")
BASE_ICON: Aliases = ("baseIcon", "base-icon", "fromIcon", "from-icon")
SIZES: Aliases = ("sizes", "sizeList", "size-list")
FORMATS: Aliases = ("formats", "formatList", "format-list")
RESIZE_METHOD: Aliases = ("resizeMethod", "resize-method", "resize")
APPLE_TOUCH_ICON_BG: Aliases = (
    "appleTouchIconBG",
    "appleTouchIconBg",
    "apple-touch-icon-bg",
    "appleTouchIconBackground",
    "apple-touch-icon-background",
    "atib",
)
APPLE_TOUCH_ICON_PADDING: Aliases = ("appleTouchIconPadding", "apple-touch-icon-padding", "atip")
GEN_FAVICONS: Aliases = ("genFavicons", "gen-favicons", "generateFavicons", "generate-favicons")

DEFAULT_THEME_COLOR = "white"
DEFAULT_APPLE_TOUCH_ICON_PADDING = 12
APPLE_TOUCH_ICON_SIZE = 180

DISPLAY_MODES = ("standalone", "minimal-ui", "fullscreen", "browser")
TEXT_DIRECTIONS = ("rtl", "ltr", "auto")
ORIENTATIONS = (
    "any",
    "natural",
    "landscape",
    "landscape-primary",
    "landscape-secondary",
    "portrait",
    "portrait-primary",
    "portrait-secondary",
)


@dataclass(frozen=True, slots=True)
class ExtraParam:
    """A well-known manifest member copied into the manifest after validation.

    ``check`` is either a type (``str``, ``bool``) or a predicate. ``default``
    receives the resolved theme colour and returns the value to use when the
    member is absent; ``None`` means the member is simply left out.
    """

    aliases: Aliases
    check: type | Callable[[Any], bool]
    default: Callable[[str], Any] | None = None

    @property
    def key(self) -> str:
        return self.aliases[0]

    def accepts(self, value: Any) -> bool:
        if isinstance(self.check, type):
            return isinstance(value, self.check)
        return bool(self.check(value))


EXTRA_PARAMS: Tuple[ExtraParam, ...] = (
    ExtraParam(
        ("background_color", "backgroundColor", "background-color", "bgColor", "bg-color", "bg"),
        str,
        lambda theme: theme,
    ),
    ExtraParam(("categories",), is_string_list),
    ExtraParam(("dir", "direction", "textDirection", "text-direction"), lambda v: v in TEXT_DIRECTIONS),
    ExtraParam(
        ("display", "displayMode", "display-mode"),
        lambda v: v in DISPLAY_MODES,
        lambda theme: "standalone",
    ),
    ExtraParam(
        (
            "iarc_rating_id",
            "iarc",
            "iarcId",
            "iarcID",
            "iarc-id",
            "iarcRatingId",
            "iarcRatingID",
            "iarc-rating-id",
            "iarcRating",
            "iarc-rating",
        ),
        str,
    ),
    ExtraParam(("lang", "language"), str),
    ExtraParam(
        ("orientation", "rotated", "screenOrientation", "screen-orientation"),
        lambda v: v in ORIENTATIONS,
    ),
    ExtraParam(
        (
            "prefer_related_applications",
            "preferRelated",
            "prefer-related",
            "preferRelatedApplications",
            "prefer-related-applications",
        ),
        bool,
    ),
    ExtraParam(
        ("related_applications", "related", "relatedApplications", "related-applications"),
        lambda v: is_mapping_list(v, "url"),
    ),
    ExtraParam(("screenshots", "screenShots", "screen-shots"), lambda v: is_mapping_list(v, "src")),
    ExtraParam(
        ("serviceworker", "sw", "serviceWorker", "service-worker"),
        lambda v: isinstance(v, Mapping) and "src" in v,
    ),
)


def lookup_option(
    source: Mapping[str, Any],
    aliases: Sequence[str],
    fallback: Mapping[str, Any] | None = None,
) -> Any:
    """Return the first value present under any alias, else the fallback's value, else None."""
    for mapping in (source, fallback or {}):
        for key in aliases:
            value = mapping.get(key)
            if value is not None:
                return value
    return None


def apply_environment(options: Mapping[str, Any], env: str | None) -> Dict[str, Any]:
    """Merge the options nested under the current environment name over the top level."""
    merged = dict(options)
    if not env:
        return merged
    wanted = env.lower()
    env_key = next((key for key in options if isinstance(key, str) and key.lower() == wanted), None)
    if env_key is None:
        return merged
    env_options = merged.pop(env_key)
    if not isinstance(env_options, Mapping):
        raise ValidationError(
            f'The specific options for environment "{env}" must be a mapping containing the desired parameters.'
        )
    logger.debug("Applying options for environment %s", env)
    merged.update(env_options)
    return merged


def resolve_options(
    raw: Any,
    meta: MetaConfig | None = None,
    fallback: Mapping[str, Any] | None = None,
    env: str | None = None,
) -> Configuration:
    """Validate ``raw`` and return the resolved configuration.

    ``env`` selects the environment override block; it defaults to the
    ``PWA_MANIFEST_ENV`` environment variable. The first invalid option
    raises :class:`ValidationError` and nothing is returned.
    """
    meta = meta or MetaConfig()
    fallback = fallback or {}
    if raw is None:
        raise ValidationError("No PWA manifest options found.")
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "The PWA manifest options must be a mapping containing the desired parameters."
        )
    opts = apply_environment(raw, env if env is not None else os.environ.get(ENV_VAR))

    disabled = lookup_option(opts, DISABLED, fallback)
    if disabled is None:
        disabled = False
    if not isinstance(disabled, bool):
        raise ValidationError("The disable option in the PWA manifest options must be a boolean.")

    name = lookup_option(opts, NAME, fallback)
    if name is None:
        raise ValidationError("No name was found in the options.")
    if not isinstance(name, str):
        raise ValidationError("The name provided in the options must be a string.")

    short_name = _string_option(opts, SHORT_NAME, fallback, name, "short name")
    description = _string_option(opts, DESCRIPTION, fallback, "", "description")
    start_url = _string_option(opts, START_URL, fallback, meta.base_url, "start URL")
    scope = _string_option(opts, SCOPE, fallback, meta.base_url, "scope")
    theme = _string_option(
        opts,
        THEME_COLOR,
        fallback,
        DEFAULT_THEME_COLOR,
        "theme color",
        "a string representing a valid CSS color",
    )

    # Icon fields fall back to the nested icon block first, then to the flat fallback.
    nested_fallback = lookup_option(fallback, ICON_OPTIONS)
    if not isinstance(nested_fallback, Mapping):
        nested_fallback = {}
    icon_fallback = ChainMap(dict(nested_fallback), dict(fallback))
    icon_opts = lookup_option(opts, ICON_OPTIONS, fallback)
    if icon_opts is None:
        raise ValidationError("No icon generation options found in the PWA manifest options.")
    if not isinstance(icon_opts, Mapping):
        raise ValidationError(
            "The icon generation options in the PWA manifest options must be a mapping "
            "containing the desired parameters."
        )

    ms_tile_color = _string_option(
        icon_opts,
        MS_TILE_COLOR,
        icon_fallback,
        theme,
        "Microsoft tile color",
        "a string representing the theme color for the application",
    )
    base_icon_path = _resolve_base_icon(icon_opts, icon_fallback, meta.resolve_dir)
    sizes = _resolve_sizes(lookup_option(icon_opts, SIZES, icon_fallback))
    formats = _resolve_formats(lookup_option(icon_opts, FORMATS, icon_fallback))

    resize_fit = lookup_option(icon_opts, RESIZE_METHOD, icon_fallback) or "cover"
    if resize_fit not in RESIZE_FITS:
        raise ValidationError(
            "The resize method parameter in the icon generation options must be one of "
            "'cover', 'contain', or 'fill'."
        )

    apple_touch_icon_bg = _string_option(
        icon_opts,
        APPLE_TOUCH_ICON_BG,
        icon_fallback,
        theme,
        "Apple Touch Icon background color",
        "a string representing a valid CSS color",
    )
    apple_touch_icon_padding = _resolve_padding(
        lookup_option(icon_opts, APPLE_TOUCH_ICON_PADDING, icon_fallback)
    )

    generate_favicons = lookup_option(icon_opts, GEN_FAVICONS, icon_fallback)
    if generate_favicons is None:
        generate_favicons = False
    if not isinstance(generate_favicons, bool):
        raise ValidationError(
            "The favicon generation option in the icon generation options must be a boolean."
        )

    extra_params = resolve_extra_params(opts, theme)
    extra_params.update(_included_params(opts, lookup_option(opts, INCLUDE, fallback)))

    return Configuration(
        name=name,
        short_name=short_name,
        base_icon_path=base_icon_path,
        description=description,
        start_url=start_url,
        scope=scope,
        base_url=meta.base_url,
        theme_color=theme,
        sizes=sizes,
        formats=formats,
        resize_fit=resize_fit,
        apple_touch_icon_background=apple_touch_icon_bg,
        apple_touch_icon_padding=apple_touch_icon_padding,
        generate_favicons=generate_favicons,
        ms_tile_color=ms_tile_color,
        disabled=disabled,
        extra_params=MappingProxyType(extra_params),
    )


def resolve_extra_params(opts: Mapping[str, Any], theme: str) -> Dict[str, Any]:
    """Validate the well-known manifest members listed in :data:`EXTRA_PARAMS`."""
    params: Dict[str, Any] = {}
    for param in EXTRA_PARAMS:
        value = lookup_option(opts, param.aliases)
        if value is None:
            if param.default is not None:
                params[param.key] = param.default(theme)
            continue
        if not param.accepts(value):
            raise ValidationError(
                f'Parameter "{param.key}" provided in the options is invalid. Please check '
                "the official MDN documentation on the Web App Manifest."
            )
        params[param.key] = value
    return params


def _included_params(opts: Mapping[str, Any], include: Any) -> Dict[str, Any]:
    if include is None:
        return {}
    if not is_string_list(include):
        raise ValidationError(
            "The include parameter in the options must be a list of extra parameter names "
            "to include in the final manifest."
        )
    return {key: opts[key] for key in include if key in opts}


def _string_option(
    source: Mapping[str, Any],
    aliases: Aliases,
    fallback: Mapping[str, Any],
    default: str,
    label: str,
    expected: str = "a string",
) -> str:
    value = lookup_option(source, aliases, fallback) or default
    if not isinstance(value, str):
        raise ValidationError(f"The {label} provided in the options must be {expected}.")
    return value


def _resolve_base_icon(
    icon_opts: Mapping[str, Any], icon_fallback: Mapping[str, Any], resolve_dir: Path | str
) -> Path:
    base_icon = lookup_option(icon_opts, BASE_ICON, icon_fallback)
    if base_icon is None:
        raise ValidationError("No base icon was found in the icon generation options.")
    if not isinstance(base_icon, (str, Path)):
        raise ValidationError(
            "The base icon parameter in the icon generation options must be a string that "
            "contains the path to the icon."
        )
    full_path = Path(resolve_dir) / base_icon
    if not full_path.is_file():
        raise ValidationError(f"No icon was found at the base icon path {base_icon}.")
    return full_path


def _resolve_sizes(value: Any) -> Tuple[int, ...]:
    if value is None:
        return DEFAULT_SIZES
    if not (is_sequence(value) and all(is_number(size) for size in value)):
        raise ValidationError(
            "The sizes parameter in the icon generation options must be a list of numeric "
            "pixel values for sizes of the images."
        )
    sizes = set(REQUIRED_SIZES)
    for size in value:
        if not math.isfinite(size) or size <= 0 or size != int(size):
            raise ValidationError(
                f"The sizes parameter in the icon generation options contains {size!r}, "
                "which is not a positive whole number of pixels."
            )
        sizes.add(int(size))
    return tuple(sorted(sizes))


def _resolve_formats(value: Any) -> Mapping[str, Mapping[str, Any]]:
    formats = default_formats()
    if value is not None:
        if not (isinstance(value, Mapping) and _only_supported(value.keys())):
            raise ValidationError(
                "The formats parameter in the icon generation options must be a mapping with "
                "each key being a supported file type (png, webp, jpeg, or tiff) for the output "
                "images, and each value being the options to pass to the image encoder."
            )
        overrides: Dict[str, Dict[str, Any]] = {}
        for fmt, encode_options in value.items():
            if encode_options is None:
                encode_options = {}
            if not isinstance(encode_options, Mapping):
                raise ValidationError(f'The encode options for format "{fmt}" must be a mapping.')
            overrides[fmt] = dict(encode_options)
        formats = {"png": formats["png"], **overrides}
    return MappingProxyType({fmt: MappingProxyType(opts) for fmt, opts in formats.items()})


def _only_supported(keys: Iterable[Any]) -> bool:
    return all(key in SUPPORTED_FORMATS for key in keys)


def _resolve_padding(value: Any) -> int:
    if value is None:
        return DEFAULT_APPLE_TOUCH_ICON_PADDING
    if not is_number(value) or not math.isfinite(value):
        raise ValidationError(
            "The Apple Touch Icon padding parameter must be a number of pixels to pad the "
            "image with on each side."
        )
    padding = int(value)
    if padding < 0 or 2 * padding >= APPLE_TOUCH_ICON_SIZE:
        raise ValidationError(
            "The Apple Touch Icon padding parameter must leave room for the icon inside the "
            f"{APPLE_TOUCH_ICON_SIZE}x{APPLE_TOUCH_ICON_SIZE} canvas."
        )
    return padding
