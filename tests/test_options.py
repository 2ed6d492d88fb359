"""Tests for option resolution."""
import math
from pathlib import Path

import pytest

from pwa_manifest.core.errors import ValidationError
from pwa_manifest.core.models import DEFAULT_SIZES, MetaConfig
from pwa_manifest.core.options import ENV_VAR, apply_environment, lookup_option, resolve_options


def _options(icon_path: Path, **extra) -> dict:
    options = {"name": "My App", "icons": {"baseIcon": str(icon_path)}}
    options.update(extra)
    return options


def test_defaults(icon_path: Path) -> None:
    config = resolve_options(_options(icon_path))

    assert config.short_name == "My App"
    assert config.description == ""
    assert config.start_url == "/"
    assert config.scope == "/"
    assert config.theme_color == "white"
    assert config.ms_tile_color == "white"
    assert config.apple_touch_icon_background == "white"
    assert config.apple_touch_icon_padding == 12
    assert config.resize_fit == "cover"
    assert config.generate_favicons is False
    assert config.disabled is False
    assert config.sizes == DEFAULT_SIZES
    assert list(config.formats) == ["png", "webp"]
    assert config.base_icon_name == "icon"
    assert dict(config.extra_params) == {"background_color": "white", "display": "standalone"}


def test_aliases_are_resolved(icon_path: Path) -> None:
    config = resolve_options(
        {
            "app-name": "Long Name",
            "short_name": "Short",
            "desc": "Does things",
            "start-url": "/app/",
            "theme-color": "#112233",
            "iconGenerationOptions": {
                "from-icon": str(icon_path),
                "resize-method": "contain",
                "atib": "black",
                "atip": 0,
                "generate-favicons": True,
                "microsoft-tile-color": "#445566",
            },
        }
    )

    assert config.name == "Long Name"
    assert config.short_name == "Short"
    assert config.description == "Does things"
    assert config.start_url == "/app/"
    assert config.theme_color == "#112233"
    assert config.resize_fit == "contain"
    assert config.apple_touch_icon_background == "black"
    assert config.apple_touch_icon_padding == 0
    assert config.generate_favicons is True
    assert config.ms_tile_color == "#445566"
    assert config.extra_params["background_color"] == "#112233"


def test_alias_priority_follows_table_order() -> None:
    source = {"theme": "red", "themeColor": "blue"}

    assert lookup_option(source, ("themeColor", "theme-color", "theme_color", "theme")) == "blue"


def test_fallback_is_used_when_all_aliases_are_absent(icon_path: Path) -> None:
    config = resolve_options(
        _options(icon_path),
        fallback={"themeColor": "#abcdef", "description": "From fallback"},
    )

    assert config.theme_color == "#abcdef"
    assert config.description == "From fallback"


def test_meta_base_url_drives_navigation_defaults(icon_path: Path) -> None:
    config = resolve_options(_options(icon_path), MetaConfig(base_url="/static/"))

    assert config.start_url == "/static/"
    assert config.scope == "/static/"
    assert config.base_url == "/static/"


def test_base_icon_relative_to_resolve_dir(icon_path: Path) -> None:
    options = {"name": "App", "icons": {"baseIcon": icon_path.name}}

    config = resolve_options(options, MetaConfig(resolve_dir=icon_path.parent))

    assert config.base_icon_path == icon_path.parent / "icon.png"


def test_sizes_always_include_manifest_baseline(icon_path: Path) -> None:
    options = _options(icon_path)
    options["icons"]["sizes"] = [48, 192, 48]

    assert resolve_options(options).sizes == (48, 192, 512)


def test_formats_keep_png_defaults(icon_path: Path) -> None:
    options = _options(icon_path)
    options["icons"]["formats"] = {"webp": {"quality": 10}}

    formats = resolve_options(options).formats

    assert list(formats) == ["png", "webp"]
    assert dict(formats["png"]) == {"compress_level": 9}
    assert dict(formats["webp"]) == {"quality": 10}
    assert "jpeg" not in formats
    assert "tiff" not in formats


def test_formats_png_override_replaces_whole_entry(icon_path: Path) -> None:
    options = _options(icon_path)
    options["icons"]["formats"] = {"png": {"optimize": True}}

    formats = resolve_options(options).formats

    assert {fmt: dict(opts) for fmt, opts in formats.items()} == {"png": {"optimize": True}}


def test_include_passes_fields_through(icon_path: Path) -> None:
    config = resolve_options(
        _options(icon_path, include=["customField"], customField=42)
    )

    assert config.extra_params["customField"] == 42
    assert "include" not in config.extra_params


def test_invalid_display_is_rejected(icon_path: Path) -> None:
    with pytest.raises(ValidationError, match='"display"'):
        resolve_options(_options(icon_path, display="kiosk"))


def test_extra_params_are_validated(icon_path: Path) -> None:
    config = resolve_options(
        _options(
            icon_path,
            categories=["games"],
            textDirection="rtl",
            language="en",
            sw={"src": "/sw.js"},
            related=[{"url": "https://example.com"}],
            preferRelated=False,
        )
    )

    assert config.extra_params["categories"] == ["games"]
    assert config.extra_params["dir"] == "rtl"
    assert config.extra_params["lang"] == "en"
    assert config.extra_params["serviceworker"] == {"src": "/sw.js"}
    assert config.extra_params["related_applications"] == [{"url": "https://example.com"}]
    assert config.extra_params["prefer_related_applications"] is False


def test_environment_block_overrides_top_level(icon_path: Path) -> None:
    options = _options(icon_path, Production={"name": "Prod App"})

    config = resolve_options(options, env="production")

    assert config.name == "Prod App"


def test_environment_variable_selects_block(icon_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_VAR, "DEVELOPMENT")
    options = _options(icon_path, development={"disabled": True})

    assert resolve_options(options).disabled is True


def test_environment_block_is_not_a_field() -> None:
    merged = apply_environment({"name": "A", "staging": {"scope": "/s/"}}, "staging")

    assert merged == {"name": "A", "scope": "/s/"}


def test_environment_block_must_be_mapping(icon_path: Path) -> None:
    with pytest.raises(ValidationError, match="environment"):
        resolve_options(_options(icon_path, production="yes"), env="production")


def test_disabled_still_validates() -> None:
    with pytest.raises(ValidationError, match="No name"):
        resolve_options({"disabled": True})


@pytest.mark.parametrize(
    ("options", "message"),
    [
        (None, "No PWA manifest options"),
        (["name"], "must be a mapping"),
        ({"disable": "yes"}, "disable option"),
        ({"name": 5}, "name provided in the options must be a string"),
        ({"name": "App"}, "No icon generation options"),
        ({"name": "App", "icons": "icon.png"}, "icon generation options"),
        ({"name": "App", "icons": {}}, "No base icon"),
        ({"name": "App", "icons": {"baseIcon": 3}}, "base icon parameter"),
        ({"name": "App", "icons": {"baseIcon": "missing.png"}}, "No icon was found"),
        ({"name": "App", "shortName": 3, "icons": {}}, "short name"),
    ],
)
def test_invalid_options(options, message: str, tmp_path: Path) -> None:
    with pytest.raises(ValidationError, match=message):
        resolve_options(options, MetaConfig(resolve_dir=tmp_path))


@pytest.mark.parametrize(
    ("icon_options", "message"),
    [
        ({"sizes": "192"}, "sizes parameter"),
        ({"sizes": [192, "512"]}, "sizes parameter"),
        ({"sizes": [0]}, "positive whole number"),
        ({"sizes": [12.5]}, "positive whole number"),
        ({"sizes": [math.inf]}, "positive whole number"),
        ({"sizes": [math.nan]}, "positive whole number"),
        ({"formats": {"gif": {}}}, "formats parameter"),
        ({"formats": ["png"]}, "formats parameter"),
        ({"formats": {"png": 9}}, "encode options"),
        ({"resize": "stretch"}, "resize method"),
        ({"atip": "12"}, "padding parameter"),
        ({"atip": 90}, "room for the icon"),
        ({"atip": math.nan}, "padding parameter"),
        ({"atip": math.inf}, "padding parameter"),
        ({"genFavicons": "yes"}, "favicon generation"),
        ({"msTileColor": 1}, "Microsoft tile color"),
    ],
)
def test_invalid_icon_options(icon_path: Path, icon_options: dict, message: str) -> None:
    options = _options(icon_path)
    options["icons"].update(icon_options)

    with pytest.raises(ValidationError, match=message):
        resolve_options(options)


def test_include_must_be_string_list(icon_path: Path) -> None:
    with pytest.raises(ValidationError, match="include parameter"):
        resolve_options(_options(icon_path, include="customField"))


def test_icon_fields_fall_back_to_flat_fallback(icon_path: Path) -> None:
    config = resolve_options(
        {"name": "A", "icons": {}},
        fallback={"baseIcon": str(icon_path), "sizes": [64], "msTileColor": "#000000"},
    )

    assert config.base_icon_path == icon_path
    assert config.sizes == (64, 192, 512)
    assert config.ms_tile_color == "#000000"


def test_nested_fallback_wins_over_flat_fallback(icon_path: Path) -> None:
    config = resolve_options(
        {"name": "A", "icons": {"baseIcon": str(icon_path)}},
        fallback={"resize": "fill", "icons": {"resize": "contain"}},
    )

    assert config.resize_fit == "contain"
