"""Schema helpers for the application settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import TMDB_API_URL, TMDB_TIMEOUT_SEC

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "favactors/settings.schema.json",
    "type": "object",
    "required": ["schema", "tmdb", "images", "ui"],
    "properties": {
        "schema": {"const": "favactors/settings@1"},
        "data_dir": {"type": ["string", "null"]},
        "tmdb": {
            "type": "object",
            "required": ["api_url", "timeout"],
            "properties": {
                "api_key": {"type": ["string", "null"]},
                "api_url": {"type": "string", "minLength": 1},
                "timeout": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": True,
        },
        "images": {
            "type": "object",
            "properties": {
                "profile_size": {"type": ["string", "null"], "pattern": "^(w|h)[0-9]+$|^original$"},
            },
            "additionalProperties": True,
        },
        "ui": {
            "type": "object",
            "properties": {
                "window_size": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 200},
                    "minItems": 2,
                    "maxItems": 2,
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "favactors/settings@1",
    "data_dir": None,
    "tmdb": {
        "api_key": None,
        "api_url": TMDB_API_URL,
        "timeout": TMDB_TIMEOUT_SEC,
    },
    "images": {
        "profile_size": None,
    },
    "ui": {
        "window_size": [420, 640],
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("tmdb", "images", "ui")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            if key == "data_dir" and value not in {None, ""}:
                try:
                    merged[key] = os.fspath(value)
                except TypeError:
                    continue
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
