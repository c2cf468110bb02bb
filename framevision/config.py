# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Reader settings resolved from ``FRAMEVISION_*`` environment variables."""
from __future__ import annotations

import os

from pydantic import BaseModel, Field, ValidationError

from .models import CameraSettings

DEFAULT_DISPLAY_WIDTH_CHARS = 24
DEFAULT_MAX_LINES_PER_PAGE = 5
# accessory images arrive rotated 90 degrees clockwise
DEFAULT_ROTATION = 90


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_truthy(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


class ReaderSettings(BaseModel):
    display_width_chars: int = Field(DEFAULT_DISPLAY_WIDTH_CHARS, ge=1)
    max_lines_per_page: int = Field(DEFAULT_MAX_LINES_PER_PAGE, ge=1)
    translate: bool = False
    # prefix each block with its language, e.g. "eng: ..."
    show_language: bool = False
    rotation: int = DEFAULT_ROTATION
    camera: CameraSettings = Field(default_factory=CameraSettings)


def _load_camera_settings() -> CameraSettings:
    defaults = CameraSettings()
    try:
        return CameraSettings(
            quality_index=_env_int("FRAMEVISION_CAMERA_QUALITY_INDEX", defaults.quality_index),
            metering_index=_env_int("FRAMEVISION_CAMERA_METERING_INDEX", defaults.metering_index),
            exposure=_env_float("FRAMEVISION_CAMERA_EXPOSURE", defaults.exposure),
        )
    except ValidationError:
        return defaults


def load_settings() -> ReaderSettings:
    """Build settings from the environment, falling back to defaults per field."""

    width = _env_int("FRAMEVISION_DISPLAY_WIDTH", DEFAULT_DISPLAY_WIDTH_CHARS)
    lines = _env_int("FRAMEVISION_LINES_PER_PAGE", DEFAULT_MAX_LINES_PER_PAGE)
    return ReaderSettings(
        display_width_chars=width if width >= 1 else DEFAULT_DISPLAY_WIDTH_CHARS,
        max_lines_per_page=lines if lines >= 1 else DEFAULT_MAX_LINES_PER_PAGE,
        translate=_env_truthy("FRAMEVISION_TRANSLATE", False),
        show_language=_env_truthy("FRAMEVISION_SHOW_LANGUAGE", False),
        rotation=_env_int("FRAMEVISION_ROTATION", DEFAULT_ROTATION),
        camera=_load_camera_settings(),
    )
