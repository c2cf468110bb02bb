# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Error taxonomy for the capture pipeline."""
from __future__ import annotations


class FrameVisionError(RuntimeError):
    """Base class for recoverable pipeline errors."""


class TransportError(FrameVisionError):
    """Capture request or display send to the accessory failed."""


class ExtractionError(FrameVisionError):
    """Text recognition failed for a captured image."""


class DecodeError(ExtractionError):
    """Captured bytes could not be decoded as an image."""


class TranslationError(FrameVisionError):
    """Translating a single text block failed."""

    def __init__(self, message: str, block_index: int | None = None) -> None:
        super().__init__(message)
        self.block_index = block_index
