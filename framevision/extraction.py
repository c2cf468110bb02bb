# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Turn a captured image into ordered, optionally translated text blocks.

The recognizer's block order is not reliable, so blocks are re-sorted by
descending top edge (the accessory image is rotated, which makes the bottom
of the capture the start of the text) and the lines inside each block are
sorted by the same key. Translation runs per block so that a failing block
does not take the others down with it.
"""
from __future__ import annotations

import io
import logging
import time
from typing import Callable, List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from .config import DEFAULT_ROTATION
from .errors import DecodeError, ExtractionError, TranslationError
from .interfaces import Recognizer, Translator
from .log import get_logger, log_event
from .models import CapturedImage, RecognizedBlock, TextBlock


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def order_blocks(blocks: Sequence[RecognizedBlock]) -> List[TextBlock]:
    """Sort blocks and their lines by descending top edge."""

    ordered: List[TextBlock] = []
    for block in sorted(blocks, key=lambda b: b.top, reverse=True):
        lines = sorted(block.lines, key=lambda line: line.top, reverse=True)
        ordered.append(
            TextBlock(
                lines=[line.text for line in lines],
                top=block.top,
                language=block.language,
            )
        )
    return ordered


def decode_image(image: CapturedImage) -> Image.Image:
    """Decode the compressed capture with Pillow."""

    try:
        decoded = Image.open(io.BytesIO(image.data))
        decoded.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"could not decode {len(image.data)} image bytes: {exc}") from exc
    return decoded


class TextExtractionAdapter:
    """Run recognition and optional translation behind one async call."""

    def __init__(
        self,
        recognizer: Recognizer,
        translator: Optional[Translator] = None,
        *,
        rotation: int = DEFAULT_ROTATION,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.recognizer = recognizer
        self.translator = translator
        self.rotation = rotation
        self.logger = logger or get_logger("framevision.extraction")

    async def extract(
        self,
        image: CapturedImage,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> List[TextBlock]:
        started = time.perf_counter()
        decoded = decode_image(image)
        log_event(self.logger, "extraction.decoded", {"elapsed_ms": _elapsed_ms(started)}, level="debug")

        started = time.perf_counter()
        try:
            recognized = await self.recognizer.recognize(decoded, self.rotation)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"text recognition failed: {exc}") from exc
        log_event(
            self.logger,
            "extraction.recognized",
            {"blocks": len(recognized), "elapsed_ms": _elapsed_ms(started)},
            level="debug",
        )

        blocks = order_blocks(recognized)
        if self.translator is None:
            return blocks
        return await self._translate(blocks, should_continue)

    async def _translate(
        self,
        blocks: List[TextBlock],
        should_continue: Optional[Callable[[], bool]],
    ) -> List[TextBlock]:
        assert self.translator is not None
        translated: List[TextBlock] = []
        for index, block in enumerate(blocks):
            if should_continue is not None and not should_continue():
                break
            started = time.perf_counter()
            try:
                text = await self.translator.translate(block.text)
            except Exception as exc:
                error = exc if isinstance(exc, TranslationError) else TranslationError(str(exc), index)
                log_event(
                    self.logger,
                    "translation.failed",
                    {"block": index, "error": str(error)},
                    level="warning",
                )
                translated.append(block.model_copy(update={"translation_error": str(error)}))
            else:
                log_event(
                    self.logger,
                    "translation.completed",
                    {"block": index, "elapsed_ms": _elapsed_ms(started)},
                    level="debug",
                )
                translated.append(block.model_copy(update={"translation": text}))
        return translated
