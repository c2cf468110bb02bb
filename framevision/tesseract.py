"""Recognizer implementation backed by pytesseract.

Tesseract's ``image_to_data`` output is grouped back into blocks and lines
using its ``block_num``/``par_num``/``line_num`` columns, and each line and
block carries the smallest ``top`` of its words so the extraction adapter
can order them. The blocking Tesseract call runs in a worker thread.
"""
from __future__ import annotations

import asyncio
import os
from typing import Dict, List, Tuple

import pytesseract
from PIL import Image
from pytesseract import Output

from .models import RecognizedBlock, RecognizedLine


def _pytesseract_allowed() -> bool:
    raw = os.environ.get("FRAMEVISION_ALLOW_PYTESSERACT")
    if raw is None:
        return True
    return raw.strip().lower() not in {"0", "false", "no", "off"}


class TesseractRecognizer:
    """Recognize text blocks with Tesseract.

    Args:
        lang: Language hint passed to Tesseract (e.g. ``"eng"`` or
            ``"eng+deu"``).
        oem: OCR Engine Mode; ``3`` selects the LSTM engine.
        psm: Page segmentation mode; ``3`` lets Tesseract find blocks on a
            free-form scene instead of assuming a single column.
        min_confidence: Words below this confidence (0-100) are dropped.
    """

    def __init__(self, lang: str = "eng", oem: int = 3, psm: int = 3, min_confidence: float = 0.0) -> None:
        if not _pytesseract_allowed():
            raise RuntimeError(
                "pytesseract is disabled by FRAMEVISION_ALLOW_PYTESSERACT; set it to 1/true to enable"
            )
        self.lang = lang
        self.config = f"--oem {oem} --psm {psm}"
        self.min_confidence = min_confidence
        # Tesseract does not detect languages; a single configured language is
        # the only one words can be recognized in
        self.language = lang if "+" not in lang else None

    async def recognize(self, image: Image.Image, rotation: int) -> List[RecognizedBlock]:
        return await asyncio.to_thread(self._recognize_sync, image, rotation)

    def _recognize_sync(self, image: Image.Image, rotation: int) -> List[RecognizedBlock]:
        # PIL rotates counter-clockwise, undoing a clockwise capture rotation
        upright = image.rotate(rotation, expand=True) if rotation % 360 else image
        data = pytesseract.image_to_data(
            upright,
            lang=self.lang,
            config=self.config,
            output_type=Output.DICT,
        )
        return self._group(data)

    def _group(self, data: Dict[str, list]) -> List[RecognizedBlock]:
        lines: Dict[Tuple[int, int, int], List[Tuple[str, float]]] = {}
        for text, conf, top, block_num, par_num, line_num in zip(
            data.get("text", []),
            data.get("conf", []),
            data.get("top", []),
            data.get("block_num", []),
            data.get("par_num", []),
            data.get("line_num", []),
        ):
            if not text or not str(text).strip():
                continue
            if conf is None or float(conf) < 0 or float(conf) < self.min_confidence:
                continue
            key = (int(block_num), int(par_num), int(line_num))
            lines.setdefault(key, []).append((str(text), float(top)))

        blocks: Dict[int, List[RecognizedLine]] = {}
        for (block_num, _par, _line), words in lines.items():
            blocks.setdefault(block_num, []).append(
                RecognizedLine(
                    text=" ".join(word for word, _top in words),
                    top=min(top for _word, top in words),
                )
            )

        return [
            RecognizedBlock(
                lines=block_lines,
                top=min(line.top for line in block_lines),
                language=self.language,
            )
            for block_lines in blocks.values()
        ]
