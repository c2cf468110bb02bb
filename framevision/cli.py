# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Command-line entry for running the reader on saved captures.

Each image goes through one full controller cycle (decode, recognize,
paginate, display) with a recording transport standing in for the
accessory, and the resulting pages are emitted as JSON.
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .capture import FileCaptureService
from .config import ReaderSettings, load_settings
from .controller import CaptureSessionController
from .display import DisplayEmitter
from .extraction import TextExtractionAdapter
from .mocks import MockRecognizer, RecordingTransport
from .pager import Pager
from .tesseract import TesseractRecognizer

_MOCK_BLOCKS = [
    (120.0, [("text recognized by the mock recognizer", 120.0)]),
    (40.0, [("second block", 40.0)]),
]


def build_controller(
    paths: Sequence[str],
    settings: ReaderSettings,
    *,
    use_mocks: bool = False,
    lang: str = "eng",
) -> CaptureSessionController:
    recognizer = MockRecognizer(_MOCK_BLOCKS) if use_mocks else TesseractRecognizer(lang=lang)
    extractor = TextExtractionAdapter(recognizer, rotation=settings.rotation)
    pager = Pager(settings.display_width_chars, settings.max_lines_per_page)
    emitter = DisplayEmitter(RecordingTransport())
    return CaptureSessionController(
        FileCaptureService(paths),
        extractor,
        pager,
        emitter,
        settings=settings,
    )


async def read_images(controller: CaptureSessionController, paths: Sequence[str]) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    for path in paths:
        ok = await controller.run_cycle()
        pages = [list(page.lines) for page in controller.pager.pages] if ok else []
        snapshot = controller.snapshot()
        results.append(
            {
                "image": path,
                "ok": ok,
                "status": snapshot.status,
                "pages": pages,
                "metadata": snapshot.metadata.model_dump(mode="json") if snapshot.metadata else None,
            }
        )
    return results


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read text from saved accessory captures")
    parser.add_argument("images", nargs="+", help="JPEG captures to process in order")
    parser.add_argument("--width", type=int, help="Display width in characters")
    parser.add_argument("--lines", type=int, help="Lines per display page")
    parser.add_argument("--rotation", type=int, help="Clockwise rotation of the captures in degrees")
    parser.add_argument("--lang", default="eng", help="Tesseract language hint")
    parser.add_argument("--out", default="-", help="Output file path or '-' for stdout")
    parser.add_argument(
        "--use-mocks",
        action="store_true",
        help="Use the mock recognizer (no Tesseract needed) for fast smoke tests",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    settings = load_settings()
    overrides: Dict[str, int] = {}
    if args.width is not None:
        overrides["display_width_chars"] = args.width
    if args.lines is not None:
        overrides["max_lines_per_page"] = args.lines
    if args.rotation is not None:
        overrides["rotation"] = args.rotation
    if overrides:
        settings = ReaderSettings(**{**settings.model_dump(), **overrides})

    controller = build_controller(args.images, settings, use_mocks=args.use_mocks, lang=args.lang)
    payload = asyncio.run(read_images(controller, args.images))

    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.out == "-":
        print(text)
    else:
        Path(args.out).write_text(text, encoding="utf-8")


if __name__ == "__main__":  # pragma: no cover
    main()
