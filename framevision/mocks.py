"""In-memory collaborators for tests and smoke runs."""
from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from PIL import Image

from .display import DISPLAY_TEXT_CODE, TxMessage
from .errors import ExtractionError, TransportError, TranslationError
from .models import CameraSettings, RecognizedBlock, RecognizedLine


class MockCaptureService:
    """Return fixed image bytes; optionally wait on ``gate`` or fail."""

    def __init__(
        self,
        data: bytes = b"",
        *,
        gate: Optional[asyncio.Event] = None,
        fail: bool = False,
    ) -> None:
        self.data = data
        self.gate = gate
        self.fail = fail
        self.calls: List[CameraSettings] = []

    async def request_capture(self, settings: CameraSettings) -> bytes:
        self.calls.append(settings)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise TransportError("mock capture failed")
        return self.data


class MockRecognizer:
    """Return canned blocks, given as ``(top, [(line, line_top), ...])``."""

    def __init__(
        self,
        blocks: Sequence[Tuple[float, Sequence[Tuple[str, float]]]] = (),
        *,
        gate: Optional[asyncio.Event] = None,
        fail: bool = False,
    ) -> None:
        self.blocks = [
            RecognizedBlock(
                lines=[RecognizedLine(text=text, top=line_top) for text, line_top in lines],
                top=top,
                language="en",
            )
            for top, lines in blocks
        ]
        self.gate = gate
        self.fail = fail
        self.calls: List[Tuple[Image.Image, int]] = []

    async def recognize(self, image: Image.Image, rotation: int) -> List[RecognizedBlock]:
        self.calls.append((image, rotation))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ExtractionError("mock recognition failed")
        return list(self.blocks)


class MockTranslator:
    """Tag text with ``prefix``; calls listed in ``fail_on`` (0-based) raise."""

    def __init__(self, prefix: str = "[tr] ", fail_on: Iterable[int] = ()) -> None:
        self.prefix = prefix
        self.fail_on: Set[int] = set(fail_on)
        self.calls: List[str] = []

    async def translate(self, text: str) -> str:
        index = len(self.calls)
        self.calls.append(text)
        if index in self.fail_on:
            raise TranslationError(f"mock translation failed for call {index}", index)
        return f"{self.prefix}{text}"


class RecordingTransport:
    """Keep every message that would have gone to the accessory."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: List[TxMessage] = []

    async def send(self, message: TxMessage) -> None:
        if self.fail:
            raise TransportError("mock transport failed")
        self.messages.append(message)

    @property
    def display_texts(self) -> List[str]:
        return [m.text for m in self.messages if m.code == DISPLAY_TEXT_CODE]
