# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Interfaces for the external collaborators of the capture pipeline."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol

from .models import CameraSettings, RecognizedBlock

if TYPE_CHECKING:
    from PIL import Image

    from .display import TxMessage


class CaptureService(Protocol):
    async def request_capture(self, settings: CameraSettings) -> bytes:
        ...


class Recognizer(Protocol):
    async def recognize(self, image: "Image.Image", rotation: int) -> List[RecognizedBlock]:
        ...


class Translator(Protocol):
    async def translate(self, text: str) -> str:
        ...


class Transport(Protocol):
    async def send(self, message: "TxMessage") -> None:
        ...
