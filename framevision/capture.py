"""Capture services that do not need a connected accessory."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List

from .errors import TransportError
from .models import CameraSettings


class FileCaptureService:
    """Serve previously saved JPEG captures in order, one per request."""

    def __init__(self, paths: Iterable[str | Path]) -> None:
        self.paths: List[Path] = [Path(p) for p in paths]
        self.requests: List[CameraSettings] = []

    async def request_capture(self, settings: CameraSettings) -> bytes:
        self.requests.append(settings)
        if not self.paths:
            raise TransportError("no more captures available")
        path = self.paths.pop(0)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise TransportError(f"could not read capture {path}: {exc}") from exc
