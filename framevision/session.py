# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Wire the reader components together for one accessory connection."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import ReaderSettings, load_settings
from .controller import CaptureSessionController
from .dispatcher import InputDispatcher
from .display import DisplayEmitter
from .errors import TransportError
from .extraction import TextExtractionAdapter
from .interfaces import CaptureService, Recognizer, Transport, Translator
from .log import get_logger, log_event
from .pager import Pager


class ReaderSession:
    """Tap-driven reader bound to a transport.

    ``on_taps`` is the transport's inbound callback; taps are queued on a
    channel whose only consumer is the :class:`InputDispatcher`.
    """

    def __init__(
        self,
        transport: Transport,
        capture_service: CaptureService,
        recognizer: Recognizer,
        translator: Optional[Translator] = None,
        settings: Optional[ReaderSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.logger = logger or get_logger("framevision.session")
        if self.settings.translate and translator is None:
            raise ValueError("translation is enabled but no translator was given")

        self.pager = Pager(self.settings.display_width_chars, self.settings.max_lines_per_page)
        self.emitter = DisplayEmitter(transport)
        self.extractor = TextExtractionAdapter(
            recognizer,
            translator if self.settings.translate else None,
            rotation=self.settings.rotation,
        )
        self.controller = CaptureSessionController(
            capture_service,
            self.extractor,
            self.pager,
            self.emitter,
            settings=self.settings,
        )
        self.dispatcher = InputDispatcher(self.controller, self.emitter)
        self.taps: "asyncio.Queue[Optional[int]]" = asyncio.Queue()
        self._dispatch_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._dispatch_task is not None and not self._dispatch_task.done()

    async def start(self) -> None:
        if self.running:
            return
        await self.emitter.set_tap_subscription(True)
        await self.emitter.prompt()
        self._dispatch_task = asyncio.create_task(self.dispatcher.run(self.taps))
        log_event(self.logger, "session.started", {"translate": self.settings.translate})

    def on_taps(self, taps: int) -> None:
        self.taps.put_nowait(taps)

    async def stop(self) -> None:
        if self._dispatch_task is not None:
            self.taps.put_nowait(None)
            await self._dispatch_task
            self._dispatch_task = None
        try:
            await self.emitter.set_tap_subscription(False)
        except TransportError as exc:
            log_event(self.logger, "tap_subscription.failed", {"error": str(exc)}, level="error")
        await self.controller.cancel()

        # the cycle is stale after cancel; drop it instead of leaving it pending
        task = self.controller.task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        log_event(self.logger, "session.stopped")
