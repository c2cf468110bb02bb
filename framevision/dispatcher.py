"""Map accessory tap counts onto reader actions."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .controller import CaptureSessionController
from .display import DisplayEmitter
from .errors import TransportError
from .log import get_logger, log_event

NEXT_PAGE_TAPS = 1
PREVIOUS_PAGE_TAPS = 2
NEW_CAPTURE_TAPS = 3


class InputDispatcher:
    """Single consumer of the tap channel.

    Page navigation is served at once, even while a capture cycle is in
    flight, against whatever pages are currently loaded. A triple-tap only
    asks the controller to start; the cycle runs as its own task so later
    taps are not held up behind it.
    """

    def __init__(
        self,
        controller: CaptureSessionController,
        emitter: DisplayEmitter,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.controller = controller
        self.emitter = emitter
        self.logger = logger or get_logger("framevision.dispatcher")

    @property
    def pager(self):
        return self.controller.pager

    async def handle_tap(self, taps: int) -> Optional[asyncio.Task]:
        log_event(self.logger, "tap.received", {"taps": taps}, level="debug")
        if taps == NEXT_PAGE_TAPS:
            self.pager.next_page()
            await self._show_current_page()
        elif taps == PREVIOUS_PAGE_TAPS:
            self.pager.previous_page()
            await self._show_current_page()
        elif taps == NEW_CAPTURE_TAPS:
            return self.controller.start()
        else:
            log_event(self.logger, "tap.ignored", {"taps": taps}, level="debug")
        return None

    async def _show_current_page(self) -> None:
        self.controller.publish()
        try:
            await self.emitter.show_page(self.pager.current_page())
        except TransportError as exc:
            log_event(self.logger, "display.failed", {"error": str(exc)}, level="error")

    async def run(self, channel: "asyncio.Queue[Optional[int]]") -> None:
        """Consume tap counts in arrival order until a ``None`` arrives."""

        while True:
            taps = await channel.get()
            try:
                if taps is None:
                    return
                await self.handle_tap(taps)
            finally:
                channel.task_done()
