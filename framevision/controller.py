# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Capture session controller.

One cycle runs capture, extraction and pagination as a chain of awaited
calls on the event loop. ``start`` is the single-flight guard: the idle
check and the switch to ``capturing`` happen in the same scheduling step,
so two triple-taps can never both pass it.

``cancel`` bumps a generation counter. A cycle compares its generation
with the current one whenever an awaited call resolves and drops its
results once it has been superseded, leaving pages and display alone.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence

from .config import ReaderSettings
from .display import DisplayEmitter
from .errors import ExtractionError, TransportError
from .extraction import TextExtractionAdapter
from .interfaces import CaptureService
from .log import get_logger, log_event
from .models import (
    CapturedImage,
    CaptureMetadata,
    SessionSnapshot,
    SessionState,
    TextBlock,
)
from .pager import Pager

NO_TEXT_MESSAGE = "No text found"

Listener = Callable[[SessionSnapshot], None]


def _retrieve_result(task: asyncio.Task) -> None:
    # crashes are logged as cycle.crashed; nobody else may await the task
    if not task.cancelled():
        task.exception()


class CaptureSessionController:
    def __init__(
        self,
        capture_service: CaptureService,
        extractor: TextExtractionAdapter,
        pager: Pager,
        emitter: DisplayEmitter,
        settings: Optional[ReaderSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.capture_service = capture_service
        self.extractor = extractor
        self.pager = pager
        self.emitter = emitter
        self.settings = settings or ReaderSettings()
        self.logger = logger or get_logger("framevision.controller")

        self._state = SessionState.IDLE
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

        self.image: Optional[CapturedImage] = None
        self.recognized_text: List[str] = []
        self.translated_text: List[str] = []
        self.translation_errors: List[str] = []
        self.status: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self._state,
            page_lines=tuple(self.pager.current_page()),
            page_index=self.pager.current_index,
            page_count=self.pager.page_count,
            image=self.image.data if self.image else None,
            metadata=self.image.metadata if self.image else None,
            recognized_text=tuple(self.recognized_text),
            translated_text=tuple(self.translated_text),
            translation_errors=tuple(self.translation_errors),
            status=self.status,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        self.publish()

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def start(self) -> Optional[asyncio.Task]:
        """Begin a capture cycle unless one is already running.

        Returns the cycle task, or ``None`` when the request was dropped.
        Must be called from within a running event loop.
        """

        if self._state is not SessionState.IDLE:
            log_event(self.logger, "capture.rejected", {"state": self._state.value})
            return None

        self._generation += 1
        generation = self._generation
        self._set_state(SessionState.CAPTURING)
        self._task = asyncio.create_task(self._run_cycle(generation))
        self._task.add_done_callback(_retrieve_result)
        return self._task

    async def run_cycle(self) -> bool:
        task = self.start()
        if task is None:
            return False
        return await task

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run_cycle(self, generation: int) -> bool:
        try:
            return await self._cycle(generation)
        except Exception:
            if self._is_current(generation):
                log_event(self.logger, "cycle.crashed", {"state": self._state.value}, level="error", exc_info=True)
            raise
        finally:
            if self._is_current(generation) and self._state is not SessionState.IDLE:
                self._set_state(SessionState.IDLE)

    async def _cycle(self, generation: int) -> bool:
        try:
            image = await self._capture()
        except TransportError as exc:
            self._fail(generation, "capture", exc)
            return False
        if not self._is_current(generation):
            self._discard(generation, "capture")
            return False

        self.image = image
        self._set_state(SessionState.EXTRACTING)
        try:
            blocks = await self.extractor.extract(image, lambda: self._is_current(generation))
        except ExtractionError as exc:
            self._fail(generation, "extraction", exc)
            return False
        if not self._is_current(generation):
            self._discard(generation, "extraction")
            return False
        log_event(self.logger, "extraction.completed", {"blocks": len(blocks)})

        self._set_state(SessionState.PAGINATING)
        self._paginate(blocks)
        try:
            if self.pager.page_count:
                await self.emitter.show_page(self.pager.current_page())
            else:
                await self.emitter.show_status(NO_TEXT_MESSAGE)
        except TransportError as exc:
            self._report("display", exc)
        return True

    async def _capture(self) -> CapturedImage:
        settings = self.settings.camera
        started = time.perf_counter()
        data = await self.capture_service.request_capture(settings)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        metadata = CaptureMetadata(
            quality=settings.quality,
            settings=settings,
            size=len(data),
            elapsed_ms=elapsed_ms,
        )
        log_event(self.logger, "capture.completed", {"size": len(data), "elapsed_ms": elapsed_ms})
        return CapturedImage(data=data, metadata=metadata)

    def _block_text(self, block: TextBlock) -> str:
        if self.settings.show_language and block.language:
            return f"{block.language}: {block.display_text}"
        return block.display_text

    def _paginate(self, blocks: Sequence[TextBlock]) -> None:
        self.pager.clear()
        self.recognized_text = [block.text for block in blocks]
        self.translated_text = [block.translation for block in blocks if block.translation is not None]
        self.translation_errors = [
            block.translation_error for block in blocks if block.translation_error is not None
        ]
        for block in blocks:
            self.pager.append_line(self._block_text(block))
        self.status = None

    def _fail(self, generation: int, stage: str, exc: Exception) -> None:
        if not self._is_current(generation):
            self._discard(generation, stage)
            return
        self._report(stage, exc)

    def _report(self, stage: str, exc: Exception) -> None:
        self.status = f"{stage} failed: {exc}"
        log_event(
            self.logger,
            "cycle.failed",
            {"stage": stage, "error_type": type(exc).__name__, "error": str(exc)},
            level="error",
        )

    def _discard(self, generation: int, stage: str) -> None:
        log_event(self.logger, "cycle.discarded", {"stage": stage, "generation": generation})

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    async def cancel(self) -> None:
        """Abandon any running cycle, clear all text and blank the display."""

        self._generation += 1
        self._set_state(SessionState.CANCELLING)
        self.pager.clear()
        self.image = None
        self.recognized_text = []
        self.translated_text = []
        self.translation_errors = []
        self.status = None
        try:
            await self.emitter.blank()
        except TransportError as exc:
            self._report("display", exc)
        finally:
            log_event(self.logger, "session.cancelled", {"generation": self._generation})
            self._set_state(SessionState.IDLE)
