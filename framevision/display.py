# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 framevision contributors

"""Outbound messages for the accessory display."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .interfaces import Transport
from .log import get_logger, log_event

DISPLAY_TEXT_CODE = 0x0A
TAP_SUBSCRIPTION_CODE = 0x10

LINE_SEPARATOR = "\n"
PROMPT_TEXT = "3-Tap: new photo\n____________\n1-Tap: next\n2-Tap: previous"
# the display keeps its last text until something replaces it
BLANK_TEXT = " "


class TxMessage(BaseModel):
    """A message for the accessory: a type code plus a text or value payload."""

    model_config = ConfigDict(frozen=True)

    code: int = Field(..., ge=0, le=0xFF)
    text: str = ""
    value: Optional[int] = Field(None, ge=0, le=0xFF)

    def encode(self) -> bytes:
        if self.value is not None:
            return bytes([self.code, self.value])
        return bytes([self.code]) + self.text.encode("utf-8")


class DisplayEmitter:
    """Serialize pages and status strings into display messages.

    Every method issues exactly one ``Transport.send`` call; transport
    failures propagate as :class:`~framevision.errors.TransportError`.
    """

    def __init__(
        self,
        transport: Transport,
        line_separator: str = LINE_SEPARATOR,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.transport = transport
        self.line_separator = line_separator
        self.logger = logger or get_logger("framevision.display")

    async def _send_text(self, text: str) -> None:
        log_event(self.logger, "display.send", {"chars": len(text)}, level="debug")
        await self.transport.send(TxMessage(code=DISPLAY_TEXT_CODE, text=text))

    async def show_page(self, lines: Sequence[str]) -> None:
        await self._send_text(self.line_separator.join(lines))

    async def show_status(self, text: str) -> None:
        await self._send_text(text)

    async def prompt(self) -> None:
        await self._send_text(PROMPT_TEXT)

    async def blank(self) -> None:
        await self._send_text(BLANK_TEXT)

    async def set_tap_subscription(self, enabled: bool) -> None:
        await self.transport.send(TxMessage(code=TAP_SUBSCRIPTION_CODE, value=1 if enabled else 0))
