"""Tap-driven text reader for a head-worn camera accessory.

Capture a photo, recognize (and optionally translate) its text, and page
through the result on the accessory's display with 1/2/3-tap gestures.
"""
from __future__ import annotations

from .config import ReaderSettings, load_settings
from .controller import NO_TEXT_MESSAGE, CaptureSessionController
from .dispatcher import InputDispatcher
from .display import (
    BLANK_TEXT,
    DISPLAY_TEXT_CODE,
    PROMPT_TEXT,
    TAP_SUBSCRIPTION_CODE,
    DisplayEmitter,
    TxMessage,
)
from .errors import DecodeError, ExtractionError, FrameVisionError, TranslationError, TransportError
from .extraction import TextExtractionAdapter, decode_image, order_blocks
from .interfaces import CaptureService, Recognizer, Translator, Transport
from .layout import layout_pages, wrap_text
from .models import (
    CameraSettings,
    CapturedImage,
    CaptureMetadata,
    Page,
    RecognizedBlock,
    RecognizedLine,
    SessionSnapshot,
    SessionState,
    TextBlock,
)
from .pager import Pager
from .session import ReaderSession

__version__ = "0.1.0"

__all__ = [
    "BLANK_TEXT",
    "CameraSettings",
    "CaptureMetadata",
    "CaptureService",
    "CaptureSessionController",
    "CapturedImage",
    "DISPLAY_TEXT_CODE",
    "DecodeError",
    "DisplayEmitter",
    "ExtractionError",
    "FrameVisionError",
    "InputDispatcher",
    "NO_TEXT_MESSAGE",
    "PROMPT_TEXT",
    "Page",
    "Pager",
    "ReaderSession",
    "ReaderSettings",
    "RecognizedBlock",
    "RecognizedLine",
    "Recognizer",
    "SessionSnapshot",
    "SessionState",
    "TAP_SUBSCRIPTION_CODE",
    "TextBlock",
    "TextExtractionAdapter",
    "TransportError",
    "TranslationError",
    "Translator",
    "Transport",
    "TxMessage",
    "decode_image",
    "layout_pages",
    "load_settings",
    "order_blocks",
    "wrap_text",
]
