"""Data models shared across the capture pipeline.

Value objects are pydantic models so collaborators can be swapped without
changing what flows between them. Anything that is handed to more than one
component is frozen.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

QUALITY_VALUES: Tuple[int, ...] = (10, 25, 50, 100)
METERING_VALUES: Tuple[str, ...] = ("SPOT", "CENTER_WEIGHTED", "AVERAGE")


class CameraSettings(BaseModel):
    """Capture parameters requested from the accessory camera."""

    model_config = ConfigDict(frozen=True)

    quality_index: int = Field(0, ge=0, le=len(QUALITY_VALUES) - 1)
    metering_index: int = Field(2, ge=0, le=len(METERING_VALUES) - 1)
    # runs of the auto exposure/gain algorithm, one every 100ms
    auto_exp_gain_times: int = Field(2, ge=0, le=10)
    exposure: float = Field(0.18, ge=0.0, le=1.0)
    exposure_speed: float = Field(0.5, ge=0.0, le=1.0)
    shutter_limit: int = Field(16383, ge=4, le=16383)
    analog_gain_limit: int = Field(1, ge=0, le=248)
    white_balance_speed: float = Field(0.5, ge=0.0, le=1.0)

    @property
    def quality(self) -> int:
        return QUALITY_VALUES[self.quality_index]

    @property
    def metering(self) -> str:
        return METERING_VALUES[self.metering_index]


class CaptureMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: int
    settings: CameraSettings
    size: int = Field(..., ge=0)
    elapsed_ms: int = Field(..., ge=0)


class CapturedImage(BaseModel):
    """Compressed image bytes as received from the accessory."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    metadata: CaptureMetadata


class RecognizedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    top: float


class RecognizedBlock(BaseModel):
    """Raw recognizer output for one grouped region, in recognizer order."""

    model_config = ConfigDict(frozen=True)

    lines: List[RecognizedLine]
    top: float
    language: Optional[str] = None


class TextBlock(BaseModel):
    """Ordered text block ready for layout, optionally translated."""

    model_config = ConfigDict(frozen=True)

    lines: List[str]
    top: float
    language: Optional[str] = None
    translation: Optional[str] = None
    translation_error: Optional[str] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def display_text(self) -> str:
        if self.translation is not None:
            return self.translation
        return self.text


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: Tuple[str, ...] = ()


class SessionState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    EXTRACTING = "extracting"
    PAGINATING = "paginating"
    CANCELLING = "cancelling"


class SessionSnapshot(BaseModel):
    """Read-only view of the controller for presentation layers."""

    model_config = ConfigDict(frozen=True)

    state: SessionState
    page_lines: Tuple[str, ...] = ()
    page_index: int = Field(0, ge=0)
    page_count: int = Field(0, ge=0)
    image: Optional[bytes] = None
    metadata: Optional[CaptureMetadata] = None
    recognized_text: Tuple[str, ...] = ()
    translated_text: Tuple[str, ...] = ()
    translation_errors: Tuple[str, ...] = ()
    status: Optional[str] = None
