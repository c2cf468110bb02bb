import asyncio

import pytest
from pydantic import ValidationError

from framevision import (
    BLANK_TEXT,
    DISPLAY_TEXT_CODE,
    PROMPT_TEXT,
    TAP_SUBSCRIPTION_CODE,
    DisplayEmitter,
    TransportError,
    TxMessage,
)
from framevision.mocks import RecordingTransport


def test_tx_message_encodes_text_and_values():
    assert TxMessage(code=DISPLAY_TEXT_CODE, text="héllo").encode() == b"\x0ah\xc3\xa9llo"
    assert TxMessage(code=TAP_SUBSCRIPTION_CODE, value=1).encode() == b"\x10\x01"


def test_tx_message_rejects_out_of_range_codes():
    with pytest.raises(ValidationError):
        TxMessage(code=256)


def test_emitter_sends_one_message_per_call():
    transport = RecordingTransport()
    emitter = DisplayEmitter(transport)

    async def scenario():
        await emitter.set_tap_subscription(True)
        await emitter.prompt()
        await emitter.show_page(["first line", "second line"])
        await emitter.show_status("capture failed")
        await emitter.blank()

    asyncio.run(scenario())

    assert [m.code for m in transport.messages] == [TAP_SUBSCRIPTION_CODE] + [DISPLAY_TEXT_CODE] * 4
    assert transport.messages[0].value == 1
    assert transport.display_texts == [PROMPT_TEXT, "first line\nsecond line", "capture failed", BLANK_TEXT]


def test_emitter_propagates_transport_errors():
    emitter = DisplayEmitter(RecordingTransport(fail=True))

    with pytest.raises(TransportError):
        asyncio.run(emitter.show_page(["x"]))
