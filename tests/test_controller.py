import asyncio

import pytest

from framevision import (
    NO_TEXT_MESSAGE,
    BLANK_TEXT,
    CaptureSessionController,
    DisplayEmitter,
    Pager,
    ReaderSettings,
    SessionState,
    TextExtractionAdapter,
)
from framevision.mocks import MockCaptureService, MockRecognizer, MockTranslator, RecordingTransport

from conftest import make_jpeg

BLOCKS = [
    (10, [("bottom of the page", 10)]),
    (50, [("hello world this is a long line that needs wrapping", 50)]),
]


def _build(capture=None, recognizer=None, translator=None, transport=None):
    settings = ReaderSettings(display_width_chars=20, max_lines_per_page=2)
    transport = transport or RecordingTransport()
    capture = capture or MockCaptureService(make_jpeg())
    recognizer = recognizer or MockRecognizer(BLOCKS)
    controller = CaptureSessionController(
        capture,
        TextExtractionAdapter(recognizer, translator),
        Pager(settings.display_width_chars, settings.max_lines_per_page),
        DisplayEmitter(transport),
        settings=settings,
    )
    return controller, capture, recognizer, transport


async def _wait_for(controller, state):
    while controller.state is not state:
        await asyncio.sleep(0)


def test_cycle_paginates_and_shows_first_page():
    controller, capture, _recognizer, transport = _build()

    assert asyncio.run(controller.run_cycle()) is True

    assert controller.state is SessionState.IDLE
    assert capture.calls == [controller.settings.camera]
    assert [list(page.lines) for page in controller.pager.pages] == [
        ["hello world this is", "a long line that"],
        ["needs wrapping"],
        ["bottom of the page"],
    ]
    assert transport.display_texts == ["hello world this is\na long line that"]

    snapshot = controller.snapshot()
    assert snapshot.page_count == 3
    assert snapshot.metadata.size == len(capture.data)
    assert snapshot.metadata.quality == 10
    assert snapshot.image == capture.data
    assert snapshot.recognized_text == (
        "hello world this is a long line that needs wrapping",
        "bottom of the page",
    )
    assert snapshot.status is None


def test_triple_taps_during_a_cycle_are_dropped():
    async def scenario():
        gate = asyncio.Event()
        controller, capture, _recognizer, _transport = _build(capture=MockCaptureService(make_jpeg(), gate=gate))

        first = controller.start()
        assert first is not None
        assert controller.state is SessionState.CAPTURING
        assert controller.start() is None
        await asyncio.sleep(0)
        assert controller.start() is None

        gate.set()
        assert await first is True
        assert len(capture.calls) == 1

        second = controller.start()
        assert second is not None
        await second
        assert len(capture.calls) == 2

    asyncio.run(scenario())


def test_capture_failure_keeps_previous_pages_and_display():
    controller, capture, _recognizer, transport = _build()
    asyncio.run(controller.run_cycle())
    pages_before = controller.pager.pages
    sent_before = list(transport.messages)

    capture.fail = True
    assert asyncio.run(controller.run_cycle()) is False

    assert controller.state is SessionState.IDLE
    assert controller.pager.pages == pages_before
    assert transport.messages == sent_before
    assert controller.snapshot().status.startswith("capture failed")


def test_extraction_failure_leaves_pagination_unchanged():
    controller, _capture, recognizer, transport = _build()
    asyncio.run(controller.run_cycle())
    controller.pager.next_page()
    pages_before = controller.pager.pages
    sent_before = list(transport.messages)

    recognizer.fail = True
    assert asyncio.run(controller.run_cycle()) is False

    assert controller.state is SessionState.IDLE
    assert controller.pager.pages == pages_before
    assert controller.pager.current_index == 1
    assert transport.messages == sent_before
    assert controller.status.startswith("extraction failed")


def test_undecodable_capture_returns_to_idle():
    controller, _capture, recognizer, _transport = _build(capture=MockCaptureService(b"\xff\xd8garbage"))

    assert asyncio.run(controller.run_cycle()) is False

    assert controller.state is SessionState.IDLE
    assert recognizer.calls == []
    assert controller.pager.page_count == 0
    assert "extraction failed" in controller.status


def test_failed_translation_keeps_other_blocks():
    recognizer = MockRecognizer([(30, [("first", 30)]), (20, [("second", 20)]), (10, [("third", 10)])])
    translator = MockTranslator(prefix="T ", fail_on={1})
    controller, _capture, _recognizer, _transport = _build(recognizer=recognizer, translator=translator)

    assert asyncio.run(controller.run_cycle()) is True

    lines = [line for page in controller.pager.pages for line in page.lines]
    assert lines == ["T first", "second", "T third"]
    snapshot = controller.snapshot()
    assert snapshot.translated_text == ("T first", "T third")
    assert len(snapshot.translation_errors) == 1


def test_empty_extraction_clears_pages_and_reports_no_text():
    controller, _capture, recognizer, transport = _build()
    asyncio.run(controller.run_cycle())

    recognizer.blocks = []
    assert asyncio.run(controller.run_cycle()) is True

    assert controller.pager.page_count == 0
    assert controller.pager.current_page() == []
    assert transport.display_texts[-1] == NO_TEXT_MESSAGE


def test_cancel_clears_pages_and_blanks_display():
    controller, _capture, _recognizer, transport = _build()
    asyncio.run(controller.run_cycle())

    asyncio.run(controller.cancel())

    assert controller.state is SessionState.IDLE
    assert controller.pager.current_page() == []
    snapshot = controller.snapshot()
    assert snapshot.recognized_text == ()
    assert snapshot.image is None
    assert transport.display_texts[-1] == BLANK_TEXT


def test_cancel_discards_in_flight_extraction():
    async def scenario():
        gate = asyncio.Event()
        controller, _capture, _recognizer, transport = _build(recognizer=MockRecognizer(BLOCKS, gate=gate))

        task = controller.start()
        await _wait_for(controller, SessionState.EXTRACTING)
        await controller.cancel()
        assert controller.state is SessionState.IDLE

        gate.set()
        assert await task is False
        return controller, transport

    controller, transport = asyncio.run(scenario())

    assert controller.state is SessionState.IDLE
    assert controller.pager.current_page() == []
    assert transport.display_texts == [BLANK_TEXT]


def test_new_cycle_after_cancel_ignores_the_stale_one():
    async def scenario():
        gate = asyncio.Event()
        controller, _capture, recognizer, transport = _build(recognizer=MockRecognizer(BLOCKS, gate=gate))

        stale = controller.start()
        await _wait_for(controller, SessionState.EXTRACTING)
        await controller.cancel()
        fresh = controller.start()
        assert fresh is not None
        await _wait_for(controller, SessionState.EXTRACTING)

        gate.set()
        results = await asyncio.gather(stale, fresh)
        return controller, recognizer, transport, results

    controller, recognizer, transport, results = asyncio.run(scenario())

    assert results == [False, True]
    assert len(recognizer.calls) == 2
    assert controller.state is SessionState.IDLE
    assert controller.pager.page_count == 3
    assert transport.display_texts == [BLANK_TEXT, "hello world this is\na long line that"]


def test_display_failure_after_pagination_is_reported():
    controller, _capture, _recognizer, _transport = _build(transport=RecordingTransport(fail=True))

    assert asyncio.run(controller.run_cycle()) is True

    assert controller.state is SessionState.IDLE
    assert controller.pager.page_count == 3
    assert controller.status.startswith("display failed")


def test_unexpected_errors_still_return_to_idle():
    class ExplodingCapture:
        async def request_capture(self, settings):
            raise RuntimeError("boom")

    controller, _capture, _recognizer, _transport = _build(capture=ExplodingCapture())

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(controller.run_cycle())
    assert controller.state is SessionState.IDLE


def test_listeners_see_each_state_change():
    controller, _capture, _recognizer, _transport = _build()
    seen = []
    unsubscribe = controller.subscribe(lambda snapshot: seen.append(snapshot.state))

    asyncio.run(controller.run_cycle())
    unsubscribe()
    asyncio.run(controller.run_cycle())

    assert seen == [
        SessionState.CAPTURING,
        SessionState.EXTRACTING,
        SessionState.PAGINATING,
        SessionState.IDLE,
    ]


def test_language_prefix_when_enabled():
    controller, _capture, _recognizer, _transport = _build(
        recognizer=MockRecognizer([(1, [("hola", 1)])])
    )
    controller.settings = ReaderSettings(display_width_chars=20, max_lines_per_page=2, show_language=True)

    asyncio.run(controller.run_cycle())

    assert controller.pager.current_page() == ["en: hola"]
    assert controller.snapshot().recognized_text == ("hola",)
