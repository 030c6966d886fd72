"""Tests for IngestionPipeline."""

from __future__ import annotations

import logging
import threading
from unittest.mock import MagicMock

import pytest

from race_telemetry.ingest import (
    IngestionPipeline,
    IterableSource,
    PublishError,
    TransportError,
)
from race_telemetry.protocol import Frame, SessionEnded, SessionStarted
from tests.packets import SSTA_SAMPLE, event_packet, header_bytes, motion_packet


def _valid(code: bytes = b"SSTA", frame_identifier: int = 0) -> bytes:
    return event_packet(code, frame_identifier=frame_identifier)


def test_publishes_decoded_frames_in_order():
    datagrams = [_valid(frame_identifier=i) for i in range(5)]
    pipeline = IngestionPipeline(IterableSource(datagrams))
    frames = pipeline.frames()

    pipeline.start()

    received = list(frames)
    assert [f.header.frame_identifier for f in received] == [0, 1, 2, 3, 4]
    assert all(isinstance(f, Frame) for f in received)


def test_discards_undecodable_datagrams_without_gaps():
    datagrams = [
        _valid(b"SSTA", 1),
        header_bytes(packet_id=10),          # packet id out of range
        b"\x00\x01",                         # truncated
        header_bytes(packet_id=6) + bytes(100),  # unsupported packet type
        event_packet(b"NOPE"),               # unknown event code
        _valid(b"SEND", 2),
    ]
    pipeline = IngestionPipeline(IterableSource(datagrams))
    frames = pipeline.frames()

    pipeline.start()

    received = list(frames)
    assert [f.body.details for f in received] == [SessionStarted(), SessionEnded()]
    assert pipeline.received == 6
    assert pipeline.discarded == 4
    assert pipeline.published == 2


def test_discarded_datagrams_are_logged_at_debug(caplog):
    pipeline = IngestionPipeline(IterableSource([b"junk"]))
    pipeline.frames()
    with caplog.at_level(logging.DEBUG, logger="race_telemetry.ingest.pipeline"):
        pipeline.start()
    assert "discarded 4-byte datagram" in caplog.text


def test_exhausted_source_closes_queue():
    pipeline = IngestionPipeline(IterableSource([]))
    frames = pipeline.frames()
    pipeline.start()

    assert frames.get() is None
    assert list(frames) == []


def test_transport_error_propagates_and_closes_queue():
    source = MagicMock()
    source.read.side_effect = [SSTA_SAMPLE, TransportError("socket gone")]
    pipeline = IngestionPipeline(source)
    frames = pipeline.frames()

    with pytest.raises(TransportError):
        pipeline.start()

    assert len(list(frames)) == 1


def test_publish_error_when_all_consumers_gone():
    pipeline = IngestionPipeline(IterableSource([SSTA_SAMPLE] * 3))
    frames = pipeline.frames()
    frames.close()

    with pytest.raises(PublishError):
        pipeline.start()
    assert pipeline.published == 0


def test_decoder_is_injectable():
    frame = MagicMock(spec=Frame)
    decoder = MagicMock()
    decoder.decode.return_value = frame
    pipeline = IngestionPipeline(IterableSource([b"anything"]), decoder=decoder)
    frames = pipeline.frames()

    pipeline.start()

    decoder.decode.assert_called_once_with(b"anything")
    assert list(frames) == [frame]


def test_unexpected_decoder_exception_is_not_swallowed():
    decoder = MagicMock()
    decoder.decode.side_effect = RuntimeError("bug")
    pipeline = IngestionPipeline(IterableSource([b"x"]), decoder=decoder)
    frames = pipeline.frames()

    with pytest.raises(RuntimeError):
        pipeline.start()
    assert list(frames) == []


def test_frames_are_distributed_between_subscriptions():
    datagrams = [_valid(frame_identifier=i) for i in range(50)]
    pipeline = IngestionPipeline(IterableSource(datagrams))
    a, b = pipeline.frames(), pipeline.frames()
    pipeline.start()

    got: list[int] = []
    lock = threading.Lock()

    def drain(sub):
        for f in sub:
            with lock:
                got.append(f.header.frame_identifier)

    threads = [threading.Thread(target=drain, args=(s,)) for s in (a, b)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=2.0)

    assert sorted(got) == list(range(50))


def test_background_run_and_stop():
    stopped = threading.Event()
    source = MagicMock()
    source.read.side_effect = lambda: None if stopped.wait(timeout=2.0) else motion_packet()
    source.close.side_effect = stopped.set

    pipeline = IngestionPipeline(source)
    frames = pipeline.frames()
    thread = pipeline.start_in_background()
    assert pipeline.running

    pipeline.stop()

    assert not thread.is_alive()
    assert not pipeline.running
    assert pipeline.error is None
    assert list(frames) == []


def test_background_error_is_recorded():
    source = MagicMock()
    source.read.side_effect = TransportError("boom")
    pipeline = IngestionPipeline(source)
    frames = pipeline.frames()

    thread = pipeline.start_in_background()
    thread.join(timeout=2.0)

    assert isinstance(pipeline.error, TransportError)
    assert frames.get() is None
