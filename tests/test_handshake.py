"""Tests for the enable handshake state machine."""

from unittest.mock import Mock

import pytest

from midicontrols.midi import Handshake, HandshakeState


@pytest.mark.unit
class TestHandshake:
    """Test PENDING -> READY | FAILED transitions."""

    def test_starts_pending(self):
        handshake = Handshake("output")
        assert handshake.state == HandshakeState.PENDING
        assert handshake.is_pending
        assert handshake.value is None
        assert handshake.error is None

    def test_queued_work_runs_in_order_on_resolve(self):
        handshake = Handshake("output")
        calls = []
        handshake.then(lambda port: calls.append(("first", port)))
        handshake.then(lambda port: calls.append(("second", port)))
        assert calls == []

        handshake.resolve("port")

        assert handshake.is_ready
        assert handshake.value == "port"
        assert calls == [("first", "port"), ("second", "port")]

    def test_then_after_ready_runs_immediately(self):
        handshake = Handshake("output")
        handshake.resolve("port")
        on_ready = Mock()

        handshake.then(on_ready)

        on_ready.assert_called_once_with("port")

    def test_reject_drops_queue_and_reports(self):
        handshake = Handshake("input")
        on_ready = Mock()
        on_failure = Mock()
        handshake.then(on_ready, on_failure)
        handshake.then(on_ready)
        error = RuntimeError("no device")

        handshake.reject(error)

        assert handshake.is_failed
        assert handshake.error is error
        on_ready.assert_not_called()
        on_failure.assert_called_once_with(error)

    def test_then_after_failure(self):
        handshake = Handshake("input")
        error = RuntimeError("no device")
        handshake.reject(error)
        on_ready = Mock()
        on_failure = Mock()

        handshake.then(on_ready, on_failure)
        handshake.then(on_ready)

        on_ready.assert_not_called()
        on_failure.assert_called_once_with(error)

    def test_settles_only_once(self):
        handshake = Handshake("output")
        handshake.resolve("port")
        handshake.reject(RuntimeError("late"))
        handshake.resolve("other")

        assert handshake.is_ready
        assert handshake.value == "port"
        assert handshake.error is None

    def test_failing_continuation_is_isolated(self):
        handshake = Handshake("output")
        after = Mock()
        handshake.then(Mock(side_effect=RuntimeError("boom")))
        handshake.then(after)

        handshake.resolve("port")

        after.assert_called_once_with("port")
