"""Tests for the output module."""

from unittest.mock import MagicMock, patch

import pytest

from conn_event_decoder.output import StdoutSink


class TestStdoutSink:
    """Tests for :class:`StdoutSink`."""

    def test_stdout_sink_writes_bytes(self) -> None:
        """StdoutSink writes raw bytes to stdout buffer."""
        sink = StdoutSink()
        data = b"truck-7,no date,52,SETUP_STARTED\n"

        mock_buffer = MagicMock()
        mock_stdout = MagicMock()
        mock_stdout.buffer = mock_buffer
        with patch("conn_event_decoder.output.sys") as mock_sys:
            mock_sys.stdout = mock_stdout
            sink.write(data)
            mock_buffer.write.assert_called_once_with(data)
            mock_buffer.flush.assert_called_once()

    def test_broken_pipe_is_reraised(self) -> None:
        sink = StdoutSink()
        mock_stdout = MagicMock()
        mock_stdout.buffer.write.side_effect = BrokenPipeError
        with patch("conn_event_decoder.output.sys") as mock_sys:
            mock_sys.stdout = mock_stdout
            with pytest.raises(BrokenPipeError):
                sink.write(b"x\n")
