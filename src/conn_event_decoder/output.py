"""Output sink: decoded lines go to stdout for the host to collect."""

from __future__ import annotations

import logging
import sys

logger = logging.getLogger(__name__)


class StdoutSink:
    """Write decoded lines directly to stdout."""

    def write(self, data: bytes) -> None:
        """Write *data* to ``sys.stdout.buffer`` and flush.

        Raises
        ------
        BrokenPipeError
            If the stdout consumer has gone away.
        """
        try:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        except BrokenPipeError:
            logger.warning("stdout broken, consumer likely exited")
            raise

    def close(self) -> None:
        """No-op for stdout."""
