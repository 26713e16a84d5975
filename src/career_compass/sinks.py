"""Best-effort text outputs: clipboard copies and file downloads.

Tools receive a ``TextSink`` and call ``write(text)``; the boolean result is
the only failure signal. A sink must never raise into the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)


class TextSink(Protocol):
    def write(self, text: str) -> bool: ...


class BufferSink:
    """Keeps the last written text in memory."""

    def __init__(self):
        self.text: Optional[str] = None
        self.history: list[str] = []

    def write(self, text: str) -> bool:
        self.text = text
        self.history.append(text)
        return True


class FileSink:
    """Writes text to a file, like a browser download."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def write(self, text: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding=self.encoding)
        except OSError as exc:
            logger.warning("Download to %s failed: %s", self.path, exc)
            return False
        logger.info("Wrote %d characters to %s", len(text), self.path)
        return True


class FallbackSink:
    """Tries each sink in order until one accepts the text."""

    def __init__(self, *sinks: TextSink):
        self.sinks = list(sinks)

    def write(self, text: str) -> bool:
        for sink in self.sinks:
            try:
                if sink.write(text):
                    return True
            except Exception as exc:
                logger.warning("%s failed, trying next sink: %s", type(sink).__name__, exc)
        return False


def safe_write(sink: Optional[TextSink], text: str) -> bool:
    """Write through ``sink``, turning a missing sink or an exception into False."""
    if sink is None:
        return False
    return FallbackSink(sink).write(text)
