"""
Output buffering for generated code.

The aggregator either collects everything in a single stream or gives each
top-level declaration its own named buffer. Exactly one buffer may be open
at any time; opening a second one, or closing when none is open, is a
sequencing bug in the caller and raises :class:`SinkStateError`.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from ...logging_config import get_logger

logger = get_logger(__name__)


class SinkStateError(AssertionError):
    """Raised when buffers are opened or closed out of sequence."""

    pass


@dataclass(frozen=True)
class OutputFile:
    """A finished output buffer; filename is None for single-stream output."""

    filename: Optional[str]
    text: str


class SourceBuffer:
    """Line-oriented text buffer."""

    def __init__(self, line_ending: str = "\n"):
        self.line_ending = line_ending
        self._lines: List[str] = []

    def emit_line(self, line: str = "") -> None:
        self._lines.append(line)

    def emit(self, text: str) -> None:
        """Emit a block of text, one buffer line per text line."""
        for line in text.rstrip("\n").split("\n"):
            self._lines.append(line)

    def ensure_blank_line(self) -> None:
        """Emit a blank separator line unless the buffer is empty or already ends in one."""
        if self._lines and self._lines[-1] != "":
            self._lines.append("")

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def text(self) -> str:
        if not self._lines:
            return ""
        return self.line_ending.join(self._lines) + self.line_ending


class FileAggregator:
    """Routes emitted text into one stream or one buffer per declaration."""

    def __init__(
        self, split_files: bool, file_extension: str, line_ending: str = "\n"
    ):
        self.split_files = split_files
        self.file_extension = file_extension
        self.line_ending = line_ending
        self._stream = SourceBuffer(line_ending) if not split_files else None
        self._open: Optional[str] = None
        self._buffer: Optional[SourceBuffer] = None
        self._finished: Dict[str, SourceBuffer] = {}

    def file_name_for(self, name: str) -> str:
        return f"{name.lower()}{self.file_extension}"

    @property
    def is_open(self) -> bool:
        return self._open is not None

    def open(self, name: str, filename: Optional[str] = None) -> SourceBuffer:
        """
        Open the buffer for a declaration.

        Args:
            name: Resolved declaration name
            filename: Explicit file name (defaults to the lower-cased name
                plus the file extension)

        Returns:
            The buffer all writes should go to until close()

        Raises:
            SinkStateError: If a buffer is already open, or the file was
                already finished
        """
        if self._open is not None:
            raise SinkStateError(f"Previous file wasn't finished: {self._open}")

        if not self.split_files:
            self._open = name
            self._buffer = self._stream
            return self._buffer

        filename = filename or self.file_name_for(name)
        if filename in self._finished:
            raise SinkStateError(f"File was already written: {filename}")

        logger.debug("Opening output file %s", filename)
        self._open = filename
        self._buffer = SourceBuffer(self.line_ending)
        return self._buffer

    def close(self) -> None:
        """
        Close the open buffer, moving it to the finished files when splitting.

        Raises:
            SinkStateError: If no buffer is open
        """
        if self._open is None:
            raise SinkStateError("No file is open")

        if self.split_files:
            self._finished[self._open] = self._buffer
        self._open = None
        self._buffer = None

    @contextmanager
    def emit_file(
        self, name: str, filename: Optional[str] = None
    ) -> Iterator[SourceBuffer]:
        """Open a buffer for the duration of a with-block, closing it on every exit path."""
        buffer = self.open(name, filename)
        try:
            yield buffer
        finally:
            self.close()

    def finished_files(self) -> List[OutputFile]:
        """
        All output, in the order buffers were finished.

        Raises:
            SinkStateError: If a buffer is still open
        """
        if self._open is not None:
            raise SinkStateError(f"File still open: {self._open}")

        if not self.split_files:
            return [OutputFile(None, self._stream.text)]
        return [
            OutputFile(filename, buffer.text)
            for filename, buffer in self._finished.items()
        ]
