"""
Line-oriented file writer rooted at an output directory.

Lines are buffered while a file is open and written out when it is closed,
so a file on disk is always either untouched or complete. Only one file may
be open at a time: open_file, write_line and close_file must alternate in
that order.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..core.errors import FileSystemError

logger = logging.getLogger(__name__)

DEFAULT_INDENT_WIDTH = 3


class FileWriter:
    """
    Writes text files below an output directory.

    Example:
        writer = FileWriter(Path("output"))
        writer.open_file("models/org.acme.cto")
        writer.write_line(0, "namespace org.acme")
        writer.close_file()
    """

    def __init__(self, output_dir: Path | str, indent_width: int = DEFAULT_INDENT_WIDTH):
        self.output_dir = Path(output_dir)
        self.indent_width = indent_width
        self.files_written: list[Path] = []
        self._relative_path: str | None = None
        self._before: list[str] = []
        self._lines: list[str] = []

    @property
    def is_open(self) -> bool:
        return self._relative_path is not None

    def open_file(self, relative_path: str) -> None:
        """
        Begin writing a file.

        Raises:
            FileSystemError: If another file is still open
        """
        if self._relative_path is not None:
            raise FileSystemError(
                f"Cannot open {relative_path}: {self._relative_path} has not been closed"
            )
        self._relative_path = relative_path
        self._before = []
        self._lines = []

    def write_line(self, indent: int, text: str) -> None:
        """Append a line prefixed with ``indent * indent_width`` spaces."""
        self._require_open("write to")
        self._lines.append(self._format(indent, text))

    def write(self, text: str) -> None:
        """Append text verbatim, without indentation or line-ending translation (model copies)."""
        self._require_open("write to")
        self._lines.append(text)

    def write_lines(self, text: str, indent: int = 0) -> None:
        """Append multi-line text line by line, ending each line with the host line separator."""
        self._require_open("write to")
        for line in text.splitlines():
            self.write_line(indent, line)

    def write_before_line(self, indent: int, text: str) -> None:
        """Add a line ahead of everything written with write_line (e.g. imports)."""
        self._require_open("write to")
        self._before.append(self._format(indent, text))

    def close_file(self) -> Path:
        """
        Write the buffered lines to disk and release the file.

        Returns:
            Path of the written file

        Raises:
            FileSystemError: If no file is open or the write fails
        """
        self._require_open("close")
        relative_path = self._relative_path
        path = self.output_dir / relative_path
        content = "".join(self._before + self._lines)
        self._relative_path = None
        self._before = []
        self._lines = []

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise FileSystemError(f"Cannot write {path}: {e}") from e

        logger.debug("Wrote %s", path)
        self.files_written.append(path)
        return path

    def copy_file(self, source: Path, relative_path: str) -> Path:
        """
        Copy a file byte-for-byte to a path below the output directory.

        Raises:
            FileSystemError: If a file is open or the copy fails
        """
        if self._relative_path is not None:
            raise FileSystemError(
                f"Cannot copy {relative_path}: {self._relative_path} has not been closed"
            )
        path = self.output_dir / relative_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, path)
        except OSError as e:
            raise FileSystemError(f"Cannot copy {source} to {path}: {e}") from e

        logger.debug("Copied %s", path)
        self.files_written.append(path)
        return path

    @contextmanager
    def writing(self, relative_path: str) -> Iterator[FileWriter]:
        """Open a file for the duration of a with-block; it is closed on normal exit."""
        self.open_file(relative_path)
        try:
            yield self
        except BaseException:
            self._relative_path = None
            self._before = []
            self._lines = []
            raise
        self.close_file()

    def _format(self, indent: int, text: str) -> str:
        return " " * (indent * self.indent_width) + text + os.linesep

    def _require_open(self, action: str) -> None:
        if self._relative_path is None:
            raise FileSystemError(f"Cannot {action} a file: no file is open")
