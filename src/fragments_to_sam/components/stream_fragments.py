"""
Line sources for fragments and genome files.

Fragments files are usually BGZF-compressed (tabix-indexed); BGZF is a
series of gzip members, so the gzip module decodes it. Compression is
detected from the leading bytes, which also works for stdin.

Lines are yielded as raw bytes; the parsers decode them one at a time so
a single undecodable line is reported against its line number.
"""

import contextlib
import gzip
import io
import os
import sys
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Type, Union

from .errors import CorruptInputError, FormatError

GZIP_MAGIC = b"\x1f\x8b"
STDIN_PATH = "-"


@dataclass
class FragmentFileStats:
    """Fragments file statistics container."""

    path: str
    size_bytes: int
    compressed: bool
    modified_time: float

    @classmethod
    def from_path(cls, path: str) -> "FragmentFileStats":
        """Stat the file and sniff its compression without decoding it."""
        stat = os.stat(path)
        with open(path, "rb") as handle:
            compressed = handle.read(len(GZIP_MAGIC)) == GZIP_MAGIC
        return cls(
            path=path,
            size_bytes=stat.st_size,
            compressed=compressed,
            modified_time=stat.st_mtime,
        )


def decode_line(
    line: Union[bytes, str],
    line_number: Optional[int] = None,
    error: Type[FormatError] = FormatError,
) -> str:
    """Decode a raw line as UTF-8 and drop its line terminator."""
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise error(f"line is not valid UTF-8: {e}", line_number) from e
    return line.rstrip("\r\n")

def _decompress(raw: BinaryIO) -> BinaryIO:
    buffered = raw if hasattr(raw, "peek") else io.BufferedReader(raw)
    if buffered.peek(len(GZIP_MAGIC))[: len(GZIP_MAGIC)] == GZIP_MAGIC:
        return gzip.GzipFile(fileobj=buffered)
    return buffered


def _checked_lines(handle: BinaryIO, path: str) -> Iterator[bytes]:
    try:
        yield from handle
    except (EOFError, zlib.error) as e:
        raise CorruptInputError(f"{path}: {e}") from e


@contextlib.contextmanager
def open_lines(path: str) -> Iterator[Iterator[bytes]]:
    """
    Open ``path`` (or stdin for ``-``) and yield an iterator over its lines.

    Lines are bytes and keep their trailing newline; the parsers decode and
    strip them. A truncated or corrupt compressed stream raises
    CorruptInputError while iterating.
    """
    if path == STDIN_PATH:
        # leave the process' stdin open
        yield _checked_lines(_decompress(sys.stdin.buffer), path)
        return

    raw = open(path, "rb")
    handle = _decompress(raw)
    try:
        yield _checked_lines(handle, path)
    finally:
        handle.close()
        # GzipFile does not close a file object it was handed
        raw.close()


def format_progress(
    lines_read: int, records_written: int, rate: float = None
) -> str:
    """Format progress message for consistent logging."""
    base = f"Lines: {lines_read:10d} | Records: {records_written:10d}"
    if rate is not None:
        base += f" | Rate: {rate:8.0f} lines/sec"
    return base
