import gzip
import io
import sys

import pytest

from fragments_to_sam.components.errors import CorruptInputError, FormatError
from fragments_to_sam.components.stream_fragments import (
    FragmentFileStats,
    decode_line,
    format_progress,
    open_lines,
)

CONTENT = "chr1\t10\t20\tA\nchr1\t30\t40\tB\n"


def test_reads_plain_and_gzip_files(write_file):
    for name in ("fragments.tsv", "fragments.tsv.gz"):
        with open_lines(str(write_file(name, CONTENT))) as lines:
            assert list(lines) == [b"chr1\t10\t20\tA\n", b"chr1\t30\t40\tB\n"]


def test_compression_is_detected_from_content(tmp_path):
    # gzip data under a name that does not say so
    path = tmp_path / "fragments.tsv"
    path.write_bytes(gzip.compress(CONTENT.encode()))
    with open_lines(str(path)) as lines:
        assert len(list(lines)) == 2


def test_reads_stdin(monkeypatch):
    for data in (CONTENT.encode(), gzip.compress(CONTENT.encode())):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
        with open_lines("-") as lines:
            assert list(lines)[1] == b"chr1\t30\t40\tB\n"


def test_truncated_gzip_raises_corrupt_input(tmp_path):
    data = gzip.compress((CONTENT * 50).encode())
    path = tmp_path / "fragments.tsv.gz"
    path.write_bytes(data[: len(data) // 2])

    with pytest.raises(CorruptInputError):
        with open_lines(str(path)) as lines:
            list(lines)


def test_decode_line():
    assert decode_line(b"chr1\t1\t2\tA\r\n") == "chr1\t1\t2\tA"
    assert decode_line("chr1\t1\t2\tA\n") == "chr1\t1\t2\tA"
    with pytest.raises(FormatError) as excinfo:
        decode_line(b"chr1\t1\t2\t\xff\n", line_number=4)
    assert excinfo.value.line_number == 4


def test_fragment_file_stats(write_file):
    plain = FragmentFileStats.from_path(str(write_file("a.tsv", CONTENT)))
    compressed = FragmentFileStats.from_path(str(write_file("a.tsv.gz", CONTENT)))
    assert not plain.compressed
    assert plain.size_bytes == len(CONTENT)
    assert compressed.compressed


def test_format_progress():
    assert format_progress(10, 20) == f"Lines: {10:10d} | Records: {20:10d}"
    assert format_progress(10, 20, 5.0).endswith(f"Rate: {5:8d} lines/sec")
