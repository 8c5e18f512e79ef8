import gzip
from pathlib import Path

import pytest

from fragments_to_sam.components.reference_dictionary import ReferenceDictionary


class RecordingWriter:
    """Writer that keeps everything it is given, in call order."""

    def __init__(self):
        self.events = []

    def write_header(self, header):
        self.events.append(("header", header))

    def write_record(self, header, record):
        self.events.append(("record", record))

    @property
    def records(self):
        return [payload for kind, payload in self.events if kind == "record"]


@pytest.fixture
def genome_dictionary() -> ReferenceDictionary:
    return ReferenceDictionary.from_lines(
        ["chr1\t248956422\n", "chr2\t198295559\n"]
    )


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()


# Write a text file (gzip-compressed when the name ends in .gz) under tmp_path:
#
#   def test_something(write_file):
#       path = write_file("fragments.tsv.gz", "chr1\t0\t10\tBC\n")
#
@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        if name.endswith(".gz"):
            with gzip.open(path, "wt") as fh:
                fh.write(content)
        else:
            path.write_text(content)
        return path

    return _write
