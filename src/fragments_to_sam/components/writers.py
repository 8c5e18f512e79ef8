"""
Alignment Writers

Sinks for the converted stream. Every writer exposes ``write_header(header)``
and ``write_record(header, record)``; the pipeline never depends on how the
output is serialized.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

import pysam

from .sam_header import SamHeader
from .synthesizer import format_sam_line
from .types import AlignmentRecord

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("sam", "bam")


class AlignmentWriter(ABC):
    """Abstract base class for alignment sinks."""

    @abstractmethod
    def write_header(self, header: SamHeader) -> None:
        """Write the header. Called exactly once, before any record."""
        pass

    @abstractmethod
    def write_record(self, header: SamHeader, record: AlignmentRecord) -> None:
        """Write one alignment record."""
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SamTextWriter(AlignmentWriter):
    """Writes SAM text to an open text stream."""

    def __init__(self, stream: TextIO, close_stream: bool = False):
        self.stream = stream
        self.close_stream = close_stream

    def write_header(self, header: SamHeader) -> None:
        for line in header.to_lines():
            self.stream.write(line + "\n")

    def write_record(self, header: SamHeader, record: AlignmentRecord) -> None:
        self.stream.write(format_sam_line(header, record) + "\n")

    def close(self) -> None:
        self.stream.flush()
        if self.close_stream:
            self.stream.close()


class PysamAlignmentWriter(AlignmentWriter):
    """
    Delegates serialization to ``pysam.AlignmentFile``.

    The file is opened when the header arrives, since pysam needs the
    header to create it.
    """

    def __init__(self, path: str, output_format: str = "bam"):
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {output_format}")
        self.path = path
        self.output_format = output_format
        self._file: Optional[pysam.AlignmentFile] = None

    @property
    def file_mode(self) -> str:
        return "wb" if self.output_format == "bam" else "w"

    def write_header(self, header: SamHeader) -> None:
        if self._file is not None:
            raise RuntimeError("header already written")
        alignment_header = pysam.AlignmentHeader.from_dict(header.to_dict())
        self._file = pysam.AlignmentFile(
            self.path, self.file_mode, header=alignment_header
        )
        logger.debug(f"Opened {self.path} for {self.output_format} output")

    def write_record(self, header: SamHeader, record: AlignmentRecord) -> None:
        if self._file is None:
            raise RuntimeError("write_header must be called before write_record")
        self._file.write(to_aligned_segment(self._file.header, record))

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


def to_aligned_segment(
    alignment_header: pysam.AlignmentHeader, record: AlignmentRecord
) -> pysam.AlignedSegment:
    """Convert a record to a pysam AlignedSegment (0-based coordinates)."""
    segment = pysam.AlignedSegment(alignment_header)
    segment.query_name = record.read_name
    segment.flag = record.flags
    segment.reference_id = record.reference_id
    segment.reference_start = record.position - 1
    segment.mapping_quality = record.mapping_quality
    segment.cigartuples = list(record.cigar)
    if record.mate_reference_id is None:
        segment.next_reference_id = -1
    else:
        segment.next_reference_id = record.mate_reference_id
    segment.next_reference_start = record.mate_position - 1
    segment.template_length = record.template_length
    return segment


def open_writer(path: str, output_format: str = "sam") -> AlignmentWriter:
    """
    Pick a writer for ``path``.

    SAM to stdout (``-``) is written as plain text; every other combination
    goes through pysam.
    """
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {output_format}")
    if output_format == "sam" and path == "-":
        return SamTextWriter(sys.stdout)
    return PysamAlignmentWriter(path, output_format)
