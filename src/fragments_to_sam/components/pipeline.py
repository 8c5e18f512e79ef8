"""
Streaming fragment conversion pipeline.

Pulls decoded lines one at a time, parses them, synthesizes alignment
records and hands each record to the writer before the next line is read.
Nothing is buffered beyond the current fragment, so output order always
matches input order.
"""

import inspect
import logging
import time
from typing import AsyncIterable, Iterable, List, Optional, Union

from .errors import FragmentFormatError
from .fragment_parser import is_ignorable, parse_fragment_line
from .reference_dictionary import ReferenceDictionary, read_genome
from .sam_header import SamHeader
from .stream_fragments import decode_line, format_progress, open_lines
from .synthesizer import synthesize
from .types import AlignmentRecord, ConversionStats, ErrorPolicy, OutputMode
from .writers import open_writer

logger = logging.getLogger(__name__)

DEFAULT_LOG_EVERY = 1_000_000


class _LineConverter:
    """Per-line step shared by the synchronous and asynchronous drivers."""

    def __init__(
        self,
        dictionary: ReferenceDictionary,
        mode: OutputMode,
        error_policy: ErrorPolicy,
        log_every: int,
        log,
    ):
        self.dictionary = dictionary
        self.mode = mode
        self.error_policy = error_policy
        self.log_every = log_every
        self.log = log
        self.stats = ConversionStats()
        self.start_time = time.time()

    def convert(self, line: Union[bytes, str]) -> List[AlignmentRecord]:
        self.stats.lines_read += 1
        line_number = self.stats.lines_read

        try:
            text = decode_line(line, line_number, FragmentFormatError)
            if is_ignorable(text):
                self.stats.ignored_lines += 1
                return []
            entry = parse_fragment_line(text, self.dictionary, line_number)
        except FragmentFormatError as e:
            if self.error_policy is ErrorPolicy.FAIL:
                raise
            self.stats.malformed_skipped += 1
            self.log.warning(f"Skipping malformed fragment: {e}")
            return []

        if entry is None:
            self.stats.unknown_reference += 1
            return []

        self.stats.fragments_converted += 1
        return synthesize(entry, self.mode)

    def record_written(self):
        self.stats.records_written += 1

    def maybe_report(self):
        if self.log_every and self.stats.lines_read % self.log_every == 0:
            self.log.info(
                format_progress(
                    self.stats.lines_read, self.stats.records_written, self._rate()
                )
            )

    def finish(self) -> ConversionStats:
        total_time = time.time() - self.start_time
        self.log.info(
            format_progress(
                self.stats.lines_read, self.stats.records_written, self._rate()
            )
            + " (FINAL)"
        )
        self.log.info(
            f"Conversion complete in {total_time:.2f} seconds: "
            f"{self.stats.fragments_converted} fragments, "
            f"{self.stats.unknown_reference} on unknown references, "
            f"{self.stats.malformed_skipped} malformed lines skipped"
        )
        return self.stats

    def _rate(self) -> float:
        elapsed_time = time.time() - self.start_time
        return self.stats.lines_read / elapsed_time if elapsed_time > 0 else 0


def convert_fragments(
    lines: Iterable[Union[bytes, str]],
    dictionary: ReferenceDictionary,
    mode: OutputMode,
    writer,
    *,
    error_policy: ErrorPolicy = ErrorPolicy.SKIP,
    header: Optional[SamHeader] = None,
    log_every: int = DEFAULT_LOG_EVERY,
    log=None,
) -> ConversionStats:
    """
    Write the header, then every record synthesized from ``lines``.

    ``writer`` is anything with ``write_header(header)`` and
    ``write_record(header, record)``. ``log`` defaults to this module's
    logger; a Dagster ``context.log`` works as well.
    """
    header = header or SamHeader.build(dictionary)
    converter = _LineConverter(dictionary, mode, error_policy, log_every, log or logger)

    writer.write_header(header)
    for line in lines:
        for record in converter.convert(line):
            writer.write_record(header, record)
            converter.record_written()
        converter.maybe_report()

    return converter.finish()


async def _maybe_await(result):
    if inspect.isawaitable(result):
        await result


async def convert_fragments_async(
    lines: AsyncIterable[Union[bytes, str]],
    dictionary: ReferenceDictionary,
    mode: OutputMode,
    writer,
    *,
    error_policy: ErrorPolicy = ErrorPolicy.SKIP,
    header: Optional[SamHeader] = None,
    log_every: int = DEFAULT_LOG_EVERY,
    log=None,
) -> ConversionStats:
    """
    Same as convert_fragments, for an async line source.

    Writer methods may be plain functions or coroutines. The only
    suspension points are reading a line and writing a record, so each
    fragment is fully written before the next line is read.
    """
    header = header or SamHeader.build(dictionary)
    converter = _LineConverter(dictionary, mode, error_policy, log_every, log or logger)

    await _maybe_await(writer.write_header(header))
    async for line in lines:
        for record in converter.convert(line):
            await _maybe_await(writer.write_record(header, record))
            converter.record_written()
        converter.maybe_report()

    return converter.finish()


def convert_files(
    fragments_path: str,
    genome_path: str,
    output_path: str = "-",
    mode: OutputMode = OutputMode.PAIRED_END,
    *,
    output_format: str = "sam",
    error_policy: ErrorPolicy = ErrorPolicy.SKIP,
    log_every: int = DEFAULT_LOG_EVERY,
    log=None,
) -> ConversionStats:
    """
    Convert a fragments file to SAM/BAM.

    The genome is loaded first; if it is malformed the error propagates
    before the output is opened or any header is written.
    """
    log = log or logger
    dictionary = read_genome(genome_path)
    log.info(f"Loaded {len(dictionary)} reference sequences from {genome_path}")

    with open_lines(fragments_path) as lines:
        with open_writer(output_path, output_format) as writer:
            return convert_fragments(
                lines,
                dictionary,
                mode,
                writer,
                error_policy=error_policy,
                log_every=log_every,
                log=log,
            )
