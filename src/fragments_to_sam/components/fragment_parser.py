"""
Fragment Line Parser

Turns one line of a 10x-style fragments file
(``chrom<TAB>start<TAB>end<TAB>barcode[<TAB>...]``) into a FragmentEntry.
"""

from typing import Optional, Union

from .errors import FragmentFormatError
from .reference_dictionary import ReferenceDictionary
from .stream_fragments import decode_line
from .types import FragmentEntry

REQUIRED_FIELDS = 4


def is_ignorable(line: str) -> bool:
    """Blank and ``#`` comment lines carry no fragment."""
    return not line or line.startswith("#")


def parse_fragment_line(
    line: Union[bytes, str],
    dictionary: ReferenceDictionary,
    line_number: Optional[int] = None,
) -> Optional[FragmentEntry]:
    """
    Parse a fragments line against the reference dictionary.

    Returns None for blank lines, ``#`` comment lines and fragments on a
    chromosome missing from the dictionary. Raises FragmentFormatError for
    missing fields, non-numeric coordinates, an end before the start or a
    line that is not valid UTF-8.
    """
    line = decode_line(line, line_number, FragmentFormatError)
    if is_ignorable(line):
        return None

    fields = line.split("\t")
    if len(fields) < REQUIRED_FIELDS:
        raise FragmentFormatError(
            f"expected at least {REQUIRED_FIELDS} tab-separated fields, got {len(fields)}",
            line_number,
        )

    chrom, start_field, end_field, barcode = fields[:REQUIRED_FIELDS]
    start = _parse_coordinate("start", start_field, line_number)
    end = _parse_coordinate("end", end_field, line_number)

    chrom_index = dictionary.index_of(chrom)
    if chrom_index is None:
        return None

    if end < start:
        raise FragmentFormatError(
            f"end ({end}) is before start ({start}) on {chrom}", line_number
        )
    if not barcode:
        raise FragmentFormatError("empty barcode", line_number)

    return FragmentEntry(
        chrom_index=chrom_index,
        start=start,
        length=end - start,
        barcode=barcode,
    )


def _parse_coordinate(label: str, value: str, line_number: Optional[int]) -> int:
    if not (value.isascii() and value.isdigit()):
        raise FragmentFormatError(
            f"{label} is not a non-negative integer: {value!r}", line_number
        )
    return int(value)
