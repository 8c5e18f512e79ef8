"""
Reference Dictionary

The ordered name -> (index, length) table read from a genome sizes file.
Insertion order is the @SQ order of the header and the basis of the
reference ids written into every record.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .errors import CorruptInputError, DuplicateReferenceError, GenomeFormatError
from .stream_fragments import decode_line, open_lines
from .types import ReferenceSequence

logger = logging.getLogger(__name__)


class ReferenceDictionary:
    """Read-only, ordered mapping of reference names to sequences."""

    def __init__(self, sequences: Iterable[ReferenceSequence] = ()):
        self._sequences: List[ReferenceSequence] = []
        self._by_name: Dict[str, ReferenceSequence] = {}
        for sequence in sequences:
            self._add(sequence.name, sequence.length)

    def _add(self, name: str, length: int, line_number: Optional[int] = None):
        if name in self._by_name:
            raise DuplicateReferenceError(
                f"duplicate reference sequence name: {name!r}", line_number
            )
        sequence = ReferenceSequence(
            name=name, length=length, index=len(self._sequences)
        )
        self._sequences.append(sequence)
        self._by_name[name] = sequence

    @classmethod
    def from_lines(
        cls, lines: Iterable[Union[bytes, str]]
    ) -> "ReferenceDictionary":
        """
        Build the dictionary from tab-delimited ``name<TAB>length`` lines.

        Blank lines and lines starting with ``#`` are ignored, as are any
        fields after the length. Lines may be bytes or text; bytes must be
        valid UTF-8.
        """
        dictionary = cls()
        for line_number, line in enumerate(lines, start=1):
            line = decode_line(line, line_number, GenomeFormatError)
            if not line.strip() or line.startswith("#"):
                continue

            fields = line.split("\t")
            name = fields[0]
            if not name:
                raise GenomeFormatError("missing reference name", line_number)
            if len(fields) < 2 or not fields[1]:
                raise GenomeFormatError(
                    f"missing length for reference {name!r}", line_number
                )

            length = _parse_length(fields[1], line_number)
            dictionary._add(name, length, line_number)

        if not dictionary:
            raise GenomeFormatError("genome sizes file lists no reference sequences")

        logger.debug(f"Loaded {len(dictionary)} reference sequences")
        return dictionary

    def __len__(self) -> int:
        return len(self._sequences)

    def __iter__(self) -> Iterator[ReferenceSequence]:
        return iter(self._sequences)

    def __contains__(self, name) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[ReferenceSequence]:
        return self._by_name.get(name)

    def index_of(self, name: str) -> Optional[int]:
        sequence = self._by_name.get(name)
        return sequence.index if sequence is not None else None

    def name_of(self, index: int) -> str:
        if index < 0:
            raise IndexError(f"invalid reference index: {index}")
        return self._sequences[index].name


def _parse_length(value: str, line_number: int) -> int:
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise GenomeFormatError(f"length is not a positive integer: {value!r}", line_number)
    length = int(value)
    if length <= 0:
        raise GenomeFormatError(f"length must be positive: {value!r}", line_number)
    return length


def read_genome(path: str) -> ReferenceDictionary:
    """Build the dictionary from a genome sizes file (plain or gzip)."""
    try:
        with open_lines(path) as lines:
            return ReferenceDictionary.from_lines(lines)
    except CorruptInputError as e:
        raise GenomeFormatError(str(e)) from e
