"""
Alignment Synthesizer

Maps a FragmentEntry to the alignment records that represent it under a
given OutputMode. Every record spans the whole fragment footprint with a
single match operation; paired-end mode emits both ends over the same span.
"""

from typing import Dict, List, Tuple

from .sam_header import SamHeader
from .types import CIGAR_MATCH, AlignmentRecord, FragmentEntry, OutputMode

# SAM flag bits
FLAG_PAIRED = 0x1
FLAG_PROPER_PAIR = 0x2
FLAG_REVERSE = 0x10
FLAG_READ1 = 0x40
FLAG_READ2 = 0x80

MAPPING_QUALITY_UNAVAILABLE = 255

FIRST_IN_PAIR = FLAG_PAIRED | FLAG_PROPER_PAIR | FLAG_READ1  # 67
SECOND_IN_PAIR = FLAG_PAIRED | FLAG_PROPER_PAIR | FLAG_REVERSE | FLAG_READ2  # 147

# mode -> (flags of each emitted record, whether mates point back at the fragment)
MODE_TABLE: Dict[OutputMode, Tuple[Tuple[int, ...], bool]] = {
    OutputMode.PAIRED_END: ((FIRST_IN_PAIR, SECOND_IN_PAIR), True),
    OutputMode.FORWARD_ONLY: ((0,), False),
    OutputMode.REVERSE_ONLY: ((FLAG_REVERSE,), False),
}


def synthesize(entry: FragmentEntry, mode: OutputMode) -> List[AlignmentRecord]:
    """Return the records for one fragment, in output order."""
    flags, has_mate = MODE_TABLE[mode]
    position = entry.start + 1
    cigar = ((CIGAR_MATCH, entry.length),)

    return [
        AlignmentRecord(
            read_name=entry.barcode,
            flags=flag,
            reference_id=entry.chrom_index,
            position=position,
            cigar=cigar,
            mate_reference_id=entry.chrom_index if has_mate else None,
            mate_position=position if has_mate else 0,
            mapping_quality=MAPPING_QUALITY_UNAVAILABLE,
        )
        for flag in flags
    ]


def format_sam_line(header: SamHeader, record: AlignmentRecord) -> str:
    """Render the 11 mandatory SAM columns of a record, without a newline."""
    if record.mate_reference_id is None:
        mate_reference = "*"
    elif record.mate_reference_id == record.reference_id:
        mate_reference = "="
    else:
        mate_reference = header.reference_name(record.mate_reference_id)

    return "\t".join(
        (
            record.read_name,
            str(record.flags),
            header.reference_name(record.reference_id),
            str(record.position),
            str(record.mapping_quality),
            record.cigarstring,
            mate_reference,
            str(record.mate_position),
            str(record.template_length),
            "*",
            "*",
        )
    )
