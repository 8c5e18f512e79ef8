"""
Shared types for fragment conversion components.
"""

import enum
from dataclasses import asdict, dataclass
from typing import Optional

# BAM operation codes, in the order used by the BAM spec
CIGAR_OPS = "MIDNSHP=X"
CIGAR_MATCH = 0


class OutputMode(enum.Enum):
    """How many alignment records each fragment becomes, and with which flags."""

    PAIRED_END = "paired-end"
    FORWARD_ONLY = "forward-only"
    REVERSE_ONLY = "reverse-only"

    @classmethod
    def parse(cls, value) -> "OutputMode":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for mode in cls:
            if mode.value == normalized:
                return mode
        choices = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Unknown output mode: {value!r} (expected one of {choices})")


class ErrorPolicy(enum.Enum):
    """What the driver does with a malformed fragments line."""

    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class ReferenceSequence:
    """One entry of the reference dictionary."""

    name: str
    length: int
    index: int


@dataclass(frozen=True)
class FragmentEntry:
    """A validated fragment, resolved against the reference dictionary."""

    chrom_index: int
    start: int  # 0-based, inclusive
    length: int
    barcode: str


@dataclass(frozen=True)
class AlignmentRecord:
    """A synthetic alignment for one end of a fragment."""

    read_name: str
    flags: int
    reference_id: int
    position: int  # 1-based
    cigar: tuple  # ((op, length), ...)
    mate_reference_id: Optional[int] = None
    mate_position: int = 0
    mapping_quality: int = 255
    template_length: int = 0

    @property
    def cigarstring(self) -> str:
        return "".join(f"{length}{CIGAR_OPS[op]}" for op, length in self.cigar)


@dataclass
class ConversionStats:
    """Counters collected while streaming fragments through the pipeline."""

    lines_read: int = 0
    fragments_converted: int = 0
    records_written: int = 0
    unknown_reference: int = 0
    malformed_skipped: int = 0
    ignored_lines: int = 0

    def as_dict(self) -> dict:
        return asdict(self)
