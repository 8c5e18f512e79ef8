"""
SAM header built from the reference dictionary.
"""

from dataclasses import dataclass
from typing import List

from .reference_dictionary import ReferenceDictionary

SAM_VERSION = "1.0"
SORT_ORDER = "unknown"
GROUP_ORDER = "query"
PROGRAM_ID = "fragments_to_sam"
COMMENT = "SAM output made with fragments_to_sam"


@dataclass(frozen=True)
class SamHeader:
    """Header for the converted stream: @HD, one @SQ per reference, @PG and @CO."""

    dictionary: ReferenceDictionary
    program_id: str = PROGRAM_ID
    comment: str = COMMENT

    @classmethod
    def build(
        cls,
        dictionary: ReferenceDictionary,
        program_id: str = PROGRAM_ID,
        comment: str = COMMENT,
    ) -> "SamHeader":
        return cls(dictionary=dictionary, program_id=program_id, comment=comment)

    def reference_name(self, reference_id: int) -> str:
        return self.dictionary.name_of(reference_id)

    def to_dict(self) -> dict:
        """Header in the nested form understood by ``pysam.AlignmentHeader.from_dict``."""
        return {
            "HD": {"VN": SAM_VERSION, "SO": SORT_ORDER, "GO": GROUP_ORDER},
            "SQ": [{"SN": seq.name, "LN": seq.length} for seq in self.dictionary],
            "PG": [{"ID": self.program_id}],
            "CO": [self.comment],
        }

    def to_lines(self) -> List[str]:
        lines = [f"@HD\tVN:{SAM_VERSION}\tSO:{SORT_ORDER}\tGO:{GROUP_ORDER}"]
        lines.extend(
            f"@SQ\tSN:{seq.name}\tLN:{seq.length}" for seq in self.dictionary
        )
        lines.append(f"@PG\tID:{self.program_id}")
        lines.append(f"@CO\t{self.comment}")
        return lines
