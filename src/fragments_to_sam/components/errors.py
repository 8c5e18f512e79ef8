"""
Exceptions raised while converting fragments to alignments.
"""

from typing import Optional


class FragmentsToSamError(Exception):
    """Base class for all conversion errors."""


class FormatError(FragmentsToSamError, ValueError):
    """A line of input could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class GenomeFormatError(FormatError):
    """The genome sizes file is malformed."""


class DuplicateReferenceError(GenomeFormatError):
    """A reference name appears more than once in the genome sizes file."""


class FragmentFormatError(FormatError):
    """A fragments line is malformed."""


class CorruptInputError(FragmentsToSamError):
    """A compressed input stream is truncated or corrupt."""
