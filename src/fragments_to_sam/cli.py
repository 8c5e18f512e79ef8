"""
Command line entry point.

    fragments-to-sam --fragments fragments.tsv.gz --genome hg38.chrom.sizes > out.sam
"""

import argparse
import logging
import sys

from .components.errors import FragmentsToSamError
from .components.pipeline import DEFAULT_LOG_EVERY, convert_files
from .components.types import ErrorPolicy, OutputMode
from .components.writers import OUTPUT_FORMATS

logger = logging.getLogger("fragments_to_sam")


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fragments-to-sam",
        description="Convert a 10x-style fragments file to a SAM/BAM stream",
    )
    parser.add_argument(
        "-f", "--fragments", required=True,
        help="fragments file (plain or bgzip), or - for stdin",
    )
    parser.add_argument(
        "-g", "--genome", required=True,
        help="genome sizes file: name<TAB>length per line",
    )
    parser.add_argument(
        "-o", "--output", default="-",
        help="output path, or - for stdout (default: -)",
    )
    parser.add_argument(
        "--mode", default=OutputMode.PAIRED_END.value,
        choices=[mode.value for mode in OutputMode],
        help="records emitted per fragment (default: paired-end)",
    )
    parser.add_argument(
        "--output-format", default="sam", choices=OUTPUT_FORMATS,
        help="output format (default: sam)",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="abort on the first malformed fragments line instead of skipping it",
    )
    parser.add_argument(
        "--log-every", type=non_negative_int, default=DEFAULT_LOG_EVERY,
        help="log progress every N lines, 0 to disable",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    # records go to stdout, diagnostics to stderr
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        stats = convert_files(
            args.fragments,
            args.genome,
            args.output,
            OutputMode.parse(args.mode),
            output_format=args.output_format,
            error_policy=ErrorPolicy.FAIL if args.strict else ErrorPolicy.SKIP,
            log_every=args.log_every,
        )
    except (FragmentsToSamError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"Wrote {stats.records_written} records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
